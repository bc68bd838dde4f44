"""Order aggregate: a checkout snapshot and its fulfilment status.

Items copy the product name, price, color and size at the moment of checkout
and never change afterwards, even if the product does. Only the status moves:

    Pending → Shipped → Completed

Pending orders may instead be deleted, which hands their stock back.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.product.product import SizeKey
from storefront.shared.errors import InvalidStateError, OrderInvalidError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    COMPLETED = "Completed"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
}

REVENUE_STATUSES = (OrderStatus.SHIPPED, OrderStatus.COMPLETED)

_STATUS_CHOICES_MESSAGE = "Status must be one of: " + ", ".join(s.value for s in OrderStatus)


def parse_status(value) -> OrderStatus:
    """Turn a status name into OrderStatus, or raise OrderInvalidError."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise OrderInvalidError({"status": [_STATUS_CHOICES_MESSAGE]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class CustomerInfo:
    """Who the order ships to. Captured once at checkout."""

    name: String(required=True, max_length=200)
    email: String(required=True, max_length=254)
    address: String(required=True, max_length=500)
    phone: String(max_length=20)

    @invariant.post
    def email_must_be_well_formed(self):
        email = self.email or ""
        local, _, domain = email.partition("@")
        if not local or "." not in domain or " " in email or email.count("@") != 1:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    @invariant.post
    def phone_must_be_dialable(self):
        if self.phone and not re.match(r"^\+?[\d\s\-()]+$", self.phone):
            raise ValidationError({"phone": [f"Invalid phone number: {self.phone!r}"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """One purchased size option, frozen at checkout time."""

    product_id: Identifier(required=True)
    product_name: String(required=True, max_length=200)
    quantity: Integer(required=True, min_value=1)
    price: Float(required=True, min_value=0.0)
    selected_color: String(required=True, max_length=100)
    selected_size: String(required=True, max_length=100)

    @property
    def size_key(self) -> SizeKey:
        return SizeKey.from_json(self.selected_size)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    items: HasMany(OrderItem)
    total: Float(default=0.0, min_value=0.0)
    shipping_fee: Float(default=0.0, min_value=0.0)
    shipping_country: String(required=True, max_length=3)
    total_weight: Float(default=0.0, min_value=0.0)
    customer_info: ValueObject(CustomerInfo, required=True)
    customer_email: String(required=True, max_length=254)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    idempotency_key: String(max_length=255)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def customer_email_matches_customer_info(self):
        if self.customer_info and self.customer_email != self.customer_info.email:
            raise ValidationError({"customer_email": ["Customer email must match the customer info"]})

    @classmethod
    def place(
        cls,
        items,
        customer_info,
        shipping_country,
        shipping_fee,
        total_weight,
        idempotency_key=None,
    ):
        """Record a checkout. The total is always the sum of the item lines."""
        from storefront.order.events import OrderPlaced

        if not items:
            raise OrderInvalidError({"products": ["Order must contain at least one product"]})

        if isinstance(customer_info, CustomerInfo):
            customer_info = customer_info.to_dict()
        info = CustomerInfo(
            name=(customer_info.get("name") or "").strip(),
            email=(customer_info.get("email") or "").strip().lower(),
            address=(customer_info.get("address") or "").strip(),
            phone=customer_info.get("phone") or None,
        )

        now = datetime.now(UTC)
        order = cls(
            shipping_country=shipping_country.upper(),
            shipping_fee=shipping_fee,
            total_weight=total_weight,
            customer_info=info,
            customer_email=info.email,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            for item in items:
                order.add_items(item)
            order.total = sum(item.line_total for item in items)

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                customer_email=info.email,
                item_count=len(items),
                total=order.total,
                shipping_fee=order.shipping_fee,
                shipping_country=order.shipping_country,
                placed_at=now,
            )
        )
        return order

    @property
    def grand_total(self) -> float:
        return self.total + self.shipping_fee

    @property
    def is_deletable(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    def assert_deletable(self):
        if not self.is_deletable:
            raise InvalidStateError({"status": ["Can only delete orders with Pending status"]})

    def change_status(self, new_status) -> bool:
        """Move the order forward. Returns False when it already has that status."""
        from storefront.order.events import OrderStatusChanged

        target = new_status if isinstance(new_status, OrderStatus) else parse_status(new_status)
        current = OrderStatus(self.status)
        if target == current:
            return False

        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError({"status": [f"Cannot change status from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True
