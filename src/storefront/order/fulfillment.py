"""OrderFulfillmentService: checkout, cancellation and status changes.

Products and orders are saved separately, so checkout runs as a saga:

1. price and weigh every line against the catalog (nothing is written yet)
2. reserve stock line by line
3. save the order

If step 2 or 3 fails, every line reserved so far is released again, newest
first, before the error reaches the caller. Cancellation runs the same
reservation in reverse under the order's lock, and reserves again whatever
it had returned if it cannot finish.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderItem, parse_status
from storefront.product.catalog import InventoryCatalog
from storefront.product.product import Product, SizeKey, VariantLocation
from storefront.shared.errors import (
    InsufficientStockError,
    NotFoundError,
    OrderInvalidError,
    OrderNotFoundError,
    ShippingUnavailableError,
)
from storefront.shared.locks import KeyedLocks, order_locks
from storefront.shipping.table import ShippingRateTable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """One requested line of a checkout."""

    product_id: str
    selected_color: str
    selected_size: SizeKey
    quantity: int


@dataclass(frozen=True)
class OrderRemoval:
    """A deleted order and how many of its items could not be restocked."""

    order: Order
    skipped_items: int = 0

    @property
    def fully_restocked(self) -> bool:
        return self.skipped_items == 0


@dataclass
class _PricedLine:
    line: OrderLine
    product: Product
    location: VariantLocation
    price: float


class OrderFulfillmentService:
    def __init__(
        self,
        catalog: InventoryCatalog | None = None,
        rates: ShippingRateTable | None = None,
        locks: KeyedLocks | None = None,
    ):
        self.catalog = catalog or InventoryCatalog()
        self.rates = rates or ShippingRateTable()
        self._locks = locks or order_locks

    @property
    def ledger(self):
        return current_domain.repository_for(Order)

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------
    def create_order(self, lines, customer_info, shipping_country, idempotency_key=None) -> Order:
        """Validate, price, reserve and persist a checkout.

        With an ``idempotency_key``, repeating the call returns the order the
        first call created instead of reserving stock again.
        """
        if not idempotency_key:
            return self._place(lines, customer_info, shipping_country)

        with self._locks.hold(f"idempotency:{idempotency_key}"):
            existing = self.ledger.find_by_idempotency_key(idempotency_key)
            if existing is not None:
                logger.info("order_replayed", order_id=existing.id, idempotency_key=idempotency_key)
                return existing
            return self._place(lines, customer_info, shipping_country, idempotency_key)

    def _place(self, lines, customer_info, shipping_country, idempotency_key=None) -> Order:
        if not lines:
            raise OrderInvalidError({"products": ["Order must contain at least one product"]})

        try:
            rule = self.rates.lookup(shipping_country)
        except ShippingUnavailableError as exc:
            raise OrderInvalidError({"shipping_country": [str(exc)]}) from exc

        priced = [self._price(line) for line in lines]
        total_weight = sum(p.product.shipping_weight * p.line.quantity for p in priced)

        reserved: list[_PricedLine] = []
        try:
            for p in priced:
                self.catalog.reserve(p.location, p.line.quantity)
                reserved.append(p)

            order = Order.place(
                items=[self._snapshot(p) for p in priced],
                customer_info=customer_info,
                shipping_country=rule.country,
                shipping_fee=self.rates.fee(rule, total_weight),
                total_weight=total_weight,
                idempotency_key=idempotency_key,
            )
            self.ledger.add(order)
        except Exception:
            self._compensate(reserved)
            raise

        logger.info(
            "order_placed",
            order_id=order.id,
            items=len(priced),
            total=order.total,
            shipping_fee=order.shipping_fee,
            shipping_country=order.shipping_country,
        )
        return order

    def _price(self, line: OrderLine) -> _PricedLine:
        try:
            product, location = self.catalog.resolve_variant(line.product_id, line.selected_color, line.selected_size)
        except NotFoundError as exc:
            raise OrderInvalidError({"products": [str(exc)]}) from exc

        option = product.size_option(location.size_option_id)
        if option.stock < line.quantity:
            raise InsufficientStockError(
                f"Insufficient stock for product {product.display_name} "
                f"({line.selected_color}, size {line.selected_size.label()}). Available: {option.stock}",
                available=option.stock,
            )
        return _PricedLine(line=line, product=product, location=location, price=option.price)

    @staticmethod
    def _snapshot(p: _PricedLine) -> OrderItem:
        return OrderItem(
            product_id=p.product.id,
            product_name=p.product.display_name,
            quantity=p.line.quantity,
            price=p.price,
            selected_color=p.line.selected_color,
            selected_size=p.line.selected_size.to_json(),
        )

    def _compensate(self, reserved: list[_PricedLine]) -> None:
        for p in reversed(reserved):
            try:
                self.catalog.release(p.location, p.line.quantity)
            except Exception:
                # Keep releasing the rest; the original failure is re-raised by the caller
                logger.exception(
                    "stock_compensation_failed",
                    product_id=p.location.product_id,
                    size_option_id=p.location.size_option_id,
                    quantity=p.line.quantity,
                )
        if reserved:
            logger.warning("order_reservations_rolled_back", lines=len(reserved))

    # ------------------------------------------------------------------
    # Lookup, cancellation and status
    # ------------------------------------------------------------------
    def get_order(self, order_id) -> Order:
        try:
            return self.ledger.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFoundError(f"Order {order_id} not found") from None

    def delete_order(self, order_id) -> OrderRemoval:
        """Delete a Pending order and hand its stock back.

        Items whose color or size no longer exists on the product are skipped
        and counted. If a release or the delete itself fails, the stock
        returned so far is reserved again and the order stays as it was, so a
        retry cannot restock twice.
        """
        with self._locks.hold(str(order_id)):
            order = self.get_order(order_id)
            order.assert_deletable()

            released: list[tuple[VariantLocation, int]] = []
            skipped = 0
            try:
                for item in order.items:
                    try:
                        _, location = self.catalog.resolve_variant(item.product_id, item.selected_color, item.size_key)
                    except NotFoundError as exc:
                        logger.warning(
                            "stock_restore_skipped",
                            order_id=order.id,
                            product_id=item.product_id,
                            reason=str(exc),
                        )
                        skipped += 1
                        continue
                    self.catalog.release(location, item.quantity)
                    released.append((location, item.quantity))

                self.ledger.remove_order(order)
            except Exception:
                self._take_back(released)
                raise

        logger.info("order_deleted", order_id=order.id, items=len(order.items), skipped=skipped)
        return OrderRemoval(order=order, skipped_items=skipped)

    def _take_back(self, released: list[tuple[VariantLocation, int]]) -> None:
        for location, quantity in reversed(released):
            try:
                self.catalog.reserve(location, quantity)
            except Exception:
                logger.exception(
                    "stock_restore_rollback_failed",
                    product_id=location.product_id,
                    size_option_id=location.size_option_id,
                    quantity=quantity,
                )
        if released:
            logger.warning("order_restock_rolled_back", lines=len(released))

    def update_status(self, order_id, new_status) -> Order:
        """Move an order along Pending, Shipped, Completed. Stock is not touched."""
        target = parse_status(new_status)
        with self._locks.hold(str(order_id)):
            order = self.get_order(order_id)
            if order.change_status(target):
                self.ledger.add(order)
                logger.info("order_status_changed", order_id=order.id, status=order.status)
        return order
