"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A checkout was accepted and its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String(required=True)
    item_count = Integer(required=True)
    total = Float(required=True)
    shipping_fee = Float(required=True)
    shipping_country = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
