"""Domain events for the Product aggregate.

Stock movements are recorded as facts so that reservations and their
compensations can be audited per size option.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductRegistered:
    """A product was added to the catalog."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    weight_kg = Float(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockReserved:
    """Units of a size option were set aside for an order."""

    __version__ = 1

    product_id = Identifier(required=True)
    variation_id = Identifier(required=True)
    size_option_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@storefront.event(part_of="Product")
class StockReleased:
    """Previously reserved units of a size option were returned to stock."""

    __version__ = 1

    product_id = Identifier(required=True)
    variation_id = Identifier(required=True)
    size_option_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)
