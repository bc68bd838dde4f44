"""Product aggregate root with Variation and SizeOption entities.

A product is sold in variations (one per color) and each variation in size
options (one per EU/US size pair). The size option is the unit of inventory:
it carries the price and the stock count. ``in_stock`` on the product mirrors
whether any size option of any variation still has stock.

Size options hang directly off the product and point at their variation by
id, since child entities cannot own children of their own.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.shared.errors import InsufficientStockError, SizeNotFoundError, VariantNotFoundError
from storefront.shared.localized import LocalizedText

DEFAULT_WEIGHT_KG = 0.5


def _compact(number: float) -> int | float:
    return int(number) if float(number).is_integer() else number


@storefront.value_object(part_of="Product")
class SizeKey:
    """A shoe size expressed in both the EU and US systems."""

    eu: Float(required=True, min_value=0.0)
    us: Float(required=True, min_value=0.0)

    @classmethod
    def from_dict(cls, data: dict) -> "SizeKey":
        """Build from ``{"EU": .., "US": ..}`` (either case)."""
        return cls(eu=data.get("EU", data.get("eu")), us=data.get("US", data.get("us")))

    @classmethod
    def from_json(cls, raw: str) -> "SizeKey":
        return cls.from_dict(json.loads(raw))

    def matches(self, other: "SizeKey") -> bool:
        return self.eu == other.eu and self.us == other.us

    def as_payload(self) -> dict:
        return {"EU": _compact(self.eu), "US": _compact(self.us)}

    def to_json(self) -> str:
        return json.dumps(self.as_payload())

    def label(self) -> str:
        return f"EU {_compact(self.eu)} / US {_compact(self.us)}"


@storefront.entity(part_of="Product")
class Variation:
    """A color of the product."""

    color: ValueObject(LocalizedText, required=True)
    image: String(max_length=500)


@storefront.entity(part_of="Product")
class SizeOption:
    """A size of one variation, with its own price and stock."""

    variation_id: Identifier(required=True)
    size: ValueObject(SizeKey, required=True)
    price: Float(required=True, min_value=0.0)
    stock: Integer(default=0, min_value=0)


@dataclass(frozen=True)
class VariantLocation:
    """Where a (color, size) request resolved to inside a product."""

    product_id: str
    variation_id: str
    size_option_id: str


@storefront.aggregate
class Product:
    """Product aggregate root."""

    name: ValueObject(LocalizedText, required=True)
    weight_kg: Float(min_value=0.0)
    variations: HasMany(Variation)
    size_options: HasMany(SizeOption)
    in_stock: Boolean(default=False)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def in_stock_reflects_size_option_stock(self):
        if self.in_stock != self._any_size_in_stock():
            raise ValidationError({"in_stock": ["In-stock flag must match the stock of the size options"]})

    @invariant.post
    def size_options_belong_to_a_variation(self):
        variation_ids = {v.id for v in self.variations}
        orphans = [o for o in self.size_options if o.variation_id not in variation_ids]
        if orphans:
            raise ValidationError({"size_options": ["Every size option must belong to a variation of the product"]})

    @classmethod
    def create(cls, name, weight_kg=None):
        from storefront.product.events import ProductRegistered

        name_vo = LocalizedText(**name) if isinstance(name, dict) else name
        product = cls(name=name_vo, weight_kg=weight_kg)
        product.raise_(
            ProductRegistered(
                product_id=product.id,
                name=name_vo.display(),
                weight_kg=product.shipping_weight,
                registered_at=product.created_at,
            )
        )
        return product

    @property
    def display_name(self) -> str:
        return self.name.display()

    @property
    def shipping_weight(self) -> float:
        """Weight per unit in kilograms, falling back to the default for unweighed products."""
        return self.weight_kg if self.weight_kg is not None else DEFAULT_WEIGHT_KG

    def _any_size_in_stock(self) -> bool:
        return any(option.stock > 0 for option in self.size_options)

    def add_variation(self, color, image=None):
        color_vo = LocalizedText(**color) if isinstance(color, dict) else color
        if any(v.color.matches(color_vo.en) or v.color.matches(color_vo.vi) for v in self.variations):
            raise ValidationError({"variations": [f"Color '{color_vo.display()}' already exists"]})

        variation = Variation(color=color_vo, image=image)
        self.add_variations(variation)
        self.updated_at = datetime.now(UTC)
        return variation

    def add_size_option(self, variation_id, size, price, stock=0):
        size_vo = SizeKey.from_dict(size) if isinstance(size, dict) else size
        if self._variation(variation_id) is None:
            raise ValidationError({"variations": [f"Variation {variation_id} not found"]})
        if self.find_size_option(variation_id, size_vo) is not None:
            raise ValidationError({"size_options": [f"Size {size_vo.label()} already exists for this color"]})

        option = SizeOption(variation_id=variation_id, size=size_vo, price=price, stock=stock)
        with atomic_change(self):
            self.add_size_options(option)
            self.in_stock = self._any_size_in_stock()
            self.updated_at = datetime.now(UTC)
        return option

    def find_variation(self, color: str) -> Variation | None:
        """Variation whose English or Vietnamese color label equals ``color``."""
        return next((v for v in self.variations if v.color.matches(color)), None)

    def find_size_option(self, variation_id, size: SizeKey) -> SizeOption | None:
        return next(
            (o for o in self.size_options if o.variation_id == variation_id and o.size.matches(size)),
            None,
        )

    def locate(self, color: str, size: SizeKey) -> VariantLocation:
        variation = self.find_variation(color)
        if variation is None:
            raise VariantNotFoundError(f'Color "{color}" not available for product {self.display_name}')

        option = self.find_size_option(variation.id, size)
        if option is None:
            raise SizeNotFoundError(
                f'Size {size.label()} not available for product {self.display_name} in color "{color}"'
            )
        return VariantLocation(product_id=self.id, variation_id=variation.id, size_option_id=option.id)

    def _variation(self, variation_id) -> Variation | None:
        return next((v for v in self.variations if v.id == variation_id), None)

    def size_option(self, size_option_id) -> SizeOption:
        option = next((o for o in self.size_options if o.id == size_option_id), None)
        if option is None:
            raise SizeNotFoundError(f"Size option {size_option_id} not found on product {self.display_name}")
        return option

    def reserve(self, size_option_id, quantity):
        from storefront.product.events import StockReserved

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        option = self.size_option(size_option_id)
        if option.stock < quantity:
            color = self._variation(option.variation_id).color.display()
            raise InsufficientStockError(
                f"Insufficient stock for product {self.display_name} "
                f"({color}, size {option.size.label()}). Available: {option.stock}",
                available=option.stock,
            )

        with atomic_change(self):
            option.stock = option.stock - quantity
            self.in_stock = self._any_size_in_stock()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReserved(
                product_id=self.id,
                variation_id=option.variation_id,
                size_option_id=option.id,
                quantity=quantity,
                remaining=option.stock,
            )
        )

    def release(self, size_option_id, quantity):
        from storefront.product.events import StockReleased

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        option = self.size_option(size_option_id)
        with atomic_change(self):
            option.stock = option.stock + quantity
            self.in_stock = True
            self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReleased(
                product_id=self.id,
                variation_id=option.variation_id,
                size_option_id=option.id,
                quantity=quantity,
                remaining=option.stock,
            )
        )
