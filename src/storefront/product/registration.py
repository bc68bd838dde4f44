"""Product registration: command and handler.

Variations travel as a JSON document so a whole product, colors and sizes
included, is registered in one step:

    [{"color": {"en": "Red", "vi": "Đỏ"}, "image": "red.png",
      "sizes": [{"size": {"EU": 42, "US": 9}, "price": 100, "stock": 5}]}]
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.localized import LocalizedText


@storefront.command(part_of="Product")
class RegisterProduct:
    name_en: String(max_length=200)
    name_vi: String(max_length=200)
    weight_kg: Float(min_value=0.0)
    variations: Text(required=True)


def _parse_variations(raw):
    try:
        variations = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"variations": ["Variations must be valid JSON"]}) from None
    if not isinstance(variations, list):
        raise ValidationError({"variations": ["Variations must be a JSON list"]})
    return variations


@storefront.command_handler(part_of=Product)
class RegisterProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.create(
            name=LocalizedText(en=command.name_en, vi=command.name_vi),
            weight_kg=command.weight_kg,
        )

        for entry in _parse_variations(command.variations):
            variation = product.add_variation(entry["color"], image=entry.get("image"))
            for size in entry.get("sizes", []):
                product.add_size_option(
                    variation.id,
                    size=size["size"],
                    price=size["price"],
                    stock=size.get("stock", 0),
                )

        current_domain.repository_for(Product).add(product)
        return str(product.id)
