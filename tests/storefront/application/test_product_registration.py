import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.product.product import Product, SizeKey
from storefront.product.registration import RegisterProduct


class TestRegisterProduct:
    def test_registers_variations_and_sizes(self, make_product, variation_entry, size_entry):
        product = make_product(
            variations=[
                variation_entry("Red", "Đỏ", sizes=[size_entry(42, 9, stock=5), size_entry(43, 10, stock=0)]),
                variation_entry("Black", "Đen", image="black.png", sizes=[size_entry(42, 9, price=120.0, stock=1)]),
            ]
        )

        assert len(product.variations) == 2
        assert len(product.size_options) == 3
        assert product.in_stock is True

        black = product.find_variation("Đen")
        assert black.image == "black.png"
        assert product.find_size_option(black.id, SizeKey(eu=42, us=9)).price == 120.0

    def test_product_without_stock_is_out_of_stock(self, make_product, variation_entry, size_entry):
        product = make_product(variations=[variation_entry(sizes=[size_entry(stock=0)])])
        assert product.in_stock is False

    def test_weight_defaults_when_missing(self, make_product):
        product = make_product(weight_kg=None)
        assert product.shipping_weight == 0.5

    def test_invalid_json_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            current_domain.process(
                RegisterProduct(name_en="Court Runner", variations="not json"),
                asynchronous=False,
            )
        assert "variations" in exc_info.value.messages

    def test_nothing_persisted_on_invalid_size(self):
        variations = [{"color": {"en": "Red"}, "sizes": [{"size": {"EU": 42, "US": 9}, "price": -1}]}]
        with pytest.raises(ValidationError):
            current_domain.process(
                RegisterProduct(name_en="Court Runner", variations=json.dumps(variations)),
                asynchronous=False,
            )

        assert current_domain.repository_for(Product)._dao.query.all().total == 0
