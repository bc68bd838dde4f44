"""Shared BDD fixtures and step definitions for checkout scenarios."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.order.fulfillment import OrderLine
from storefront.product.product import Product, SizeKey
from storefront.shipping.rates import SetShippingRate


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Registered products by English name."""
    return {}


@pytest.fixture()
def shopper():
    return {"name": "Jane Doe", "email": "jane@example.com", "address": "12 Main St, Springfield"}


@pytest.fixture()
def order_line(products):
    """Build an OrderLine for a registered product by name."""

    def _line(name, color, eu, us, quantity):
        return OrderLine(
            product_id=products[name],
            selected_color=color,
            selected_size=SizeKey(eu=eu, us=us),
            quantity=quantity,
        )

    return _line


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('shipping to "{country}" costs {base_fee:f} plus {per_kg_rate:f} per kg'))
def shipping_rate(country, base_fee, per_kg_rate):
    current_domain.process(
        SetShippingRate(country=country, base_fee=base_fee, per_kg_rate=per_kg_rate),
        asynchronous=False,
    )


@given(parsers.cfparse('a product "{name}" weighing {weight:f} kg'), target_fixture="current_product")
def product_named(products, name, weight):
    product = Product.create(name={"en": name}, weight_kg=weight)
    current_domain.repository_for(Product).add(product)
    products[name] = product.id
    return name


@given(parsers.cfparse('it comes in "{color}" size EU {eu:d} US {us:d} at {price:f} with {stock:d} in stock'))
def size_in_stock(products, current_product, color, eu, us, price, stock):
    repo = current_domain.repository_for(Product)
    product = repo.get(products[current_product])
    variation = product.find_variation(color) or product.add_variation({"en": color})
    product.add_size_option(variation.id, {"EU": eu, "US": us}, price=price, stock=stock)
    repo.add(product)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} left in "{color}" size EU {eu:d} US {us:d}'))
def stock_left(products, name, stock, color, eu, us):
    product = current_domain.repository_for(Product).get(products[name])
    option = product.find_size_option(product.find_variation(color).id, SizeKey(eu=eu, us=us))
    assert option.stock == stock


@then(parsers.cfparse('"{name}" is in stock'))
def is_in_stock(products, name):
    assert current_domain.repository_for(Product).get(products[name]).in_stock is True
