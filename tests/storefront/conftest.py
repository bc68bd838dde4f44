import json

import pytest
from protean import current_domain

from storefront.identity import get_identity_provider, reset_identity_provider
from storefront.order.fulfillment import OrderFulfillmentService, OrderLine
from storefront.product.product import Product, SizeKey
from storefront.product.registration import RegisterProduct
from storefront.shipping.rates import SetShippingRate

ADMIN_TOKEN = "admin-token"
SHOPPER_TOKEN = "shopper-token"
SHOPPER_EMAIL = "jane@example.com"


@pytest.fixture(scope="session")
def _storefront_domain():
    """Initialize the storefront domain once per session."""
    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_identity_provider()
    ctx.pop()


# ---------------------------------------------------------------------------
# Catalog and shipping data
# ---------------------------------------------------------------------------
def _size_entry(eu=42, us=9, price=100.0, stock=5):
    return {"size": {"EU": eu, "US": us}, "price": price, "stock": stock}


def _variation_entry(en="Red", vi="Đỏ", image="red.png", sizes=None):
    return {
        "color": {"en": en, "vi": vi},
        "image": image,
        "sizes": sizes if sizes is not None else [_size_entry()],
    }


@pytest.fixture
def size_entry():
    return _size_entry


@pytest.fixture
def variation_entry():
    return _variation_entry


@pytest.fixture
def make_product():
    """Register a product through the RegisterProduct command and load it back."""

    def _make(name="Court Runner", name_vi="Giày Chạy", weight_kg=1.0, variations=None):
        command = RegisterProduct(
            name_en=name,
            name_vi=name_vi,
            weight_kg=weight_kg,
            variations=json.dumps(variations if variations is not None else [_variation_entry()]),
        )
        product_id = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture
def reload_product():
    def _reload(product):
        return current_domain.repository_for(Product).get(product.id)

    return _reload


@pytest.fixture
def set_rate():
    def _set(country="US", base_fee=25.0, per_kg_rate=5.0, is_active=True):
        command = SetShippingRate(country=country, base_fee=base_fee, per_kg_rate=per_kg_rate, is_active=is_active)
        return current_domain.process(command, asynchronous=False)

    return _set


@pytest.fixture
def us_rate(set_rate):
    return set_rate("US", 25.0, 5.0)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@pytest.fixture
def customer():
    return {
        "name": "Jane Doe",
        "email": "  Jane@Example.com ",
        "address": "12 Main St, Springfield",
        "phone": "+1 555 0100",
    }


@pytest.fixture
def service():
    return OrderFulfillmentService()


def _line_for(product, quantity=1, color="Red", eu=42, us=9):
    return OrderLine(
        product_id=product.id,
        selected_color=color,
        selected_size=SizeKey(eu=eu, us=us),
        quantity=quantity,
    )


@pytest.fixture
def line_for():
    return _line_for


@pytest.fixture
def place_order(service, customer, us_rate):
    """Check out ``quantity`` units of the Red EU 42 / US 9 option of a product."""

    def _place(product, quantity=1, email=None, **line_kwargs):
        info = dict(customer, email=email) if email else customer
        return service.create_order([_line_for(product, quantity, **line_kwargs)], info, "us")

    return _place


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
@pytest.fixture
def identity():
    provider = get_identity_provider()
    provider.register_admin(ADMIN_TOKEN, principal_id="admin-1")
    provider.register_user(SHOPPER_TOKEN, SHOPPER_EMAIL)
    return provider


@pytest.fixture
def admin_headers(identity):
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def shopper_headers(identity):
    return {"Authorization": f"Bearer {SHOPPER_TOKEN}"}
