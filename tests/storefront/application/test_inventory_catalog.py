import threading

import pytest

from storefront.domain import storefront
from storefront.product.catalog import InventoryCatalog
from storefront.product.product import SizeKey
from storefront.shared.errors import (
    InsufficientStockError,
    ProductNotFoundError,
    SizeNotFoundError,
    VariantNotFoundError,
)


@pytest.fixture
def catalog():
    return InventoryCatalog()


class TestResolveVariant:
    def test_resolves_by_english_or_vietnamese_color(self, catalog, make_product):
        product = make_product()
        _, by_en = catalog.resolve_variant(product.id, "Red", SizeKey(eu=42, us=9))
        _, by_vi = catalog.resolve_variant(product.id, "Đỏ", SizeKey(eu=42, us=9))

        assert by_en == by_vi
        assert by_en.product_id == product.id

    def test_unknown_product(self, catalog):
        with pytest.raises(ProductNotFoundError) as exc_info:
            catalog.resolve_variant("missing", "Red", SizeKey(eu=42, us=9))
        assert str(exc_info.value) == "Product with ID missing not found"

    def test_unknown_color(self, catalog, make_product):
        product = make_product()
        with pytest.raises(VariantNotFoundError):
            catalog.resolve_variant(product.id, "Green", SizeKey(eu=42, us=9))

    def test_unknown_size(self, catalog, make_product):
        product = make_product()
        with pytest.raises(SizeNotFoundError):
            catalog.resolve_variant(product.id, "Red", SizeKey(eu=42, us=10))


class TestReserveAndRelease:
    def test_reservation_is_persisted(self, catalog, make_product, reload_product):
        product = make_product()
        _, location = catalog.resolve_variant(product.id, "Red", SizeKey(eu=42, us=9))

        catalog.reserve(location, 3)

        stored = reload_product(product)
        assert stored.size_option(location.size_option_id).stock == 2
        assert stored.in_stock is True

    def test_failed_reservation_leaves_stock(self, catalog, make_product, reload_product):
        product = make_product()
        _, location = catalog.resolve_variant(product.id, "Red", SizeKey(eu=42, us=9))

        with pytest.raises(InsufficientStockError):
            catalog.reserve(location, 6)

        assert reload_product(product).size_option(location.size_option_id).stock == 5

    def test_release_is_persisted(self, catalog, make_product, reload_product):
        product = make_product()
        _, location = catalog.resolve_variant(product.id, "Red", SizeKey(eu=42, us=9))

        catalog.reserve(location, 5)
        assert reload_product(product).in_stock is False

        catalog.release(location, 5)
        stored = reload_product(product)
        assert stored.size_option(location.size_option_id).stock == 5
        assert stored.in_stock is True

    def test_find_returns_none_for_missing_product(self, catalog):
        assert catalog.find("missing") is None


class TestConcurrentReservations:
    def test_stock_is_never_oversold(self, catalog, make_product, reload_product):
        product = make_product()
        _, location = catalog.resolve_variant(product.id, "Red", SizeKey(eu=42, us=9))

        outcomes = []
        start = threading.Barrier(10)

        def checkout():
            with storefront.domain_context():
                start.wait()
                try:
                    catalog.reserve(location, 1)
                    outcomes.append("reserved")
                except InsufficientStockError:
                    outcomes.append("rejected")

        threads = [threading.Thread(target=checkout) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stored = reload_product(product)
        assert outcomes.count("reserved") == 5
        assert outcomes.count("rejected") == 5
        assert stored.size_option(location.size_option_id).stock == 0
        assert stored.in_stock is False
