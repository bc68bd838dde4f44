"""InventoryCatalog: variant resolution and atomic stock movements.

Every stock movement loads the product, applies the change and saves it while
holding the product's lock, so the stock check and the decrement are one
indivisible step. The lock is per product rather than per size option because
the product is saved as a whole and ``in_stock`` depends on all of its sizes.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.product.product import Product, SizeKey, VariantLocation
from storefront.shared.errors import ProductNotFoundError
from storefront.shared.locks import KeyedLocks, stock_locks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryCatalog:
    def __init__(self, locks: KeyedLocks | None = None):
        self._locks = locks or stock_locks

    @property
    def _repository(self):
        return current_domain.repository_for(Product)

    def get(self, product_id) -> Product:
        try:
            return self._repository.get(product_id)
        except ObjectNotFoundError:
            raise ProductNotFoundError(f"Product with ID {product_id} not found") from None

    def find(self, product_id) -> Product | None:
        try:
            return self.get(product_id)
        except ProductNotFoundError:
            return None

    def resolve_variant(self, product_id, color: str, size: SizeKey) -> tuple[Product, VariantLocation]:
        """Find the size option a (color, size) request refers to.

        Raises ProductNotFoundError, VariantNotFoundError or SizeNotFoundError.
        """
        product = self.get(product_id)
        return product, product.locate(color, size)

    def reserve(self, location: VariantLocation, quantity: int) -> Product:
        """Take ``quantity`` units out of stock, or raise InsufficientStockError leaving stock untouched."""
        with self._locks.hold(location.product_id):
            product = self.get(location.product_id)
            product.reserve(location.size_option_id, quantity)
            self._repository.add(product)

        logger.info(
            "stock_reserved",
            product_id=location.product_id,
            size_option_id=location.size_option_id,
            quantity=quantity,
        )
        return product

    def release(self, location: VariantLocation, quantity: int) -> Product:
        """Return ``quantity`` units to stock."""
        with self._locks.hold(location.product_id):
            product = self.get(location.product_id)
            product.release(location.size_option_id, quantity)
            self._repository.add(product)

        logger.info(
            "stock_released",
            product_id=location.product_id,
            size_option_id=location.size_option_id,
            quantity=quantity,
        )
        return product
