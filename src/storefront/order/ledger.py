"""OrderLedger: persistence and queries for Order."""

import math
from collections.abc import Iterator
from dataclasses import dataclass

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus

_BATCH_SIZE = 100


@dataclass
class OrderPage:
    items: list[Order]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@storefront.repository(part_of=Order)
class OrderLedger:
    """Order repository with paging and the filters the order views need.

    Listings are newest first. Email filters match the normalized
    (trimmed, lowercased) customer email.
    """

    def _query(self, status=None, email=None):
        criteria = {}
        if status:
            criteria["status"] = status.value if isinstance(status, OrderStatus) else status
        if email:
            criteria["customer_email"] = email.strip().lower()
        return self._dao.query.filter(**criteria)

    def page(self, page: int = 1, limit: int = 10, status=None, email=None) -> OrderPage:
        offset = (page - 1) * limit
        results = self._query(status, email).order_by("-created_at").offset(offset).limit(limit).all()
        return OrderPage(items=list(results.items), total=results.total, page=page, limit=limit)

    def find_by_idempotency_key(self, key: str) -> Order | None:
        results = self._dao.query.filter(idempotency_key=key).all().items
        return results[0] if results else None

    def count_orders(self, status=None, email=None) -> int:
        return self._query(status, email).all().total

    def count_by_status(self, email=None) -> dict[str, int]:
        return {status.value: self.count_orders(status, email) for status in OrderStatus}

    def iter_matching(self, statuses=None, email=None) -> Iterator[Order]:
        """Every order matching the filters, fetched in batches."""
        for status in statuses or [None]:
            offset = 0
            while True:
                results = self._query(status, email).order_by("-created_at").offset(offset).limit(_BATCH_SIZE).all()
                yield from results.items
                offset += _BATCH_SIZE
                if offset >= results.total:
                    break

    def remove_order(self, order: Order) -> None:
        self._dao.delete(order)
