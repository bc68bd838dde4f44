"""Order statistics: counts per status and revenue, read straight from the ledger."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.order.order import REVENUE_STATUSES, Order, OrderStatus

RECENT_ORDERS = 5


@dataclass
class OrderStats:
    total_orders: int
    pending_orders: int
    shipped_orders: int
    completed_orders: int
    total_revenue: float


@dataclass
class CustomerOrderStats:
    total_orders: int
    pending_orders: int
    shipped_orders: int
    completed_orders: int
    total_spent: float
    recent_orders: list[Order] = field(default_factory=list)


def _status_counts(ledger, email=None) -> dict[str, int]:
    counts = ledger.count_by_status(email=email)
    return {
        "pending_orders": counts[OrderStatus.PENDING.value],
        "shipped_orders": counts[OrderStatus.SHIPPED.value],
        "completed_orders": counts[OrderStatus.COMPLETED.value],
    }


def stats_summary(email=None) -> OrderStats:
    """Counts per status, plus revenue as the sum of item totals of Shipped and Completed orders."""
    ledger = current_domain.repository_for(Order)
    counts = _status_counts(ledger, email)
    revenue = sum(order.total for order in ledger.iter_matching(statuses=REVENUE_STATUSES, email=email))
    return OrderStats(total_orders=sum(counts.values()), total_revenue=revenue, **counts)


def customer_stats(email) -> CustomerOrderStats:
    """A shopper's own numbers. Spending includes shipping fees and every status."""
    ledger = current_domain.repository_for(Order)
    counts = _status_counts(ledger, email)
    spent = sum(order.grand_total for order in ledger.iter_matching(email=email))
    recent = ledger.page(page=1, limit=RECENT_ORDERS, email=email).items
    return CustomerOrderStats(
        total_orders=sum(counts.values()),
        total_spent=spent,
        recent_orders=recent,
        **counts,
    )
