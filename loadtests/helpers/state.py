"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class CheckoutState:
    """Tracks what a single simulated shopper has bought."""

    order_ids: list[str] = field(default_factory=list)
    units_bought: int = 0
    sold_out: int = 0
