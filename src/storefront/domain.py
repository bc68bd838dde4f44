"""Storefront bounded context: footwear catalogue stock, shipping rates and orders.

Handles variant resolution and stock reservation for products (variations by
color, size options by EU/US size), per-country shipping fees, and the order
lifecycle from checkout through cancellation with stock compensation.
"""

from protean.domain import Domain

storefront = Domain(name="storefront")
