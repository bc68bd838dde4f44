"""Storefront Load Testing: Locust entry point.

Checkout traffic concentrates on a single size option so that concurrent
reservations contend for the same stock.

Usage:
    # Web UI:
    locust -f loadtests/locustfile.py

    # Headless (CI mode):
    python src/manage.py seed-shipping && python src/manage.py seed-products
    LOADTEST_PRODUCT_ID=<id> locust -f loadtests/locustfile.py CheckoutUser --headless \
           -u 50 -r 5 -t 120s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.checkout import CheckoutUser, ShippingBrowserUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Sold-out checkouts are expected under contention and are not logged.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        if "Insufficient stock" in detail:
            return
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print how the checkout attempts ended."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    stats = environment.stats.get("POST /orders", "POST")
    print(f"[LOADTEST] Checkout attempts: {stats.num_requests}, failures: {stats.num_failures}\n")
