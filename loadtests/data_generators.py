"""Faker-based data generators for Locust load test scenarios.

Payloads pass the CustomerInfo checks (single @, dotted domain, dialable
phone) and use the field names of the checkout request schema.
"""

import os
import random
import uuid

from faker import Faker

fake = Faker()

COUNTRIES = ["US", "GB", "DE", "JP", "KR", "AU", "CA", "SG"]


def valid_email() -> str:
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def valid_phone() -> str:
    area = random.randint(200, 999)
    prefix = random.randint(200, 999)
    line = random.randint(1000, 9999)
    return f"+1-{area}-{prefix}-{line}"


def customer_info() -> dict:
    return {
        "name": fake.name()[:200],
        "email": valid_email(),
        "address": fake.address().replace("\n", ", ")[:500],
        "phone": valid_phone(),
    }


def target_line(quantity: int = 1) -> dict:
    """The contended order line, configured through LOADTEST_* variables."""
    return {
        "product_id": os.environ.get("LOADTEST_PRODUCT_ID", ""),
        "selected_color": os.environ.get("LOADTEST_COLOR", "Black"),
        "selected_size": {
            "eu": float(os.environ.get("LOADTEST_SIZE_EU", "42")),
            "us": float(os.environ.get("LOADTEST_SIZE_US", "9")),
        },
        "quantity": quantity,
    }


def checkout_data(quantity: int | None = None, country: str | None = None) -> dict:
    return {
        "products": [target_line(quantity or random.randint(1, 2))],
        "customer_info": customer_info(),
        "shipping_country": country or random.choice(COUNTRIES),
    }


def idempotency_key() -> str:
    return f"LT-{uuid.uuid4().hex}"
