"""Storefront management CLI.

Creates and drops the database schema and loads the default shipping rates
and a demo catalog.

Usage:
    python src/manage.py setup-db        # Create all tables
    python src/manage.py drop-db         # Drop all tables
    python src/manage.py seed-shipping   # Load the default shipping rate table
    python src/manage.py seed-products   # Register the demo catalog
"""

import argparse
import json
import sys

from storefront.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

# country: (base fee, per-kg rate)
DEFAULT_SHIPPING_RATES = {
    "US": (25.0, 5.0),
    "CN": (15.0, 2.5),
    "JP": (20.0, 3.0),
    "KR": (18.0, 3.5),
    "TH": (12.0, 2.0),
    "SG": (15.0, 2.8),
    "AU": (30.0, 4.5),
    "GB": (28.0, 4.2),
    "DE": (25.0, 4.0),
    "CA": (22.0, 4.8),
}


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    print("Creating storefront database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    print("Dropping storefront database schema...")
    drop_db(_domain())
    print("Done.")


def seed_shipping_rates(rates=None):
    """Upsert the shipping rate table. Returns the countries written."""
    from storefront.shipping.rates import SetShippingRate

    domain = _domain()
    written = []
    with domain.domain_context():
        for country, (base_fee, per_kg_rate) in (rates or DEFAULT_SHIPPING_RATES).items():
            command = SetShippingRate(country=country, base_fee=base_fee, per_kg_rate=per_kg_rate)
            written.append(domain.process(command, asynchronous=False))
            logger.info("shipping_rate_seeded", country=country, base_fee=base_fee, per_kg_rate=per_kg_rate)
    print(f"Seeded {len(written)} shipping rates: {', '.join(written)}")
    return written


# (name en, name vi), weight kg, colors (en, vi, image), price, stock per size
DEMO_PRODUCTS = [
    (("Vans Old Skool", "Giày Vans Old Skool"), 0.9, [("Black", "Đen", "/assets/shoe1.jpg")], 1800000, 5),
    (("Nike Air Force 1", "Giày Nike Air Force 1"), 1.1, [("White", "Trắng", "/assets/shoe2.jpg")], 2200000, 5),
    (
        ("Adidas Stan Smith", "Giày Adidas Stan Smith"),
        0.8,
        [("White", "Trắng", "/assets/shoe3.jpg"), ("Green", "Xanh lá", "/assets/shoe4.jpg")],
        1900000,
        5,
    ),
]

DEMO_SIZES = [(38, 5.5), (39, 6.5), (40, 7), (41, 8), (42, 9), (43, 9.5), (44, 10)]


def seed_products(products=None):
    """Register the demo catalog. Returns the new product ids."""
    from storefront.product.registration import RegisterProduct

    domain = _domain()
    created = []
    with domain.domain_context():
        for (name_en, name_vi), weight_kg, colors, price, stock in products or DEMO_PRODUCTS:
            variations = [
                {
                    "color": {"en": en, "vi": vi},
                    "image": image,
                    "sizes": [{"size": {"EU": eu, "US": us}, "price": price, "stock": stock} for eu, us in DEMO_SIZES],
                }
                for en, vi, image in colors
            ]
            command = RegisterProduct(
                name_en=name_en,
                name_vi=name_vi,
                weight_kg=weight_kg,
                variations=json.dumps(variations),
            )
            product_id = domain.process(command, asynchronous=False)
            created.append(product_id)
            logger.info("product_seeded", product_id=product_id, name=name_en)
    print(f"Seeded {len(created)} products: {', '.join(created)}")
    return created


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-shipping", help="Load the default shipping rates")
    subparsers.add_parser("seed-products", help="Register the demo catalog")

    args = parser.parse_args()
    configure_logging()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-shipping":
        seed_shipping_rates()
    elif args.command == "seed-products":
        seed_products()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
