"""
Florify — Admin Listing Script

Publishes a listing on behalf of a vendor, e.g. when onboarding a vendor's
price sheet by hand. Prints any price alerts the vendor has afterwards.

Usage:
    python scripts/add_listing.py --vendor-id v-123 --vendor-name "Rosaprima" \
        --canonical-name "Red Roses" --price 45.00
    python scripts/add_listing.py --vendor-id v-9 --vendor-name "Alexandra Farms" \
        --canonical-name "Blue Tulips" --price 20 --category Tulips --color Blue --box-type QB
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from decimal import Decimal, InvalidOperation

# Resolve project root so this script can be run from any working directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from florify.errors import MarketplaceError
from florify.main import create_db_engine, init_schema
from florify.services.marketplace import Marketplace
from florify.store.sql import SqlStore


def _price(value: str) -> Decimal:
    try:
        price = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise argparse.ArgumentTypeError("price must be a finite, non-negative number")
    return price


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a Florify listing for a vendor.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/add_listing.py --vendor-id v-123 --vendor-name Rosaprima --canonical-name "Red Roses" --price 45
  python scripts/add_listing.py --vendor-id v-9 --vendor-name "Alexandra Farms" --canonical-name "Blue Tulips" --price 20 --box-type QB
""",
    )
    parser.add_argument("--vendor-id", required=True, help="Owning vendor identifier.")
    parser.add_argument("--vendor-name", required=True, help="Vendor display name.")
    parser.add_argument(
        "--canonical-name",
        required=True,
        help="Normalized product name shared across vendors (e.g. 'Red Roses').",
    )
    parser.add_argument("--price", type=_price, required=True, help="Asking price per box.")
    parser.add_argument("--category", default=None, help="Product category (default: Other).")
    parser.add_argument("--color", default=None, help="Flower color (default: Assorted).")
    parser.add_argument("--stems-per-bunch", type=int, default=None)
    parser.add_argument("--units-per-box", type=int, default=None)
    parser.add_argument("--box-type", default=None, help="Box type code (default: EB).")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    engine, session_factory = create_db_engine()

    try:
        await init_schema(engine)
        marketplace = Marketplace(SqlStore(session_factory))
        listing = await marketplace.create_listing(
            vendor_id=args.vendor_id,
            vendor_name=args.vendor_name,
            canonical_name=args.canonical_name,
            price=args.price,
            category=args.category,
            color=args.color,
            stems_per_bunch=args.stems_per_bunch,
            units_per_box=args.units_per_box,
            box_type=args.box_type,
        )
        print("Listing created successfully.")
        print(f"  listing_id      = {listing.listing_id}")
        print(f"  canonical_name  = {listing.canonical_name}")
        print(f"  vendor          = {listing.vendor_name} ({listing.vendor_id})")
        print(f"  price           = {listing.price}")
        print(f"  box             = {listing.units_per_box} x {listing.box_type}, "
              f"{listing.stems_per_bunch} stems/bunch")

        alerts = await marketplace.list_vendor_alerts(args.vendor_id)
        if alerts:
            print()
            print(f"Vendor has {len(alerts)} price alert(s):")
            for alert in alerts:
                print(
                    f"  {alert.canonical_name}: {alert.your_price} vs lowest "
                    f"{alert.lowest_market_price} (+{alert.percent_above:.2f}%)"
                )
    except MarketplaceError as e:
        print(f"Failed to create listing: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
