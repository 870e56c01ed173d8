#!/usr/bin/env python3
"""Seed sample catalog script.

Creates the tables if needed and loads sample categories, products
and a banner.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --clear
"""

import argparse
import asyncio

from storefront.catalog.seed import seed_catalog
from storefront.infrastructure.database import dispose_engine, get_session_factory, init_models
from storefront.infrastructure.logging import setup_logging


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the sample storefront catalog")
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing catalog records before seeding",
    )
    args = parser.parse_args()

    setup_logging()
    await init_models()

    async with get_session_factory()() as session:
        result = await seed_catalog(session, clear=args.clear)

    await dispose_engine()

    print(
        f"Seeded {result['categories']} categories, "
        f"{result['products']} products, {result['banners']} banners"
    )


if __name__ == "__main__":
    asyncio.run(main())
