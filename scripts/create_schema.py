"""Create the salary ledger tables.

Usage:
    python scripts/create_schema.py
    python scripts/create_schema.py --database-url postgresql+asyncpg://...

Only tables that do not exist yet are created; existing data is untouched.
"""

from __future__ import annotations

import argparse
import asyncio

from salary_ledger.config import get_settings
from salary_ledger.database import create_schema, get_engine
from salary_ledger.models import Base


async def create_tables(database_url: str) -> None:
    """Create all ledger tables in the target database."""
    print(f"Target database: {database_url.split('@')[1] if '@' in database_url else database_url}")

    engine = get_engine(database_url)
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()

    for table in Base.metadata.sorted_tables:
        print(f"  {table.name}")
    print("\nSchema ready.")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create the salary ledger tables")
    parser.add_argument(
        "--database-url",
        type=str,
        default=get_settings().database_url,
        help="Database URL (default: from settings)",
    )

    args = parser.parse_args()

    asyncio.run(create_tables(args.database_url))


if __name__ == "__main__":
    main()
