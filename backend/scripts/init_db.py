#!/usr/bin/env python3
"""Create the SmartAgri tables, or drop and recreate them with --reset."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from smartagri.config import DATABASE_PATH
from smartagri.database import Base, engine
import smartagri.models  # noqa: F401, E402 - registers users, devices, readings, recommendations


async def init_db(reset: bool = False) -> None:
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
            print(f"Dropped existing tables in {DATABASE_PATH}")
        await conn.run_sync(Base.metadata.create_all)

    tables = ", ".join(sorted(Base.metadata.tables))
    print(f"Tables ready: {tables}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    args = parser.parse_args()
    asyncio.run(init_db(reset=args.reset))
