#!/usr/bin/env python3
"""Prepare a local database in one go: tables, demo account, devices and 24h of readings."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from scripts.init_db import init_db
from scripts.seed_demo import DEMO_USER, seed_demo


async def setup_all(reset: bool = False) -> None:
    print("=== SmartAgri database setup ===")

    print("\n[1/2] Tables")
    await init_db(reset=reset)

    print("\n[2/2] Demo data")
    await seed_demo()

    print(f"\nDone. Sign in as {DEMO_USER['email']} and start the server with:")
    print("  uvicorn smartagri.main:app --reload --port 8000")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()
    asyncio.run(setup_all(reset=args.reset))
