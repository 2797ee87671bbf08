#!/usr/bin/env python3
"""
Initialize the database schema.

Creates the organizations, employees, tasks and ai_scores tables if they
don't exist, on whichever database DB_* settings point to. Optionally seeds
a demo organization.

Usage:
    python3 migrations/init_database.py
    python3 migrations/init_database.py --seed-org "Acme Inc" --seed-email ops@acme.test
"""

import argparse
import asyncio
import re
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from config.database import get_database_settings
from database.async_engine import (
    close_database,
    create_engine,
    get_session_factory,
    init_database,
    session_scope,
)
from database.models import OrganizationRecord
from config.settings import get_settings
from services.logging_config import configure_logging, get_logger

logger = get_logger("migrations.init_database", component="migrations")


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


async def run(seed_org: str = None, seed_email: str = None) -> None:
    settings = get_database_settings()
    engine = create_engine(settings)
    try:
        await init_database(engine)

        if seed_org:
            factory = get_session_factory(engine)
            async with session_scope(factory) as session:
                org = OrganizationRecord(
                    name=seed_org,
                    slug=slugify(seed_org),
                    email=seed_email or f"admin@{slugify(seed_org)}.local",
                )
                session.add(org)
                await session.commit()
            logger.info(f"Seeded organization {org.name} ({org.id})", extra={"org_id": org.id})
    finally:
        await close_database(engine)


def main():
    parser = argparse.ArgumentParser(description="Create the workforce schema")
    parser.add_argument("--seed-org", help="Create an organization with this name")
    parser.add_argument("--seed-email", help="Contact email of the seeded organization")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs, settings.log_file)
    asyncio.run(run(args.seed_org, args.seed_email))
    print("Database initialized successfully!")
    print("\nTables:")
    print("  - organizations")
    print("  - employees")
    print("  - tasks")
    print("  - ai_scores")


if __name__ == "__main__":
    main()
