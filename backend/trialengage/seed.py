"""Seed CLI — `python -m trialengage.seed [--create-tables]`.

Design Decisions:
    - Goes through DatabaseSessionManager like the API; no FastAPI app is started
    - --create-tables is for throwaway databases; real deployments run alembic
"""

import argparse
import asyncio
import logging

from trialengage.config import get_settings
from trialengage.infrastructure.database import DatabaseSessionManager
from trialengage.infrastructure.observability import setup_logging
from trialengage.services.seed import seed_demo_tenants
import trialengage.models  # noqa: F401

logger = logging.getLogger(__name__)


async def run(create_tables: bool = False) -> list[str]:
    manager = DatabaseSessionManager.from_settings(get_settings())
    try:
        if create_tables:
            await manager.create_all()
        async with manager.session() as db:
            return await seed_demo_tenants(db)
    finally:
        await manager.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed TrialEngage demo tenants")
    parser.add_argument(
        "--create-tables", action="store_true",
        help="create tables from the ORM metadata before seeding",
    )
    args = parser.parse_args()
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    created = asyncio.run(run(args.create_tables))
    logger.info(f"Created {len(created)} tenant(s): {created or 'none'}")


if __name__ == "__main__":
    main()
