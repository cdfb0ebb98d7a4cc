"""Create the studygate schema and optionally seed zero counters.

Usage:
    python -m studygate.tools.init_db
    python -m studygate.tools.init_db --seed-counters
    python -m studygate.tools.init_db --drop  # drop existing tables first
    python -m studygate.tools.init_db --verify-only
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from studygate.adapters.persistence.database import Base, async_session_factory, engine
from studygate.adapters.persistence.models import GroupCountModel, ParticipantModel
from studygate.domain.value_objects.enums import ParticipantGroup

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def init_schema(db_engine: AsyncEngine = engine, drop: bool = False) -> None:
    """Create all tables; with drop=True, remove them first (destroys data)."""
    async with db_engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("Dropped all existing tables")
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ready")


async def seed_counters(
    sessions: async_sessionmaker[AsyncSession] = async_session_factory,
) -> int:
    """Insert a zero counter for every group that has none. Returns how many were added."""
    added = 0
    async with sessions.begin() as session:
        existing = set((await session.execute(select(GroupCountModel.group_name))).scalars())
        for group in ParticipantGroup:
            if group.value in existing:
                logger.debug("Counter '%s' already exists, skipping", group.value)
                continue
            session.add(GroupCountModel(group_name=group.value, count=0))
            added += 1
    logger.info("Seeded %d group counters", added)
    return added


async def _verify_data(
    sessions: async_sessionmaker[AsyncSession] = async_session_factory,
) -> None:
    """Print counters and participant totals."""
    async with sessions() as session:
        counters = (await session.execute(select(GroupCountModel))).scalars().all()
        status_rows = (
            await session.execute(
                select(ParticipantModel.status, func.count(ParticipantModel.id))
                .group_by(ParticipantModel.status)
            )
        ).all()

        print(f"\n{'='*50}")
        print("STUDYGATE VERIFICATION")
        print(f"{'='*50}")
        for c in counters:
            print(f"{c.group_name:<20} {c.count}")
        print(f"Participants by status: {dict(status_rows)}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Initialize the studygate database")
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing tables before creating them",
    )
    parser.add_argument(
        "--seed-counters", action="store_true",
        help="Create zero counters for every group",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only print current state, don't change anything",
    )
    args = parser.parse_args()

    async def run_all():
        if not args.verify_only:
            await init_schema(drop=args.drop)
            if args.seed_counters:
                await seed_counters()
        await _verify_data()
        await engine.dispose()

    asyncio.run(run_all())


if __name__ == "__main__":
    main()
