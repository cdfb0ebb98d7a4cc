"""SQLAlchemy repository implementations.

Each primitive runs in its own short transaction on a fresh session, so no
request holds state or a connection between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studygate.adapters.persistence.models import GroupCountModel, ParticipantModel
from studygate.application.ports.group_count_repo import GroupCountRepository
from studygate.application.ports.participant_repo import ParticipantRepository
from studygate.config import settings
from studygate.domain.entities.participant import ParticipantRecord
from studygate.domain.errors import TransientStoreError
from studygate.domain.value_objects.enums import (
    Direction,
    ParticipantGroup,
    ParticipantStatus,
)

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise TransientStoreError(f"Store failure while trying to {action}") from e


# ─── Mappers ─────────────────────────────────────────────────────────


def _participant_to_domain(m: ParticipantModel) -> ParticipantRecord:
    return ParticipantRecord(
        id=m.id,
        direction=Direction(m.direction),
        group=ParticipantGroup(m.group_name),
        status=ParticipantStatus(m.status),
        created_at=m.created_at,
        used_at=m.used_at,
    )


def _known_groups(rows) -> dict[ParticipantGroup, int]:
    known = {g.value for g in ParticipantGroup}
    return {ParticipantGroup(name): value for name, value in rows if name in known}


# ─── Repositories ────────────────────────────────────────────────────


class SqlParticipantRepository(ParticipantRepository):
    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self._sessions = sessions

    async def get(self, participant_id: str) -> ParticipantRecord | None:
        with _store_errors("load participant"):
            async with self._sessions() as s:
                m = await s.get(ParticipantModel, participant_id)
                return _participant_to_domain(m) if m else None

    async def create(self, record: ParticipantRecord) -> bool:
        with _store_errors("create participant"):
            try:
                async with self._sessions.begin() as s:
                    s.add(
                        ParticipantModel(
                            id=record.id,
                            status=record.status.value,
                            direction=record.direction.value,
                            group_name=record.group.value,
                            created_at=record.created_at,
                        )
                    )
            except IntegrityError:
                return False
            return True

    async def mark_used(self, participant_id: str, used_at: datetime) -> bool:
        with _store_errors("mark participant used"):
            async with self._sessions.begin() as s:
                result = await s.execute(
                    update(ParticipantModel)
                    .where(
                        ParticipantModel.id == participant_id,
                        ParticipantModel.status == ParticipantStatus.PENDING.value,
                    )
                    .values(status=ParticipantStatus.USED.value, used_at=used_at)
                )
                return result.rowcount == 1

    async def count_used_by_group(self) -> dict[ParticipantGroup, int]:
        with _store_errors("count used participants"):
            async with self._sessions() as s:
                result = await s.execute(
                    select(ParticipantModel.group_name, func.count(ParticipantModel.id))
                    .where(ParticipantModel.status == ParticipantStatus.USED.value)
                    .group_by(ParticipantModel.group_name)
                )
                return _known_groups(result.all())


class SqlGroupCountRepository(GroupCountRepository):
    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        max_retries: int | None = None,
    ):
        self._sessions = sessions
        self._max_retries = (
            settings.counter_max_retries if max_retries is None else max_retries
        )

    async def get_count(self, group: ParticipantGroup) -> int:
        with _store_errors("read group count"):
            async with self._sessions() as s:
                value = await s.scalar(
                    select(GroupCountModel.count).where(GroupCountModel.group_name == group.value)
                )
                return value or 0

    async def get_all(self) -> dict[ParticipantGroup, int]:
        with _store_errors("read group counts"):
            async with self._sessions() as s:
                result = await s.execute(select(GroupCountModel.group_name, GroupCountModel.count))
                return _known_groups(result.all())

    async def increment(self, group: ParticipantGroup) -> int:
        for attempt in range(1, self._max_retries + 1):
            with _store_errors("increment group count"):
                new_value = await self._try_increment(group.value)
            if new_value is not None:
                return new_value
            logger.debug("Counter %s contended (attempt %d)", group.value, attempt)

        raise TransientStoreError(
            f"Counter {group.value} still contended after {self._max_retries} attempts"
        )

    async def _try_increment(self, group_name: str) -> int | None:
        """One optimistic attempt: returns the new value, or None on conflict."""
        try:
            async with self._sessions.begin() as s:
                current = await s.scalar(
                    select(GroupCountModel.count).where(GroupCountModel.group_name == group_name)
                )
                if current is None:
                    # Created at 0 and incremented in one step; a concurrent
                    # creator makes the commit fail on the primary key.
                    s.add(GroupCountModel(group_name=group_name, count=1))
                    return 1

                result = await s.execute(
                    update(GroupCountModel)
                    .where(
                        GroupCountModel.group_name == group_name,
                        GroupCountModel.count == current,
                    )
                    .values(count=current + 1)
                )
                if result.rowcount != 1:
                    return None
                return current + 1
        except IntegrityError:
            return None
