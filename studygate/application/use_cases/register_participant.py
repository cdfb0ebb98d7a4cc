"""RegisterParticipantUseCase — create-only participant registration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from studygate.application.ports.participant_repo import ParticipantRepository
from studygate.domain.entities.participant import ParticipantRecord
from studygate.domain.errors import ConflictError
from studygate.domain.policies.submission_rules import (
    check_token,
    parse_direction,
    parse_group,
    require_participant_id,
)
from studygate.domain.value_objects.enums import ParticipantStatus

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RegisterParticipantUseCase:
    """Records a participant's group and direction before the survey."""

    def __init__(
        self,
        participant_repo: ParticipantRepository,
        survey_token: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._participants = participant_repo
        self._token = survey_token
        self._clock = clock

    async def execute(
        self,
        token: str | None,
        participant_id: str | None,
        direction: str | None,
        group: str | None,
    ) -> ParticipantRecord:
        """Register a participant.

        All validation happens before the store is touched. The record is
        created pending; an existing record is never overwritten.

        Raises:
            AuthError: token mismatch.
            ValidationError: missing id, bad direction or bad group.
            ConflictError: the id is already registered.
        """
        check_token(token, self._token)
        participant_id = require_participant_id(participant_id, "unityId")
        parsed_direction = parse_direction(direction, case_insensitive=True)
        parsed_group = parse_group(group)

        if await self._participants.get(participant_id) is not None:
            logger.warning("Participant %s already registered", participant_id)
            raise ConflictError("Unity ID already registered")

        record = ParticipantRecord(
            id=participant_id,
            direction=parsed_direction,
            group=parsed_group,
            status=ParticipantStatus.PENDING,
            created_at=self._clock(),
        )
        # The insert itself is guarded by the primary key, so a concurrent
        # duplicate that slipped past the check above still ends up here.
        if not await self._participants.create(record):
            logger.warning("Participant %s registered concurrently", participant_id)
            raise ConflictError("Unity ID already registered")

        logger.info(
            "Participant %s registered: group=%s, direction=%s",
            participant_id, parsed_group.value, parsed_direction.value,
        )
        return record
