"""FinalizeSubmissionUseCase — count a registered participant exactly once."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from studygate.application.ports.group_count_repo import GroupCountRepository
from studygate.application.ports.participant_repo import ParticipantRepository
from studygate.application.use_cases.register_participant import utcnow
from studygate.domain.errors import InvalidReferenceError, MismatchError
from studygate.domain.policies.submission_rules import (
    check_token,
    parse_direction,
    parse_group,
    require_participant_id,
)
from studygate.domain.value_objects.enums import ParticipantGroup

logger = logging.getLogger(__name__)


class FinalizeOutcome(str, Enum):
    INCREMENTED = "incremented"
    ALREADY_PROCESSED = "already_processed"


@dataclass
class FinalizeResult:
    """Summary of one finalize call."""

    participant_id: str
    group: ParticipantGroup
    outcome: FinalizeOutcome
    count: int | None = None  # new counter value, only when incremented

    @property
    def message(self) -> str:
        if self.outcome == FinalizeOutcome.ALREADY_PROCESSED:
            return f"Unity ID {self.participant_id} already processed"
        return f"Incremented group: {self.group.value}"


class FinalizeSubmissionUseCase:
    """Transitions a pending registration to used and advances its counter."""

    def __init__(
        self,
        participant_repo: ParticipantRepository,
        count_repo: GroupCountRepository,
        survey_token: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._participants = participant_repo
        self._counts = count_repo
        self._token = survey_token
        self._clock = clock

    async def execute(
        self,
        token: str | None,
        group: str | None,
        participant_id: str | None,
        direction: str | None,
    ) -> FinalizeResult:
        """Finalize a submission.

        Pipeline:
        1. Validate token, id, group and direction (no store access)
        2. Load the registration; unknown ids are rejected
        3. Already used -> report success without touching anything
        4. Group and direction must match the registration
        5. Conditionally mark the record used
        6. Only then increment the group counter

        A failure between steps 5 and 6 loses one increment. It is never
        recovered here; the relay's retry then sees "already processed".
        """
        check_token(token, self._token)
        participant_id = require_participant_id(participant_id, "submissionId")
        parsed_group = parse_group(group)
        parsed_direction = parse_direction(direction)

        record = await self._participants.get(participant_id)
        if record is None:
            logger.warning("Finalize for unknown participant %s", participant_id)
            raise InvalidReferenceError("Invalid Unity ID")

        if record.is_used():
            logger.info("Participant %s already processed", participant_id)
            return FinalizeResult(
                participant_id=participant_id,
                group=record.group,
                outcome=FinalizeOutcome.ALREADY_PROCESSED,
            )

        if not record.matches(parsed_group, parsed_direction):
            logger.warning(
                "Participant %s mismatch: registered %s/%s, submitted %s/%s",
                participant_id, record.group.value, record.direction.value,
                parsed_group.value, parsed_direction.value,
            )
            raise MismatchError("Group or direction mismatch")

        if not await self._participants.mark_used(participant_id, self._clock()):
            # A concurrent call won the transition and owns the increment
            logger.info("Participant %s finalized concurrently", participant_id)
            return FinalizeResult(
                participant_id=participant_id,
                group=record.group,
                outcome=FinalizeOutcome.ALREADY_PROCESSED,
            )

        try:
            new_count = await self._counts.increment(parsed_group)
        except Exception:
            logger.error(
                "Lost increment: participant %s marked used but group %s not incremented",
                participant_id, parsed_group.value,
            )
            raise

        logger.info(
            "Participant %s finalized → group %s = %d",
            participant_id, parsed_group.value, new_count,
        )
        return FinalizeResult(
            participant_id=participant_id,
            group=parsed_group,
            outcome=FinalizeOutcome.INCREMENTED,
            count=new_count,
        )
