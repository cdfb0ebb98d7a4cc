"""AuditGroupCountsUseCase — compare counters with finalized records."""

from __future__ import annotations

import logging

from studygate.application.ports.group_count_repo import GroupCountRepository
from studygate.application.ports.participant_repo import ParticipantRepository
from studygate.domain.entities.group_audit import GroupAudit
from studygate.domain.policies.submission_rules import check_token
from studygate.domain.value_objects.enums import ParticipantGroup

logger = logging.getLogger(__name__)


class AuditGroupCountsUseCase:
    def __init__(
        self,
        participant_repo: ParticipantRepository,
        count_repo: GroupCountRepository,
        survey_token: str,
    ):
        self._participants = participant_repo
        self._counts = count_repo
        self._token = survey_token

    async def execute(self, token: str | None) -> list[GroupAudit]:
        check_token(token, self._token)
        counters = await self._counts.get_all()
        used = await self._participants.count_used_by_group()

        report = [
            GroupAudit(
                group=group,
                counter=counters.get(group, 0),
                used_records=used.get(group, 0),
            )
            for group in ParticipantGroup
        ]
        for entry in report:
            if entry.drift != 0:
                logger.warning(
                    "Group %s drift %d (counter=%d, used=%d)",
                    entry.group.value, entry.drift, entry.counter, entry.used_records,
                )
        return report
