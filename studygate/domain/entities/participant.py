"""ParticipantRecord entity — one registered study participant."""

from dataclasses import dataclass
from datetime import datetime

from studygate.domain.value_objects.enums import (
    Direction,
    ParticipantGroup,
    ParticipantStatus,
)

# Matches the width of participants.id
MAX_PARTICIPANT_ID_LENGTH = 100


@dataclass
class ParticipantRecord:
    id: str
    direction: Direction
    group: ParticipantGroup
    status: ParticipantStatus = ParticipantStatus.PENDING
    created_at: datetime | None = None
    used_at: datetime | None = None

    def is_used(self) -> bool:
        return self.status == ParticipantStatus.USED

    def matches(self, group: ParticipantGroup, direction: Direction) -> bool:
        return self.group == group and self.direction == direction
