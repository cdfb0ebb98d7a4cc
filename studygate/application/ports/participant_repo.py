"""Port interface for participant record persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from studygate.domain.entities.participant import ParticipantRecord
from studygate.domain.value_objects.enums import ParticipantGroup


class ParticipantRepository(ABC):
    @abstractmethod
    async def get(self, participant_id: str) -> ParticipantRecord | None:
        ...

    @abstractmethod
    async def create(self, record: ParticipantRecord) -> bool:
        """Insert the record only if no record exists for its id.

        Returns False when the id is already taken. Must be atomic: two
        concurrent creates for one id may not both succeed.
        """
        ...

    @abstractmethod
    async def mark_used(self, participant_id: str, used_at: datetime) -> bool:
        """Transition pending -> used in a single conditional update.

        Returns True only for the call that performed the transition.
        """
        ...

    @abstractmethod
    async def count_used_by_group(self) -> dict[ParticipantGroup, int]:
        ...
