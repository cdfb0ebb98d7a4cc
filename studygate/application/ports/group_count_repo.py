"""Port interface for per-group participant counters."""

from abc import ABC, abstractmethod

from studygate.domain.value_objects.enums import ParticipantGroup


class GroupCountRepository(ABC):
    @abstractmethod
    async def get_count(self, group: ParticipantGroup) -> int:
        """Current counter value, 0 if the counter does not exist yet."""
        ...

    @abstractmethod
    async def get_all(self) -> dict[ParticipantGroup, int]:
        ...

    @abstractmethod
    async def increment(self, group: ParticipantGroup) -> int:
        """Atomically add one to the counter and return the NEW value.

        Must be an optimistic read-modify-write that retries on concurrent
        writers, never a plain read followed by a blind write.
        """
        ...
