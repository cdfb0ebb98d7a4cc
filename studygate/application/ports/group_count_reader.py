"""Port interface for the client-side group count lookup."""

from abc import ABC, abstractmethod

from studygate.domain.value_objects.enums import ParticipantGroup


class GroupCountReader(ABC):
    @abstractmethod
    async def read_count(self, group: ParticipantGroup) -> int:
        """Fetch the current count for one group.

        Raises CountLookupError when the lookup fails.
        """
        ...
