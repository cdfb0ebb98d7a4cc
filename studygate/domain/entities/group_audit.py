"""GroupAudit entity — a counter compared against its finalized records."""

from dataclasses import dataclass

from studygate.domain.value_objects.enums import ParticipantGroup


@dataclass(frozen=True)
class GroupAudit:
    group: ParticipantGroup
    counter: int
    used_records: int

    @property
    def drift(self) -> int:
        """Negative when increments were lost after a record was marked used."""
        return self.counter - self.used_records
