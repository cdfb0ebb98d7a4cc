"""AssignGroupUseCase — client-side balanced group assignment."""

from __future__ import annotations

import asyncio
import logging
import random

from studygate.application.ports.group_count_reader import GroupCountReader
from studygate.domain.errors import CountLookupError
from studygate.domain.policies.group_balance import pick_least_populated
from studygate.domain.value_objects.enums import FALLBACK_SLOT, GROUP_SLOTS

logger = logging.getLogger(__name__)


class AssignGroupUseCase:
    """Reads every group's count in turn and picks the smallest group."""

    def __init__(self, reader: GroupCountReader, rng: random.Random | None = None):
        self._reader = reader
        self._rng = rng or random.Random()

    async def execute(self) -> int:
        """Return the assigned slot (1-3), or 0 if any lookup failed.

        Lookups run one after another; the first failure aborts the rest.
        """
        counts: dict[int, int] = {}
        for slot, group in sorted(GROUP_SLOTS.items()):
            try:
                counts[slot] = await self._reader.read_count(group)
            except CountLookupError as e:
                logger.warning("Count lookup for %s failed: %s", group.value, e)
                return FALLBACK_SLOT
            logger.debug("Group %s count: %d", group.value, counts[slot])

        slot = pick_least_populated(counts, self._rng)
        logger.info("Assigned to group slot %d (counts=%s)", slot, counts)
        return slot

    def start(self) -> asyncio.Task[int]:
        """Schedule the assignment on the running loop and return its task."""
        return asyncio.ensure_future(self.execute())
