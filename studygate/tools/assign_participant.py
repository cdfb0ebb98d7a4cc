"""Assign a participant to a group and register it with the studygate API.

Reads the three group counts, picks the least-populated group (random on a
tie or when a lookup fails), then registers the participant in that group.

Usage:
    python -m studygate.tools.assign_participant --direction left
    python -m studygate.tools.assign_participant --direction right --participant-id abc-123
    python -m studygate.tools.assign_participant --direction left --override 2
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
import uuid
from dataclasses import dataclass

from studygate.adapters.http.study_client import StudyGateClient
from studygate.application.use_cases.assign_group import AssignGroupUseCase
from studygate.domain.policies.group_balance import resolve_group
from studygate.domain.value_objects.enums import (
    FALLBACK_SLOT,
    GROUP_SLOTS,
    Direction,
    ParticipantGroup,
    group_for_slot,
)

logger = logging.getLogger(__name__)


@dataclass
class Enrollment:
    participant_id: str
    slot: int
    group: ParticipantGroup
    registered: bool


async def assign_and_register(
    client: StudyGateClient,
    participant_id: str,
    direction: Direction,
    rng: random.Random | None = None,
    override: int = FALLBACK_SLOT,
) -> Enrollment:
    assigned = await AssignGroupUseCase(client, rng).start()
    slot = resolve_group(assigned, rng, override)
    group = group_for_slot(slot)
    registered = await client.register(participant_id, direction, group)
    return Enrollment(participant_id, slot, group, registered)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="Assign and register one study participant")
    parser.add_argument(
        "--direction", required=True, choices=[d.value for d in Direction],
        help="Direction chosen during gameplay",
    )
    parser.add_argument(
        "--participant-id", default=None,
        help="Participant id (a new UUID4 when omitted)",
    )
    parser.add_argument(
        "--override", type=int, default=FALLBACK_SLOT, choices=sorted(GROUP_SLOTS),
        help="Force a group slot instead of balancing",
    )
    parser.add_argument(
        "--api-url", default=None,
        help="studygate API base URL (defaults to STUDYGATE_API_URL)",
    )
    args = parser.parse_args()

    client = StudyGateClient(base_url=args.api_url)
    enrollment = asyncio.run(
        assign_and_register(
            client,
            args.participant_id or str(uuid.uuid4()),
            Direction(args.direction),
            override=args.override,
        )
    )

    print(f"{enrollment.participant_id} -> {enrollment.group.value} (slot {enrollment.slot})")
    if not enrollment.registered:
        logger.error("Registration failed for %s", enrollment.participant_id)
        sys.exit(1)


if __name__ == "__main__":
    main()
