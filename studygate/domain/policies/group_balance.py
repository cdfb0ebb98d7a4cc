"""GroupBalancePolicy — fill the least-populated group, random tie-break."""

from __future__ import annotations

import random

from studygate.domain.value_objects.enums import FALLBACK_SLOT, GROUP_SLOTS


def pick_least_populated(counts: dict[int, int], rng: random.Random | None = None) -> int:
    """Pick the slot with the lowest count.

    1. Find the minimum count across all slots.
    2. Collect every slot sharing that minimum.
    3. Choose uniformly at random among them.

    Greedily filling the smallest group keeps group sizes within one of each
    other over many independent assignments.

    Args:
        counts: slot -> current participant count.
        rng: random source (defaults to the module-level generator).

    Returns:
        The chosen slot.

    Raises:
        ValueError: if counts is empty.
    """
    if not counts:
        raise ValueError("Cannot balance over an empty set of groups")

    rng = rng or random.Random()
    min_count = min(counts.values())
    tied = sorted(slot for slot, count in counts.items() if count == min_count)
    return rng.choice(tied)


def resolve_group(
    assigned: int,
    rng: random.Random | None = None,
    override: int = FALLBACK_SLOT,
) -> int:
    """Turn a balancer result into the slot the participant actually plays.

    An explicit override wins. Otherwise a fallback (0) or unknown slot is
    replaced by a uniformly random slot among 1-3.
    """
    if override != FALLBACK_SLOT:
        return override
    if assigned in GROUP_SLOTS:
        return assigned
    rng = rng or random.Random()
    return rng.choice(sorted(GROUP_SLOTS))
