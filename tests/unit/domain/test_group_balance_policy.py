"""Tests for GroupBalancePolicy."""

import random
from collections import Counter

import pytest

from studygate.domain.policies.group_balance import pick_least_populated, resolve_group


def test_unique_minimum_is_deterministic():
    """Counts {1,3,2} → group 1 every time."""
    rng = random.Random(0)
    for _ in range(50):
        assert pick_least_populated({1: 1, 2: 3, 3: 2}, rng) == 1


def test_minimum_in_last_slot():
    assert pick_least_populated({1: 7, 2: 7, 3: 6}) == 3


def test_tie_breaks_between_tied_groups_only():
    """Counts {2,2,5} → groups 1 and 2 both chosen, group 3 never."""
    rng = random.Random(42)
    picks = Counter(pick_least_populated({1: 2, 2: 2, 3: 5}, rng) for _ in range(300))
    assert picks[1] > 0
    assert picks[2] > 0
    assert picks[3] == 0


def test_all_tied_reaches_every_group():
    rng = random.Random(7)
    picks = {pick_least_populated({1: 0, 2: 0, 3: 0}, rng) for _ in range(200)}
    assert picks == {1, 2, 3}


def test_empty_counts_raise():
    with pytest.raises(ValueError, match="empty set of groups"):
        pick_least_populated({})


def test_greedy_fill_keeps_groups_within_one():
    """Repeatedly filling the smallest group never lets sizes drift apart."""
    rng = random.Random(3)
    counts = {1: 0, 2: 0, 3: 0}
    for _ in range(100):
        counts[pick_least_populated(counts, rng)] += 1
        assert max(counts.values()) - min(counts.values()) <= 1


def test_resolve_keeps_valid_assignment():
    assert resolve_group(2) == 2


def test_resolve_fallback_is_random_valid_slot():
    rng = random.Random(11)
    picks = {resolve_group(0, rng) for _ in range(200)}
    assert picks == {1, 2, 3}


def test_resolve_override_wins():
    assert resolve_group(1, override=3) == 3
    assert resolve_group(0, override=2) == 2
