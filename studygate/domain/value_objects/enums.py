"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ParticipantStatus(str, Enum):
    PENDING = "pending"
    USED = "used"


class ParticipantGroup(str, Enum):
    TEST_GROUP_1_TEXT = "TestGroup1Text"
    TEST_GROUP_2_ARROWS = "TestGroup2Arrows"
    CONTROL_GROUP_BLANK = "ControlGroupBlank"


# Client-held assignment slots. 0 means "unassigned / fallback".
FALLBACK_SLOT = 0

GROUP_SLOTS: dict[int, ParticipantGroup] = {
    1: ParticipantGroup.TEST_GROUP_1_TEXT,
    2: ParticipantGroup.TEST_GROUP_2_ARROWS,
    3: ParticipantGroup.CONTROL_GROUP_BLANK,
}


def group_for_slot(slot: int) -> ParticipantGroup:
    """Map an assignment slot (1-3) to its group.

    Raises:
        ValueError: for the fallback slot or anything out of range.
    """
    try:
        return GROUP_SLOTS[slot]
    except KeyError:
        raise ValueError(f"No group for assignment slot {slot}") from None
