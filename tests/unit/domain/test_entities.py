"""Tests for domain entities."""

from studygate.domain.entities.group_audit import GroupAudit
from studygate.domain.entities.participant import ParticipantRecord
from studygate.domain.value_objects.enums import (
    Direction,
    ParticipantGroup,
    ParticipantStatus,
)


def _record(**kwargs) -> ParticipantRecord:
    defaults = dict(
        id="abc-123", direction=Direction.LEFT, group=ParticipantGroup.TEST_GROUP_1_TEXT,
    )
    defaults.update(kwargs)
    return ParticipantRecord(**defaults)


def test_new_record_is_pending():
    r = _record()
    assert r.status == ParticipantStatus.PENDING
    assert r.is_used() is False
    assert r.used_at is None


def test_used_record():
    r = _record(status=ParticipantStatus.USED)
    assert r.is_used() is True


def test_matches_same_group_and_direction():
    r = _record()
    assert r.matches(ParticipantGroup.TEST_GROUP_1_TEXT, Direction.LEFT) is True


def test_matches_rejects_other_group():
    r = _record()
    assert r.matches(ParticipantGroup.CONTROL_GROUP_BLANK, Direction.LEFT) is False


def test_matches_rejects_other_direction():
    r = _record()
    assert r.matches(ParticipantGroup.TEST_GROUP_1_TEXT, Direction.RIGHT) is False


def test_audit_drift():
    consistent = GroupAudit(group=ParticipantGroup.TEST_GROUP_1_TEXT, counter=4, used_records=4)
    undercount = GroupAudit(group=ParticipantGroup.TEST_GROUP_1_TEXT, counter=3, used_records=4)
    assert consistent.drift == 0
    assert undercount.drift == -1
