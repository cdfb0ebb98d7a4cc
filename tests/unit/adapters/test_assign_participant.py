"""Tests for the assign-and-register tool, over httpx MockTransport."""

import json
import random

import httpx
import pytest

from studygate.adapters.http.study_client import StudyGateClient
from studygate.domain.value_objects.enums import Direction, ParticipantGroup
from studygate.tools import assign_participant
from studygate.tools.assign_participant import assign_and_register


class FakeApi:
    """Serves group counts and records registrations."""

    def __init__(self, counts=None, register_status=200):
        self.counts = counts
        self.register_status = register_status
        self.registered = []

    def __call__(self, request):
        if request.method == "POST":
            self.registered.append(json.loads(request.content))
            return httpx.Response(self.register_status, json={})
        if self.counts is None:
            return httpx.Response(503)
        group = request.url.path.split("/")[3]
        return httpx.Response(200, json={"group": group, "count": self.counts.get(group, 0)})


def _client(api) -> StudyGateClient:
    return StudyGateClient(
        base_url="http://studygate.test", token="t", transport=httpx.MockTransport(api)
    )


@pytest.mark.asyncio
async def test_registers_into_least_populated_group():
    api = FakeApi({"TestGroup1Text": 3, "TestGroup2Arrows": 1, "ControlGroupBlank": 2})

    enrollment = await assign_and_register(_client(api), "abc-123", Direction.RIGHT)

    assert enrollment.slot == 2
    assert enrollment.group == ParticipantGroup.TEST_GROUP_2_ARROWS
    assert enrollment.registered is True
    assert api.registered == [
        {"token": "t", "unityId": "abc-123", "direction": "right", "group": "TestGroup2Arrows"}
    ]


@pytest.mark.asyncio
async def test_lookup_failure_falls_back_to_random_group():
    api = FakeApi(counts=None)

    enrollment = await assign_and_register(
        _client(api), "abc-123", Direction.LEFT, rng=random.Random(7)
    )

    assert enrollment.slot in (1, 2, 3)
    assert api.registered[0]["group"] == enrollment.group.value


@pytest.mark.asyncio
async def test_override_wins_over_balancing():
    api = FakeApi({"TestGroup1Text": 0, "TestGroup2Arrows": 9, "ControlGroupBlank": 9})

    enrollment = await assign_and_register(_client(api), "abc-123", Direction.LEFT, override=3)

    assert enrollment.group == ParticipantGroup.CONTROL_GROUP_BLANK


@pytest.mark.asyncio
async def test_failed_registration_is_reported():
    api = FakeApi({}, register_status=409)

    enrollment = await assign_and_register(_client(api), "abc-123", Direction.LEFT)

    assert enrollment.registered is False


def test_main_exits_nonzero_when_registration_fails(monkeypatch, capsys):
    api = FakeApi({}, register_status=403)
    monkeypatch.setattr(
        assign_participant,
        "StudyGateClient",
        lambda base_url=None: StudyGateClient(
            base_url=base_url or "http://studygate.test", transport=httpx.MockTransport(api)
        ),
    )
    monkeypatch.setattr(
        "sys.argv", ["studygate-assign", "--direction", "left", "--participant-id", "p-1"]
    )

    with pytest.raises(SystemExit) as exc:
        assign_participant.main()

    assert exc.value.code == 1
    assert capsys.readouterr().out.startswith("p-1 -> ")
    assert api.registered[0]["unityId"] == "p-1"
