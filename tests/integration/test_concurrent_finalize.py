"""Concurrent finalization against the SQL repositories on SQLite."""

import asyncio

import pytest

from studygate.adapters.persistence.repositories import (
    SqlGroupCountRepository,
    SqlParticipantRepository,
)
from studygate.application.use_cases.audit_group_counts import AuditGroupCountsUseCase
from studygate.application.use_cases.finalize_submission import (
    FinalizeOutcome,
    FinalizeSubmissionUseCase,
)
from studygate.application.use_cases.register_participant import RegisterParticipantUseCase
from studygate.domain.value_objects.enums import ParticipantGroup

TOKEN = "test-token"
G2 = ParticipantGroup.TEST_GROUP_2_ARROWS


@pytest.fixture
def repos(sql_sessions):
    return SqlParticipantRepository(sql_sessions), SqlGroupCountRepository(sql_sessions)


async def _register_all(participant_repo, ids):
    uc = RegisterParticipantUseCase(participant_repo=participant_repo, survey_token=TOKEN)
    for pid in ids:
        await uc.execute(TOKEN, pid, "right", G2.value)


@pytest.mark.asyncio
async def test_concurrent_finalizes_count_each_participant_once(repos):
    participant_repo, count_repo = repos
    ids = [f"participant-{i}" for i in range(20)]
    await _register_all(participant_repo, ids)

    uc = FinalizeSubmissionUseCase(
        participant_repo=participant_repo, count_repo=count_repo, survey_token=TOKEN
    )
    # Every id is finalized twice at the same time, as a retrying relay would
    calls = [uc.execute(TOKEN, G2.value, pid, "right") for pid in ids + ids]
    results = await asyncio.gather(*calls, return_exceptions=True)

    assert [r for r in results if isinstance(r, Exception)] == []
    outcomes = [r.outcome for r in results]
    assert outcomes.count(FinalizeOutcome.INCREMENTED) == 20
    assert outcomes.count(FinalizeOutcome.ALREADY_PROCESSED) == 20
    assert sorted(r.count for r in results if r.count is not None) == list(range(1, 21))
    assert await count_repo.get_count(G2) == 20

    audit = await AuditGroupCountsUseCase(participant_repo, count_repo, TOKEN).execute(TOKEN)
    assert all(entry.drift == 0 for entry in audit)
