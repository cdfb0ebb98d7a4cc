"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studygate.adapters.persistence.database import async_session_factory
from studygate.adapters.persistence.repositories import (
    SqlGroupCountRepository,
    SqlParticipantRepository,
)
from studygate.application.use_cases.audit_group_counts import AuditGroupCountsUseCase
from studygate.application.use_cases.finalize_submission import FinalizeSubmissionUseCase
from studygate.application.use_cases.register_participant import RegisterParticipantUseCase
from studygate.config import settings


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


def get_participant_repo(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SqlParticipantRepository:
    return SqlParticipantRepository(sessions)


def get_count_repo(
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> SqlGroupCountRepository:
    return SqlGroupCountRepository(sessions)


def get_register_uc(
    participant_repo: SqlParticipantRepository = Depends(get_participant_repo),
) -> RegisterParticipantUseCase:
    return RegisterParticipantUseCase(
        participant_repo=participant_repo,
        survey_token=settings.survey_token,
    )


def get_finalize_uc(
    participant_repo: SqlParticipantRepository = Depends(get_participant_repo),
    count_repo: SqlGroupCountRepository = Depends(get_count_repo),
) -> FinalizeSubmissionUseCase:
    return FinalizeSubmissionUseCase(
        participant_repo=participant_repo,
        count_repo=count_repo,
        survey_token=settings.survey_token,
    )


def get_audit_uc(
    participant_repo: SqlParticipantRepository = Depends(get_participant_repo),
    count_repo: SqlGroupCountRepository = Depends(get_count_repo),
) -> AuditGroupCountsUseCase:
    return AuditGroupCountsUseCase(
        participant_repo=participant_repo,
        count_repo=count_repo,
        survey_token=settings.survey_token,
    )
