"""Group endpoints — count lookups for the balancer + counter audit."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from studygate.adapters.persistence.repositories import SqlGroupCountRepository
from studygate.application.use_cases.audit_group_counts import AuditGroupCountsUseCase
from studygate.domain.errors import StudyGateError
from studygate.domain.value_objects.enums import ParticipantGroup
from studygate.infrastructure.api.dependencies import get_audit_uc, get_count_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("/counts")
async def list_counts(count_repo: SqlGroupCountRepository = Depends(get_count_repo)):
    """Current counter for every group (0 where no counter exists yet)."""
    try:
        counts = await count_repo.get_all()
    except StudyGateError:
        logger.exception("Error reading group counts")
        raise HTTPException(status_code=500, detail="Error reading group counts")

    return {"counts": {g.value: counts.get(g, 0) for g in ParticipantGroup}}


@router.get("/audit")
async def audit_counts(
    token: str | None = None,
    uc: AuditGroupCountsUseCase = Depends(get_audit_uc),
):
    """Compare each counter with the number of finalized participants."""
    try:
        report = await uc.execute(token)
    except StudyGateError as e:
        if e.status_code >= 500:
            logger.exception("Error auditing group counts")
            raise HTTPException(status_code=500, detail="Error auditing group counts")
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return {
        "groups": [
            {
                "group": entry.group.value,
                "counter": entry.counter,
                "used_records": entry.used_records,
                "drift": entry.drift,
            }
            for entry in report
        ],
        "consistent": all(entry.drift == 0 for entry in report),
    }


@router.get("/{group}/count")
async def get_count(
    group: str,
    count_repo: SqlGroupCountRepository = Depends(get_count_repo),
):
    """Single counter lookup — the read the group balancer performs."""
    try:
        parsed = ParticipantGroup(group)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid group")

    try:
        count = await count_repo.get_count(parsed)
    except StudyGateError:
        logger.exception("Error reading count for %s", group)
        raise HTTPException(status_code=500, detail="Error reading group count")

    return {"group": parsed.value, "count": count}
