"""Submission endpoints — participant registration and survey finalization."""

from __future__ import annotations

import logging
from typing import TypeVar

import pydantic
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from studygate.application.use_cases.finalize_submission import FinalizeSubmissionUseCase
from studygate.application.use_cases.register_participant import RegisterParticipantUseCase
from studygate.config import settings
from studygate.domain.errors import StudyGateError, ValidationError
from studygate.infrastructure.api.dependencies import get_finalize_uc, get_register_uc

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])

REGISTER_METHODS = "POST, OPTIONS"
FINALIZE_METHODS = "GET, POST, OPTIONS"


def _cors_headers(methods: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


# ── Request schemas ─────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    token: str | None = None
    unity_id: str | None = Field(default=None, alias="unityId")
    direction: str | None = None
    group: str | None = None


class FinalizeRequest(BaseModel):
    token: str | None = None
    group: str | None = None
    submission_id: str | None = Field(default=None, alias="submissionId")
    direction: str | None = None


BodyT = TypeVar("BodyT", bound=BaseModel)


async def _read_body(request: Request, schema: type[BodyT]) -> BodyT:
    """Validate an optional JSON object body; an empty body has no fields.

    Fields are checked by the use case, so every field is optional here and
    only non-object bodies or non-string values are rejected.
    """
    raw = await request.body()
    if not raw:
        return schema()
    try:
        return schema.model_validate_json(raw)
    except pydantic.ValidationError:
        raise ValidationError("Malformed request body") from None


def _to_http(e: Exception, opaque_detail: str, headers: dict[str, str]) -> HTTPException:
    """Translate a failure; store and unexpected errors stay opaque."""
    if isinstance(e, StudyGateError) and e.status_code < 500:
        logger.warning("Rejected %s: %s", type(e).__name__, e)
        return HTTPException(status_code=e.status_code, detail=str(e), headers=headers)
    logger.exception(opaque_detail)
    return HTTPException(status_code=500, detail=opaque_detail, headers=headers)


# ─── Register ────────────────────────────────────────────────────────


@router.options("/register")
async def register_preflight():
    return Response(status_code=204, headers=_cors_headers(REGISTER_METHODS))


@router.post("/register")
async def register_participant(
    request: Request,
    uc: RegisterParticipantUseCase = Depends(get_register_uc),
):
    """Create a pending participant record (create-only)."""
    headers = _cors_headers(REGISTER_METHODS)
    try:
        body = await _read_body(request, RegisterRequest)
        record = await uc.execute(
            token=body.token,
            participant_id=body.unity_id,
            direction=body.direction,
            group=body.group,
        )
    except Exception as e:
        raise _to_http(e, "Error registering Unity ID", headers)

    return JSONResponse(
        {
            "status": "ok",
            "message": "Unity ID registered successfully",
            "participant": {
                "id": record.id,
                "group": record.group.value,
                "direction": record.direction.value,
                "status": record.status.value,
            },
        },
        headers=headers,
    )


# ─── Finalize ────────────────────────────────────────────────────────


@router.options("/finalize")
async def finalize_preflight():
    return Response(status_code=204, headers=_cors_headers(FINALIZE_METHODS))


@router.api_route("/finalize", methods=["GET", "POST"])
async def finalize_submission(
    request: Request,
    uc: FinalizeSubmissionUseCase = Depends(get_finalize_uc),
):
    """Count a registered participant once; repeats report success.

    Parameters come from the query string first, then the JSON body, for
    either method.
    """
    headers = _cors_headers(FINALIZE_METHODS)
    try:
        body = await _read_body(request, FinalizeRequest)
        query = request.query_params

        result = await uc.execute(
            token=query.get("token") or body.token,
            group=query.get("group") or body.group,
            participant_id=query.get("submissionId") or body.submission_id,
            direction=query.get("direction") or body.direction,
        )
    except Exception as e:
        raise _to_http(e, "Error incrementing group", headers)

    return JSONResponse(
        {
            "status": "ok",
            "message": result.message,
            "outcome": result.outcome.value,
            "group": result.group.value,
            "count": result.count,
        },
        headers=headers,
    )
