"""Request validation rules shared by registration and finalization.

Each check raises a domain error and never touches storage, so a request
that fails any of them leaves no trace.
"""

from __future__ import annotations

import hmac

from studygate.domain.entities.participant import MAX_PARTICIPANT_ID_LENGTH
from studygate.domain.errors import AuthError, ValidationError
from studygate.domain.value_objects.enums import Direction, ParticipantGroup


def check_token(provided: str | None, expected: str) -> None:
    """Exact match against the configured secret; an unset secret matches nothing."""
    if not expected or provided is None:
        raise AuthError("Unauthorized: Invalid token")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        raise AuthError("Unauthorized: Invalid token")


def require_participant_id(raw: str | None, field_name: str) -> str:
    """Any non-empty id up to the stored width is accepted verbatim."""
    if not raw:
        raise ValidationError(f"Missing {field_name}")
    if len(raw) > MAX_PARTICIPANT_ID_LENGTH:
        raise ValidationError(
            f"{field_name} exceeds {MAX_PARTICIPANT_ID_LENGTH} characters"
        )
    return raw


def parse_direction(raw: str | None, *, case_insensitive: bool = False) -> Direction:
    """Parse a direction.

    Registration accepts any letter case and stores the lower-case value;
    finalization requires the exact stored spelling.
    """
    if not raw:
        raise ValidationError("Invalid or missing direction")
    value = raw.lower() if case_insensitive else raw
    try:
        return Direction(value)
    except ValueError:
        raise ValidationError("Invalid or missing direction") from None


def parse_group(raw: str | None) -> ParticipantGroup:
    if not raw:
        raise ValidationError("Invalid or missing group")
    try:
        return ParticipantGroup(raw)
    except ValueError:
        raise ValidationError("Invalid or missing group") from None
