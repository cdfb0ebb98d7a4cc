"""Domain error taxonomy.

Every error carries the HTTP status it maps to so the API layer can
translate it without knowing about individual cases.
"""


class StudyGateError(Exception):
    status_code: int = 500


class ValidationError(StudyGateError):
    """A required field is missing or malformed."""

    status_code = 400


class AuthError(StudyGateError):
    """The shared token did not match."""

    status_code = 403


class ConflictError(StudyGateError):
    """A participant id is already registered."""

    status_code = 409


class InvalidReferenceError(StudyGateError):
    """Finalize was called for an id that was never registered."""

    status_code = 400


class MismatchError(StudyGateError):
    """Finalize parameters disagree with the stored registration."""

    status_code = 400


class TransientStoreError(StudyGateError):
    """The underlying store failed; the caller may retry."""

    status_code = 500


class CountLookupError(Exception):
    """A client-side group count fetch failed."""
