"""Failures surfaced to submitters and operators."""


class IntakeError(Exception):
    """Base error rendered as ``{"success": false, "error": message}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(IntakeError):
    """Missing or malformed identifier."""

    status_code = 400


class NotFound(IntakeError):
    status_code = 404


class UpstreamFailure(IntakeError):
    """Database or object-storage collaborator failed."""

    status_code = 502
