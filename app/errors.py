"""Error taxonomy shared by the services and the HTTP layer."""
from __future__ import annotations


class PlacementError(Exception):
    """Base class for failures reported to callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PlacementError):
    """Malformed input such as an unknown branch code."""

    status_code = 400


class NotFound(PlacementError):
    status_code = 404


class Conflict(PlacementError):
    status_code = 409


class StorageError(PlacementError):
    """Transaction or connection failure; retrying is left to the caller."""

    status_code = 503
