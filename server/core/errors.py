"""Typed dashboard errors.

Every error carries the HTTP status it should surface with, so route handlers
never translate exceptions themselves; ``api.app`` registers one handler that
renders ``{"error": message}`` for all of them.
"""
from typing import Optional


class DashboardError(Exception):
    """Base class for errors surfaced to the dashboard UI."""
    status_code: int = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DashboardError):
    """A required request field is missing or empty."""
    status_code = 400


class UnsupportedPlatform(DashboardError):
    status_code = 400


class NotFoundError(DashboardError):
    status_code = 404


class MissingAccountError(DashboardError):
    """The inbox message has no account to reply from."""
    status_code = 401


class UpstreamError(DashboardError):
    """The gateway answered with a non-success status or was unreachable."""


class UpstreamAuthError(UpstreamError):
    """Gateway rejected the credentials or the checkpoint code."""


class UpstreamSendError(UpstreamError):
    """Gateway rejected a send, logout or list call."""


class UpstreamTimeout(UpstreamError):
    status_code = 408


class DraftGenerationError(DashboardError):
    pass


def upstream_message(data: dict, default: str) -> str:
    """Pick the human-readable error text out of a gateway error body."""
    if isinstance(data, dict):
        return data.get("message") or data.get("detail") or default
    return default
