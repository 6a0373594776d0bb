"""Dispatch errors.

``NotFound`` is the only terminal kind a dispatch can end with. Every failed
check (no matching route, unknown controller, missing or non-literal action
segment, action not exposed) collapses into it; ``reason`` says which one,
for logs only. The response itself is always the same status and body.
"""

from __future__ import annotations

__all__ = ["DispatchError", "NotFound", "NOT_FOUND_BODY"]

NOT_FOUND_BODY = "404 Not Found"


class DispatchError(Exception):
    """Base class for errors that end a dispatch."""

    status = 500

    def __init__(self, reason: str = "", *, status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        if status is not None:
            self.status = status


class NotFound(DispatchError):
    """No route/controller/action could serve the request."""

    status = 404
