"""Error taxonomy shared by the relay, the document store and the chat session."""

from __future__ import annotations

from typing import Any

UNEXPECTED_ERROR_MESSAGE = "Failed to process your message. Please try again."


class GiaError(Exception):
    """Base exception rendered as ``{"error": message, "details": ...}``."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class InvalidRequest(GiaError):
    """The caller sent a request the relay cannot act on."""

    status_code = 400


class UpstreamError(GiaError):
    """The completion endpoint answered with a non-success status or was unreachable."""

    def __init__(self, upstream_status: int | None, body: str) -> None:
        if upstream_status is None:
            details = f"API error: {body}"
        else:
            details = f"API error: {upstream_status} - {body}"
        super().__init__(
            UNEXPECTED_ERROR_MESSAGE,
            status_code=500,
            details=details,
        )
        self.upstream_status = upstream_status
        self.body = body


class UpstreamWarming(GiaError):
    """The hosted model is still loading. Never surfaced as an HTTP error."""

    def __init__(self, body: str = "") -> None:
        super().__init__("Model is loading.", status_code=503, details=body or None)
        self.body = body


class CollectionNotFound(GiaError):
    status_code = 404

    def __init__(self, name: str) -> None:
        super().__init__(f"Collection not found: {name}")
        self.name = name


class NetworkFailure(GiaError):
    """The relay itself could not be reached from the chat session."""

    status_code = 502
