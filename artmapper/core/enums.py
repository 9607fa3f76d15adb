"""Status codes reported by the data mapper."""

from __future__ import annotations

from enum import IntEnum


class StatusCode(IntEnum):
    """HTTP status codes the data mapper reports in APIError."""

    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
