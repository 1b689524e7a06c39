"""Error taxonomy for repository exploration.

Every failure a search can run into is one of the exceptions below. The
kind decides the message shown to the user, not the recovery path: each is
terminal for the search attempt that raised it.

Note:
    Silent truncation at the page-count bound is not an error. It is logged
    and reported through `CollectionResult.truncated` instead.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional


class ExplorerError(Exception):
    """Base class for all failures surfaced to the user."""

    message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def user_message(self) -> str:
        return str(self)


class InvalidIdentity(ExplorerError):
    """The input could not be resolved to a GitHub handle."""

    message = "Invalid GitHub username or URL"

    def __init__(self, text: str = ""):
        super().__init__()
        self.text = text


class NotFound(ExplorerError):
    """The handle resolved but GitHub has no such user."""

    message = "User not found. Please check the username and try again."


class QuotaExceeded(ExplorerError):
    """GitHub refused the request because the rate limit is exhausted."""

    def __init__(self, reset_at: Optional[datetime] = None):
        text = "API rate limit exceeded."
        if reset_at is not None:
            text += f" Try again after {reset_at.strftime('%H:%M:%S')} UTC."
        super().__init__(text)
        self.reset_at = reset_at


class UpstreamError(ExplorerError):
    """Any other non-success status, malformed body, or transport failure."""

    message = "Failed to fetch data from GitHub. Please try again."

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
