"""
Autosquash Error Types.

Defines the exceptions raised while reconciling a webhook event. Only
errors that scope the whole invocation are allowed to escape the
reconciler; rejected merge/update actions are isolated per pull request.
"""

from typing import Optional


class AutosquashError(Exception):
    """Base class for all Autosquash errors."""


class PayloadError(AutosquashError):
    """Raised when a webhook event payload is missing or malformed."""


class HostError(AutosquashError):
    """Raised when the version-control host cannot serve a request."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class PullRequestNotFoundError(HostError):
    """Raised when the requested pull request does not exist."""


class ActionRejectedError(HostError):
    """Raised when the host refuses a merge or branch update."""


class ResolutionTimeoutError(AutosquashError):
    """
    Raised when a pull request's mergeable state never settles.

    Attributes:
        number (int): Pull request number
        attempts (int): Number of fetches performed before giving up
    """

    def __init__(self, number: int, attempts: int):
        super().__init__(
            f"Mergeable state of #{number} still unknown after {attempts} attempts"
        )
        self.number = number
        self.attempts = attempts
