"""
Domain Layer - Errors
---------------------
Every failure talking to GitHub surfaces as one of four categories.
The gateway decides the category from the provider's error text; the
application layer only ever sees these classes, never httpx exceptions.
"""

from __future__ import annotations


class GitHubError(Exception):
    """Base class. `message` is the provider's raw error text."""

    user_message = "GitHub request failed"
    exit_code    = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(GitHubError):
    """Requested account or repository does not exist."""

    user_message = "account or repository not found"
    exit_code    = 2


class UnauthorizedError(GitHubError):
    """A token was supplied and GitHub rejected it."""

    user_message = "invalid GitHub token"
    exit_code    = 3


class RateLimitedError(GitHubError):
    """API quota exhausted."""

    user_message = "API rate limit exceeded - supply a token to raise the limit"
    exit_code    = 4


class UnknownGitHubError(GitHubError):
    """Anything else. The raw message is passed through to the user."""

    exit_code = 1

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return self.message


def classify_error(message: str) -> GitHubError:
    """Map a provider error message onto the error taxonomy."""
    if "Not Found" in message:
        return NotFoundError(message)
    if "Bad credentials" in message:
        return UnauthorizedError(message)
    if "rate limit" in message.lower():
        return RateLimitedError(message)
    return UnknownGitHubError(message)
