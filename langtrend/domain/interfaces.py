"""
Domain Layer - Interfaces (Abstract Contracts)
-----------------------------------------------
These are ABSTRACT definitions of what the infrastructure must provide.
The domain layer defines the shape; the infrastructure layer implements it.

The aggregator and the history reconstructor depend on IRepoGateway, not on
the concrete GitHubClient, so tests can hand them a fake gateway and
exercise the orchestration without any network.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any

from .entities import CommitSummary, LanguageBytes, RawRepo, TreeEntry, UserProfile


class IRepoGateway(ABC):
    """
    Contract that any source-control API client must fulfil.
    Every method raises a GitHubError subclass on failure; none of them retry.
    """

    @abstractmethod
    async def get_user_profile(self, username: str) -> UserProfile:
        """Fetch the account. NotFoundError if it does not exist."""
        ...

    @abstractmethod
    async def list_owned_non_fork_repos(self, username: str) -> list[RawRepo]:
        """All repos owned by `username`, every page concatenated, forks removed."""
        ...

    @abstractmethod
    async def get_language_bytes(self, owner: str, repo: str) -> LanguageBytes:
        """Byte count per language for the repo's current default branch."""
        ...

    @abstractmethod
    async def list_recent_commits(self, owner: str, repo: str, max_count: int) -> list[CommitSummary]:
        """Most recent commits, newest first."""
        ...

    @abstractmethod
    async def get_tree_at_commit(self, owner: str, repo: str, sha: str) -> list[TreeEntry]:
        """Flat recursive listing of the tree reachable from `sha`."""
        ...


class ICacheStore(ABC):
    """
    Contract for the ephemeral cache that may sit in front of the aggregator.
    Swap the in-memory store for Redis or a file cache without touching
    application code.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None when absent or expired."""
        ...

    @abstractmethod
    def put(self, key: str, value: Any, ttl: float) -> None:
        """Store `value` for `ttl` seconds."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Drop `key` if present."""
        ...
