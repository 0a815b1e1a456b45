from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Dict

# Raw per-language size for one snapshot of a codebase: name -> bytes.
LanguageBytes = Dict[str, int]


class _PlainData:
    """Mixin for entities that must survive a trip through a cache or JSON."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LanguagePercentage(_PlainData):
    """Share of one language within a total, rounded to 2 decimal places."""
    name:  str
    value: float
    bytes: int


@dataclass(frozen=True)
class UserProfile(_PlainData):
    login:        str
    name:         str | None
    avatar_url:   str
    html_url:     str
    bio:          str | None
    public_repos: int
    followers:    int
    following:    int


@dataclass(frozen=True)
class RawRepo(_PlainData):
    """
    One record of a user's repository listing, as the gateway hands it over.

    Field names are OURS, not GitHub's. The translation happens in the
    gateway's anti-corruption layer, not here.
    """
    name:             str
    description:      str | None
    html_url:         str
    stargazers_count: int
    forks_count:      int
    size:             int            # KB on disk
    created_at:       str
    updated_at:       str
    fork:             bool = False


@dataclass(frozen=True)
class RepoInfo(_PlainData):
    """
    Immutable language profile of one repository.

    total_bytes is the sum of `languages`; language_percentages is the
    normalized view of the same map. Both are derived once when the
    aggregator builds the object and never change afterwards.
    """
    name:                 str
    description:          str | None
    html_url:             str
    stargazers_count:     int
    forks_count:          int
    size:                 int
    created_at:           str
    updated_at:           str
    languages:            LanguageBytes
    language_percentages: tuple[LanguagePercentage, ...]
    total_bytes:          int


@dataclass(frozen=True)
class UserAnalysis(_PlainData):
    """
    Full report for one account.

    `repos` keeps fetch order (most recently updated first, as GitHub
    returns them); overall_languages is the normalized byte-wise sum of
    every repo's languages.
    """
    user:              UserProfile
    repos:             tuple[RepoInfo, ...]
    overall_languages: tuple[LanguagePercentage, ...]
    total_bytes:       int
    total_repos:       int


@dataclass(frozen=True)
class CommitSummary(_PlainData):
    sha:     str
    date:    str     # ISO8601, "" when GitHub has none
    message: str


@dataclass(frozen=True)
class TreeEntry(_PlainData):
    path: str
    type: str               # "blob", "tree" or "commit" (submodule)
    size: int | None = None


@dataclass(frozen=True)
class CommitSnapshot(_PlainData):
    """Language composition of the repository tree at one commit."""
    sha:                  str
    short_sha:            str
    date:                 str
    message:              str    # first line only
    languages:            LanguageBytes
    language_percentages: tuple[LanguagePercentage, ...]
    total_bytes:          int


@dataclass(frozen=True)
class RepoCommitHistory(_PlainData):
    """
    Reconstructed language trend for one repository.

    Snapshots are ordered oldest first. Commits whose tree could not be
    fetched are listed in skipped_commits instead of failing the whole run.
    """
    repo_name:       str
    snapshots:       tuple[CommitSnapshot, ...]
    all_languages:   tuple[str, ...]
    skipped_commits: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_trend(self) -> bool:
        return len(self.snapshots) >= 2
