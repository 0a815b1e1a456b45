from __future__ import annotations
import logging
from typing import Sequence, TypeVar

from langtrend.domain.entities import CommitSnapshot, CommitSummary, LanguageBytes, RepoCommitHistory, TreeEntry
from langtrend.domain.errors import GitHubError
from langtrend.domain.interfaces import IRepoGateway
from .classifier import classify
from .normalizer import normalize

log = logging.getLogger(__name__)

DEFAULT_SAMPLE_LIMIT= 15
MAX_COMMITS_PER_CALL= 30
SHORT_SHA_LENGTH= 7

T = TypeVar("T")


def sample_commits(commits: Sequence[T], limit: int) -> list[T]:
    """
    Pick an evenly spaced subset of a newest-first commit list.

    Takes every `step`-th commit, step = len // limit, until `limit` picks
    are collected, then appends the oldest commit if the walk missed it
    so the trend always reaches back to the start of the window. The
    result can therefore hold limit + 1 commits.

    Lists no longer than `limit` come back unchanged.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if len(commits) <= limit:
        return list(commits)

    step = len(commits) // limit
    picked_idx: list[int] = []
    for i in range(0, len(commits), step):
        if len(picked_idx) >= limit:
            break
        picked_idx.append(i)

    oldest = len(commits) - 1
    if oldest not in picked_idx:
        picked_idx.append(oldest)
    return [commits[i] for i in picked_idx]


def tally_tree(entries: Sequence[TreeEntry]) -> LanguageBytes:
    """Sum blob sizes per language; files classify() does not know are skipped."""
    languages: LanguageBytes = {}
    for entry in entries:
        if entry.type != "blob" or entry.size is None:
            continue
        language = classify(entry.path)
        if language is None:
            continue
        languages[language] = languages.get(language, 0) + entry.size
    return languages


def build_snapshot(commit: CommitSummary, languages: LanguageBytes) -> CommitSnapshot:
    return CommitSnapshot(
        sha                  = commit.sha,
        short_sha            = commit.sha[:SHORT_SHA_LENGTH],
        date                 = commit.date,
        message              = commit.message.split("\n", 1)[0],
        languages            = languages,
        language_percentages = tuple(normalize(languages)),
        total_bytes          = sum(languages.values()),
    )


class CommitHistoryReconstructor:
    """
    Rebuilds how a repository's language mix changed over its recent history.

    GitHub only reports current-state language bytes, so each sampled
    commit's full tree is listed and every file is classified by path.
    That is a full recomputation per commit, not a diff walk, which is why
    the number of sampled commits is bounded.
    """

    def __init__(self, gateway: IRepoGateway) -> None:
        self._gateway = gateway

    async def reconstruct_history(self, owner: str, repo: str, sample_limit: int = DEFAULT_SAMPLE_LIMIT) -> RepoCommitHistory:
        commits = await self._gateway.list_recent_commits(owner, repo, min(sample_limit, MAX_COMMITS_PER_CALL))
        selected = sample_commits(commits, sample_limit)
        log.info("History %s/%s | %d commits fetched | %d sampled", owner, repo, len(commits), len(selected))

        snapshots: list[CommitSnapshot] = []
        skipped: list[str] = []
        seen: dict[str, None] = {}

        for commit in selected:
            try:
                tree = await self._gateway.get_tree_at_commit(owner, repo, commit.sha)
            except GitHubError as exc:
                # Oversized or otherwise unreadable trees are expected; drop the point
                log.warning("Skipping %s/%s@%s | %s", owner, repo, commit.sha[:SHORT_SHA_LENGTH], exc.message)
                skipped.append(commit.sha)
                continue

            snapshot = build_snapshot(commit, tally_tree(tree))
            seen.update(dict.fromkeys(snapshot.languages))
            snapshots.append(snapshot)

        # Gateway and sampling are newest-first; callers want a timeline
        snapshots.reverse()

        if len(snapshots) < 2:
            log.info("History %s/%s | only %d snapshot(s) - not enough for a trend", owner, repo, len(snapshots))

        return RepoCommitHistory(
            repo_name       = repo,
            snapshots       = tuple(snapshots),
            all_languages   = tuple(seen),
            skipped_commits = tuple(skipped),
        )
