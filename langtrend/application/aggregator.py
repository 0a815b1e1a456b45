from __future__ import annotations
import logging
from collections import Counter

from langtrend.domain.entities import LanguageBytes, RawRepo, RepoInfo, UserAnalysis
from langtrend.domain.interfaces import IRepoGateway
from .normalizer import normalize
from .pool import BoundedPool

log = logging.getLogger(__name__)

BATCH_SIZE= 10


def build_repo_info(repo: RawRepo, languages: LanguageBytes) -> RepoInfo:
    """Attach a language profile to one listing record."""
    return RepoInfo(
        name                 = repo.name,
        description          = repo.description,
        html_url             = repo.html_url,
        stargazers_count     = repo.stargazers_count,
        forks_count          = repo.forks_count,
        size                 = repo.size,
        created_at           = repo.created_at,
        updated_at           = repo.updated_at,
        languages            = dict(languages),
        language_percentages = tuple(normalize(languages)),
        total_bytes          = sum(languages.values()),
    )


def merge_languages(repos: list[RepoInfo]) -> LanguageBytes:
    """Byte-wise sum of every repo's languages, in first-seen order."""
    overall: Counter[str] = Counter()
    for repo in repos:
        overall.update(repo.languages)
    return dict(overall)


class UserAnalysisAggregator:
    """
    Builds the full language report for one GitHub account.

    The gateway is injected; this class creates no network client itself.
    In tests a fake IRepoGateway stands in for GitHub.

    Language lookups go through a BoundedPool so at most `batch_size`
    requests are in flight at once. That keeps a large account from
    burning through the rate limit in one burst while still overlapping
    request latency.
    """

    def __init__(self, gateway: IRepoGateway, batch_size: int = BATCH_SIZE) -> None:
        self._gateway = gateway
        self._pool    = BoundedPool(batch_size)

    async def analyze_user(self, username: str) -> UserAnalysis:
        """
        Fetch profile, repos and per-repo languages for `username`.

        Any failure aborts the whole call. A partial report is never returned.
        """
        user = await self._gateway.get_user_profile(username)
        log.info("Profile fetched | %s | %d public repos", user.login, user.public_repos)

        raw_repos = await self._gateway.list_owned_non_fork_repos(username)

        async def _languages(repo: RawRepo) -> RepoInfo:
            languages = await self._gateway.get_language_bytes(username, repo.name)
            return build_repo_info(repo, languages)

        repos = await self._pool.map(_languages, raw_repos)

        overall = merge_languages(repos)
        total_bytes = sum(overall.values())
        log.info("Analysis complete | %s | %d repos | %d languages | %d bytes", username, len(repos), len(overall), total_bytes)

        return UserAnalysis(
            user              = user,
            repos             = tuple(repos),
            overall_languages = tuple(normalize(overall)),
            total_bytes       = total_bytes,
            total_repos       = len(repos),
        )
