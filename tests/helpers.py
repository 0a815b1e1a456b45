from __future__ import annotations
import asyncio

from langtrend.domain.entities import CommitSummary, RawRepo, TreeEntry, UserProfile
from langtrend.domain.errors import GitHubError
from langtrend.domain.interfaces import IRepoGateway


def make_profile(login: str = "octocat") -> UserProfile:
    return UserProfile(
        login=login,
        name="The Octocat",
        avatar_url=f"https://avatars.example/{login}",
        html_url=f"https://github.com/{login}",
        bio=None,
        public_repos=3,
        followers=10,
        following=0,
    )


def make_repo(name: str, updated_at: str = "2024-01-01T00:00:00Z", stars: int = 0, fork: bool = False) -> RawRepo:
    return RawRepo(
        name=name,
        description=f"{name} description",
        html_url=f"https://github.com/octocat/{name}",
        stargazers_count=stars,
        forks_count=0,
        size=1,
        created_at="2020-01-01T00:00:00Z",
        updated_at=updated_at,
        fork=fork,
    )


def make_commits(count: int) -> list[CommitSummary]:
    """Newest first: index 0 is the most recent commit."""
    return [
        CommitSummary(
            sha=f"{count - i:040x}",
            date=f"2024-01-{count - i:02d}T00:00:00Z",
            message=f"commit {count - i}\n\nbody",
        )
        for i in range(count)
    ]


class FakeGateway(IRepoGateway):
    """
    In-memory stand-in for GitHubClient.

    Records every call and the peak number of concurrent language
    lookups so tests can check the pool's cap.
    """

    def __init__(
        self,
        profile: UserProfile | None = None,
        repos: list[RawRepo] | None = None,
        languages: dict[str, dict[str, int]] | None = None,
        commits: list[CommitSummary] | None = None,
        trees: dict[str, list[TreeEntry]] | None = None,
        errors: dict[str, GitHubError] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.profile = profile or make_profile()
        self.repos = repos or []
        self.languages = languages or {}
        self.commits = commits or []
        self.trees = trees or {}
        self.errors = errors or {}
        self.delay = delay
        self.calls: list[tuple] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    def _maybe_fail(self, key: str) -> None:
        if key in self.errors:
            raise self.errors[key]

    async def get_user_profile(self, username: str) -> UserProfile:
        self.calls.append(("profile", username))
        self._maybe_fail(f"profile:{username}")
        return self.profile

    async def list_owned_non_fork_repos(self, username: str) -> list[RawRepo]:
        self.calls.append(("repos", username))
        self._maybe_fail(f"repos:{username}")
        return [r for r in self.repos if not r.fork]

    async def get_language_bytes(self, owner: str, repo: str) -> dict[str, int]:
        self.calls.append(("languages", owner, repo))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            self._maybe_fail(f"languages:{repo}")
            return dict(self.languages.get(repo, {}))
        finally:
            self.in_flight -= 1

    async def list_recent_commits(self, owner: str, repo: str, max_count: int) -> list[CommitSummary]:
        self.calls.append(("commits", owner, repo, max_count))
        self._maybe_fail(f"commits:{repo}")
        # Ignores max_count on purpose so tests can feed more than was asked for
        return list(self.commits)

    async def get_tree_at_commit(self, owner: str, repo: str, sha: str) -> list[TreeEntry]:
        self.calls.append(("tree", owner, repo, sha))
        self._maybe_fail(f"tree:{sha}")
        return list(self.trees.get(sha, []))
