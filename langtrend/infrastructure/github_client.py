from __future__ import annotations

import logging
from typing import Any

import httpx

from langtrend.domain.entities import CommitSummary, LanguageBytes, RawRepo, TreeEntry, UserProfile
from langtrend.domain.errors import classify_error
from langtrend.domain.interfaces import IRepoGateway

log = logging.getLogger(__name__)

GITHUB_API_URL= "https://api.github.com"
API_VERSION= "2022-11-28"
PAGE_SIZE= 100
MAX_COMMITS_PER_CALL= 30


class GitHubClient(IRepoGateway):
    """
    Concrete implementation of IRepoGateway for GitHub's REST API.

    The constructor receives an httpx.AsyncClient (injected) rather than
    creating one internally. The caller owns its lifecycle and timeout.

    The token is optional: without one GitHub still answers, only with a
    much lower rate allowance. No request is ever retried here; every
    failure is translated into a GitHubError and raised to the caller.
    """

    def __init__(self, client: httpx.AsyncClient, token: str | None = None, base_url: str = GITHUB_API_URL) -> None:
        self._client   = client
        self._base_url = base_url.rstrip("/")
        self._headers  = {
            "Accept":               "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """GitHub puts a human-readable reason in the JSON body's `message`."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text or f"HTTP {response.status_code}"

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        log.debug("GET %s params=%s", path, params)
        try:
            # Renamed or transferred repos answer with a 301 to the new location
            response = await self._client.get(url, headers=self._headers, params=params, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            error = classify_error(self._error_message(exc.response))
            log.debug("GET %s failed | %d | %s", path, exc.response.status_code, error.message)
            raise error from exc
        except httpx.RequestError as exc:
            raise classify_error(str(exc) or exc.__class__.__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            # A proxy or captive portal answering 200 with an HTML page
            raise classify_error(response.text or f"HTTP {response.status_code}: empty body") from exc

    # ------------------------------------------------------------------
    # Anti-Corruption Layer
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_profile(data: dict) -> UserProfile:
        return UserProfile(
            login        = data["login"],
            name         = data.get("name"),
            avatar_url   = data.get("avatar_url") or "",
            html_url     = data.get("html_url") or "",
            bio          = data.get("bio"),
            public_repos = data.get("public_repos") or 0,
            followers    = data.get("followers") or 0,
            following    = data.get("following") or 0,
        )

    @staticmethod
    def _parse_repo(data: dict) -> RawRepo:
        return RawRepo(
            name             = data["name"],
            description      = data.get("description"),
            html_url         = data.get("html_url") or "",
            stargazers_count = data.get("stargazers_count") or 0,
            forks_count      = data.get("forks_count") or 0,
            size             = data.get("size") or 0,
            created_at       = data.get("created_at") or "",
            updated_at       = data.get("updated_at") or "",
            fork             = bool(data.get("fork")),
        )

    @staticmethod
    def _parse_commit(data: dict) -> CommitSummary:
        commit = data.get("commit") or {}
        author = commit.get("author") or {}
        committer = commit.get("committer") or {}
        return CommitSummary(
            sha     = data["sha"],
            date    = author.get("date") or committer.get("date") or "",
            message = commit.get("message") or "",
        )

    @staticmethod
    def _parse_tree_entry(data: dict) -> TreeEntry:
        return TreeEntry(
            path = data["path"],
            type = data.get("type", "blob"),
            size = data.get("size"),
        )

    # ------------------------------------------------------------------
    # IRepoGateway implementation
    # ------------------------------------------------------------------

    async def get_user_profile(self, username: str) -> UserProfile:
        data = await self._get(f"/users/{username}")
        return self._parse_profile(data)

    async def list_owned_non_fork_repos(self, username: str) -> list[RawRepo]:
        """
        Walk /users/{username}/repos page by page until a page comes back
        short, then drop forks. GitHub's order (most recently updated
        first) is kept as is.
        """
        records: list[dict] = []
        page = 1
        while True:
            batch = await self._get(
                f"/users/{username}/repos",
                params={"type": "owner", "sort": "updated", "per_page": PAGE_SIZE, "page": page},
            )
            records.extend(batch)
            log.debug("Repo listing %s | page %d | %d records", username, page, len(batch))
            if len(batch) < PAGE_SIZE:
                break
            page += 1

        repos = [self._parse_repo(r) for r in records if not r.get("fork")]
        log.info("Listed %s | %d repos | %d forks skipped", username, len(repos), len(records) - len(repos))
        return repos

    async def get_language_bytes(self, owner: str, repo: str) -> LanguageBytes:
        data = await self._get(f"/repos/{owner}/{repo}/languages")
        return {name: int(count) for name, count in data.items()}

    async def list_recent_commits(self, owner: str, repo: str, max_count: int) -> list[CommitSummary]:
        per_page = max(1, min(max_count, MAX_COMMITS_PER_CALL))
        data = await self._get(f"/repos/{owner}/{repo}/commits", params={"per_page": per_page})
        return [self._parse_commit(c) for c in data]

    async def get_tree_at_commit(self, owner: str, repo: str, sha: str) -> list[TreeEntry]:
        data = await self._get(f"/repos/{owner}/{repo}/git/trees/{sha}", params={"recursive": 1})
        if data.get("truncated"):
            log.warning("Tree for %s/%s@%s is truncated - snapshot will undercount", owner, repo, sha[:7])
        return [self._parse_tree_entry(e) for e in data.get("tree", [])]
