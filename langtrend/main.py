"""
main.py - Dependency Wiring (Composition Root)
------------------------------------------------
This file wires all the pieces together and runs the CLI.

It does NOT contain any business logic. It just:
  1. Reads configuration from environment variables and flags
  2. Creates concrete implementations of each interface
  3. Injects them into the classes that need them
  4. Calls the requested use case (analyze / history)
  5. Prints the result and exits with a code that names the failure

Dependency graph (what depends on what):
                         main.py  (wires everything)
                            │
              ┌─────────────┼──────────────────┐
              ▼             ▼                  ▼
    CachedAnalysisService   │   CommitHistoryReconstructor
              │             │                  │
              ▼             ▼                  │
 UserAnalysisAggregator  InMemoryCache         │
              │                                │
              └──────────► GitHubClient ◄──────┘
                          (IRepoGateway)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Sequence

import httpx

# Application layer
from langtrend.application.aggregator import UserAnalysisAggregator
from langtrend.application.analysis_service import DEFAULT_TTL, CachedAnalysisService
from langtrend.application.history import DEFAULT_SAMPLE_LIMIT, CommitHistoryReconstructor
from langtrend.application.report import SORT_KEYS, colorize, format_bytes, other_share, select_repos, top_languages, trend_changes

# Domain
from langtrend.domain.entities import RepoCommitHistory, UserAnalysis
from langtrend.domain.errors import GitHubError

# Infrastructure layer
from langtrend.infrastructure.github_client import GITHUB_API_URL, GitHubClient
from langtrend.infrastructure.memory_cache import InMemoryCache

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    token:     str | None
    api_url:   str
    cache_ttl: float
    timeout:   float


def _read_env(args: argparse.Namespace) -> Config:
    """
    Merge environment variables with command-line flags.
    A missing token is fine: GitHub then applies the unauthenticated limit.
    """
    token = args.token or os.environ.get("GITHUB_TOKEN") or None
    if not token:
        log.warning("No GITHUB_TOKEN set - unauthenticated requests hit the rate limit quickly")

    try:
        cache_ttl = float(os.environ.get("LANGTREND_CACHE_TTL", DEFAULT_TTL))
    except ValueError:
        log.error("LANGTREND_CACHE_TTL must be a number of seconds")
        sys.exit(1)

    return Config(
        token     = token,
        api_url   = os.environ.get("GITHUB_API_URL", GITHUB_API_URL),
        cache_ttl = cache_ttl,
        timeout   = args.timeout,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO; keep that for --verbose only
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _paint(language: str, index: int, text: str, color: bool) -> str:
    return colorize(language, index, text) if color else text


def render_analysis(analysis: UserAnalysis, sort_by: str, language: str | None, color: bool = False) -> str:
    user = analysis.user
    lines = [
        f"{user.login}" + (f" ({user.name})" if user.name else ""),
        f"{analysis.total_repos} repos | {format_bytes(analysis.total_bytes)} of code",
        "",
        "Overall languages:",
    ]
    for i, p in enumerate(analysis.overall_languages):
        lines.append(f"  {_paint(p.name, i, f'{p.name:<20}', color)} {p.value:6.2f}%  {format_bytes(p.bytes):>10}")

    repos = select_repos(analysis.repos, sort_by=sort_by, language=language)
    lines += ["", f"Repositories ({len(repos)}):"]
    for repo in repos:
        langs = ", ".join(
            f"{_paint(p.name, i, p.name, color)} {p.value:.1f}%" for i, p in enumerate(repo.language_percentages[:3])
        ) or "-"
        lines.append(f"  {repo.name:<30} ★{repo.stargazers_count:<5} {format_bytes(repo.total_bytes):>10}  {langs}")
    return "\n".join(lines)


def render_history(history: RepoCommitHistory, color: bool = False) -> str:
    lines = [f"{history.repo_name}: {len(history.snapshots)} snapshots"]
    if history.skipped_commits:
        lines.append(f"  skipped {len(history.skipped_commits)} commit(s) with unreadable trees")
    if not history.has_trend:
        lines.append("  not enough commit history for a trend (need at least 2 snapshots)")
        return "\n".join(lines)

    top = top_languages(history)
    # Index by rank in the newest snapshot so a language keeps its color on every line
    rank = {name: i for i, name in enumerate(top)}
    for snap in history.snapshots:
        shares = ", ".join(
            f"{_paint(p.name, rank[p.name], p.name, color)} {p.value:.1f}%"
            for p in snap.language_percentages if p.name in rank
        )
        other = other_share(snap, top)
        if other > 0.5:
            shares += f", Other {other:.1f}%"
        lines.append(f"  {snap.short_sha} {snap.date[:10]:<10} {shares}")

    lines += ["", "First -> last:"]
    for change in trend_changes(history):
        name = _paint(change.name, rank[change.name], f"{change.name:<20}", color)
        lines.append(f"  {name} {change.first:5.1f}% -> {change.last:5.1f}%  ({change.diff:+.2f})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Dependency wiring
# ---------------------------------------------------------------------------


async def build_and_run(args: argparse.Namespace, config: Config) -> str:
    """
    Wires all dependencies together and executes the requested command.
    Returns the text to print.
    """
    client = httpx.AsyncClient(timeout=config.timeout, follow_redirects=True)
    try:
        gateway = GitHubClient(
            client   = client,          # injected - GitHubClient doesn't create this
            token    = config.token,
            base_url = config.api_url,
        )

        if args.command == "analyze":
            # One service for the whole run: a username repeated in any casing is served from cache
            service = CachedAnalysisService(
                aggregator = UserAnalysisAggregator(gateway),
                cache      = InMemoryCache(),
                ttl        = config.cache_ttl,
            )
            analyses = [await service.analyze_user(username) for username in args.usernames]
            if args.json:
                data = [a.to_dict() for a in analyses]
                return json.dumps(data[0] if len(data) == 1 else data, indent=2, ensure_ascii=False)
            return "\n\n".join(render_analysis(a, args.sort, args.language, args.color) for a in analyses)

        reconstructor = CommitHistoryReconstructor(gateway)
        history = await reconstructor.reconstruct_history(args.owner, args.repo, sample_limit=args.samples)
        if args.json:
            return json.dumps(history.to_dict(), indent=2, ensure_ascii=False)
        return render_history(history, args.color)

    finally:
        await client.aclose()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="langtrend",
        description="Byte-weighted language report for a GitHub user's repositories",
    )
    parser.add_argument("--token", help="GitHub token (default: $GITHUB_TOKEN)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT:.0f})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--color", action="store_true", help="Color language names with ANSI escapes")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Language report for every non-fork repo each user owns")
    analyze.add_argument("usernames", nargs="+", metavar="username")
    analyze.add_argument("--sort", choices=SORT_KEYS, default="updated", help="Repository order (default: updated)")
    analyze.add_argument("--language", help="Only list repos that use this language")
    analyze.add_argument("--json", action="store_true", help="Print the raw report as JSON")

    history = sub.add_parser("history", help="Language trend across a repo's recent commits")
    history.add_argument("owner")
    history.add_argument("repo")
    history.add_argument(
        "--samples",
        type    = _positive_int,
        default = DEFAULT_SAMPLE_LIMIT,
        help    = f"Number of commits to sample (default: {DEFAULT_SAMPLE_LIMIT})",
    )
    history.add_argument("--json", action="store_true", help="Print the raw history as JSON")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    config = _read_env(args)

    try:
        output = asyncio.run(build_and_run(args, config))
    except GitHubError as exc:
        if exc.user_message == exc.message:
            log.error("%s", exc.message)
        else:
            log.error("%s (%s)", exc.user_message, exc.message)
        return exc.exit_code

    print(output)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
