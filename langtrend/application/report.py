from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone

from langtrend.domain.entities import CommitSnapshot, RepoCommitHistory, RepoInfo
from .normalizer import round_half_up

SORT_KEYS = ("updated", "stars", "size", "languages", "name")
TOP_LANGUAGES= 10

LANGUAGE_COLORS: dict[str, str] = {
    "JavaScript": "#f1e05a", "TypeScript": "#3178c6", "Python": "#3572A5",
    "Java": "#b07219", "C#": "#178600", "C++": "#f34b7d", "C": "#555555",
    "Go": "#00ADD8", "Rust": "#dea584", "Ruby": "#701516", "PHP": "#4F5D95",
    "Swift": "#F05138", "Kotlin": "#A97BFF", "Dart": "#00B4AB", "Scala": "#c22d40",
    "Shell": "#89e051", "HTML": "#e34c26", "CSS": "#563d7c", "SCSS": "#c6538c",
    "Vue": "#41b883", "Svelte": "#ff3e00", "Lua": "#000080", "R": "#198CE7",
    "Perl": "#0298c3", "Haskell": "#5e5086", "Elixir": "#6e4a7e", "Clojure": "#db5855",
    "Erlang": "#B83998", "Objective-C": "#438eff", "Dockerfile": "#384d54",
    "Makefile": "#427819", "PowerShell": "#012456", "Jupyter Notebook": "#DA5B0B",
    "Zig": "#ec915c", "Assembly": "#6E4C13", "Vim Script": "#019833", "Nix": "#7e7eff",
}

FALLBACK_COLORS = [
    "#6366f1", "#8b5cf6", "#a855f7", "#d946ef", "#ec4899",
    "#f43f5e", "#ef4444", "#f97316", "#f59e0b", "#eab308",
    "#84cc16", "#22c55e", "#10b981", "#14b8a6", "#06b6d4",
    "#0ea5e9", "#3b82f6", "#2563eb", "#7c3aed", "#c026d3",
]


@dataclass(frozen=True)
class LanguageChange:
    """How one language's share moved between the first and last snapshot."""
    name:  str
    first: float
    last:  float
    diff:  float


def language_color(language: str, index: int = 0) -> str:
    return LANGUAGE_COLORS.get(language) or FALLBACK_COLORS[index % len(FALLBACK_COLORS)]


def colorize(language: str, index: int = 0, text: str | None = None) -> str:
    """Wrap `text` (default: the language name) in a 24-bit ANSI foreground color."""
    hex_color = language_color(language, index).lstrip("#")
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    return f"\x1b[38;2;{r};{g};{b}m{text if text is not None else language}\x1b[0m"


def format_bytes(count: int) -> str:
    """1536 -> '1.5 KB'. One decimal, a trailing .0 is dropped."""
    if count <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    i = 0
    scaled = float(count)
    while scaled >= 1024 and i < len(units) - 1:
        scaled /= 1024
        i += 1
    text = f"{scaled:.1f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"


def _timestamp(value: str) -> float:
    if not value:
        return float("-inf")
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc).timestamp()


def select_repos(repos: tuple[RepoInfo, ...] | list[RepoInfo], sort_by: str = "updated", language: str | None = None) -> list[RepoInfo]:
    """
    Filter and order repos for display.

    `language` keeps only repos where that language shows up at all.
    Sorting is stable, so equal keys keep GitHub's order.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"unknown sort key {sort_by!r}, expected one of {', '.join(SORT_KEYS)}")

    selected = list(repos)
    if language:
        selected = [r for r in selected if any(p.name == language for p in r.language_percentages)]

    if sort_by == "updated":
        selected.sort(key=lambda r: _timestamp(r.updated_at), reverse=True)
    elif sort_by == "stars":
        selected.sort(key=lambda r: r.stargazers_count, reverse=True)
    elif sort_by == "size":
        selected.sort(key=lambda r: r.total_bytes, reverse=True)
    elif sort_by == "languages":
        selected.sort(key=lambda r: len(r.language_percentages), reverse=True)
    else:
        selected.sort(key=lambda r: r.name.casefold())
    return selected


def _share(snapshot: CommitSnapshot, language: str) -> float:
    for p in snapshot.language_percentages:
        if p.name == language:
            return p.value
    return 0.0


def top_languages(history: RepoCommitHistory, limit: int = TOP_LANGUAGES) -> list[str]:
    """Largest languages of the newest snapshot."""
    if not history.snapshots:
        return []
    return [p.name for p in history.snapshots[-1].language_percentages[:limit]]


def other_share(snapshot: CommitSnapshot, languages: list[str]) -> float:
    """Percentage not covered by `languages`, never below zero."""
    covered = sum(_share(snapshot, name) for name in languages)
    return max(0.0, round_half_up((100 - covered) * 100) / 100)


def trend_changes(history: RepoCommitHistory, limit: int = TOP_LANGUAGES) -> list[LanguageChange]:
    """
    First-vs-last share for the top languages of the newest snapshot.
    Empty when there are fewer than two snapshots.
    """
    if not history.has_trend:
        return []
    first, last = history.snapshots[0], history.snapshots[-1]
    changes = []
    for name in top_languages(history, limit):
        a, b = _share(first, name), _share(last, name)
        if a == 0 and b == 0:
            continue
        changes.append(LanguageChange(name=name, first=a, last=b, diff=round_half_up((b - a) * 100) / 100))
    return changes
