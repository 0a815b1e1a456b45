import json

import pytest
import respx
from httpx import Response

from langtrend import main as cli

API = "https://api.github.com"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("LANGTREND_CACHE_TTL", raising=False)


def _mock_user(rsx):
    profile = rsx.get(f"{API}/users/alice").mock(return_value=Response(200, json={"login": "alice", "name": "Alice"}))
    rsx.get(f"{API}/users/alice/repos").mock(
        return_value=Response(200, json=[
            {"name": "site", "fork": False, "updated_at": "2024-01-01T00:00:00Z"},
            {"name": "copied", "fork": True},
        ])
    )
    rsx.get(f"{API}/repos/alice/site/languages").mock(
        return_value=Response(200, json={"TypeScript": 8000, "CSS": 2000})
    )
    return profile


def test_analyze_json(capsys):
    with respx.mock(assert_all_called=True) as rsx:
        _mock_user(rsx)
        code = cli.main(["analyze", "alice", "--json"])

    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["total_repos"] == 1
    assert report["total_bytes"] == 10000
    assert report["repos"][0]["language_percentages"] == [
        {"name": "TypeScript", "value": 80.0, "bytes": 8000},
        {"name": "CSS", "value": 20.0, "bytes": 2000},
    ]


def test_analyze_text(capsys):
    with respx.mock(assert_all_called=True) as rsx:
        _mock_user(rsx)
        code = cli.main(["--token", "t0k", "analyze", "alice", "--sort", "name"])

    assert code == 0
    out = capsys.readouterr().out
    assert "alice (Alice)" in out
    assert "TypeScript" in out
    assert "site" in out


def test_history_text(capsys):
    commits = [
        {"sha": "b" * 40, "commit": {"author": {"date": "2024-02-01T00:00:00Z"}, "message": "grow"}},
        {"sha": "a" * 40, "commit": {"author": {"date": "2024-01-01T00:00:00Z"}, "message": "init"}},
    ]
    with respx.mock(assert_all_called=True) as rsx:
        rsx.get(f"{API}/repos/alice/site/commits").mock(return_value=Response(200, json=commits))
        rsx.get(f"{API}/repos/alice/site/git/trees/{'a' * 40}").mock(
            return_value=Response(200, json={"tree": [{"path": "index.js", "type": "blob", "size": 100}]})
        )
        rsx.get(f"{API}/repos/alice/site/git/trees/{'b' * 40}").mock(
            return_value=Response(200, json={"tree": [
                {"path": "index.js", "type": "blob", "size": 100},
                {"path": "index.ts", "type": "blob", "size": 300},
            ]})
        )
        code = cli.main(["history", "alice", "site"])

    assert code == 0
    out = capsys.readouterr().out
    assert "site: 2 snapshots" in out
    assert "aaaaaaa" in out
    assert "TypeScript" in out


@pytest.mark.parametrize(
    "status, message, expected_code",
    [
        (404, "Not Found", 2),
        (401, "Bad credentials", 3),
        (403, "API rate limit exceeded", 4),
        (502, "Bad Gateway", 1),
    ],
)
def test_errors_map_to_exit_codes(status, message, expected_code):
    with respx.mock() as rsx:
        rsx.get(f"{API}/users/ghost").mock(return_value=Response(status, json={"message": message}))
        assert cli.main(["analyze", "ghost"]) == expected_code


def test_samples_must_be_positive():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["history", "a", "b", "--samples", "0"])


def test_analyze_same_user_twice_is_served_from_cache(capsys):
    with respx.mock(assert_all_called=True) as rsx:
        profile = _mock_user(rsx)
        code = cli.main(["analyze", "alice", "Alice", "--json"])

    assert code == 0
    assert profile.call_count == 1
    reports = json.loads(capsys.readouterr().out)
    assert [r["user"]["login"] for r in reports] == ["alice", "alice"]


def test_color_flag_paints_language_names(capsys):
    with respx.mock(assert_all_called=True) as rsx:
        _mock_user(rsx)
        assert cli.main(["--color", "analyze", "alice"]) == 0
    colored = capsys.readouterr().out

    with respx.mock(assert_all_called=True) as rsx:
        _mock_user(rsx)
        assert cli.main(["analyze", "alice"]) == 0
    plain = capsys.readouterr().out

    assert "\x1b[38;2;49;120;198mTypeScript" in colored
    assert "\x1b[" not in plain
