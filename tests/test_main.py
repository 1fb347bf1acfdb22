"""Entry point tests."""

from __future__ import annotations

import gitlab_review_mcp.__main__ as entry
import pytest


def test_missing_token_exits_non_zero(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv("GITLAB_PERSONAL_ACCESS_TOKEN", raising=False)

    async def never_called(_config) -> None:  # noqa: ANN001
        raise AssertionError("server must not start without a token")

    monkeypatch.setattr(entry, "run_server", never_called)

    with pytest.raises(SystemExit) as exc:
        entry.main([])

    assert exc.value.code == 1
    assert "GITLAB_PERSONAL_ACCESS_TOKEN" in capsys.readouterr().err


def test_starts_server_with_loaded_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITLAB_PERSONAL_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("GITLAB_API_URL", "https://gitlab.example.com/api/v4")
    seen = []

    async def fake_run_server(config) -> None:  # noqa: ANN001
        seen.append(config)

    monkeypatch.setattr(entry, "run_server", fake_run_server)

    entry.main([])

    (config,) = seen
    assert config.access_token == "tok"
    assert config.api_url == "https://gitlab.example.com/api/v4"


def test_self_test_flag_needs_no_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITLAB_PERSONAL_ACCESS_TOKEN", raising=False)

    entry.main(["--test"])


def test_parse_args_defaults() -> None:
    assert entry.parse_args([]).test is False
    assert entry.parse_args(["--test"]).test is True
