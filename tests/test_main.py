"""Tests for the command line entry point."""

import pytest

from codex_pr_action.__main__ import main


@pytest.fixture
def action_env(monkeypatch, temp_git_repo, tmp_path):
    monkeypatch.setenv("INPUT_GITHUB_TOKEN", "ghs_test")
    monkeypatch.setenv("INPUT_PROVIDER_API_KEY", "sk-test")
    monkeypatch.setenv("INPUT_PROMPT", "add a LICENSE file")
    monkeypatch.setenv("GITHUB_WORKSPACE", str(temp_git_repo))
    monkeypatch.setenv("GITHUB_OUTPUT", str(tmp_path / "github_output"))
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(tmp_path / "summary.md"))
    return tmp_path


def test_missing_input_fails(action_env, monkeypatch, capsys):
    """Test a configuration error exits non-zero with an error annotation."""
    monkeypatch.delenv("INPUT_PROMPT")

    assert main() == 1

    out = capsys.readouterr().out
    assert "::error title=ConfigurationError::" in out
    assert "prompt" in out
    assert not (action_env / "github_output").exists()


def test_generation_error_fails(action_env, monkeypatch, fake_codex, capsys):
    """Test a failing codex run exits non-zero."""
    monkeypatch.setenv("INPUT_CODEX_BIN", str(fake_codex("exit 2")))

    assert main() == 1
    assert "::error title=GenerationError::" in capsys.readouterr().out


def test_no_changes_writes_outputs(action_env, monkeypatch, fake_codex):
    """Test a run without changes succeeds and writes outputs."""
    monkeypatch.setenv("INPUT_CODEX_BIN", str(fake_codex("true")))

    assert main() == 0

    assert (action_env / "github_output").read_text() == "changes_detected=false\nnew_branch=\npr_url=\n"
    assert "No changes" in (action_env / "summary.md").read_text()
