"""Tests for the codex CLI runner."""

import os

import pytest

from codex_pr_action.errors import GenerationError
from codex_pr_action.services.codex import CodexRunner


class TestBuildCommand:
    def test_command_layout(self, tmp_path):
        """Test flags and prompt are passed in order."""
        runner = CodexRunner(tmp_path, codex_bin="/opt/codex")
        cmd = runner.build_command("add a LICENSE file", "full-auto", "o4-mini", "openai")
        assert cmd == [
            "/opt/codex",
            "--approval-mode", "full-auto",
            "--model", "o4-mini",
            "--provider", "openai",
            "--quiet",
            "add a LICENSE file",
        ]

    @pytest.mark.parametrize("mode", ["suggest", "auto-edit", "full-auto"])
    def test_approval_mode_passed_through(self, tmp_path, mode):
        """Test approval mode is not reinterpreted."""
        cmd = CodexRunner(tmp_path).build_command("p", mode, "m", "openai")
        assert cmd[cmd.index("--approval-mode") + 1] == mode


class TestRun:
    def test_success(self, temp_git_repo, fake_codex, tmp_path):
        """Test a successful run captures output and receives env and args."""
        args_file = tmp_path / "args.txt"
        script = fake_codex(
            f'printf "%s\\n" "$@" > "{args_file}"\n'
            'echo "key=$OPENAI_API_KEY"'
        )
        runner = CodexRunner(temp_git_repo, codex_bin=str(script))
        env = {**os.environ, "OPENAI_API_KEY": "sk-test"}

        result = runner.run("add a LICENSE file", "full-auto", "o4-mini", "openai", env)

        assert result.exit_code == 0
        assert "key=sk-test" in result.stdout
        assert args_file.read_text().splitlines() == result.command[1:]

    def test_runs_in_working_dir(self, temp_git_repo, fake_codex):
        """Test codex runs inside the working tree."""
        script = fake_codex('echo "MIT License" > LICENSE')
        CodexRunner(temp_git_repo, codex_bin=str(script)).run(
            "add a LICENSE file", "full-auto", "o4-mini", "openai", dict(os.environ)
        )
        assert (temp_git_repo / "LICENSE").read_text() == "MIT License\n"

    def test_nonzero_exit_raises(self, temp_git_repo, fake_codex):
        """Test a non-zero exit raises GenerationError with details."""
        script = fake_codex('echo "invalid api key" >&2\nexit 3')
        runner = CodexRunner(temp_git_repo, codex_bin=str(script))

        with pytest.raises(GenerationError) as exc_info:
            runner.run("p", "full-auto", "o4-mini", "openai", dict(os.environ))

        assert exc_info.value.exit_code == 3
        assert "invalid api key" in exc_info.value.stderr
        assert "status 3" in str(exc_info.value)

    def test_missing_binary_raises(self, temp_git_repo, tmp_path):
        """Test a missing executable raises GenerationError."""
        runner = CodexRunner(temp_git_repo, codex_bin=str(tmp_path / "does-not-exist"))
        with pytest.raises(GenerationError) as exc_info:
            runner.run("p", "full-auto", "o4-mini", "openai", dict(os.environ))
        assert "Failed to start codex CLI" in str(exc_info.value)
