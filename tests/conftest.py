"""Shared fixtures."""

import os
import stat
import subprocess

import pytest


def _git(*args, cwd):
    return subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove action inputs and runner variables inherited from the test environment."""
    for name in list(os.environ):
        if name.startswith("INPUT_") or name.startswith("GITHUB_") or name == "RUNNER_DEBUG":
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a temporary git repository for testing."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git("init", cwd=repo)
    _git("config", "user.email", "test@test.com", cwd=repo)
    _git("config", "user.name", "Test User", cwd=repo)
    # Create initial commit
    (repo / "README.md").write_text("# Test\n")
    _git("add", ".", cwd=repo)
    _git("commit", "-m", "Initial commit", cwd=repo)
    _git("branch", "-M", "main", cwd=repo)
    return repo


@pytest.fixture
def bare_remote(tmp_path, temp_git_repo):
    """Create a bare repository and register it as origin of temp_git_repo."""
    remote = tmp_path / "remote.git"
    _git("init", "--bare", str(remote), cwd=tmp_path)
    _git("remote", "add", "origin", str(remote), cwd=temp_git_repo)
    _git("push", "origin", "main", cwd=temp_git_repo)
    return remote


@pytest.fixture
def fake_codex(tmp_path):
    """Factory for executable shell scripts standing in for the codex CLI."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def make(body: str, name: str = "codex"):
        script = bin_dir / name
        script.write_text("#!/bin/sh\n" + body + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return make
