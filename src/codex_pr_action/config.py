"""Configuration management for Codex PR Action."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

from .errors import ConfigurationError


APPROVAL_MODES = ("suggest", "auto-edit", "full-auto")

DEFAULT_GIT_USER_NAME = "github-actions[bot]"
DEFAULT_GIT_USER_EMAIL = "41898282+github-actions[bot]@users.noreply.github.com"


def _input(name: str, default: str = "") -> str:
    """Read an action input; blank values fall back to the default."""
    value = os.environ.get(f"INPUT_{name.upper()}", "").strip()
    return value or default


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _truthy(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Settings(BaseModel):
    """Action settings loaded from inputs and the runner environment."""

    # Action inputs
    github_token: str = Field(default_factory=lambda: _input("github_token"))
    provider_api_key: str = Field(default_factory=lambda: _input("provider_api_key"))
    prompt: str = Field(default_factory=lambda: _input("prompt"))
    branch_name: str = Field(default_factory=lambda: _input("branch_name", "main"))
    approval_mode: str = Field(default_factory=lambda: _input("approval_mode", "full-auto"))
    model: str = Field(default_factory=lambda: _input("model", "o4-mini"))
    provider: str = Field(default_factory=lambda: _input("provider", "openai"))
    provider_base_url: str | None = Field(default_factory=lambda: _input("provider_base_url") or None)

    codex_bin: str = Field(default_factory=lambda: _input("codex_bin", "codex"))
    git_user_name: str = Field(default_factory=lambda: _input("git_user_name", DEFAULT_GIT_USER_NAME))
    git_user_email: str = Field(default_factory=lambda: _input("git_user_email", DEFAULT_GIT_USER_EMAIL))
    draft: bool = Field(default_factory=lambda: _truthy(_input("draft")))

    # Runner context
    working_dir: Path = Field(default_factory=lambda: Path(_env("GITHUB_WORKSPACE", os.getcwd())))
    repository: str | None = Field(default_factory=lambda: _env("GITHUB_REPOSITORY") or None)
    api_url: str = Field(default_factory=lambda: _env("GITHUB_API_URL", "https://api.github.com"))
    server_url: str = Field(default_factory=lambda: _env("GITHUB_SERVER_URL", "https://github.com"))
    run_id: str | None = Field(default_factory=lambda: _env("GITHUB_RUN_ID") or None)
    run_attempt: str = Field(default_factory=lambda: _env("GITHUB_RUN_ATTEMPT", "1"))
    job: str = Field(default_factory=lambda: _env("GITHUB_JOB"))
    step: str = Field(default_factory=lambda: _env("GITHUB_ACTION"))
    output_file: Path | None = Field(
        default_factory=lambda: Path(_env("GITHUB_OUTPUT")) if _env("GITHUB_OUTPUT") else None
    )
    summary_file: Path | None = Field(
        default_factory=lambda: Path(_env("GITHUB_STEP_SUMMARY")) if _env("GITHUB_STEP_SUMMARY") else None
    )

    # RUNNER_DEBUG is set to 1 when a workflow is re-run with debug logging
    debug: bool = Field(
        default_factory=lambda: _env("RUNNER_DEBUG") == "1" or _truthy(_input("debug"))
    )

    def normalized_provider(self) -> str:
        """Provider name as used for the environment lookup."""
        return self.provider.strip().lower()

    def get_run_url(self) -> str | None:
        """Get the URL of the workflow run, if the runner context is known."""
        if not self.repository or not self.run_id:
            return None
        return f"{self.server_url.rstrip('/')}/{self.repository}/actions/runs/{self.run_id}"

    def validate_required(self) -> None:
        """Validate that required inputs are present and enums are valid."""
        missing = [
            name
            for name in ("github_token", "provider_api_key", "prompt")
            if not getattr(self, name).strip()
        ]
        if missing:
            raise ConfigurationError(f"Missing required input(s): {', '.join(missing)}")

        if self.approval_mode not in APPROVAL_MODES:
            raise ConfigurationError(
                f"Invalid approval_mode '{self.approval_mode}'. "
                f"Expected one of: {', '.join(APPROVAL_MODES)}"
            )

        if not self.branch_name.strip():
            raise ConfigurationError("branch_name must not be empty")
