"""Pydantic models for the action."""

from enum import Enum

from pydantic import BaseModel, Field


class RunState(str, Enum):
    """Pipeline state."""
    IDLE = "idle"
    VALIDATING = "validating"
    INVOKING = "invoking"
    NO_CHANGES = "no_changes"
    PUBLISHING = "publishing"
    OPENING_PR = "opening_pr"
    DONE = "done"
    FAILED = "failed"


class ProviderEnvironment(BaseModel):
    """Environment variables the codex CLI expects for a provider."""
    provider: str
    api_key_var: str
    base_url_var: str | None = None
    env: dict[str, str] = Field(default_factory=dict)


class CodexResult(BaseModel):
    """Result from codex CLI execution."""
    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""


class PullRequest(BaseModel):
    """Pull request opened on the hosting platform."""
    number: int
    html_url: str
    head: str
    base: str


class RunResult(BaseModel):
    """Outcome of a single action run."""
    changes_detected: bool
    new_branch: str = ""
    pr_url: str = ""
    changed_paths: list[str] = Field(default_factory=list)
    state: RunState = RunState.DONE

    def to_outputs(self) -> dict[str, str]:
        """Action outputs, as the runner expects them."""
        return {
            "changes_detected": "true" if self.changes_detected else "false",
            "new_branch": self.new_branch,
            "pr_url": self.pr_url,
        }
