"""Models and schemas for Codex PR Action."""

from .schemas import CodexResult, ProviderEnvironment, PullRequest, RunResult, RunState

__all__ = ["CodexResult", "ProviderEnvironment", "PullRequest", "RunResult", "RunState"]
