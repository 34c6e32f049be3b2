"""Codex CLI invocation service."""

import subprocess
from pathlib import Path

import structlog

from ..errors import GenerationError
from ..models.schemas import CodexResult


logger = structlog.get_logger()

STDERR_TAIL_CHARS = 2000


class CodexRunner:
    """Runs the codex CLI against a working tree."""

    def __init__(self, working_dir: Path, codex_bin: str = "codex"):
        self.working_dir = working_dir
        self.codex_bin = codex_bin
        self.logger = logger.bind(component="codex_runner")

    def build_command(
        self,
        prompt: str,
        approval_mode: str,
        model: str,
        provider: str
    ) -> list[str]:
        """Build the codex command line. Approval mode is passed through unchanged."""
        return [
            self.codex_bin,
            "--approval-mode", approval_mode,
            "--model", model,
            "--provider", provider,
            "--quiet",
            prompt,
        ]

    def run(
        self,
        prompt: str,
        approval_mode: str,
        model: str,
        provider: str,
        env: dict[str, str]
    ) -> CodexResult:
        """
        Run codex and wait for it to exit.

        Args:
            prompt: Task description handed to codex
            approval_mode: One of suggest, auto-edit, full-auto
            model: Model name
            provider: Provider name
            env: Full subprocess environment, provider variables included

        Returns:
            CodexResult with captured output

        Raises:
            GenerationError if codex cannot be started or exits non-zero
        """
        cmd = self.build_command(prompt, approval_mode, model, provider)
        self.logger.info(
            "codex_started",
            approval_mode=approval_mode,
            model=model,
            provider=provider,
            working_dir=str(self.working_dir),
        )

        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_dir,
                env=env,
                capture_output=True,
                text=True
            )
        except (FileNotFoundError, PermissionError) as e:
            raise GenerationError(f"Failed to start codex CLI '{self.codex_bin}': {e}") from e

        codex_result = CodexResult(
            command=cmd,
            exit_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

        if result.returncode != 0:
            stderr_tail = result.stderr[-STDERR_TAIL_CHARS:]
            self.logger.error("codex_failed", exit_code=result.returncode, stderr=stderr_tail)
            raise GenerationError(
                f"codex exited with status {result.returncode}: {stderr_tail.strip() or result.stdout[-STDERR_TAIL_CHARS:].strip()}",
                exit_code=result.returncode,
                stderr=result.stderr,
            )

        self.logger.info("codex_finished", exit_code=result.returncode)
        return codex_result
