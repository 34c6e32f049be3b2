"""Action outputs and job summary."""

import uuid
from pathlib import Path

import structlog

from .models.schemas import RunResult
from .naming import summarize


logger = structlog.get_logger()


def format_output(name: str, value: str) -> str:
    """Format one output in the runner's GITHUB_OUTPUT file syntax."""
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(result: RunResult, output_file: Path | None) -> dict[str, str]:
    """
    Write the action outputs.

    Without an output file (e.g. a local run) the outputs are only logged.
    """
    outputs = result.to_outputs()
    logger.info("action_outputs", **outputs)

    if output_file is None:
        return outputs

    with output_file.open("a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(format_output(name, value))
    return outputs


def write_summary(result: RunResult, summary_file: Path | None, prompt: str) -> None:
    """Append a markdown job summary, if the runner provides a summary file."""
    if summary_file is None:
        return

    lines = ["## Codex PR", "", f"**Prompt:** {summarize(prompt)}", ""]
    if not result.changes_detected:
        lines.append("No changes were produced; no pull request was opened.")
    else:
        lines.append(f"- Branch: `{result.new_branch}`")
        lines.append(f"- Pull request: {result.pr_url}")
        lines.append(f"- Changed files: {len(result.changed_paths)}")

    with summary_file.open("a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
