"""Branch names, commit messages and pull request text derived from the prompt."""

import hashlib
import re
from datetime import datetime, timezone


BRANCH_PREFIX = "codex"
SLUG_MAX_LENGTH = 40
SUMMARY_MAX_LENGTH = 72
DIGEST_LENGTH = 6
MAX_LISTED_PATHS = 50


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Lower-case text with non-alphanumeric runs collapsed to '-'."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or "change"


def _first_line(prompt: str) -> str:
    for line in prompt.strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


def summarize(prompt: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """First non-empty prompt line, truncated with an ellipsis."""
    line = _first_line(prompt)
    if len(line) <= max_length:
        return line
    return line[:max_length - 3].rstrip() + "..."


def make_branch_name(
    prompt: str,
    run_id: str | None = None,
    run_attempt: str = "1",
    base_branch: str = "main",
    context: str = "",
    now: datetime | None = None
) -> str:
    """
    Generate the branch name for a run.

    The slug only covers the start of the prompt, so the suffix carries a hash
    over the full prompt and the invocation context (job and step). Inside a
    workflow run the run id and attempt are added, so re-runs get their own
    branch; outside one the current time goes into the hash instead.
    """
    slug = slugify(prompt)
    if run_id:
        digest = hashlib.sha1(f"{prompt}\0{context}".encode()).hexdigest()
        suffix = f"{run_id}-{run_attempt}-{digest[:DIGEST_LENGTH]}"
    else:
        now = now or datetime.now(timezone.utc)
        digest = hashlib.sha1(f"{prompt}\0{context}\0{now.isoformat()}".encode()).hexdigest()
        suffix = digest[:8]

    name = f"{BRANCH_PREFIX}/{slug}-{suffix}"
    if name == base_branch:
        name = f"{name}-1"
    return name


def make_commit_message(prompt: str) -> str:
    summary = summarize(f"{BRANCH_PREFIX}: {_first_line(prompt)}")
    return f"{summary}\n\n{prompt.strip()}\n"


def make_pr_title(prompt: str) -> str:
    return summarize(f"{BRANCH_PREFIX}: {_first_line(prompt)}")


def make_pr_body(prompt: str, changed_paths: list[str], run_url: str | None = None) -> str:
    """Markdown body for the pull request."""
    quoted = "\n".join(f"> {line}" if line else ">" for line in prompt.strip().splitlines())
    lines = [
        "This pull request was generated by the codex CLI from the following prompt:",
        "",
        quoted,
        "",
        f"### Changed files ({len(changed_paths)})",
        "",
    ]
    lines.extend(f"- `{path}`" for path in changed_paths[:MAX_LISTED_PATHS])
    if len(changed_paths) > MAX_LISTED_PATHS:
        lines.append(f"- ... and {len(changed_paths) - MAX_LISTED_PATHS} more")
    if run_url:
        lines.extend(["", f"Workflow run: {run_url}"])
    return "\n".join(lines) + "\n"
