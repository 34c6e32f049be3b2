"""Git operations service."""

import base64
import subprocess
from pathlib import Path

import structlog

from ..errors import PublishError


logger = structlog.get_logger()

MIN_SECRET_LENGTH = 8


class GitError(PublishError):
    """Raised when a git operation fails."""
    pass


class GitService:
    """Service for git operations."""

    def __init__(self, working_dir: Path, secrets: list[str] | None = None):
        self.working_dir = working_dir
        self._secrets = [s for s in (secrets or []) if s]
        self.logger = logger.bind(component="git")

    def _scrub(self, text: str) -> str:
        for secret in self._secrets:
            # Short values would mangle unrelated words
            if len(secret) < MIN_SECRET_LENGTH:
                continue
            text = text.replace(secret, "***")
        return text

    def _run(self, args: list[str], action: str) -> str:
        """Run a git command and return its stdout."""
        self.logger.debug("git_command", args=[self._scrub(a) for a in args[:4]])
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.working_dir,
                capture_output=True,
                text=True,
                check=True
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to {action}: {self._scrub(e.stderr or e.stdout or '').strip()}") from e
        except FileNotFoundError as e:
            raise GitError(f"Failed to {action}: git executable not found") from e

    def is_git_repository(self) -> bool:
        """Check if the working directory is a git repository."""
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--git-dir"],
                cwd=self.working_dir,
                capture_output=True,
                text=True
            )
            return result.returncode == 0
        except (FileNotFoundError, NotADirectoryError):
            return False

    def get_head_sha(self) -> str:
        """Get the SHA of the current HEAD commit."""
        return self._run(["rev-parse", "HEAD"], "resolve HEAD").strip()

    def get_remote_url(self, remote: str = "origin") -> str | None:
        """Get the URL of a remote, or None if it is not configured."""
        try:
            return self._run(["remote", "get-url", remote], f"get url of remote '{remote}'").strip() or None
        except GitError:
            return None

    def get_changed_paths(self) -> list[str]:
        """
        List paths modified in the working tree.

        Includes modified, added, deleted, renamed and untracked files.
        """
        output = self._run(
            ["status", "--porcelain=v1", "-z", "--untracked-files=all"],
            "read working tree status"
        )
        entries = output.split("\0")
        paths = []
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if len(entry) < 4:
                continue
            status, path = entry[:2], entry[3:]
            paths.append(path)
            # Renames and copies are followed by the original path
            if "R" in status or "C" in status:
                if i < len(entries) and entries[i]:
                    if "R" in status:
                        paths.append(entries[i])
                    i += 1
        return paths

    def create_branch(self, branch_name: str) -> None:
        """Create a new git branch and check it out."""
        self._run(["checkout", "-b", branch_name], "create branch")

    def stage_all(self) -> None:
        """Stage all modified, added and deleted paths."""
        self._run(["add", "--all"], "stage changes")

    def commit(self, message: str, author_name: str, author_email: str) -> str:
        """Commit staged changes and return the new commit SHA."""
        self._run(
            [
                "-c", f"user.name={author_name}",
                "-c", f"user.email={author_email}",
                "commit", "--no-verify", "-m", message,
            ],
            "commit changes"
        )
        return self.get_head_sha()

    def _auth_header_keys(self) -> list[str]:
        """List stored http extraheader keys (e.g. the one actions/checkout writes)."""
        result = subprocess.run(
            ["git", "config", "--name-only", "--get-regexp", r"^http\..*extraheader$"],
            cwd=self.working_dir,
            capture_output=True,
            text=True
        )
        if result.returncode != 0:
            return []
        return list(dict.fromkeys(line.strip() for line in result.stdout.splitlines() if line.strip()))

    def _push_auth_args(self, token: str) -> list[str]:
        """
        Build '-c' options that authenticate a single command with the token.

        An empty value resets a multi-valued extraheader, so each stored key is
        cleared and set again with the token. A generic key does not override a
        URL-specific one.
        """
        basic = base64.b64encode(f"x-access-token:{token}".encode()).decode()
        self._secrets.append(basic)
        header = f"AUTHORIZATION: basic {basic}"

        keys = self._auth_header_keys() or ["http.extraheader"]
        args = []
        for key in keys:
            args.extend(["-c", f"{key}=", "-c", f"{key}={header}"])
        return args

    def push(self, branch_name: str, token: str | None = None, remote: str = "origin") -> None:
        """
        Push a branch to the remote and set its upstream.

        For HTTPS remotes the token is passed as a basic auth header for this
        command only, replacing any header stored by the checkout.
        """
        args = []
        remote_url = self.get_remote_url(remote) or ""
        if token and remote_url.startswith("https://"):
            args.extend(self._push_auth_args(token))

        args.extend(["push", "--set-upstream", remote, branch_name])
        self._run(args, f"push branch '{branch_name}'")
