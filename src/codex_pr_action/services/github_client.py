"""Simple GitHub REST API client for pull request creation."""

import re
from urllib.parse import urlparse

import httpx
import structlog

from ..errors import PublishError
from ..models.schemas import PullRequest


logger = structlog.get_logger()

_SCP_REMOTE = re.compile(r"^[\w.-]+@[\w.-]+:(?P<path>.+)$")


class GitHubAPIError(PublishError):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def parse_repository(remote_url: str) -> str | None:
    """
    Derive 'owner/name' from a git remote URL.

    Handles both forms:
        https://github.com/octo/hello.git -> octo/hello
        git@github.com:octo/hello.git     -> octo/hello
    """
    remote_url = remote_url.strip()
    match = _SCP_REMOTE.match(remote_url)
    if match:
        path = match.group("path")
    else:
        parsed = urlparse(remote_url)
        if parsed.scheme not in ("http", "https", "ssh", "git"):
            return None
        path = parsed.path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-len(".git")]

    parts = path.split("/")
    if len(parts) < 2 or not all(parts[-2:]):
        return None
    return "/".join(parts[-2:])


def _error_detail(response: httpx.Response) -> str:
    """Extract the API's error message from a response."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()

    if not isinstance(data, dict):
        return str(data)

    detail = data.get("message", "")
    errors = data.get("errors") or []
    messages = [
        e.get("message") or e.get("code", "") if isinstance(e, dict) else str(e)
        for e in errors
    ]
    messages = [m for m in messages if m]
    if messages:
        detail = f"{detail} ({'; '.join(messages)})" if detail else "; ".join(messages)
    return detail


class GitHubClient:
    """Simple async client for the GitHub REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.api_url = api_url.rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.timeout = httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0)
        self._transport = transport
        self.logger = logger.bind(component="github_client")

    async def create_pull_request(
        self,
        repository: str,
        head: str,
        base: str,
        title: str,
        body: str,
        draft: bool = False
    ) -> PullRequest:
        """
        Open a pull request.

        Args:
            repository: Repository as 'owner/name'
            head: Branch with the changes
            base: Branch to merge into
            title: Pull request title
            body: Pull request description (markdown)
            draft: Open as a draft pull request

        Returns:
            The created pull request

        Raises:
            GitHubAPIError if the request fails or is rejected
        """
        url = f"{self.api_url}/repos/{repository}/pulls"
        payload = {
            "title": title,
            "head": head,
            "base": base,
            "body": body,
            "draft": draft,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self.headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            raise GitHubAPIError(
                f"Failed to create pull request ({e.response.status_code}): {detail}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"Failed to create pull request: {e}") from e

        data = response.json()
        pull_request = PullRequest(
            number=data["number"],
            html_url=data["html_url"],
            head=head,
            base=base,
        )
        self.logger.info("pull_request_created", number=pull_request.number, url=pull_request.html_url)
        return pull_request
