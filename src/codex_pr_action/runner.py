"""Pipeline orchestration for Codex PR Action."""

import structlog

from .config import Settings
from .errors import ActionError, ConfigurationError, PublishError
from .models.schemas import CodexResult, RunResult, RunState
from .naming import make_branch_name, make_commit_message, make_pr_body, make_pr_title, summarize
from .services.codex import CodexRunner
from .services.git import GitService
from .services.github_client import GitHubClient, parse_repository
from .services.providers import build_subprocess_env, map_provider_environment


logger = structlog.get_logger()

OUTPUT_TAIL_LINES = 20


def _tail(text: str, lines: int = OUTPUT_TAIL_LINES) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


class ActionRunner:
    """
    Runs the action pipeline once.

    validating -> invoking -> (no_changes | publishing -> opening_pr) -> done,
    or failed on any ActionError. Collaborators can be injected for tests.
    """

    def __init__(
        self,
        settings: Settings,
        codex: CodexRunner | None = None,
        git: GitService | None = None,
        github: GitHubClient | None = None
    ):
        self.settings = settings
        self.codex = codex or CodexRunner(settings.working_dir, codex_bin=settings.codex_bin)
        self.git = git or GitService(settings.working_dir, secrets=[settings.github_token])
        self.github = github or GitHubClient(settings.github_token, api_url=settings.api_url)
        self.state = RunState.IDLE
        self.history: list[RunState] = [RunState.IDLE]
        self.logger = logger.bind(component="runner")

        # Partial publish state, surfaced in logs on failure
        self._branch: str | None = None
        self._commit_sha: str | None = None
        self._pushed = False

    def _transition(self, state: RunState) -> None:
        self.logger.info("state_changed", previous=self.state.value, state=state.value)
        self.state = state
        self.history.append(state)

    async def run(self) -> RunResult:
        """
        Run the pipeline.

        Returns:
            RunResult with the action outputs

        Raises:
            ConfigurationError, GenerationError or PublishError; the runner is
            left in the failed state
        """
        try:
            return await self._run()
        except ActionError as e:
            if isinstance(e, PublishError) and self._branch:
                self.logger.error(
                    "publish_incomplete",
                    branch=self._branch,
                    commit=self._commit_sha,
                    pushed=self._pushed,
                )
            self._transition(RunState.FAILED)
            raise

    async def _run(self) -> RunResult:
        settings = self.settings

        self._transition(RunState.VALIDATING)
        settings.validate_required()
        if not self.git.is_git_repository():
            raise ConfigurationError(f"Working directory is not a git checkout: {settings.working_dir}")

        self._transition(RunState.INVOKING)
        self.invoke_codex()

        changed_paths = self.git.get_changed_paths()
        if not changed_paths:
            self.logger.info("no_changes_detected")
            self._transition(RunState.NO_CHANGES)
            self._transition(RunState.DONE)
            return RunResult(changes_detected=False, state=RunState.DONE)

        self.logger.info("changes_detected", count=len(changed_paths), paths=changed_paths[:20])

        self._transition(RunState.PUBLISHING)
        new_branch = self.publish(changed_paths)

        self._transition(RunState.OPENING_PR)
        pr_url = await self.open_pull_request(new_branch, changed_paths)

        self._transition(RunState.DONE)
        return RunResult(
            changes_detected=True,
            new_branch=new_branch,
            pr_url=pr_url,
            changed_paths=changed_paths,
            state=RunState.DONE,
        )

    def invoke_codex(self) -> CodexResult:
        settings = self.settings
        provider = settings.normalized_provider()
        provider_env = map_provider_environment(
            provider,
            api_key=settings.provider_api_key,
            base_url=settings.provider_base_url,
        )
        self.logger.info(
            "provider_configured",
            provider=provider,
            api_key_var=provider_env.api_key_var,
            base_url_var=provider_env.base_url_var,
            prompt=summarize(settings.prompt),
        )
        result = self.codex.run(
            prompt=settings.prompt,
            approval_mode=settings.approval_mode,
            model=settings.model,
            provider=provider,
            env=build_subprocess_env(provider_env),
        )
        self.logger.info(
            "codex_output",
            stdout_tail=_tail(result.stdout),
            stderr_tail=_tail(result.stderr),
        )
        return result

    def publish(self, changed_paths: list[str]) -> str:
        """Create a branch, commit all changes and push it. Returns the branch name."""
        settings = self.settings
        branch = make_branch_name(
            settings.prompt,
            run_id=settings.run_id,
            run_attempt=settings.run_attempt,
            base_branch=settings.branch_name,
            context=f"{settings.job}/{settings.step}",
        )

        self.git.create_branch(branch)
        self._branch = branch
        self.git.stage_all()
        self._commit_sha = self.git.commit(
            make_commit_message(settings.prompt),
            author_name=settings.git_user_name,
            author_email=settings.git_user_email,
        )
        self.logger.info("changes_committed", branch=branch, commit=self._commit_sha, files=len(changed_paths))

        self.git.push(branch, token=settings.github_token)
        self._pushed = True
        self.logger.info("branch_pushed", branch=branch)
        return branch

    def resolve_repository(self) -> str:
        """Get 'owner/name' from the runner context or the origin remote."""
        if self.settings.repository:
            return self.settings.repository

        remote_url = self.git.get_remote_url()
        repository = parse_repository(remote_url) if remote_url else None
        if not repository:
            raise PublishError(
                "Cannot determine the repository: GITHUB_REPOSITORY is not set "
                "and the origin remote is not a recognizable repository URL"
            )
        return repository

    async def open_pull_request(self, branch: str, changed_paths: list[str]) -> str:
        settings = self.settings
        pull_request = await self.github.create_pull_request(
            repository=self.resolve_repository(),
            head=branch,
            base=settings.branch_name,
            title=make_pr_title(settings.prompt),
            body=make_pr_body(settings.prompt, changed_paths, run_url=settings.get_run_url()),
            draft=settings.draft,
        )
        self.logger.info("pull_request_opened", url=pull_request.html_url, base=pull_request.base)
        return pull_request.html_url
