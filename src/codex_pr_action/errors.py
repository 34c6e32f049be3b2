"""Error taxonomy for Codex PR Action."""


class ActionError(Exception):
    """Base class for failures that end the run."""
    pass


class ConfigurationError(ActionError):
    """Raised when a required input is missing or invalid."""
    pass


class GenerationError(ActionError):
    """Raised when the code-generation CLI fails."""

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class PublishError(ActionError):
    """Raised when a git or hosting API operation fails."""
    pass
