"""Entry point for Codex PR Action."""

import asyncio
import sys

import structlog
from dotenv import load_dotenv

from .config import Settings
from .errors import ActionError
from .log_config import configure_logging
from .outputs import write_outputs, write_summary
from .runner import ActionRunner


def _escape_command_data(message: str) -> str:
    """Escape a message for a workflow command (::error::...)."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def main() -> int:
    """Run the action once and return the process exit status."""
    # Local runs only; never overrides what the runner already set
    load_dotenv(override=False)

    settings = Settings()
    configure_logging(debug=settings.debug)
    logger = structlog.get_logger().bind(component="main")

    runner = ActionRunner(settings)
    try:
        result = asyncio.run(runner.run())
    except ActionError as e:
        logger.error("action_failed", error_type=type(e).__name__, message=str(e))
        print(f"::error title={type(e).__name__}::{_escape_command_data(str(e))}")
        return 1

    write_outputs(result, settings.output_file)
    write_summary(result, settings.summary_file, settings.prompt)
    return 0


if __name__ == "__main__":
    sys.exit(main())
