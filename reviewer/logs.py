"""Logging setup.

Everything is rendered to stderr: the MCP server talks over stdio and stdout
belongs to the protocol. Standard library loggers (httpx, openai, fastmcp) are
routed to the same stream so a single ``LOG_LEVEL`` controls all output.

Example usage:

```
from reviewer.logs import get_logger

logger = get_logger(__name__)
logger.info("Fetched diff", owner="octo", repo="hello", chars=1234)
```
"""

import logging
import sys

import structlog
import structlog.contextvars


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(level: str = "INFO", renderer: str = "console") -> None:
    level_no = _level_number(level)

    logging.basicConfig(
        stream=sys.stderr,
        level=level_no,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    final_renderer: structlog.typing.Processor
    if renderer == "json":
        final_renderer = structlog.processors.JSONRenderer()
    else:
        final_renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            final_renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)


def bind_request(owner: str, repo: str, pull_number: int) -> None:
    """Attach the pull request to every log line of the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(owner=owner, repo=repo, pull_number=pull_number)
