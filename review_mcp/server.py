import os
from functools import lru_cache
from typing import Annotated, Any

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from reviewer.config import Settings
from reviewer.errors import ConfigError, ReviewError
from reviewer.logs import configure_logging, get_logger
from reviewer.models import GITHUB_NAME_PATTERN
from reviewer.pipeline import build_collaborators, run_review, validate_ref

logger = get_logger(__name__)

mcp = FastMCP(
    name="code-reviewer-mcp",
    instructions=(
        "Automated code review for GitHub pull requests. "
        "Call review_pull_request with the repository owner, name and pull request "
        "number to get a summary and inline comments ready to post as a review."
    ),
)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


@mcp.tool()
async def review_pull_request(
    owner: Annotated[str, Field(description="Repository owner", pattern=GITHUB_NAME_PATTERN)],
    repo: Annotated[str, Field(description="Repository name", pattern=GITHUB_NAME_PATTERN)],
    pull_number: Annotated[int, Field(description="Pull request number", gt=0, strict=True)],
) -> dict[str, Any]:
    """Perform code review on a GitHub pull request.

    Returns the review as a GitHub review request body (summary plus inline
    comments) and a `partial` flag set when the diff was too large to send whole.
    """
    try:
        ref = validate_ref(owner, repo, pull_number)
        settings = get_settings()
        github, agent = build_collaborators(settings)
        result = await run_review(
            ref,
            github=github,
            agent=agent,
            max_diff_chars=settings.max_diff_chars,
        )
    except ConfigError as e:
        raise ToolError(f"Failed to review pull request: {e}") from e
    except ReviewError as e:
        logger.error("Review failed", stage=e.stage, error=e.message)
        raise ToolError(f"Failed to review pull request: {e}") from e
    return result.model_dump(exclude_none=True)


def main() -> None:
    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_renderer)

    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    kwargs = {}
    if transport != "stdio":
        kwargs["host"] = os.environ.get("MCP_HOST", "0.0.0.0")
        kwargs["port"] = int(os.environ.get("MCP_PORT", "8080"))
    logger.info("Code Reviewer MCP server starting", transport=transport)
    mcp.run(transport=transport, **kwargs)


if __name__ == "__main__":
    main()
