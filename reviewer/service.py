import asyncio
import os
from functools import lru_cache

import restate
from dotenv import load_dotenv
from hypercorn.asyncio import serve
from hypercorn.config import Config

from .config import Settings
from .errors import InputValidationError, ReviewError
from .logs import configure_logging
from .models import PullRequestRef, ReviewResult
from .pipeline import build_collaborators, run_review

reviewer_service = restate.Service("Reviewer")


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return Settings.from_env()


def terminal_error(error: ReviewError) -> restate.TerminalError:
    # Nothing in the pipeline is retried, so every failure is terminal.
    status_code = 400 if isinstance(error, InputValidationError) else 502
    return restate.TerminalError(str(error), status_code=status_code)


async def review_request(req: PullRequestRef) -> ReviewResult:
    settings = _settings()
    github, agent = build_collaborators(settings)
    try:
        return await run_review(
            req,
            github=github,
            agent=agent,
            max_diff_chars=settings.max_diff_chars,
        )
    except ReviewError as e:
        raise terminal_error(e) from e


@reviewer_service.handler("RunReview")
async def run_review_handler(ctx: restate.Context, req: PullRequestRef) -> ReviewResult:
    return await review_request(req)


app = restate.app([reviewer_service])


def main() -> None:
    load_dotenv()
    settings = _settings()
    configure_logging(settings.log_level, settings.log_renderer)

    host = os.environ.get("REVIEWER_HOST", "0.0.0.0")
    port = os.environ.get("REVIEWER_PORT", "9090")

    config = Config()
    config.bind = [f"{host}:{port}"]

    asyncio.run(serve(app, config))


if __name__ == "__main__":
    main()
