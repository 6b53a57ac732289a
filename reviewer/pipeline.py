from pydantic import ValidationError
from pydantic_ai import Agent

from .agent import build_review_agent, complete_review
from .assembler import assemble_review
from .config import Settings
from .diff import DEFAULT_MAX_CHARS, is_reduced, reduce_diff
from .errors import InputValidationError
from .github import GitHubClient
from .logs import bind_request, get_logger
from .models import PullRequestRef, PullRequestReview, ReviewResult
from .parser import parse_review
from .prompt import build_prompt

logger = get_logger(__name__)


def validate_ref(owner, repo, pull_number) -> PullRequestRef:
    try:
        return PullRequestRef(owner=owner, repo=repo, pull_number=pull_number)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InputValidationError(f"invalid arguments: {problems}") from e


def build_collaborators(settings: Settings) -> tuple[GitHubClient, Agent[None, str]]:
    github = GitHubClient(
        token=settings.github_token,
        api_url=settings.github_api_url,
        timeout=settings.diff_timeout,
    )
    return github, build_review_agent(settings)


async def run_review(
    ref: PullRequestRef,
    *,
    github: GitHubClient,
    agent: Agent[None, str],
    max_diff_chars: int = DEFAULT_MAX_CHARS,
) -> ReviewResult:
    """Fetch, prompt, parse and assemble the review of one pull request.

    Stages run strictly in order; the first failure aborts the request.
    """
    bind_request(ref.owner, ref.repo, ref.pull_number)

    diff = await github.fetch_diff(ref)
    logger.info("Fetched pull request diff", chars=len(diff))

    partial = is_reduced(diff, max_diff_chars)
    prompt = build_prompt(reduce_diff(diff, max_diff_chars))

    response_text = await complete_review(agent, prompt)
    payload = parse_review(response_text)
    review = assemble_review(payload)

    logger.info("Review ready", comments=len(review.comments), partial=partial)
    return ReviewResult(review=review, partial=partial)


async def post_review(ref: PullRequestRef, review: PullRequestReview, *, github: GitHubClient) -> dict:
    """Submit an assembled review; separate from run_review so it can be resubmitted."""
    posted = await github.post_review(ref, review)
    logger.info("Posted review", review_id=posted.get("id"), url=posted.get("html_url"))
    return posted
