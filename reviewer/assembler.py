from .logs import get_logger
from .models import (
    DEFAULT_SUMMARY,
    LineAnchor,
    PositionedComment,
    PullRequestReview,
    ReviewCommentRequest,
    ReviewPayload,
)

logger = get_logger(__name__)


def _comment_request(comment: PositionedComment) -> ReviewCommentRequest:
    anchor = comment.anchor
    if isinstance(anchor, LineAnchor):
        return ReviewCommentRequest(path=comment.path, body=comment.body, line=anchor.line)

    start, end = anchor.start_line, anchor.end_line
    if start > end:
        # GitHub rejects start_line > line; the range itself is still meaningful.
        logger.warning(
            "Reversed line range, ordering it",
            path=comment.path,
            start_line=start,
            end_line=end,
        )
        start, end = end, start
    if start == end:
        return ReviewCommentRequest(path=comment.path, body=comment.body, line=end)
    return ReviewCommentRequest(
        path=comment.path,
        body=comment.body,
        start_line=start,
        start_side=comment.side,
        line=end,
        side=comment.side,
    )


def assemble_review(payload: ReviewPayload) -> PullRequestReview:
    """Map a parsed review onto GitHub's create-review request body."""
    # GitHub rejects a COMMENT review with an empty body.
    summary = payload.summary if payload.summary.strip() else DEFAULT_SUMMARY
    return PullRequestReview(
        body=summary,
        comments=[_comment_request(comment) for comment in payload.comments],
    )


def review_to_json(review: PullRequestReview) -> dict:
    """The request body as sent to GitHub (unset optional fields omitted)."""
    return review.model_dump(exclude_none=True)
