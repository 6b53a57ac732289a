from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SUMMARY = "Automated code review"

Side = Literal["RIGHT"]

# GitHub owner and repository names; at least one character besides dots.
GITHUB_NAME_PATTERN = r"^[A-Za-z0-9_.-]*[A-Za-z0-9_-][A-Za-z0-9_.-]*$"


class PullRequestRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: Annotated[str, Field(pattern=GITHUB_NAME_PATTERN, strict=True)]
    repo: Annotated[str, Field(pattern=GITHUB_NAME_PATTERN, strict=True)]
    pull_number: Annotated[int, Field(gt=0, strict=True)]


class LineAnchor(BaseModel):
    line: int


class RangeAnchor(BaseModel):
    # Kept in the order the model wrote them; start_line may exceed end_line.
    start_line: int
    end_line: int


class PositionedComment(BaseModel):
    path: str
    body: str
    anchor: LineAnchor | RangeAnchor
    side: Side = "RIGHT"


class GeneralComment(BaseModel):
    body: str


ReviewAnnotation = PositionedComment | GeneralComment


class ReviewPayload(BaseModel):
    summary: str = DEFAULT_SUMMARY
    comments: list[PositionedComment] = Field(default_factory=list)


class ReviewCommentRequest(BaseModel):
    """One inline comment in the shape GitHub's create-review endpoint expects."""

    path: str
    body: str
    line: int
    side: Side = "RIGHT"
    start_line: int | None = None
    start_side: Side | None = None


class PullRequestReview(BaseModel):
    body: str
    event: Literal["COMMENT"] = "COMMENT"
    comments: list[ReviewCommentRequest] = Field(default_factory=list)


class ReviewResult(BaseModel):
    review: PullRequestReview
    partial: bool = False
