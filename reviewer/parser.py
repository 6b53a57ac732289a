"""Parser for the line-per-comment review format requested by the prompt.

Each line of a model response is tokenized against

    <FILE_PATH>:<LINE_SPEC>:<COMMENT_TEXT>

and then classified into a positioned comment or a general comment. Lines
that do not fit the format are never discarded: they become part of the
review summary, so a partially non-compliant answer still reaches the author.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .logs import get_logger
from .models import (
    DEFAULT_SUMMARY,
    GeneralComment,
    LineAnchor,
    PositionedComment,
    RangeAnchor,
    ReviewAnnotation,
    ReviewPayload,
)
from .prompt import GENERAL_PATH

logger = get_logger(__name__)

# The first two fields cannot contain a colon, the comment text can.
LINE_PATTERN = re.compile(r"^([^:]+):([^:]+):(.*)$")
# "GENERAL: text" with the line spec left out.
SHORT_GENERAL_PATTERN = re.compile(rf"^\s*{GENERAL_PATH}\s*:(.*)$")

RANGE_SPEC = re.compile(r"^(\d+)-(\d+)$")
SINGLE_SPEC = re.compile(r"^\d+$")


@dataclass(frozen=True)
class AnnotationLine:
    path: str
    line_spec: str
    text: str

    @property
    def is_general(self) -> bool:
        return self.path == GENERAL_PATH


class SummaryBuffer:
    """Collects general-comment fragments in the order they were seen."""

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def add(self, fragment: str) -> None:
        self._fragments.append(fragment + "\n")

    def __len__(self) -> int:
        return len(self._fragments)

    def summary(self) -> str:
        text = "".join(self._fragments).strip()
        return text or DEFAULT_SUMMARY


def tokenize(line: str) -> AnnotationLine | None:
    """Split a response line into its three fields, or None if it has no such shape."""
    match = LINE_PATTERN.match(line)
    if match:
        path, line_spec, text = match.groups()
        path, line_spec = path.strip(), line_spec.strip()
        return AnnotationLine(path, line_spec, text)

    match = SHORT_GENERAL_PATTERN.match(line)
    if match:
        return AnnotationLine(GENERAL_PATH, "", match.group(1))
    return None


def classify(token: AnnotationLine) -> ReviewAnnotation:
    body = token.text.strip()
    if token.is_general:
        return GeneralComment(body=body)

    range_match = RANGE_SPEC.match(token.line_spec)
    if range_match:
        start, end = (int(value) for value in range_match.groups())
        return PositionedComment(
            path=token.path,
            body=body,
            anchor=RangeAnchor(start_line=start, end_line=end),
        )
    if SINGLE_SPEC.match(token.line_spec):
        return PositionedComment(
            path=token.path,
            body=body,
            anchor=LineAnchor(line=int(token.line_spec)),
        )

    logger.warning(
        "Unparsed line spec, moving comment to summary",
        path=token.path,
        line_spec=token.line_spec,
    )
    return GeneralComment(
        body=f"File: {token.path}, Line Info: {token.line_spec}: {body}"
    )


def iter_annotations(response_text: str) -> Iterator[ReviewAnnotation]:
    # Only "\n" ends a line; other Unicode line breaks belong to the comment text.
    for line in response_text.split("\n"):
        line = line.removesuffix("\r")
        token = tokenize(line)
        if token is None:
            yield GeneralComment(body=line)
        else:
            yield classify(token)


def parse_review(response_text: str) -> ReviewPayload:
    """Turn a model response into a summary plus positioned comments."""
    summary = SummaryBuffer()
    comments: list[PositionedComment] = []

    for annotation in iter_annotations(response_text):
        if isinstance(annotation, PositionedComment):
            comments.append(annotation)
        else:
            summary.add(annotation.body)

    logger.info(
        "Parsed review response",
        positioned_comments=len(comments),
        summary_fragments=len(summary),
    )
    return ReviewPayload(summary=summary.summary(), comments=comments)
