from .logs import get_logger

DIFF_MARKER = "diff --git"
DEFAULT_MAX_CHARS = 5000

logger = get_logger(__name__)


def is_reduced(diff: str, max_chars: int = DEFAULT_MAX_CHARS) -> bool:
    """True when reduce_diff would drop content from this diff."""
    return DIFF_MARKER in diff and len(diff) > max_chars


def reduce_diff(diff: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Bound a unified diff to at most max_chars characters.

    Diffs within the limit (and text that is not a git diff) come back
    unchanged. Larger diffs keep only their added and removed lines, then are
    cut at max_chars. The cut is not line aligned, so the result may end
    mid-line and should be treated as best-effort input for the model.
    """
    if not is_reduced(diff, max_chars):
        return diff

    changed = "\n".join(
        line for line in diff.split("\n") if line.startswith(("+", "-"))
    )
    logger.info(
        "Large diff detected, keeping changed lines only",
        original_chars=len(diff),
        changed_chars=len(changed),
        max_chars=max_chars,
    )
    if len(changed) > max_chars:
        logger.warning(
            "Diff truncated, review covers a partial change set",
            dropped_chars=len(changed) - max_chars,
            max_chars=max_chars,
        )
    return changed[:max_chars]
