from structlog.testing import capture_logs

from reviewer.diff import DEFAULT_MAX_CHARS, is_reduced, reduce_diff

from conftest import SMALL_DIFF, large_diff


def test_small_diff_is_returned_unchanged():
    assert reduce_diff(SMALL_DIFF) == SMALL_DIFF
    assert not is_reduced(SMALL_DIFF)


def test_diff_exactly_at_limit_is_unchanged():
    diff = SMALL_DIFF
    assert reduce_diff(diff, max_chars=len(diff)) == diff


def test_long_text_without_diff_marker_is_unchanged():
    text = "no marker here\n" * 1000
    assert reduce_diff(text, max_chars=100) == text
    assert not is_reduced(text, max_chars=100)


def test_large_diff_keeps_only_changed_lines_within_limit():
    diff = large_diff()
    assert len(diff) > DEFAULT_MAX_CHARS

    reduced = reduce_diff(diff)

    assert len(reduced) <= DEFAULT_MAX_CHARS
    assert "@@" not in reduced
    assert "context line" not in reduced
    assert "diff --git" not in reduced
    for line in filter(None, reduced.split("\n")):
        assert line.startswith(("+", "-"))


def test_file_headers_survive_reduction_as_changed_lines():
    reduced = reduce_diff(large_diff(5), max_chars=50)
    assert reduced.startswith("--- a/src/big.py")


def test_reduced_diff_under_limit_is_not_cut():
    diff = large_diff(20)
    reduced = reduce_diff(diff, max_chars=len(diff) - 1)
    assert reduced.endswith("+new_value_19 = 20")


def test_cut_is_a_hard_character_limit():
    reduced = reduce_diff(large_diff(), max_chars=37)
    assert len(reduced) == 37


def test_truncation_emits_warning():
    with capture_logs() as logs:
        reduce_diff(large_diff(), max_chars=100)

    levels = {entry["log_level"] for entry in logs}
    assert "warning" in levels
    warning = next(entry for entry in logs if entry["log_level"] == "warning")
    assert warning["max_chars"] == 100


def test_no_diagnostics_for_small_diff():
    with capture_logs() as logs:
        reduce_diff(SMALL_DIFF)
    assert logs == []
