GENERAL_PATH = "GENERAL"

SYSTEM_PROMPT = """\
You are a senior software engineer performing a code review of a GitHub pull request. \
Your answer is read by a program, not a person: follow the output format exactly.
"""

OUTPUT_FORMAT = f"""\
Output format:
Write one review comment per line, and nothing else, in the form

<FILE_PATH>:<LINE_SPEC>:<COMMENT_TEXT>

- FILE_PATH is the path of the changed file exactly as it appears in the diff \
(`b/` prefix removed). It must not contain a colon.
- LINE_SPEC is either a single line number `N` or an inclusive range `N-M` with N <= M. \
Use line numbers of the new version of the file: a hunk header `@@ -X,Y +N,M @@` starts \
the new file at line N, counting up for every line that is not removed.
- COMMENT_TEXT is the comment itself, on the same line. It may contain colons.
- For remarks that are not tied to a line (overall assessment, general suggestions) \
use the literal FILE_PATH `{GENERAL_PATH}` with `-` as LINE_SPEC.
- Do not wrap the answer in Markdown code fences, and do not add headings or bullets.

Examples:
src/app/server.py:42:This request has no timeout; a slow upstream will block the worker.
src/app/models.py:10-18:This validation duplicates the one in forms.py, reuse it.
{GENERAL_PATH}:-:The change is well structured; the migration needs a rollback path.
"""

REVIEW_FOCUS = """\
Cover:
1. Overall assessment of the changes
2. Specific feedback on code quality, style, and potential issues
3. Suggestions for improvements
4. Any security concerns
5. Performance considerations
"""


def build_prompt(reduced_diff: str) -> str:
    """Render the review prompt for a (possibly reduced) diff.

    The output is fully determined by the diff, so identical diffs always
    produce identical prompts.
    """
    return (
        "Please review the following GitHub pull request changes.\n\n"
        f"```diff\n{reduced_diff}\n```\n\n"
        "If the diff above contains only `+`/`-` lines without hunk headers it was "
        "shortened to fit; comment on the line numbers you can determine and put the "
        f"rest under {GENERAL_PATH}.\n\n"
        f"{REVIEW_FOCUS}\n"
        f"{OUTPUT_FORMAT}"
    )
