import asyncio
import json
import os

import click
from dotenv import load_dotenv

from .assembler import assemble_review, review_to_json
from .config import Settings
from .diff import DEFAULT_MAX_CHARS, reduce_diff
from .errors import ConfigError, ReviewError
from .logs import configure_logging
from .parser import parse_review
from .pipeline import build_collaborators, post_review, run_review, validate_ref
from .prompt import build_prompt


@click.group()
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO).")
def cli(log_level: str | None) -> None:
    """Review GitHub pull requests with a language model."""
    load_dotenv()
    configure_logging(
        log_level or os.environ.get("LOG_LEVEL", "INFO"),
        os.environ.get("LOG_RENDERER", "console"),
    )


@cli.command()
@click.argument("diff_file", type=click.File("r"), default="-")
@click.option("--max-chars", type=click.IntRange(min=1), default=DEFAULT_MAX_CHARS, show_default=True)
def reduce(diff_file, max_chars: int) -> None:
    """Print a diff bounded to --max-chars characters."""
    click.echo(reduce_diff(diff_file.read(), max_chars), nl=False)


@cli.command()
@click.argument("diff_file", type=click.File("r"), default="-")
@click.option("--max-chars", type=click.IntRange(min=1), default=DEFAULT_MAX_CHARS, show_default=True)
def prompt(diff_file, max_chars: int) -> None:
    """Print the review prompt that would be sent for a diff."""
    click.echo(build_prompt(reduce_diff(diff_file.read(), max_chars)))


@cli.command()
@click.argument("response_file", type=click.File("r"), default="-")
def parse(response_file) -> None:
    """Parse a saved model response into a GitHub review body."""
    review = assemble_review(parse_review(response_file.read()))
    click.echo(json.dumps(review_to_json(review), indent=2))


@cli.command()
@click.argument("owner")
@click.argument("repo")
@click.argument("pull_number", type=int)
@click.option("--post", is_flag=True, default=False, help="Submit the review to GitHub.")
def review(owner: str, repo: str, pull_number: int, post: bool) -> None:
    """Review a pull request and print (optionally post) the result."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        raise click.ClickException(str(e))

    async def _run() -> None:
        ref = validate_ref(owner, repo, pull_number)
        github, agent = build_collaborators(settings)
        result = await run_review(ref, github=github, agent=agent, max_diff_chars=settings.max_diff_chars)
        click.echo(json.dumps(result.model_dump(exclude_none=True), indent=2))
        if result.partial:
            click.echo("Warning: diff was reduced, the review is partial.", err=True)
        if post:
            posted = await post_review(ref, result.review, github=github)
            click.echo(f"Posted review: {posted.get('html_url', posted.get('id'))}", err=True)

    try:
        asyncio.run(_run())
    except ReviewError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
