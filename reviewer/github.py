import httpx

from .config import GITHUB_API_URL
from .errors import DiffFetchError, PostingError
from .logs import get_logger
from .models import PullRequestRef, PullRequestReview

logger = get_logger(__name__)

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubClient:
    """Fetches pull request diffs and posts reviews through the REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": "code-reviewer-mcp",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers=self._headers,
            transport=self._transport,
        )

    def _pull_url(self, ref: PullRequestRef) -> str:
        return f"{self.api_url}/repos/{ref.owner}/{ref.repo}/pulls/{ref.pull_number}"

    async def fetch_diff(self, ref: PullRequestRef) -> str:
        """Return the unified diff of a pull request."""
        logger.debug("Fetching pull request diff", url=self._pull_url(ref))
        try:
            async with self._client() as client:
                resp = await client.get(self._pull_url(ref), headers={"Accept": DIFF_MEDIA_TYPE})
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("GitHub API error", status=status, body=e.response.text[:500])
            raise DiffFetchError(f"GitHub returned {status}: {_error_message(e.response)}") from e
        except httpx.HTTPError as e:
            raise DiffFetchError(f"GitHub request failed: {e!r}") from e

        content_type = resp.headers.get("content-type", "")
        if "json" in content_type or not resp.text:
            logger.error("Invalid diff format received from GitHub", content_type=content_type)
            raise DiffFetchError("received invalid diff format from GitHub API")
        return resp.text

    async def post_review(self, ref: PullRequestRef, review: PullRequestReview) -> dict:
        """Create a review with inline comments on a pull request."""
        url = f"{self._pull_url(ref)}/reviews"
        try:
            async with self._client() as client:
                resp = await client.post(
                    url,
                    json=review.model_dump(exclude_none=True),
                    headers={"Accept": JSON_MEDIA_TYPE},
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("GitHub rejected review", status=status, body=e.response.text[:500])
            raise PostingError(
                f"GitHub returned {status}: {_error_message(e.response)}",
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            raise PostingError(f"GitHub request failed: {e!r}") from e
        return resp.json()


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        errors = data.get("errors")
        return f"{data['message']} {errors}" if errors else data["message"]
    return resp.text
