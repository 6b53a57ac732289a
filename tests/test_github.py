import json

import httpx
import pytest

from reviewer.errors import DiffFetchError, PostingError
from reviewer.github import DIFF_MEDIA_TYPE, GitHubClient
from reviewer.models import PullRequestReview, ReviewCommentRequest

from conftest import SMALL_DIFF


def _client(handler) -> GitHubClient:
    return GitHubClient(token="ghp_test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_diff(ref):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["accept"] = request.headers["accept"]
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, text=SMALL_DIFF)

    diff = await _client(handler).fetch_diff(ref)

    assert diff == SMALL_DIFF
    assert seen == {
        "path": "/repos/octo/hello/pulls/7",
        "accept": DIFF_MEDIA_TYPE,
        "auth": "Bearer ghp_test",
    }


@pytest.mark.asyncio
async def test_fetch_diff_http_error(ref):
    def handler(request):
        return httpx.Response(404, json={"message": "Not Found"})

    with pytest.raises(DiffFetchError, match="diff fetch failed: GitHub returned 404: Not Found"):
        await _client(handler).fetch_diff(ref)


@pytest.mark.asyncio
async def test_fetch_diff_unauthorized(ref):
    def handler(request):
        return httpx.Response(401, json={"message": "Bad credentials"})

    with pytest.raises(DiffFetchError, match="Bad credentials"):
        await _client(handler).fetch_diff(ref)


@pytest.mark.asyncio
async def test_fetch_diff_transport_error(ref):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DiffFetchError, match="GitHub request failed"):
        await _client(handler).fetch_diff(ref)


@pytest.mark.asyncio
async def test_fetch_diff_timeout(ref):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(DiffFetchError):
        await _client(handler).fetch_diff(ref)


@pytest.mark.asyncio
async def test_fetch_diff_rejects_json_body(ref):
    def handler(request):
        return httpx.Response(200, json={"number": 7})

    with pytest.raises(DiffFetchError, match="invalid diff format"):
        await _client(handler).fetch_diff(ref)


@pytest.mark.asyncio
async def test_fetch_diff_rejects_empty_body(ref):
    def handler(request):
        return httpx.Response(200, text="")

    with pytest.raises(DiffFetchError, match="invalid diff format"):
        await _client(handler).fetch_diff(ref)


def _review() -> PullRequestReview:
    return PullRequestReview(
        body="summary",
        comments=[
            ReviewCommentRequest(path="src/a.ts", body="fix", line=10),
            ReviewCommentRequest(
                path="src/a.ts", body="range", start_line=3, start_side="RIGHT", line=5
            ),
        ],
    )


@pytest.mark.asyncio
async def test_post_review(ref):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": 55, "html_url": "https://github.com/r/55"})

    posted = await _client(handler).post_review(ref, _review())

    assert posted["id"] == 55
    assert seen["method"] == "POST"
    assert seen["path"] == "/repos/octo/hello/pulls/7/reviews"
    assert seen["body"] == {
        "body": "summary",
        "event": "COMMENT",
        "comments": [
            {"path": "src/a.ts", "body": "fix", "line": 10, "side": "RIGHT"},
            {
                "path": "src/a.ts",
                "body": "range",
                "line": 5,
                "side": "RIGHT",
                "start_line": 3,
                "start_side": "RIGHT",
            },
        ],
    }


@pytest.mark.asyncio
async def test_post_review_rejected(ref):
    def handler(request):
        return httpx.Response(
            422,
            json={"message": "Unprocessable Entity", "errors": ["Line could not be resolved"]},
        )

    with pytest.raises(PostingError, match="Line could not be resolved") as exc_info:
        await _client(handler).post_review(ref, _review())

    assert exc_info.value.status_code == 422
    assert str(exc_info.value).startswith("review post failed: GitHub returned 422")


def test_api_url_trailing_slash_is_ignored():
    client = GitHubClient(token="t", api_url="https://ghe.example.com/api/v3/")

    assert client.api_url == "https://ghe.example.com/api/v3"
