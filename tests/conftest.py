import pytest
import structlog
from pydantic_ai import Agent
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart, UserPromptPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from reviewer.config import Settings
from reviewer.models import PullRequestRef

SMALL_DIFF = """\
diff --git a/src/x.ts b/src/x.ts
index 3b18e51..a9c2f7d 100644
--- a/src/x.ts
+++ b/src/x.ts
@@ -1,4 +1,5 @@
 import { load } from "./load";
-export function read(id) {
+export function read(id: string) {
+  if (!id) return null;
   return load(id);
 }
"""


def large_diff(hunks: int = 200) -> str:
    parts = ["diff --git a/src/big.py b/src/big.py", "--- a/src/big.py", "+++ b/src/big.py"]
    for i in range(hunks):
        parts.append(f"@@ -{i * 10 + 1},3 +{i * 10 + 1},3 @@")
        parts.append(f" context line {i}")
        parts.append(f"-old_value_{i} = {i}")
        parts.append(f"+new_value_{i} = {i + 1}")
    return "\n".join(parts) + "\n"


class FakeGitHub:
    def __init__(self, diff: str = SMALL_DIFF, error: Exception | None = None) -> None:
        self.diff = diff
        self.error = error
        self.fetched: list[PullRequestRef] = []
        self.posted: list = []

    async def fetch_diff(self, ref):
        self.fetched.append(ref)
        if self.error is not None:
            raise self.error
        return self.diff

    async def post_review(self, ref, review):
        self.posted.append((ref, review))
        return {"id": 101, "html_url": "https://github.com/octo/hello/pull/7#pullrequestreview-101"}


class ScriptedModel:
    """Answers every request with a fixed text and records the prompts it saw."""

    def __init__(self, answer: str) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def __call__(self, messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        for message in messages:
            for part in getattr(message, "parts", []):
                if isinstance(part, UserPromptPart):
                    self.prompts.append(part.content)
        return ModelResponse(parts=[TextPart(self.answer)])

    def agent(self) -> Agent[None, str]:
        return Agent(FunctionModel(self), output_type=str)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token="ghp_test", openrouter_api_key="sk-or-test")


@pytest.fixture
def ref() -> PullRequestRef:
    return PullRequestRef(owner="octo", repo="hello", pull_number=7)
