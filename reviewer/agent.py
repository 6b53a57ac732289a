from openai import APIError, AsyncOpenAI
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, ModelHTTPError
from pydantic_ai.models.openai import OpenAIChatModel, OpenAIModelProfile
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from .config import Settings
from .errors import ModelResponseError
from .logs import get_logger
from .prompt import SYSTEM_PROMPT

logger = get_logger(__name__)


def build_review_agent(settings: Settings) -> Agent[None, str]:
    """Agent that returns the model's raw text answer to the review prompt.

    Retries are disabled at every layer: a failed call fails the review.
    """
    client = AsyncOpenAI(
        base_url=settings.openrouter_base_url,
        api_key=settings.openrouter_api_key,
        timeout=settings.model_timeout,
        max_retries=0,
        default_headers={
            "HTTP-Referer": "https://github.com/code-reviewer-mcp",
            "X-Title": "code-reviewer-mcp",
        },
    )
    return Agent(
        model=OpenAIChatModel(
            model_name=settings.review_model,
            provider=OpenAIProvider(openai_client=client),
            profile=OpenAIModelProfile(openai_supports_tool_choice_required=False),
        ),
        output_type=str,
        instructions=SYSTEM_PROMPT,
        retries=0,
        model_settings=ModelSettings(
            max_tokens=settings.max_tokens,
            timeout=settings.model_timeout,
            temperature=0.0,
        ),
    )


async def complete_review(agent: Agent[None, str], prompt: str) -> str:
    """Run the prompt and return the completion text, which must not be empty."""
    try:
        result = await agent.run(prompt)
    except ModelHTTPError as e:
        logger.error("Model gateway HTTP error", status=e.status_code, model=e.model_name)
        raise ModelResponseError(f"model gateway returned {e.status_code}: {e.body}") from e
    except AgentRunError as e:
        logger.error("Invalid model response", error=str(e))
        raise ModelResponseError(f"invalid response from model gateway: {e}") from e
    except APIError as e:
        raise ModelResponseError(f"model gateway request failed: {e}") from e

    text = result.output
    if not isinstance(text, str) or not text.strip():
        logger.error("Model response has no completion text")
        raise ModelResponseError("invalid response format: completion text is empty")
    logger.debug("Model completion received", chars=len(text))
    return text
