import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from .errors import ConfigError

DEFAULT_REVIEW_MODEL = "google/gemini-2.5-pro-preview-03-25"
GITHUB_API_URL = "https://api.github.com"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class Settings(BaseModel):
    """Credentials and limits handed to the pipeline's collaborators."""

    model_config = ConfigDict(frozen=True)

    github_token: str
    openrouter_api_key: str
    review_model: str = DEFAULT_REVIEW_MODEL
    max_tokens: int = 16384
    max_diff_chars: int = 5000
    diff_timeout: float = 30.0
    model_timeout: float = 60.0
    github_api_url: str = GITHUB_API_URL
    openrouter_base_url: str = OPENROUTER_BASE_URL
    log_level: str = "INFO"
    log_renderer: str = "console"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        github_token = env.get("GITHUB_PAT") or env.get("GITHUB_TOKEN")
        if not github_token:
            raise ConfigError("GITHUB_PAT environment variable is required")
        api_key = env.get("OPENROUTER_API_KEY")
        if not api_key:
            raise ConfigError("OPENROUTER_API_KEY environment variable is required")

        return cls(
            github_token=github_token,
            openrouter_api_key=api_key,
            review_model=env.get("REVIEW_MODEL", DEFAULT_REVIEW_MODEL),
            max_tokens=_number(env, "MAX_TOKENS", 16384, int),
            max_diff_chars=_number(env, "MAX_DIFF_CHARS", 5000, int),
            diff_timeout=_number(env, "DIFF_TIMEOUT", 30.0, float),
            model_timeout=_number(env, "MODEL_TIMEOUT", 60.0, float),
            github_api_url=env.get("GITHUB_API_URL", GITHUB_API_URL).rstrip("/"),
            openrouter_base_url=env.get("OPENROUTER_BASE_URL", OPENROUTER_BASE_URL),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_renderer=env.get("LOG_RENDERER", "console").lower(),
        )


def _number(env: Mapping[str, str], key: str, default, kind):
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got '{raw}'")
    return value
