"""Settings passed explicitly into the fetcher, backends, scorer and selector."""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from plainly.errors import ConfigError

AIService = Literal["groq", "claude", "openai"]

DEFAULT_STORE_PATH = Path(".cache") / "plainly_store.json"


class RelevanceWeights(BaseModel):
    """Point pools for relevance scoring."""

    interest: int = 40  # Added once per matching interest
    career: int = 30
    geographic: int = 20
    recency: int = 10  # Also the decay window in days


class Settings(BaseModel):
    """Runtime configuration."""

    ai_service: AIService = "groq"
    groq_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    firecrawl_api_key: Optional[str] = None  # Scraper path is used only if set

    min_relevance_threshold: int = 20
    relevance_weights: RelevanceWeights = Field(default_factory=RelevanceWeights)

    store_path: Path = DEFAULT_STORE_PATH
    expires_in_days: int = 7
    http_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Unset variables keep their defaults. Call `load_dotenv()` first if
        a `.env` file should be honoured.

        Raises:
            ConfigError: a variable holds an unusable value.
        """
        env = os.environ
        try:
            defaults = RelevanceWeights()
            weights = RelevanceWeights(
                interest=int(env.get("PLAINLY_WEIGHT_INTEREST", defaults.interest)),
                career=int(env.get("PLAINLY_WEIGHT_CAREER", defaults.career)),
                geographic=int(env.get("PLAINLY_WEIGHT_GEOGRAPHIC", defaults.geographic)),
                recency=int(env.get("PLAINLY_WEIGHT_RECENCY", defaults.recency)),
            )
            return cls(
                ai_service=env.get("PLAINLY_AI_SERVICE", "groq").strip().lower(),
                groq_api_key=env.get("GROQ_API_KEY") or None,
                anthropic_api_key=env.get("ANTHROPIC_API_KEY") or None,
                openai_api_key=env.get("OPENAI_API_KEY") or None,
                firecrawl_api_key=env.get("FIRECRAWL_API_KEY") or None,
                min_relevance_threshold=int(env.get("PLAINLY_MIN_RELEVANCE", 20)),
                relevance_weights=weights,
                store_path=Path(env.get("PLAINLY_STORE_PATH", str(DEFAULT_STORE_PATH))),
                expires_in_days=int(env.get("PLAINLY_EXPIRES_IN_DAYS", 7)),
                http_timeout=float(env.get("PLAINLY_HTTP_TIMEOUT", 30.0)),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
