"""Language-model backends: one single-turn completion per call.

Each backend knows its provider's request/response shape; everything
downstream (parsing, validation) only sees the returned text.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from rich.console import Console

from plainly.config import Settings
from plainly.errors import ModelCallError

console = Console()

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

GROQ_MODEL = "llama-3.3-70b-versatile"
OPENAI_MODEL = "gpt-4o-mini"
ANTHROPIC_MODEL = "claude-haiku-4-5"

TEMPERATURE = 0.3
MAX_TOKENS = 2000


class CompletionBackend(ABC):
    """Single user message in, plain text out."""

    name = "llm"
    env_var = ""

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 120.0,
    ):
        self.api_key = api_key
        self.model = model
        self.client = client
        self.timeout = timeout

    @abstractmethod
    def build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        """(url, headers, json payload) for this provider."""

    @abstractmethod
    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        """Completion text from the provider's response body."""

    async def complete(self, prompt: str) -> str:
        """Send `prompt`, return the completion text.

        Raises:
            ModelCallError: missing key, transport failure, error status,
                malformed body or empty completion.
        """
        if not self.api_key:
            raise ModelCallError(
                f"{self.name} API key is not configured. Set {self.env_var} in your environment or .env file.",
                provider=self.name,
            )

        url, headers, payload = self.build_request(prompt)
        owns_client = self.client is None
        client = self.client or httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0))
        try:
            response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ModelCallError(f"{self.name} request timed out", provider=self.name) from e
        except httpx.TransportError as e:
            raise ModelCallError(f"Could not reach {self.name}: {e}", provider=self.name) from e
        finally:
            if owns_client:
                await client.aclose()

        if response.status_code >= 400:
            raise ModelCallError(
                f"{self.name} returned {response.status_code}: {response.text[:200]}",
                provider=self.name,
                status=response.status_code,
            )

        try:
            data = response.json()
            content = self.extract_text(data)
            if content is not None and not isinstance(content, str):
                raise TypeError(f"content is {type(content).__name__}")
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise ModelCallError(f"Unexpected response shape from {self.name}", provider=self.name) from e

        if not content or not content.strip():
            raise ModelCallError(f"Empty response from {self.name}", provider=self.name)

        console.print(f"[dim]{self.name} returned {len(content)} chars[/dim]")
        return content.strip()


class ChatCompletionsBackend(CompletionBackend):
    """OpenAI-style /chat/completions endpoint."""

    endpoint = OPENAI_URL
    default_model = OPENAI_MODEL
    json_mode = True

    def build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        payload: dict[str, Any] = {
            "model": self.model or self.default_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        return self.endpoint, headers, payload

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        return data["choices"][0]["message"].get("content")


class GroqBackend(ChatCompletionsBackend):
    name = "groq"
    env_var = "GROQ_API_KEY"
    endpoint = GROQ_URL
    default_model = GROQ_MODEL


class OpenAIBackend(ChatCompletionsBackend):
    name = "openai"
    env_var = "OPENAI_API_KEY"


class AnthropicBackend(CompletionBackend):
    """Anthropic Messages API."""

    name = "claude"
    env_var = "ANTHROPIC_API_KEY"

    def build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        payload = {
            "model": self.model or ANTHROPIC_MODEL,
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
        }
        return ANTHROPIC_URL, headers, payload

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        blocks = data["content"]
        return "".join(block.get("text", "") for block in blocks if block.get("type") == "text")


def get_backend(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> CompletionBackend:
    """Backend for `settings.ai_service`."""
    if settings.ai_service == "groq":
        return GroqBackend(settings.groq_api_key, client=client)
    if settings.ai_service == "openai":
        return OpenAIBackend(settings.openai_api_key, client=client)
    if settings.ai_service == "claude":
        return AnthropicBackend(settings.anthropic_api_key, client=client)
    raise ModelCallError(f"Unsupported AI service: {settings.ai_service}")
