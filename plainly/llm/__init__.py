"""Prompting, provider backends, and output parsing for event extraction."""

from plainly.llm.backends import (
    CompletionBackend,
    GroqBackend,
    OpenAIBackend,
    AnthropicBackend,
    get_backend,
)
from plainly.llm.parse import parse_json_response, validate_extracted_data, check_event_fields
from plainly.llm.schema import ExtractedEventData, EXTRACTION_PROMPT, build_extraction_prompt

__all__ = [
    "CompletionBackend",
    "GroqBackend",
    "OpenAIBackend",
    "AnthropicBackend",
    "get_backend",
    "parse_json_response",
    "validate_extracted_data",
    "check_event_fields",
    "ExtractedEventData",
    "EXTRACTION_PROMPT",
    "build_extraction_prompt",
]
