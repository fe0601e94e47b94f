"""Extraction schema - structured event data extracted by the LLM."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from plainly.models import EVENT_CATEGORIES, default_expiry
from plainly.models.event import EventCategory


class ExtractedEventData(BaseModel):
    """Validated model output, keyed exactly like the prompt's JSON schema."""

    title: str
    date: str = Field(description="Publication date, YYYY-MM-DD")
    category: EventCategory
    what_happened: str = Field(description="Factual summary, 2-3 sentences")
    why_people_care: str = Field(description="Why it matters, 2-3 sentences")
    what_this_means: str = Field(description="Base implications, conditional language")
    what_likely_does_not_change: Optional[str] = None

    def to_event_fields(self, expires_in_days: int = 7) -> dict:
        """Fields for `Storage.insert_event`."""
        return {
            "title": self.title,
            "date": self.date,
            "category": self.category,
            "what_happened": self.what_happened,
            "why_people_care": self.why_people_care,
            "what_this_means": self.what_this_means,
            "what_likely_does_not_change": self.what_likely_does_not_change or None,
            "expires_at": default_expiry(expires_in_days),
        }

    def to_draft_fields(self) -> dict:
        """Narrative fields for pre-filling a draft."""
        return self.model_dump()


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


EXTRACTION_PROMPT = f"""Extract structured information from this article and format it as JSON.

Extract the following fields:
1. title: The article title
2. date: The publication date (format: YYYY-MM-DD, or infer from content if not available)
3. category: One of: {', '.join(EVENT_CATEGORIES)}
4. what_happened: A factual summary of what happened (2-3 sentences, neutral tone)
5. why_people_care: Context explaining why this matters (2-3 sentences)
6. what_this_means: Base implications of this event (2-3 sentences, use conditional language like "may", "could", "might")
7. what_likely_does_not_change: Optional - what remains unchanged (1-2 sentences, optional field)

Important guidelines:
- Use neutral, factual language
- Avoid sensationalism or urgency
- Use conditional language (may, could, might) rather than definitive statements
- Keep summaries concise but informative
- If a field cannot be determined, use null

Return ONLY valid JSON matching this schema (no markdown, no backticks, no explanation):
{{
  "title": string,
  "date": string (YYYY-MM-DD),
  "category": string (one of the categories above),
  "what_happened": string,
  "why_people_care": string,
  "what_this_means": string,
  "what_likely_does_not_change": string | null
}}"""


def build_extraction_prompt(content: str) -> str:
    """Build the single user message sent to the model."""
    return f"{EXTRACTION_PROMPT}\n\nArticle content:\n\n{content}"
