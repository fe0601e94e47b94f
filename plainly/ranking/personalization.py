"""Personalized "what this means for you" text.

Builds on the event's base implications with short, hedged sentences
derived from the reader's career, country, interests and risk tolerance.
"""

import re
from typing import Optional

from plainly.models import Event, PersonalizedEvent, UserProfile

# Absolute words softened into conditional ones
SOFTENERS = [
    (re.compile(r"\bwill\b"), "may"),
    (re.compile(r"\bdefinitely\b"), "possibly"),
    (re.compile(r"\bcertainly\b"), "likely"),
]


def _modal(profile: UserProfile) -> str:
    return "may" if profile.risk_tolerance == "low" else "could"


def soften(text: str) -> str:
    """Replace definite language with conditional language."""
    for pattern, replacement in SOFTENERS:
        text = pattern.sub(replacement, text)
    return text


def personalize_text(event: Event, profile: UserProfile) -> str:
    """Personalized implications for `profile`."""
    modal = _modal(profile)
    parts = [event.what_this_means]

    if profile.career_field == "technology" and event.category == "technology":
        parts.append(f"If you work in technology, this {modal} affect your industry.")
    elif profile.career_field == "finance" and event.category == "economy":
        parts.append(f"For those in finance, this {modal} have implications.")

    if event.category in ("international", "politics"):
        impact = "may be limited" if profile.risk_tolerance == "low" else "could vary"
        location = profile.country.strip() or "your country"
        parts.append(f"Depending on your location in {location}, the impact {impact}.")

    if "money" in profile.interests and event.category == "economy":
        parts.append(f"If financial stability is a concern, this {modal} be worth monitoring.")
    if "health" in profile.interests and event.category == "health":
        parts.append(f"For those focused on health, this {modal} be relevant.")
    if "environment" in profile.interests and event.category == "environment":
        parts.append(f"If environmental issues matter to you, this {modal} be significant.")

    return soften(" ".join(p.strip() for p in parts if p and p.strip()))


def personalize_event(
    event: Event,
    profile: UserProfile,
    score: Optional[int] = None,
    is_fallback: bool = False,
) -> PersonalizedEvent:
    """Attach personalized implications to `event`."""
    return PersonalizedEvent(
        **event.model_dump(),
        personalized_what_this_means=personalize_text(event, profile),
        relevance_score=score,
        is_fallback=is_fallback,
    )
