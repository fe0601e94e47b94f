"""Relevance scoring, event selection and personalization."""

from plainly.ranking.scoring import RelevanceScorer, calculate_relevance_score, days_between
from plainly.ranking.selector import EventSelector
from plainly.ranking.personalization import personalize_event, personalize_text

__all__ = [
    "RelevanceScorer",
    "calculate_relevance_score",
    "days_between",
    "EventSelector",
    "personalize_event",
    "personalize_text",
]
