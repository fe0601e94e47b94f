"""Tests for relevance scoring."""

from datetime import timedelta

import pytest

from plainly.config import RelevanceWeights
from plainly.models import EVENT_CATEGORIES, UserProfile
from plainly.ranking.scoring import RelevanceScorer, calculate_relevance_score, days_between


@pytest.fixture
def scorer() -> RelevanceScorer:
    return RelevanceScorer()


class TestFullScenarios:
    """End-to-end scores for known profile/event pairs."""

    def test_all_pools_match(self, now, scorer, sample_profile, make_event):
        """money->economy, finance->economy, Japan in title, created now = 100."""
        event = make_event(category="economy", title="Japan market news", created_at=now)
        breakdown = scorer.breakdown(event, sample_profile, now)

        assert breakdown.interest == 40
        assert breakdown.career == 30
        assert breakdown.geographic == 20
        assert breakdown.recency == 10
        assert scorer.score(event, sample_profile, now) == 100

    def test_nothing_matches(self, now, scorer, blank_profile, make_event):
        event = make_event(category="politics", created_at=now - timedelta(days=30))
        assert scorer.score(event, blank_profile, now) == 0

    def test_functional_shortcut_matches_scorer(self, now, scorer, sample_profile, make_event):
        event = make_event(created_at=now - timedelta(days=2))
        assert calculate_relevance_score(event, sample_profile, now) == scorer.score(event, sample_profile, now)


class TestInterestPool:
    """Interest points accumulate per matching interest."""

    @pytest.mark.parametrize("interest,category", [
        ("money", "economy"),
        ("health", "health"),
        ("environment", "environment"),
        ("tech", "technology"),
        ("work", "economy"),
        ("work", "technology"),
    ])
    def test_interest_maps_to_category(self, now, scorer, make_event, interest, category):
        profile = UserProfile(id="u", interests=[interest])
        event = make_event(category=category)
        assert scorer.breakdown(event, profile, now).interest == 40

    def test_unrelated_interest_scores_nothing(self, now, scorer, make_event):
        profile = UserProfile(id="u", interests=["health"])
        assert scorer.breakdown(make_event(category="politics"), profile, now).interest == 0

    def test_multiple_matching_interests_stack_past_forty(self, now, scorer, make_event):
        """money and work both map to economy: 80 points, not capped at 40."""
        profile = UserProfile(id="u", interests=["money", "work"], career_field="other")
        event = make_event(category="economy", created_at=now - timedelta(days=20))

        assert scorer.breakdown(event, profile, now).interest == 80
        assert scorer.score(event, profile, now) == 80

    def test_stacked_total_is_clamped_to_100(self, now, scorer, make_event):
        profile = UserProfile(id="u", interests=["money", "work"], career_field="finance", country="Japan")
        event = make_event(category="economy", title="Japan budget", created_at=now)

        assert scorer.breakdown(event, profile, now).total == 140
        assert scorer.score(event, profile, now) == 100


class TestCareerPool:
    """Career field -> category mapping."""

    @pytest.mark.parametrize("career,category", [
        ("technology", "technology"),
        ("finance", "economy"),
        ("healthcare", "health"),
        ("government", "politics"),
        ("media", "social"),
        ("education", "social"),
        ("retail", "economy"),
        ("manufacturing", "economy"),
    ])
    def test_career_matches(self, now, scorer, make_event, career, category):
        profile = UserProfile(id="u", career_field=career)
        assert scorer.breakdown(make_event(category=category), profile, now).career == 30

    @pytest.mark.parametrize("category", EVENT_CATEGORIES)
    def test_other_never_matches(self, now, scorer, make_event, category):
        profile = UserProfile(id="u", career_field="other")
        assert scorer.breakdown(make_event(category=category), profile, now).career == 0


class TestGeographicPool:
    """Country substring matching."""

    def test_case_insensitive_title_match(self, now, scorer, make_event):
        profile = UserProfile(id="u", country="France")
        event = make_event(title="Strikes across france continue")
        assert scorer.breakdown(event, profile, now).geographic == 20

    @pytest.mark.parametrize("field", ["what_happened", "why_people_care", "what_this_means"])
    def test_narrative_fields_are_searched(self, now, scorer, make_event, field):
        profile = UserProfile(id="u", country="  Kenya ")
        event = make_event(**{field: "Officials in Kenya announced the change."})
        assert scorer.breakdown(event, profile, now).geographic == 20

    def test_optional_field_is_not_searched(self, now, scorer, make_event):
        profile = UserProfile(id="u", country="Kenya")
        event = make_event(what_likely_does_not_change="Kenya is unaffected.")
        assert scorer.breakdown(event, profile, now).geographic == 0

    @pytest.mark.parametrize("country", ["", "   "])
    def test_blank_country_never_matches(self, now, scorer, make_event, country):
        profile = UserProfile(id="u", country=country)
        assert scorer.breakdown(make_event(), profile, now).geographic == 0


class TestRecencyPool:
    """Ten points decaying one per (rounded-up) day."""

    @pytest.mark.parametrize("age,expected", [
        (timedelta(0), 10),
        (timedelta(seconds=1), 9),
        (timedelta(days=1), 9),
        (timedelta(days=3), 7),
        (timedelta(days=9, hours=1), 0),
        (timedelta(days=10), 0),
        (timedelta(days=45), 0),
    ])
    def test_decay(self, now, scorer, blank_profile, make_event, age, expected):
        event = make_event(created_at=now - age)
        assert scorer.breakdown(event, blank_profile, now).recency == expected

    def test_future_created_at_uses_absolute_distance(self, now, scorer, blank_profile, make_event):
        event = make_event(created_at=now + timedelta(days=2))
        assert scorer.breakdown(event, blank_profile, now).recency == 8

    def test_days_between_rounds_up(self, now):
        assert days_between(now, now) == 0
        assert days_between(now, now + timedelta(hours=1)) == 1
        assert days_between(now + timedelta(days=2), now) == 2


class TestScoreProperties:
    """Range, determinism and configurable weights."""

    @pytest.mark.parametrize("category", EVENT_CATEGORIES)
    @pytest.mark.parametrize("interests", [[], ["money"], ["money", "work", "tech"], ["health", "environment"]])
    def test_score_in_range(self, now, scorer, make_event, category, interests):
        profile = UserProfile(id="u", interests=interests, career_field="technology", country="Japan")
        event = make_event(category=category, title="Japan tech", created_at=now)
        assert 0 <= scorer.score(event, profile, now) <= 100

    def test_deterministic_for_fixed_now(self, now, scorer, sample_profile, make_event):
        event = make_event(created_at=now - timedelta(days=4))
        scores = {scorer.score(event, sample_profile, now) for _ in range(5)}
        assert len(scores) == 1

    def test_custom_weights(self, now, make_event, sample_profile):
        weights = RelevanceWeights(interest=10, career=5, geographic=1, recency=3)
        event = make_event(category="economy", title="Japan", created_at=now)
        assert RelevanceScorer(weights).score(event, sample_profile, now) == 19
