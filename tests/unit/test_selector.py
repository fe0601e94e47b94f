"""Tests for event selection and fallback behavior."""

import asyncio
from datetime import timedelta

import pytest

from plainly.models import UserProfile
from plainly.ranking import EventSelector, RelevanceScorer


def add_events(store, *events):
    """Insert events, keeping their timestamps. Returns the stored copies."""
    return [asyncio.run(store.insert_event(e.model_dump(exclude={"id"}))) for e in events]


@pytest.fixture
def selector(store) -> EventSelector:
    return EventSelector(store)


class TestMissingData:
    """Empty results instead of errors."""

    def test_unknown_user_has_no_active_event(self, selector, store, make_event, now):
        add_events(store, make_event())
        assert asyncio.run(selector.select_active_event("nobody", now)) is None
        assert asyncio.run(selector.select_top_n("nobody", 3, now)) == []

    def test_no_events(self, selector, store, sample_profile, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        assert asyncio.run(selector.select_active_event(sample_profile.id, now)) is None

    def test_only_expired_events(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(store, make_event(expires_at=now - timedelta(hours=1)))
        assert asyncio.run(selector.select_active_event(sample_profile.id, now)) is None

    def test_expiry_equal_to_now_is_excluded(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(store, make_event(expires_at=now))
        assert asyncio.run(selector.select_top_n(sample_profile.id, 5, now)) == []

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_n(self, selector, store, sample_profile, make_event, now, n):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(store, make_event())
        assert asyncio.run(selector.select_top_n(sample_profile.id, n, now)) == []


class TestActiveEvent:
    """Single-event selection."""

    def test_best_match_wins(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(
            store,
            make_event(title="Election results", category="politics"),
            make_event(title="Japan rates decision", category="economy"),
        )

        active = asyncio.run(selector.select_active_event(sample_profile.id, now))

        assert active.title == "Japan rates decision"
        assert active.relevance_score == 100
        assert active.is_fallback is False
        assert active.personalized_what_this_means

    def test_fallback_to_newest_when_nothing_qualifies(self, selector, store, blank_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(blank_profile))
        add_events(
            store,
            make_event(title="Older story", category="politics", created_at=now - timedelta(days=20)),
            make_event(title="Newer story", category="health", created_at=now - timedelta(days=15)),
        )

        active = asyncio.run(selector.select_active_event(blank_profile.id, now))

        assert active.title == "Newer story"
        assert active.is_fallback is True
        assert active.relevance_score == 0

    def test_records_read_receipt_once(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(store, make_event())

        first = asyncio.run(selector.select_active_event(sample_profile.id, now))
        second = asyncio.run(selector.select_active_event(sample_profile.id, now))

        receipts = asyncio.run(store.list_read_receipts(sample_profile.id))
        assert first.id == second.id
        assert [r.event_id for r in receipts] == [first.id]

    def test_read_events_remain_selectable(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        (event,) = add_events(store, make_event())
        asyncio.run(store.upsert_read_receipt(sample_profile.id, event.id))

        active = asyncio.run(selector.select_active_event(sample_profile.id, now))
        assert active.id == event.id


class TestThreshold:
    """Minimum relevance filtering."""

    def test_score_equal_to_threshold_is_kept(self, store, make_event, now):
        profile = UserProfile(id="u", country="Japan")
        event = make_event(title="Japan", category="politics", created_at=now - timedelta(days=30))

        ranked = EventSelector(store).rank(profile, [event], now)

        assert [s.score for s in ranked] == [20]

    def test_raised_threshold_triggers_fallback(self, store, make_event, now):
        profile = UserProfile(id="u", country="Japan")
        event = make_event(title="Japan", category="politics", created_at=now - timedelta(days=30))
        selector = EventSelector(store, min_relevance_threshold=21)

        ranked = selector.rank(profile, [event], now)

        assert len(ranked) == 1
        assert ranked[0].score == 20

    def test_fallback_flag_follows_threshold(self, store, make_event, now):
        profile = UserProfile(id="u", country="Japan")
        asyncio.run(store.upsert_user_profile(profile))
        add_events(store, make_event(title="Japan", category="politics", created_at=now - timedelta(days=30)))

        strict = EventSelector(store, min_relevance_threshold=21)
        active = asyncio.run(strict.select_active_event("u", now))
        assert active.is_fallback is True

    def test_empty_input_ranks_empty(self, store, sample_profile, now):
        assert EventSelector(store).rank(sample_profile, [], now) == []


class TestTopN:
    """Ordering and limits for multi-event selection."""

    def test_order_and_limit(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(
            store,
            make_event(title="Economy old", category="economy", created_at=now - timedelta(days=5)),
            make_event(title="Japan economy", category="economy", created_at=now),
            make_event(title="Economy new", category="economy", created_at=now - timedelta(days=1)),
            make_event(title="Health", category="health", created_at=now),
        )

        top = asyncio.run(selector.select_top_n(sample_profile.id, 3, now))

        assert [e.title for e in top] == ["Japan economy", "Economy new", "Economy old"]
        assert [e.relevance_score for e in top] == [100, 79, 75]
        assert all(not e.is_fallback for e in top)

    def test_ties_broken_by_newest(self, store, blank_profile, make_event, now):
        scorer = RelevanceScorer()
        older = make_event(title="older", created_at=now - timedelta(days=12))
        newer = make_event(title="newer", created_at=now - timedelta(days=11))
        selector = EventSelector(store, scorer=scorer, min_relevance_threshold=0)

        ranked = selector.rank(blank_profile, [older, newer], now)

        assert [s.event.title for s in ranked] == ["newer", "older"]

    def test_n_larger_than_candidates(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(store, make_event(), make_event())
        assert len(asyncio.run(selector.select_top_n(sample_profile.id, 10, now))) == 2

    def test_top_n_does_not_record_reads(self, selector, store, sample_profile, make_event, now):
        asyncio.run(store.upsert_user_profile(sample_profile))
        add_events(store, make_event())
        asyncio.run(selector.select_top_n(sample_profile.id, 1, now))
        assert asyncio.run(store.list_read_receipts(sample_profile.id)) == []
