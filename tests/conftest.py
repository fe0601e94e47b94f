"""Shared test fixtures and configuration."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from plainly.models import Event, UserProfile
from plainly.store import JSONStore

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

ARTICLE_BODY = (
    "The central bank of Japan held interest rates steady on Thursday, citing "
    "uncertainty in global markets and a slower than expected recovery in "
    "household spending. Analysts had broadly expected the decision."
)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory for events; keyword overrides replace the defaults."""

    def _make(**overrides) -> Event:
        fields = {
            "id": str(uuid.uuid4()),
            "title": "Central bank holds rates",
            "date": "2026-01-15",
            "category": "economy",
            "what_happened": "The central bank kept its policy rate unchanged.",
            "why_people_care": "Borrowing costs affect mortgages and savings.",
            "what_this_means": "Loan rates may stay where they are for now.",
            "expires_at": NOW + timedelta(days=7),
            "created_at": NOW,
            "updated_at": NOW,
        }
        fields.update(overrides)
        return Event.model_validate(fields)

    return _make


@pytest.fixture
def sample_profile() -> UserProfile:
    """Finance worker in Japan who cares about money."""
    return UserProfile(
        id="user-1",
        email="reader@example.com",
        country="Japan",
        career_field="finance",
        interests=["money"],
        risk_tolerance="low",
        onboarding_completed=True,
    )


@pytest.fixture
def blank_profile() -> UserProfile:
    """Profile that matches nothing by category or country."""
    return UserProfile(id="user-blank", country="", career_field="other", interests=[])


@pytest.fixture
def store(tmp_path) -> JSONStore:
    return JSONStore(tmp_path / "store.json")


@pytest.fixture
def article_html() -> str:
    return (
        "<html><head><title>Rates</title><style>body { color: red; }</style></head>"
        "<body><nav>Home | World | Markets</nav>"
        f"<article><h1>Japan holds rates</h1><p>{ARTICLE_BODY}</p>"
        "<script>trackVisitor();</script></article>"
        "<footer>Copyright</footer></body></html>"
    )


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by `handler`."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build
