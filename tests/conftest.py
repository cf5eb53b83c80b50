"""
Shared test fixtures for sportsbook-ai-functions.

Provides mock implementations of:
- Google GenAI client (models.generate_content)
- Audit log recorder
- Sample sportsbook domain data
"""

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import pytest

# Make the project packages importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from gemini_client import AuditLog, CompletionClient
from feature_builders.models import (
    Account,
    Selection,
    UserProfile,
)


# ============================================================================
# GENAI MOCKING
# ============================================================================

class MockGenerateResponse:
    """Mock GenerateContentResponse; only `.text` is used."""

    def __init__(self, text):
        self.text = text


Reply = Union[str, None, Exception, Callable[[Dict[str, Any]], str]]


class MockGenAIModels:
    """
    Mock genai.Client.models interface.

    Replies are consumed in order; the last one repeats. A reply may be a
    response string, None (empty response), an exception to raise, or a
    callable receiving the recorded call.
    """

    def __init__(self, replies: List[Reply]):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    def generate_content(self, model: str, contents: list, config=None) -> MockGenerateResponse:
        call = {"model": model, "contents": contents, "config": config}
        self.calls.append(call)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(call)
        return MockGenerateResponse(reply)


class MockGenAIClient:
    """Mock Google GenAI Client."""

    def __init__(self, models: MockGenAIModels):
        self.models = models


class MockClientFactory:
    """Stands in for default_client_factory; records the API keys it was given."""

    def __init__(self, *replies: Reply):
        self.models = MockGenAIModels(list(replies) or ["{}"])
        self.api_keys: List[str] = []

    def __call__(self, api_key: str) -> MockGenAIClient:
        self.api_keys.append(api_key)
        return MockGenAIClient(self.models)

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.models.calls

    def reply_with(self, *replies: Reply) -> "MockClientFactory":
        self.models.replies = list(replies)
        return self


class RecordingAuditLog(AuditLog):
    """Collects audit events for assertions."""

    def __init__(self):
        self.events: List[tuple] = []

    def record_request(self, model, parts):
        self.events.append(("request", model, parts))

    def record_response(self, model, raw_text):
        self.events.append(("response", model, raw_text))

    def record_failure(self, model, kind, detail):
        self.events.append(("failure", model, kind, detail))

    def failures(self) -> List[str]:
        return [event[2] for event in self.events if event[0] == "failure"]


def prompt_text(call: Dict[str, Any]) -> str:
    """Text of the first part of a recorded generate_content call."""
    return call["contents"][0].parts[0].text


@pytest.fixture
def api_key(monkeypatch):
    """Sets the API key environment variable."""
    monkeypatch.setenv("API_KEY", "test-api-key")
    return "test-api-key"


@pytest.fixture
def no_api_key(monkeypatch):
    """Removes the API key environment variable."""
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def mock_factory():
    """Provides a mock genai client factory replying with an empty object."""
    return MockClientFactory("{}")


@pytest.fixture
def audit_log():
    return RecordingAuditLog()


@pytest.fixture
def completion_client(mock_factory, audit_log, api_key):
    """CompletionClient wired to the mock factory and recording audit log."""
    return CompletionClient(client_factory=mock_factory, audit_log=audit_log)


# ============================================================================
# SAMPLE DATA
# ============================================================================

@pytest.fixture
def sample_selections() -> List[Selection]:
    return [
        Selection(
            eventId="cr-1",
            eventTitle="India vs Australia",
            marketId="cr-1-mw",
            marketName="Match Winner",
            runnerName="India",
            odds=1.8,
        ),
        Selection(
            eventId="cr-2",
            eventTitle="England vs Pakistan",
            marketId="cr-2-mw",
            marketName="Match Winner",
            runnerName="Pakistan",
            odds=2.1,
        ),
    ]


@pytest.fixture
def sample_profile() -> UserProfile:
    return UserProfile(
        user_id="user-123",
        risk_appetite="medium",
        favorite_sports=["cricket"],
        favorite_teams=["India"],
        account_age_days=14,
        avg_stake=25.0,
    )


@pytest.fixture
def sample_account() -> Account:
    return Account(balance=1250.50, currency="USD")


@pytest.fixture
def sample_odds_response() -> Dict[str, Any]:
    return {
        "home": {"odds": 1.8, "implied_prob": 55.56},
        "draw": {"odds": None, "implied_prob": None},
        "away": {"odds": 2.1, "implied_prob": 47.62},
        "book_margin_percent": 3.2,
        "rationale_short": "Home form edge",
        "notes": None,
    }


@pytest.fixture
def sample_odds_text(sample_odds_response) -> str:
    return json.dumps(sample_odds_response)
