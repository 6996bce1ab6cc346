"""Shared test fixtures and configuration."""
import sys
import os

# Ensure the server package is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set required environment variables BEFORE any application module is imported.
# Dummy values; no real connections are made.
os.environ.setdefault("UNIPILE_DSN", "api1.unipile.test:13111")
os.environ.setdefault("UNIPILE_TOKEN", "test-unipile-token")
os.environ.setdefault("LLM_API_KEY", "test-llm-key")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from api.app import create_app  # noqa: E402
from core.dashboard import DashboardService  # noqa: E402
from core.identity import IdentityResolver  # noqa: E402
from core.self_filter import SelfMessageFilter  # noqa: E402
from database.session_store import SessionStore  # noqa: E402
from integrations.unipile.client import GatewayResponse  # noqa: E402
from services.session_state import SessionState  # noqa: E402

BOT_NAME = "Ghost Runner"
BOT_PROVIDER_ID = "17845578411552197"
DRAFT_TEXT = "Thanks for reaching out! We're open 11am-10pm."


def make_event(**overrides) -> dict:
    """A realistic Unipile message_received payload."""
    event = {
        "event": "message_received",
        "account_id": "ACC1",
        "account_type": "INSTAGRAM",
        "chat_id": "CHAT1",
        "message_id": "MSG1",
        "provider_message_id": "PMID1",
        "message": "What are your hours?",
        "sender": {
            "attendee_id": "ATT1",
            "attendee_name": "alice_eats",
            "attendee_provider_id": "111",
        },
        "attendees": [
            {"attendee_id": "ATT0", "attendee_name": BOT_NAME, "attendee_provider_id": BOT_PROVIDER_ID},
            {"attendee_id": "ATT1", "attendee_name": "alice_eats", "attendee_provider_id": "111"},
        ],
    }
    event.update(overrides)
    return event


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def gateway():
    gw = MagicMock()
    gw.create_account = AsyncMock(return_value=GatewayResponse(201, {"account_id": "ACC1"}))
    gw.solve_checkpoint = AsyncMock(return_value=GatewayResponse(201, {"account_id": "ACC1"}))
    gw.delete_account = AsyncMock(return_value=GatewayResponse(200, {"object": "AccountDeleted"}))
    gw.send_message = AsyncMock(return_value=GatewayResponse(201, {"object": "MessageSent", "message_id": "OUT1"}))
    gw.list_messages = AsyncMock(return_value=GatewayResponse(200, {"object": "MessageList", "items": []}))
    gw.close = AsyncMock()
    return gw


@pytest.fixture
def drafts():
    d = MagicMock()
    d.generate = AsyncMock(return_value=DRAFT_TEXT)
    return d


@pytest.fixture
def session_state(tmp_path):
    return SessionState(SessionStore(tmp_path / "session.json"))


@pytest.fixture
def dashboard(gateway, drafts, session_state):
    return DashboardService(
        gateway=gateway,
        drafts=drafts,
        session=session_state,
        identity_resolver=IdentityResolver(),
        self_filter=SelfMessageFilter(BOT_NAME, BOT_PROVIDER_ID),
        dedup_window_seconds=30,
    )


@pytest.fixture
def client(dashboard):
    app = create_app(dashboard=dashboard)
    with TestClient(app) as c:
        yield c
