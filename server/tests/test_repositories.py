"""Tests for the in-memory inbox and conversation repositories."""
import pytest
from datetime import datetime, timedelta, timezone

from core.errors import NotFoundError
from database.repositories.conversation_repo import ConversationRepository
from database.repositories.inbox_repo import InboxRepository
from models.conversation import ConversationEntry
from models.message import InboxMessage

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _entry(entry_id: str, text: str = "hi", at: datetime = T0) -> ConversationEntry:
    return ConversationEntry(id=entry_id, text=text, sender="customer", timestamp=at, type="incoming")


def _msg(msg_id: str, chat_id: str = "C1", user: str = "Bob", text: str = "Hello", at: datetime = T0) -> InboxMessage:
    return InboxMessage(id=msg_id, user=user, text=text, chat_id=chat_id, created_at=at)


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------

class TestInboxRepository:
    def test_list_is_newest_first(self):
        repo = InboxRepository()
        repo.append(_msg("1"))
        repo.append(_msg("2"))
        assert [m.id for m in repo.list()] == ["2", "1"]

    def test_find_by_id_and_chat_id(self):
        repo = InboxRepository()
        repo.append(_msg("1", chat_id="CA"))
        repo.append(_msg("2", chat_id="CB"))
        assert repo.find_by_id("1").chat_id == "CA"
        assert repo.find_by_chat_id("CB").id == "2"

    def test_missing_lookups_raise_not_found(self):
        repo = InboxRepository()
        with pytest.raises(NotFoundError):
            repo.find_by_id("nope")
        with pytest.raises(NotFoundError):
            repo.find_by_chat_id("nope")
        with pytest.raises(NotFoundError):
            repo.remove("nope")

    def test_remove(self):
        repo = InboxRepository()
        repo.append(_msg("1"))
        repo.append(_msg("2"))
        removed = repo.remove("1")
        assert removed.id == "1"
        assert "1" not in repo
        assert "2" in repo
        assert len(repo) == 1

    def test_next_id_is_time_derived(self):
        repo = InboxRepository()
        assert repo.next_id(T0) == str(int(T0.timestamp() * 1000))

    def test_next_id_is_strictly_increasing_within_same_millisecond(self):
        repo = InboxRepository()
        first = int(repo.next_id(T0))
        second = int(repo.next_id(T0))
        third = int(repo.next_id(T0 - timedelta(seconds=5)))
        assert first < second < third

    def test_find_recent_respects_window(self):
        repo = InboxRepository()
        repo.append(_msg("1", user="Bob", text="Hello", at=T0))
        assert repo.find_recent("Hello", "Bob", since=T0 - timedelta(seconds=30)).id == "1"
        assert repo.find_recent("Hello", "Bob", since=T0 + timedelta(seconds=1)) is None
        assert repo.find_recent("Hello", "Alice", since=T0 - timedelta(seconds=30)) is None
        assert repo.find_recent("Hi", "Bob", since=T0 - timedelta(seconds=30)) is None


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------

class TestConversationRepository:
    def test_first_incoming_creates_conversation(self):
        repo = ConversationRepository()
        conv = repo.append_incoming("K", _entry("1"), chat_id="C1", sender_name="Bob")
        assert conv.conversation_id == "K"
        assert conv.chat_id == "C1"
        assert conv.user == "Bob"
        assert conv.platform == "Instagram"
        assert conv.all_chat_ids == ["C1"]
        assert [e.id for e in conv.messages] == ["1"]

    def test_new_chat_id_tracked_and_becomes_current(self):
        repo = ConversationRepository()
        repo.append_incoming("K", _entry("1"), chat_id="C1", sender_name="Bob")
        conv = repo.append_incoming("K", _entry("2"), chat_id="C2", sender_name="Bob")
        assert conv.chat_id == "C2"
        assert conv.all_chat_ids == ["C1", "C2"]
        assert len(repo) == 1

    def test_repeated_chat_id_not_duplicated(self):
        repo = ConversationRepository()
        repo.append_incoming("K", _entry("1"), chat_id="C1", sender_name="Bob")
        repo.append_incoming("K", _entry("2"), chat_id="C2", sender_name="Bob")
        conv = repo.append_incoming("K", _entry("3"), chat_id="C1", sender_name="Bob")
        assert conv.all_chat_ids == ["C1", "C2"]
        assert conv.chat_id == "C1"
        assert conv.chat_id in conv.all_chat_ids

    def test_reverse_lookup_covers_every_chat_id(self):
        repo = ConversationRepository()
        repo.append_incoming("K", _entry("1"), chat_id="C1", sender_name="Bob")
        repo.append_incoming("K", _entry("2"), chat_id="C2", sender_name="Bob")
        repo.append_incoming("J", _entry("3"), chat_id="C3", sender_name="Ann")
        assert repo.find_key_by_chat_id("C1") == "K"
        assert repo.find_key_by_chat_id("C2") == "K"
        assert repo.find_key_by_chat_id("C3") == "J"
        assert repo.find_key_by_chat_id("C9") is None

    def test_append_outgoing(self):
        repo = ConversationRepository()
        repo.append_incoming("K", _entry("1"), chat_id="C1", sender_name="Bob")
        later = T0 + timedelta(minutes=1)
        entry = repo.append_outgoing("K", "Hi there", now=later)
        conv = repo.get("K")
        assert entry.sender == "bot"
        assert entry.type == "outgoing"
        assert entry.id.startswith("response_")
        assert conv.messages[-1].text == "Hi there"
        assert conv.last_message_time == later

    def test_append_outgoing_unknown_key_raises(self):
        with pytest.raises(NotFoundError):
            ConversationRepository().append_outgoing("missing", "x")

    def test_get_unknown_raises(self):
        with pytest.raises(NotFoundError, match="Conversation not found"):
            ConversationRepository().get("missing")

    def test_list_sorted_by_last_activity_desc(self):
        repo = ConversationRepository()
        repo.append_incoming("old", _entry("1", at=T0), chat_id="C1", sender_name="A")
        repo.append_incoming("new", _entry("2", at=T0 + timedelta(minutes=5)), chat_id="C2", sender_name="B")
        repo.append_incoming("mid", _entry("3", at=T0 + timedelta(minutes=2)), chat_id="C3", sender_name="C")
        assert [c.conversation_id for c in repo.list()] == ["new", "mid", "old"]

    def test_list_reorders_after_reply(self):
        repo = ConversationRepository()
        repo.append_incoming("a", _entry("1", at=T0), chat_id="C1", sender_name="A")
        repo.append_incoming("b", _entry("2", at=T0 + timedelta(minutes=1)), chat_id="C2", sender_name="B")
        repo.append_outgoing("a", "reply", now=T0 + timedelta(minutes=2))
        assert [c.conversation_id for c in repo.list()] == ["a", "b"]

    def test_list_ties_broken_by_most_recent_activity(self):
        repo = ConversationRepository()
        repo.append_incoming("first", _entry("1", at=T0), chat_id="C1", sender_name="A")
        repo.append_incoming("second", _entry("2", at=T0), chat_id="C2", sender_name="B")
        assert [c.conversation_id for c in repo.list()] == ["second", "first"]
