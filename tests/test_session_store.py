import time

import psycopg2

import planner.chat.session_store as store_mod
from planner.chat.session import create_empty_chat_session
from planner.common.config import settings


def test_save_session_writes_snapshot_to_kb(monkeypatch):
    calls = []
    monkeypatch.setattr(store_mod, "put_fact", lambda cid, slot, val: calls.append((cid, slot, val)))

    s = create_empty_chat_session("sess-save")
    assert store_mod.save_session(s) is True

    assert calls and calls[0][0] == "sess-save"
    assert calls[0][1] == "chat_session"
    assert calls[0][2]["sessionId"] == "sess-save"
    assert calls[0][2]["updatedAt"] >= s.updated_at

def test_save_session_failure_is_reported_not_raised(monkeypatch, caplog):
    def boom(*a, **k):
        raise psycopg2.OperationalError("db down")
    monkeypatch.setattr(store_mod, "put_fact", boom)

    assert store_mod.save_session(create_empty_chat_session("sess-x")) is False
    assert "Failed to save chat session sess-x" in caplog.text

def test_load_missing_session_returns_none(monkeypatch):
    monkeypatch.setattr(store_mod, "get_fact", lambda cid, slot: None)
    assert store_mod.load_session("nope") is None

def test_load_fresh_session(monkeypatch, full_slots):
    s = create_empty_chat_session("sess-ok").model_copy(update={"slots": full_slots})
    monkeypatch.setattr(store_mod, "get_fact", lambda cid, slot: s.to_wire())
    monkeypatch.setattr(store_mod, "delete_facts",
                        lambda *a, **k: (_ for _ in ()).throw(AssertionError("delete_facts should not be called")))

    loaded = store_mod.load_session("sess-ok")
    assert loaded is not None
    assert loaded.session_id == "sess-ok"
    assert loaded.slots.model_dump() == full_slots.model_dump()

def test_expired_session_is_cleared(monkeypatch):
    monkeypatch.setattr(settings, "session_expiry_seconds", 24 * 60 * 60)
    old = create_empty_chat_session("sess-old").model_copy(update={"updated_at": time.time() - 25 * 60 * 60})
    deleted = []
    monkeypatch.setattr(store_mod, "get_fact", lambda cid, slot: old.to_wire())
    monkeypatch.setattr(store_mod, "delete_facts", lambda cid, slot: deleted.append((cid, slot)))

    assert store_mod.load_session("sess-old") is None
    assert deleted == [("sess-old", "chat_session")]

def test_corrupted_session_is_cleared(monkeypatch):
    deleted = []
    monkeypatch.setattr(store_mod, "get_fact", lambda cid, slot: {"sessionId": "sess-bad", "slots": "garbage"})
    monkeypatch.setattr(store_mod, "delete_facts", lambda cid, slot: deleted.append((cid, slot)))

    assert store_mod.load_session("sess-bad") is None
    assert deleted == [("sess-bad", "chat_session")]
