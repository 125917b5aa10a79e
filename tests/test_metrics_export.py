import planner.common.metrics as metrics_mod

def test_counters_and_snapshot_prefix():
    metrics_mod.inc("slots.extracted")
    metrics_mod.inc("slots.extracted", 2)
    metrics_mod.record_ai_usage(10, "5", cost_usd=0.0000042)
    metrics_mod.record_ai_usage(1, 1)

    assert metrics_mod.snapshot()["slots.extracted"] == 3
    assert metrics_mod.snapshot(prefix="ai.") == {
        "ai.calls": 2,
        "ai.tokens.prompt": 11,
        "ai.tokens.completion": 6,
        "ai.cost_micro_usd": 4,
    }

    metrics_mod.snapshot(reset=True)
    assert metrics_mod.snapshot() == {}

def test_state_transitions_are_counted_per_edge():
    metrics_mod.record_transition("gathering", "ready")
    metrics_mod.record_transition("gathering", "ready")
    metrics_mod.record_transition("ready", "generating")

    assert metrics_mod.snapshot(prefix="chat.state.") == {
        "chat.state.gathering->ready": 2,
        "chat.state.ready->generating": 1,
    }

def test_export_metrics_calls_put_fact(monkeypatch):
    called = {}

    def fake_put_fact(session_id, slot, payload):
        called["session_id"] = session_id
        called["slot"] = slot
        called["payload"] = payload

    monkeypatch.setattr(metrics_mod, "put_fact", fake_put_fact, raising=False)

    metrics_mod.inc("chat.turns")
    slot = metrics_mod.export_to_kb(session_id="chat_1_abc", slot_prefix="metrics")

    assert called, "put_fact should be called"
    assert called["session_id"] == "chat_1_abc"
    assert called["slot"].startswith("metrics_")
    assert called["payload"] == {"chat.turns": 1}
    assert slot == called["slot"]

def test_export_without_counters_writes_nothing(monkeypatch):
    calls = []
    monkeypatch.setattr(metrics_mod, "put_fact", lambda *a: calls.append(a), raising=False)

    assert metrics_mod.export_to_kb() is None
    assert calls == []
