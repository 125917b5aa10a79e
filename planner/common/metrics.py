# planner/common/metrics.py
"""
Liczniki procesu planowania (w pamięci, per proces).

Klucze:
- slots.extracted / slots.rejected, metadata.<marker>.parse_error  (ekstrakcja),
- chat.turns, chat.upstream_error, chat.empty_response,
- chat.state.<z>-><do>  (przejścia stanów rozmowy),
- ai.calls, ai.tokens.prompt, ai.tokens.completion, ai.cost_micro_usd.
Koszt trzymamy w mikrodolarach, żeby wszystkie liczniki były int.
"""
from __future__ import annotations
from typing import Dict, Optional
from collections import Counter
import time

from .kb import put_fact

_COUNTERS: Counter = Counter()


def inc(key: str, n: int = 1) -> None:
    _COUNTERS[key] += n


def record_ai_usage(prompt_tokens: int, completion_tokens: int, cost_usd: float = 0.0) -> None:
    """Jedno wywołanie modelu: tokeny wejścia/wyjścia i koszt."""
    _COUNTERS["ai.calls"] += 1
    _COUNTERS["ai.tokens.prompt"] += int(prompt_tokens)
    _COUNTERS["ai.tokens.completion"] += int(completion_tokens)
    _COUNTERS["ai.cost_micro_usd"] += round(cost_usd * 1_000_000)


def record_transition(old_state: str, new_state: str) -> None:
    _COUNTERS[f"chat.state.{old_state}->{new_state}"] += 1


def snapshot(reset: bool = False, prefix: Optional[str] = None) -> Dict[str, int]:
    """Kopia liczników (opcjonalnie tylko z danym prefiksem)."""
    data = {k: v for k, v in _COUNTERS.items() if prefix is None or k.startswith(prefix)}
    if reset:
        _COUNTERS.clear()
    return data


def export_to_kb(session_id: str = "system", slot_prefix: str = "metrics") -> Optional[str]:
    """
    Zapisuje liczniki w KB pod slotem <slot_prefix>_<ts_ns>, przypisanym do sesji.
    Bez liczników nic nie zapisuje i zwraca None; inaczej nazwę slotu.
    """
    data = snapshot()
    if not data:
        return None
    slot = f"{slot_prefix}_{time.time_ns()}"
    put_fact(session_id, slot, data)
    return slot
