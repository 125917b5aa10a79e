#!/usr/bin/env python3
# scripts/plan_chat.py
"""
Interaktywny czat planowania podróży w terminalu:
- wczytuje sesję z KB (albo zaczyna nową),
- każdą linię wysyła jako rundę czatu do modelu,
- pokazuje odpowiedź, postęp slotów i stan rozmowy,
- zapisuje sesję po każdej rundzie (chyba że --no-store).
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

env_path = ROOT / ".env"
load_dotenv(dotenv_path=str(env_path) if env_path.exists() else find_dotenv(usecwd=True), override=False)

from planner.chat import ChatTurnError, create_empty_chat_session  # noqa: E402
from planner.chat.prompt import describe_slots  # noqa: E402
from planner.chat.session_store import clear_session, load_session, save_session  # noqa: E402
from planner.chat.turn import advance_session  # noqa: E402
from planner.common.metrics import export_to_kb, snapshot  # noqa: E402


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Czat planowania podróży (sloty) w terminalu")
    p.add_argument("--session", default=os.getenv("PLANNER_SESSION_ID"), help="sessionId do wznowienia (domyślnie nowa sesja)")
    p.add_argument("--no-store", action="store_true", help="nie czytaj/zapisuj sesji w KB")
    p.add_argument("--reset", action="store_true", help="wyczyść zapisaną sesję przed startem")
    p.add_argument("--show-slots", action="store_true", help="po każdej rundzie wypisz pełne sloty jako JSON")
    p.add_argument("--export-metrics", action="store_true", help="na koniec zapisz liczniki w KB przy sesji")
    p.add_argument("-v", "--verbose", action="store_true", help="logi DEBUG")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - [%(levelname)s] %(name)s - %(message)s",
    )

    session = None
    if args.session and not args.no_store:
        if args.reset:
            clear_session(args.session)
        session = load_session(args.session)
    if session is None:
        session = create_empty_chat_session(args.session)

    print(f"[session] {session.session_id} state={session.conversation_state.value}")
    print("Pisz wiadomości; pusta linia albo Ctrl-D kończy.\n")

    for line in sys.stdin:
        text = line.strip()
        if not text:
            break
        try:
            session, reply = advance_session(session, text)
        except ChatTurnError as e:
            print(f"[ERR] {e.code.value}: {e.message}")
            if e.code.value in ("CHAT_DISABLED", "API_KEY_MISSING"):
                return 1
            continue

        print(f"\n{reply.message}\n")
        progress = reply.slot_progress
        missing = ", ".join(progress.missing) or "none"
        print(f"[slots {progress.filled}/{progress.total} {progress.percentage}%] missing: {missing}")
        print(f"[state] {reply.new_state.value}  [tokens] {reply.ai_metrics.tokens_used}  [cost] ${reply.ai_metrics.cost:.6f}")
        if args.show_slots:
            print(json.dumps(describe_slots(session.slots), ensure_ascii=False, indent=2))

        if not args.no_store:
            save_session(session)

    print("[metrics]", json.dumps(snapshot(), ensure_ascii=False))
    if args.export_metrics:
        slot = export_to_kb(session.session_id)
        if slot:
            print(f"[metrics] saved as {slot}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
