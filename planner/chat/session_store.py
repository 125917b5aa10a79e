# planner/chat/session_store.py
from __future__ import annotations

import logging
import time
from typing import Optional

import psycopg2
from pydantic import ValidationError

from planner.common.config import settings
from planner.common.kb import delete_facts, get_fact, put_fact

from .session import ChatSession

logger = logging.getLogger(__name__)

SESSION_SLOT = "chat_session"


def save_session(session: ChatSession) -> bool:
    """
    Zapisuje snapshot sesji w KB (slot `chat_session`, updated_at = teraz).
    Błąd bazy nie przerywa rozmowy: logujemy i zwracamy False.
    """
    snapshot = session.model_copy(update={"updated_at": time.time()})
    try:
        put_fact(session.session_id, SESSION_SLOT, snapshot.to_wire())
        return True
    except psycopg2.Error as e:
        logger.warning("Failed to save chat session %s: %s", session.session_id, e)
        return False


def load_session(session_id: str, *, now: Optional[float] = None) -> Optional[ChatSession]:
    """
    Ostatni snapshot sesji albo None, gdy:
    - sesji nie ma,
    - jest starsza niż settings.session_expiry_seconds (wtedy ją czyścimy),
    - snapshot jest uszkodzony (też czyścimy).
    """
    raw = get_fact(session_id, SESSION_SLOT)
    if raw is None:
        return None

    try:
        session = ChatSession.model_validate(raw)
    except ValidationError as e:
        logger.warning("Corrupted chat session %s, clearing: %s", session_id, e)
        clear_session(session_id)
        return None

    now = time.time() if now is None else now
    if now - session.updated_at > settings.session_expiry_seconds:
        logger.info("Chat session %s expired, clearing", session_id)
        clear_session(session_id)
        return None

    return session


def clear_session(session_id: str) -> None:
    try:
        delete_facts(session_id, SESSION_SLOT)
    except psycopg2.Error as e:
        logger.warning("Failed to clear chat session %s: %s", session_id, e)
