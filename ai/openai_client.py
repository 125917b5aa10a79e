# ai/openai_client.py
from __future__ import annotations
import logging
from typing import Optional

from openai import OpenAI, OpenAIError
from pydantic import BaseModel

from planner.common.config import settings

logger = logging.getLogger(__name__)

_client = None
_client_key: Optional[tuple[str, str]] = None


class ChatCompletion(BaseModel):
    content: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


def _get_client():
    """Klient budowany leniwie; przebudowa, gdy zmieni się klucz albo endpoint."""
    global _client, _client_key
    if not settings.ai_api_key:
        return None
    key = (settings.ai_api_key, settings.ai_base_url)
    if _client is not None and _client_key == key:
        return _client
    _client = OpenAI(api_key=settings.ai_api_key, base_url=settings.ai_base_url or None)
    _client_key = key
    return _client


def chat_completion(system_prompt: str, user_text: str, *, max_tokens: Optional[int] = None) -> Optional[ChatCompletion]:
    """
    Jedna runda system+user do modelu czatowego (endpoint zgodny z OpenAI).
    Zwraca ChatCompletion albo None, gdy klient nie jest skonfigurowany / API zwróciło błąd.
    UWAGA: funkcja synchroniczna.
    """
    client = _get_client()
    if client is None:
        return None
    try:
        resp = client.chat.completions.create(
            model=settings.ai_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            temperature=settings.ai_temperature,
            max_tokens=max_tokens or settings.ai_max_tokens,
            stream=False,
        )
    except OpenAIError as e:
        logger.error("Chat completion failed: %s", e)
        return None

    content = (resp.choices[0].message.content or "") if resp.choices else ""
    usage = resp.usage
    return ChatCompletion(
        content=content.strip(),
        model=resp.model or settings.ai_model,
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )
