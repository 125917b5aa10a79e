# planner/chat/turn.py
from __future__ import annotations

import logging
import time
from typing import Optional

from pydantic import Field, ValidationError, field_validator

from ai import openai_client
from planner.common.config import settings
from planner.common.metrics import inc, record_ai_usage, record_transition
from planner.nlp.extract import TRIP_JSON_MARKER, parse_metadata_block, strip_metadata_block

from .errors import ChatTurnError, ErrorCode
from .session import (
    ChatSession,
    ConversationState,
    GeneratedTrip,
    SlotProgress,
    TripSlots,
    WireModel,
    calculate_slot_progress,
)
from .prompt import build_system_prompt
from .slot_extractor import extract_slots_from_response, merge_slots, strip_slots_metadata

logger = logging.getLogger(__name__)

# intencje użytkownika rozpoznajemy po prostych frazach
CONFIRM_PHRASES = ("yes", "go ahead", "create", "generate", "let's do it", "sounds good", "perfect")
CHANGE_PHRASES = ("change", "modify", "different", "instead", "actually")


class ChatTurnRequest(WireModel):
    session_id: str = Field(..., min_length=1)
    slots: TripSlots
    conversation_state: ConversationState
    latest_message: str
    generated_trip: Optional[GeneratedTrip] = None

    @field_validator("latest_message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("latestMessage must be non-empty")
        return v


class AiMetrics(WireModel):
    model: str
    provider: str
    tokens_used: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    cost: float = 0.0


class ChatTurnResponse(WireModel):
    message: str
    updated_slots: TripSlots
    new_state: ConversationState
    slot_progress: SlotProgress
    generated_trip: Optional[GeneratedTrip] = None
    ai_metrics: AiMetrics


def _mentions(text: str, phrases) -> bool:
    return any(p in text for p in phrases)


def determine_next_state(
    current_state: ConversationState,
    updated_slots: TripSlots,
    user_message: str,
    has_generated_trip: bool = False,
) -> ConversationState:
    """
    Przejścia stanu rozmowy:
      gathering  -> ready       gdy komplet slotów
      ready      -> gathering   gdy użytkownik chce coś zmienić (ma pierwszeństwo)
      ready      -> generating  gdy potwierdza
      generating -> refining    zawsze
      refining   -> gathering   gdy chce zmian, a slotów brakuje
    """
    progress = calculate_slot_progress(updated_slots)
    all_filled = progress.filled == progress.total
    text = (user_message or "").lower()
    wants_to_generate = _mentions(text, CONFIRM_PHRASES)
    wants_to_change = _mentions(text, CHANGE_PHRASES)

    if current_state == ConversationState.GATHERING:
        return ConversationState.READY if all_filled else ConversationState.GATHERING
    if current_state == ConversationState.READY:
        if wants_to_change:
            return ConversationState.GATHERING
        if wants_to_generate:
            return ConversationState.GENERATING
        return ConversationState.READY
    if current_state == ConversationState.GENERATING:
        return ConversationState.REFINING
    if current_state == ConversationState.REFINING:
        if wants_to_change and not all_filled:
            return ConversationState.GATHERING
        return ConversationState.REFINING
    return ConversationState.GATHERING


def extract_generated_trip(response_text: Optional[str]) -> Optional[GeneratedTrip]:
    """Plan z bloku TRIP_JSON; None, gdy brak bloku, zepsuty JSON albo brak metadata/itinerary."""
    data = parse_metadata_block(response_text, TRIP_JSON_MARKER)
    if not isinstance(data, dict):
        return None
    if not isinstance(data.get("metadata"), dict) or not isinstance(data.get("itinerary"), list):
        logger.warning("TRIP_JSON block without metadata/itinerary, ignoring")
        return None
    try:
        return GeneratedTrip.model_validate(data)
    except ValidationError as e:
        logger.warning("TRIP_JSON block rejected: %s", e)
        return None


def strip_trip_json_metadata(response_text: Optional[str]) -> str:
    return strip_metadata_block(response_text, TRIP_JSON_MARKER).strip()


def estimate_cost(prompt_tokens: int, completion_tokens: int) -> float:
    """Koszt w USD wg cennika za 1M tokenów z settings."""
    return (
        prompt_tokens / 1_000_000 * settings.ai_price_input_per_m
        + completion_tokens / 1_000_000 * settings.ai_price_output_per_m
    )


def handle_chat_turn(request: ChatTurnRequest | dict) -> ChatTurnResponse:
    """
    Jedna runda rozmowy: prompt → model → sloty/plan z odpowiedzi → nowy stan.
    Rzuca ChatTurnError, gdy czat jest wyłączony, brak klucza, żądanie jest złe
    albo model nie odpowiedział.
    """
    if not settings.chat_enabled:
        raise ChatTurnError(ErrorCode.CHAT_DISABLED)
    if not settings.ai_api_key:
        raise ChatTurnError(ErrorCode.API_KEY_MISSING)

    if not isinstance(request, ChatTurnRequest):
        try:
            request = ChatTurnRequest.model_validate(request)
        except ValidationError as e:
            raise ChatTurnError(ErrorCode.INVALID_REQUEST, {"err": str(e)}) from e

    state = request.conversation_state
    system_prompt = build_system_prompt(request.slots, state, request.generated_trip)

    completion = openai_client.chat_completion(system_prompt, request.latest_message)
    if completion is None:
        inc("chat.upstream_error")
        raise ChatTurnError(ErrorCode.UPSTREAM_UNAVAILABLE, {"session_id": request.session_id})
    if not completion.content:
        inc("chat.empty_response")
        raise ChatTurnError(ErrorCode.EMPTY_RESPONSE, {"session_id": request.session_id})

    assistant_text = completion.content
    extracted = extract_slots_from_response(assistant_text)
    updated_slots = merge_slots(request.slots, extracted)

    generated_trip = request.generated_trip
    if state == ConversationState.GENERATING:
        trip = extract_generated_trip(assistant_text)
        if trip is not None:
            generated_trip = trip
        else:
            logger.warning("session %s: no usable trip in generating turn", request.session_id)

    new_state = determine_next_state(state, updated_slots, request.latest_message, generated_trip is not None)
    clean_message = strip_trip_json_metadata(strip_slots_metadata(assistant_text))

    cost = estimate_cost(completion.prompt_tokens, completion.completion_tokens)
    inc("chat.turns")
    record_ai_usage(completion.prompt_tokens, completion.completion_tokens, cost)
    record_transition(state.value, new_state.value)
    logger.info(
        "session %s: %s -> %s, slots %s%%, tokens %s",
        request.session_id, state.value, new_state.value,
        updated_slots.completion_percentage, completion.total_tokens,
    )

    return ChatTurnResponse(
        message=clean_message,
        updated_slots=updated_slots,
        new_state=new_state,
        slot_progress=calculate_slot_progress(updated_slots),
        generated_trip=generated_trip,
        ai_metrics=AiMetrics(
            model=completion.model,
            provider=settings.ai_provider,
            tokens_used=completion.total_tokens,
            prompt_tokens=completion.prompt_tokens,
            completion_tokens=completion.completion_tokens,
            cost=cost,
        ),
    )


def advance_session(session: ChatSession, latest_message: str) -> tuple[ChatSession, ChatTurnResponse]:
    """Runda czatu na sesji: zapamiętuje obie wiadomości, sloty, stan i plan. Sesji wejściowej nie zmienia."""
    response = handle_chat_turn({
        "session_id": session.session_id,
        "slots": session.slots,
        "conversation_state": session.conversation_state,
        "latest_message": latest_message,
        "generated_trip": session.generated_trip,
    })
    updated = (
        session
        .remember("user", latest_message)
        .remember("assistant", response.message)
        .model_copy(update={
            "slots": response.updated_slots,
            "conversation_state": response.new_state,
            "generated_trip": response.generated_trip,
            "updated_at": time.time(),
        })
    )
    return updated, response
