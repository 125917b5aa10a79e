# planner/chat/__init__.py
from .session import (
    ChatMessage,
    ChatSession,
    ConversationState,
    GeneratedTrip,
    SlotProgress,
    SlotUpdate,
    TripSlots,
    calculate_slot_progress,
    create_empty_chat_session,
    empty_slots,
    update_slot_completion,
)
from .slot_extractor import (
    extract_slots_from_response,
    merge_slots,
    strip_slots_metadata,
    validate_extracted_slots,
)
from .errors import ChatTurnError, ErrorCode, ERROR_MESSAGES

__all__ = [
    "ChatMessage",
    "ChatSession",
    "ConversationState",
    "GeneratedTrip",
    "SlotProgress",
    "SlotUpdate",
    "TripSlots",
    "calculate_slot_progress",
    "create_empty_chat_session",
    "empty_slots",
    "update_slot_completion",
    "extract_slots_from_response",
    "merge_slots",
    "strip_slots_metadata",
    "validate_extracted_slots",
    "ChatTurnError",
    "ErrorCode",
    "ERROR_MESSAGES",
]
