from __future__ import annotations
from enum import Enum

class ErrorCode(str, Enum):
    CHAT_DISABLED = "CHAT_DISABLED"
    API_KEY_MISSING = "API_KEY_MISSING"
    INVALID_REQUEST = "INVALID_REQUEST"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"

ERROR_MESSAGES = {
    ErrorCode.CHAT_DISABLED: "Chat is currently disabled",
    ErrorCode.API_KEY_MISSING: "API key not configured. Please contact the administrator.",
    ErrorCode.INVALID_REQUEST: "Invalid request: sessionId, slots, conversationState, and latestMessage required",
    ErrorCode.UPSTREAM_UNAVAILABLE: "Failed to get AI response. Please try again.",
    ErrorCode.EMPTY_RESPONSE: "No response from AI",
}


class ChatTurnError(Exception):
    """Runda czatu nie mogła się odbyć; `code` mówi dlaczego, `details` to kontekst do logów."""

    def __init__(self, code: ErrorCode, details: dict | None = None):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.details = details or {}
        super().__init__(f"{code.value}: {self.message}")
