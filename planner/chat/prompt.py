# planner/chat/prompt.py
from __future__ import annotations

from typing import Optional

from planner.common.slots import INTEREST_OPTIONS, TRAVEL_STYLES, ACCOMMODATION_TYPES
from planner.nlp.extract import SLOTS_MARKER, TRIP_JSON_MARKER

from .session import ConversationState, GeneratedTrip, TripSlots, calculate_slot_progress

NOT_SET = "not set"

STATE_INSTRUCTIONS = {
    ConversationState.GATHERING: (
        "- Ask ONE question at a time about missing slots\n"
        "- Be conversational and friendly\n"
        "- Extract any trip details mentioned in the user's message\n"
        "- If user provides multiple details at once, acknowledge them all"
    ),
    ConversationState.READY: (
        "- All slots are filled! Summarize the trip details\n"
        '- Ask "I have everything I need! Ready to create your personalized itinerary?"\n'
        "- Wait for user confirmation before generating"
    ),
    ConversationState.GENERATING: (
        "- Generate a complete, detailed itinerary based on the filled slots\n"
        f"- Output the itinerary as JSON in a <!--{TRIP_JSON_MARKER}{{...}}{TRIP_JSON_MARKER}--> block\n"
        "- Include day-by-day activities with times, costs, and locations\n"
        "- Be creative and provide local insights"
    ),
    ConversationState.REFINING: (
        "- A trip has already been generated\n"
        "- Make incremental changes based on user requests\n"
        "- If they want major changes, you can regenerate portions\n"
        f"- Output any trip updates in a <!--{TRIP_JSON_MARKER}{{...}}{TRIP_JSON_MARKER}--> block"
    ),
}

SLOT_UPDATE_EXAMPLE = f"""<!--{SLOTS_MARKER}{{
  "destination": "Paris, France",
  "dates": {{"startDate": "2024-06-15", "duration": 7}},
  "budget": {{"amount": 3000, "currency": "USD", "perPerson": true}},
  "travelers": {{"adults": 2, "children": 0}},
  "travelStyle": "cultural",
  "interests": ["food", "museums", "architecture"],
  "accommodationType": "hotel"
}}{SLOTS_MARKER}-->"""

TRIP_JSON_EXAMPLE = f"""<!--{TRIP_JSON_MARKER}{{
  "metadata": {{
    "destination": "...", "country": "...", "startDate": "...", "endDate": "...", "duration": ...,
    "budget": {{"total": ..., "currency": "...", "perPerson": ...}},
    "travelers": {{"adults": ..., "children": ...}},
    "travelStyle": "...", "interests": [...], "accommodationType": "..."
  }},
  "itinerary": [
    {{"dayNumber": 1, "items": [
      {{"title": "Activity name", "category": "accommodation|food|activity|transport|nightlife",
        "startTime": "09:00", "endTime": "11:00", "estimatedCost": 50,
        "location": {{"name": "...", "address": "...", "lat": ..., "lng": ...}},
        "description": "...", "tips": "..."}}
    ]}}
  ],
  "recommendations": {{
    "doAndDont": {{"do": [...], "dont": [...]}},
    "packingList": [...],
    "localPhrases": [{{"phrase": "...", "meaning": "..."}}],
    "emergencyContacts": [{{"name": "...", "number": "..."}}]
  }}
}}{TRIP_JSON_MARKER}-->"""


def _fmt_amount(amount) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def describe_slots(slots: TripSlots) -> dict[str, str]:
    """Czytelne wartości slotów do promptu (i do podglądu w CLI)."""
    dates = slots.dates
    budget = slots.budget
    if dates.start_date and dates.duration:
        dates_str = f"{dates.start_date} for {dates.duration} days"
    else:
        dates_str = NOT_SET
    if budget.amount is not None:
        scope = "per person" if budget.per_person else "total"
        budget_str = f"{_fmt_amount(budget.amount)} {budget.currency} {scope}"
    else:
        budget_str = NOT_SET
    return {
        "Destination": slots.destination or NOT_SET,
        "Dates": dates_str,
        "Budget": budget_str,
        "Travelers": f"{slots.travelers.adults} adults, {slots.travelers.children} children",
        "Travel Style": slots.travel_style.value if slots.travel_style else NOT_SET,
        "Interests": ", ".join(slots.interests) if slots.interests else NOT_SET,
        "Accommodation": slots.accommodation_type.value if slots.accommodation_type else NOT_SET,
    }


def build_system_prompt(
    slots: TripSlots,
    conversation_state: ConversationState,
    generated_trip: Optional[GeneratedTrip] = None,
) -> str:
    """Prompt systemowy dla bieżącego stanu rozmowy: wypełnione sloty, braki, instrukcje i format bloków."""
    progress = calculate_slot_progress(slots)
    generating = conversation_state == ConversationState.GENERATING

    lines = [
        "You are a travel planning assistant using a slot-filling approach.",
        "",
        f"CURRENT STATE: {conversation_state.value}",
        "",
        "FILLED SLOTS:",
        *(f"- {label}: {value}" for label, value in describe_slots(slots).items()),
        "",
        f"SLOT PROGRESS: {progress.filled}/{progress.total} ({progress.percentage}%)",
        f"MISSING SLOTS: {', '.join(progress.missing) if progress.missing else 'none'}",
        "",
        "STATE INSTRUCTIONS:",
        STATE_INSTRUCTIONS[conversation_state],
    ]

    if generated_trip is not None:
        lines += [
            "",
            "EXISTING TRIP:",
            f"The user already has a generated trip to {generated_trip.destination or 'their destination'}.",
            "They may be asking to modify or refine it.",
        ]

    lines += [
        "",
        "RESPONSE FORMAT RULES:",
        "1. Be conversational, helpful, and enthusiastic about travel",
    ]
    if generating:
        lines.append(f"2. Output the full itinerary JSON in a <!--{TRIP_JSON_MARKER}{{...}}{TRIP_JSON_MARKER}--> block")
    else:
        lines.append(
            "2. At the END of every response include slot updates: "
            f"<!--{SLOTS_MARKER}{{...JSON of any updated slot values...}}{SLOTS_MARKER}-->"
        )

    lines += [
        "",
        "SLOT UPDATE FORMAT (only include fields that were mentioned/updated):",
        SLOT_UPDATE_EXAMPLE,
        f"Allowed travelStyle values: {', '.join(sorted(TRAVEL_STYLES))}",
        f"Allowed accommodationType values: {', '.join(sorted(ACCOMMODATION_TYPES))}",
        f"Suggested interests: {', '.join(INTEREST_OPTIONS)}",
    ]

    if generating:
        lines += ["", "TRIP JSON FORMAT:", TRIP_JSON_EXAMPLE]

    return "\n".join(lines)
