# tests/conftest.py
import os, sys
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from planner.chat.session import empty_slots  # noqa: E402
from planner.chat.slot_extractor import merge_slots, validate_extracted_slots  # noqa: E402
from planner.common import metrics  # noqa: E402


FULL_SLOTS_JSON = {
    "destination": "Kyoto, Japan",
    "dates": {"startDate": "2025-04-01", "duration": 6},
    "budget": {"amount": 2500, "currency": "EUR", "perPerson": False},
    "travelers": {"adults": 2, "children": 1},
    "travelStyle": "cultural",
    "interests": ["food", "temples"],
    "accommodationType": "hotel",
}


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.snapshot(reset=True)
    yield
    metrics.snapshot(reset=True)


@pytest.fixture
def slots():
    return empty_slots()


@pytest.fixture
def full_slots():
    return merge_slots(empty_slots(), validate_extracted_slots(FULL_SLOTS_JSON))
