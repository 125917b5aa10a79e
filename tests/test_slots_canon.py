from planner.common.slots import (
    ACCOMMODATION_TYPES,
    CANONICAL_SLOTS,
    REQUIRED_SLOTS,
    SLOT_LABELS,
    TRAVEL_STYLES,
    AccommodationType,
    TravelStyle,
)

def test_enumerations_are_fixed():
    assert TRAVEL_STYLES == {"adventure", "relaxed", "cultural", "luxury"}
    assert ACCOMMODATION_TYPES == {"hotel", "hostel", "airbnb", "luxury"}
    assert isinstance(TRAVEL_STYLES, frozenset)
    assert TravelStyle("cultural") is TravelStyle.CULTURAL
    assert AccommodationType.AIRBNB.value == "airbnb"

def test_required_slots_contain_expected_minimum():
    assert {"destination", "dates", "travelers"}.issubset(REQUIRED_SLOTS)
    assert REQUIRED_SLOTS.issubset(set(CANONICAL_SLOTS))

def test_every_slot_has_a_label():
    assert set(SLOT_LABELS) == set(CANONICAL_SLOTS)
    assert len(CANONICAL_SLOTS) == 7
