# planner/nlp/extract.py
from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, Optional

from planner.common.metrics import inc

logger = logging.getLogger(__name__)

SLOTS_MARKER = "SLOTS"
TRIP_JSON_MARKER = "TRIP_JSON"


@lru_cache(maxsize=None)
def metadata_pattern(marker: str) -> re.Pattern:
    """
    Blok metadanych ma postać <!--MARKER ... MARKER-->; treść dopasowujemy leniwie,
    więc brana jest pierwsza para znaczników. Dopasowanie nie zależy od tego,
    czy w środku jest poprawny JSON (to sprawdza dopiero parser).
    """
    m = re.escape(marker)
    return re.compile(rf"<!--{m}(.*?){m}-->", flags=re.DOTALL)


def _reject_constant(name: str):
    # json.loads domyślnie przepuszcza NaN/Infinity, których nie ma w JSON
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_json_strict(blob: str) -> Any:
    return json.loads(blob, parse_constant=_reject_constant)


def find_metadata_block(text: Optional[str], marker: str) -> Optional[str]:
    """Surowa treść pierwszego bloku albo None."""
    if not text or not isinstance(text, str):
        return None
    match = metadata_pattern(marker).search(text)
    if not match:
        return None
    return match.group(1)


def parse_metadata_block(text: Optional[str], marker: str) -> Optional[Any]:
    """
    Wydobywa i parsuje JSON z pierwszego bloku <!--MARKER{...}MARKER-->.
    Zwraca zdekodowaną wartość albo None, gdy bloku nie ma lub JSON jest zepsuty.
    Nigdy nie rzuca: odpowiedź modelu to niezaufane wejście.
    """
    raw = find_metadata_block(text, marker)
    if raw is None:
        return None
    try:
        return parse_json_strict(raw.strip())
    except (ValueError, RecursionError) as e:  # Recursion: głęboko zagnieżdżony JSON
        logger.warning("Failed to parse %s metadata: %s", marker, e)
        inc(f"metadata.{marker.lower()}.parse_error")
        return None


def strip_metadata_block(text: Optional[str], marker: str) -> str:
    """Usuwa pierwszy blok (niezależnie od poprawności JSON) i końcowe białe znaki."""
    if not isinstance(text, str) or not text:
        return ""
    return metadata_pattern(marker).sub("", text, count=1).rstrip()
