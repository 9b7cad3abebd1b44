"""Line colour lookup over the upstream status feed."""

from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence

from train_traffic_engine.core.exceptions import FetchError
from train_traffic_engine.core.models import StatusRecord

# The feed has no line identifiers we can rely on; each colour lives at a fixed
# position in the returned array.
LINE_STATUS_INDEX: Mapping[str, int] = {
    "red": 0,
    "green": 1,
    "purple": 2,
    "blue": 3,
    "orange": 4,
    "lightgreen": 5,
    "brown": 6,
    "grey": 7,
    "yellow": 8,
}

_COLOUR_ALIASES: Mapping[str, str] = {"gray": "grey"}
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


def normalize_line_color(raw: Optional[str]) -> Optional[str]:
    """Map spoken input such as ``"Light Green line"`` to a table key."""
    if not raw:
        return None
    colour = raw.strip().lower()
    if colour.endswith("line"):
        colour = colour[: -len("line")]
    colour = "".join(colour.split())
    colour = _COLOUR_ALIASES.get(colour, colour)
    return colour if colour in LINE_STATUS_INDEX else None


def status_for_line(records: Sequence[StatusRecord], colour: str) -> StatusRecord:
    """Return the record for ``colour`` (a normalised table key)."""
    index = LINE_STATUS_INDEX[colour]
    if index >= len(records):
        raise FetchError(
            f"status feed returned {len(records)} records; no entry for the {colour} line"
        )
    return records[index]


def status_entries(record: StatusRecord) -> list[str]:
    """Headline status followed by each sentence of the detail text."""
    entries = [record.status] if record.status else []
    if record.text:
        entries.extend(part.strip() for part in _SENTENCE_SPLIT.split(record.text) if part.strip())
    return entries


__all__ = ["LINE_STATUS_INDEX", "normalize_line_color", "status_entries", "status_for_line"]
