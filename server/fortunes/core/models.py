"""Core internal data models for the fortune service.

Plain dataclasses with no framework dependencies. JSON conversion happens at
the API boundary through ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Fortune:
    id: int
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text}


# Seed set used when no backend data is available. Ids are 1..4 in this order.
DEFAULT_FORTUNES: tuple[str, ...] = (
    "A new voyage will fill your life with untold memories.",
    "The measure of time to your next goal is the measure of your discipline.",
    "The only way to do well is to do better each day.",
    "It ain't over till it's EOF.",
)


def is_valid_text(text: object) -> bool:
    """True if ``text`` is a non-blank string of printable characters.

    Newlines and tabs are allowed inside the text so fortunes can span lines.
    """
    if not isinstance(text, str) or not text.strip():
        return False
    return all(ch.isprintable() or ch in "\n\t" for ch in text.strip())
