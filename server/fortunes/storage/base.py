"""Backend interface (port) for mirroring fortunes to durable storage."""

from __future__ import annotations

from typing import Protocol


class FortuneBackend(Protocol):
    """Port: optional key-value mirror of the fortune collection.

    ``load_all`` and ``save`` raise ``BackendUnavailable`` on connection or
    timeout errors; ``load_all`` raises ``BackendDataError`` for entries it
    cannot parse.
    """

    def configured(self) -> bool: ...

    async def load_all(self) -> list[tuple[int, str]]: ...

    async def save(self, fortune_id: int, text: str) -> None: ...
