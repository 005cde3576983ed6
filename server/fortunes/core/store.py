"""Fortune store: the authoritative in-memory collection.

The store owns the id -> Fortune mapping and the id counter. An optional
backend is used to seed the mapping at startup and to mirror new fortunes,
but its failures never surface from store operations: reads and writes always
complete against memory.

No framework dependencies.
"""

from __future__ import annotations

import random
import threading
from typing import TYPE_CHECKING

import structlog

from fortunes.core.errors import BackendError, EmptyStore, InvalidInput
from fortunes.core.ids import IdAllocator
from fortunes.core.models import DEFAULT_FORTUNES, Fortune, is_valid_text

if TYPE_CHECKING:
    from fortunes.storage.base import FortuneBackend

log = structlog.get_logger()


class FortuneStore:
    """Thread-safe fortune collection with best-effort backend mirroring.

    Build it with ``await FortuneStore.open(backend)`` to seed from the
    backend. The plain constructor seeds the default fortunes and does no I/O.
    """

    def __init__(
        self,
        backend: FortuneBackend | None = None,
        entries: list[tuple[int, str]] | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._backend = backend
        self._rng = rng or random.Random()
        self._fortunes: dict[int, Fortune] = {}
        self._ids = IdAllocator()
        self.mirror_failures: int = 0

        if entries:
            for fortune_id, text in entries:
                self._fortunes[fortune_id] = Fortune(id=fortune_id, text=text)
                self._ids.observe(fortune_id)
        else:
            for text in DEFAULT_FORTUNES:
                fortune_id = self._ids.next_id()
                self._fortunes[fortune_id] = Fortune(id=fortune_id, text=text)

    @classmethod
    async def open(
        cls,
        backend: FortuneBackend | None = None,
        *,
        rng: random.Random | None = None,
    ) -> FortuneStore:
        """Create a store, seeding it from ``backend`` when one is configured.

        A missing, unreachable, or empty backend, or one holding unparsable
        data, all fall back to the default fortunes.
        """
        entries: list[tuple[int, str]] = []
        if backend is None or not backend.configured():
            log.info("backend_not_configured")
        else:
            try:
                entries = await backend.load_all()
            except BackendError as exc:
                log.warning("backend_load_failed", error=str(exc),
                            error_type=type(exc).__name__)
                entries = []
            for fortune_id, text in entries:
                log.debug("fortune_loaded", id=fortune_id, text=text)

        store = cls(backend=backend, entries=entries, rng=rng)
        log.info("store_seeded",
                 source="backend" if entries else "defaults",
                 count=len(store), next_id=store.next_id)
        return store

    def __len__(self) -> int:
        with self._lock:
            return len(self._fortunes)

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._ids.peek()

    @property
    def backend_configured(self) -> bool:
        return self._backend is not None and self._backend.configured()

    def list(self) -> list[Fortune]:
        """Return a snapshot of all fortunes in insertion order."""
        with self._lock:
            return list(self._fortunes.values())

    def get(self, fortune_id: int) -> Fortune | None:
        """Return the fortune with ``fortune_id``, or None if absent."""
        with self._lock:
            return self._fortunes.get(fortune_id)

    def random(self) -> Fortune:
        """Return a uniformly chosen fortune."""
        with self._lock:
            if not self._fortunes:
                raise EmptyStore("no fortunes available")
            fortunes = list(self._fortunes.values())
            return fortunes[self._rng.randrange(len(fortunes))]

    async def add(self, text: str) -> Fortune:
        """Create a fortune, then mirror it to the backend if there is one.

        Raises InvalidInput if ``text`` is not a string, is blank, or holds
        control characters other than newlines and tabs. The
        counter does not move when validation fails.
        """
        if not is_valid_text(text):
            raise InvalidInput("text must be a non-empty printable string")
        text = text.strip()

        with self._lock:
            fortune = Fortune(id=self._ids.next_id(), text=text)
            self._fortunes[fortune.id] = fortune

        log.info("fortune_added", id=fortune.id)

        if self.backend_configured:
            try:
                await self._backend.save(fortune.id, fortune.text)
            except BackendError as exc:
                with self._lock:
                    self.mirror_failures += 1
                log.warning("backend_save_failed", id=fortune.id,
                            error=str(exc), error_type=type(exc).__name__)

        return fortune
