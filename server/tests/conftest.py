"""Shared test fixtures."""

from __future__ import annotations

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from fortunes.core.errors import BackendUnavailable
from fortunes.core.store import FortuneStore
from fortunes.main import app


class FakeBackend:
    """In-memory FortuneBackend that can be told to fail."""

    def __init__(
        self,
        entries: list[tuple[int, str]] | None = None,
        *,
        load_error: Exception | None = None,
        save_error: Exception | None = None,
        is_configured: bool = True,
    ) -> None:
        self.entries = list(entries or [])
        self.load_error = load_error
        self.save_error = save_error
        self.is_configured = is_configured
        self.saved: dict[int, str] = {}
        self.load_calls = 0

    def configured(self) -> bool:
        return self.is_configured

    async def load_all(self) -> list[tuple[int, str]]:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error
        return list(self.entries)

    async def save(self, fortune_id: int, text: str) -> None:
        # Yield so concurrent adds interleave around the mirror write.
        await asyncio.sleep(0)
        if self.save_error is not None:
            raise self.save_error
        self.saved[fortune_id] = text


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def store():
    return FortuneStore()


@pytest.fixture
def down_backend():
    return FakeBackend(
        load_error=BackendUnavailable("connection refused"),
        save_error=BackendUnavailable("connection refused"),
    )


@pytest.fixture
async def client(store):
    app.state.store = store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    del app.state.store
