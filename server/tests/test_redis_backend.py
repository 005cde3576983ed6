"""Tests for RedisFortuneBackend using a stand-in client."""

from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from fortunes.core.errors import BackendDataError, BackendUnavailable
from fortunes.core.models import DEFAULT_FORTUNES
from fortunes.core.store import FortuneStore
from fortunes.storage.redis_backend import RedisFortuneBackend, parse_entry


class StubRedis:
    def __init__(self, hashes=None, error: Exception | None = None) -> None:
        self.hashes = hashes or {}
        self.error = error
        self.closed = False

    async def hgetall(self, key):
        if self.error is not None:
            raise self.error
        return dict(self.hashes.get(key, {}))

    async def hset(self, key, field, value):
        if self.error is not None:
            raise self.error
        self.hashes.setdefault(key, {})[field] = value
        return 1

    async def aclose(self):
        self.closed = True


def test_configured_only_with_host():
    assert RedisFortuneBackend("redis").configured()
    assert not RedisFortuneBackend(None).configured()
    assert not RedisFortuneBackend("").configured()


@pytest.mark.asyncio
async def test_load_all_sorts_by_id():
    stub = StubRedis({"fortunes": {"10": "ten", "2": "two", "7": "seven"}})
    backend = RedisFortuneBackend("redis", client=stub)
    assert await backend.load_all() == [(2, "two"), (7, "seven"), (10, "ten")]


@pytest.mark.asyncio
async def test_load_all_missing_hash_is_empty():
    backend = RedisFortuneBackend("redis", client=StubRedis())
    assert await backend.load_all() == []


@pytest.mark.asyncio
async def test_load_all_uses_configured_key():
    stub = StubRedis({"other": {"1": "one"}, "fortunes": {"5": "five"}})
    backend = RedisFortuneBackend("redis", key="other", client=stub)
    assert await backend.load_all() == [(1, "one")]


@pytest.mark.asyncio
@pytest.mark.parametrize("field,value", [
    ("abc", "text"),
    ("-1", "text"),
    ("1.5", "text"),
    ("3", "   "),
    ("007", "text"),
    ("3", "ring the bell \x07"),
])
async def test_load_all_rejects_bad_entries(field, value):
    stub = StubRedis({"fortunes": {"1": "fine", field: value}})
    backend = RedisFortuneBackend("redis", client=stub)
    with pytest.raises(BackendDataError):
        await backend.load_all()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    RedisConnectionError("Connection refused"),
    RedisTimeoutError("Timeout reading from socket"),
    OSError("network unreachable"),
])
async def test_load_all_maps_connection_errors(error):
    backend = RedisFortuneBackend("redis", client=StubRedis(error=error))
    with pytest.raises(BackendUnavailable):
        await backend.load_all()


@pytest.mark.asyncio
async def test_load_all_maps_decode_errors():
    error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    backend = RedisFortuneBackend("redis", client=StubRedis(error=error))
    with pytest.raises(BackendDataError):
        await backend.load_all()


@pytest.mark.asyncio
async def test_save_writes_decimal_field():
    stub = StubRedis()
    backend = RedisFortuneBackend("redis", client=stub)
    await backend.save(12, "twelve")
    await backend.save(12, "twelve")
    assert stub.hashes == {"fortunes": {"12": "twelve"}}


@pytest.mark.asyncio
async def test_save_maps_connection_errors():
    backend = RedisFortuneBackend("redis", client=StubRedis(error=RedisConnectionError("down")))
    with pytest.raises(BackendUnavailable):
        await backend.save(1, "one")


@pytest.mark.asyncio
async def test_close_releases_client():
    stub = StubRedis()
    backend = RedisFortuneBackend("redis", client=stub)
    await backend.close()
    assert stub.closed
    await backend.close()


def test_parse_entry():
    assert parse_entry("42", "The answer.") == (42, "The answer.")
    with pytest.raises(BackendDataError):
        parse_entry("", "empty id")
    with pytest.raises(BackendDataError):
        parse_entry("٣", "non-ascii digit")


@pytest.mark.asyncio
async def test_padded_id_alias_rejects_load_instead_of_overwriting():
    stub = StubRedis({"fortunes": {"7": "seven", "007": "bond"}})
    backend = RedisFortuneBackend("redis", client=stub)
    with pytest.raises(BackendDataError):
        await backend.load_all()

    store = await FortuneStore.open(backend)
    assert [f.text for f in store.list()] == list(DEFAULT_FORTUNES)


def test_parse_entry_allows_multiline_text():
    assert parse_entry("0", "line one\n\tline two") == (0, "line one\n\tline two")
