"""Redis hash backend for fortunes.

Layout: a single hash (default key ``fortunes``) whose fields are decimal
fortune ids and whose values are the fortune texts. The whole hash is read
once at startup; each new fortune is written with one HSET.

Every call is bounded by the socket timeouts and is attempted exactly once.
"""

from __future__ import annotations

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from fortunes.core.errors import BackendDataError, BackendUnavailable
from fortunes.core.models import is_valid_text

log = structlog.get_logger()

DEFAULT_PORT = 6379
DEFAULT_KEY = "fortunes"


def parse_entry(field: str, value: str) -> tuple[int, str]:
    """Convert one hash field/value pair into ``(id, text)``.

    Fields must be canonical decimal ids ("7", not "007" or "+7").
    """
    if not isinstance(field, str) or not (field.isascii() and field.isdigit()):
        raise BackendDataError(f"invalid fortune id field: {field!r}")
    if str(int(field)) != field:
        raise BackendDataError(f"non-canonical fortune id field: {field!r}")
    if not is_valid_text(value):
        raise BackendDataError(f"invalid text for fortune {field}")
    return int(field), value


class RedisFortuneBackend:
    """FortuneBackend backed by a Redis hash."""

    def __init__(
        self,
        host: str | None,
        port: int = DEFAULT_PORT,
        *,
        timeout: float = 2.0,
        key: str = DEFAULT_KEY,
        client: redis.Redis | None = None,
    ) -> None:
        self._host = host or None
        self._port = port
        self._timeout = timeout
        self._key = key
        self._client = client

    def configured(self) -> bool:
        return self._host is not None

    @property
    def key(self) -> str:
        return self._key

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis(
                host=self._host,
                port=self._port,
                decode_responses=True,
                socket_connect_timeout=self._timeout,
                socket_timeout=self._timeout,
            )
        return self._client

    async def load_all(self) -> list[tuple[int, str]]:
        """Read every stored fortune, sorted by id."""
        try:
            raw = await self._get_client().hgetall(self._key)
        except UnicodeDecodeError as exc:
            raise BackendDataError(f"undecodable data in {self._key!r}") from exc
        except (RedisError, OSError) as exc:
            raise BackendUnavailable(
                f"redis {self._host}:{self._port} unavailable: {exc}"
            ) from exc

        entries = [parse_entry(field, value) for field, value in raw.items()]
        entries.sort(key=lambda entry: entry[0])
        log.info("backend_loaded", key=self._key, count=len(entries))
        return entries

    async def save(self, fortune_id: int, text: str) -> None:
        try:
            await self._get_client().hset(self._key, str(fortune_id), text)
        except (RedisError, OSError) as exc:
            raise BackendUnavailable(
                f"redis {self._host}:{self._port} unavailable: {exc}"
            ) from exc
        log.debug("backend_saved", key=self._key, id=fortune_id)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
