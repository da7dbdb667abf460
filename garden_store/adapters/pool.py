"""Fixed-size connection pools shared by the adapters.

All connections are opened up front. Acquiring hands out an idle one or
waits up to ``timeout`` seconds for another caller to release one; only then
is ``PoolError`` raised.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from garden_store.core.exceptions import PoolError


def _exhausted(driver: str, timeout: float) -> PoolError:
    return PoolError(f"No {driver} connection released within {timeout}s")


class ConnectionPool:
    """Thread-safe pool for blocking drivers."""

    def __init__(self, connections: list[Any], driver: str, timeout: float) -> None:
        self._idle = list(connections)
        self._driver = driver
        self._timeout = timeout
        self._available = threading.Condition()

    def take(self) -> Any:
        with self._available:
            if not self._available.wait_for(lambda: self._idle, timeout=self._timeout):
                raise _exhausted(self._driver, self._timeout)
            return self._idle.pop()

    def give_back(self, connection: Any) -> None:
        with self._available:
            self._idle.append(connection)
            self._available.notify()

    def drain(self) -> list[Any]:
        """Remove and return every idle connection."""
        with self._available:
            idle, self._idle = self._idle, []
        return idle

    def __len__(self) -> int:
        return len(self._idle)


class AsyncConnectionPool:
    """Pool for asyncio drivers; waiting coroutines are served in FIFO order."""

    def __init__(self, connections: list[Any], driver: str, timeout: float) -> None:
        self._idle: asyncio.Queue[Any] = asyncio.Queue()
        for connection in connections:
            self._idle.put_nowait(connection)
        self._driver = driver
        self._timeout = timeout

    async def take(self) -> Any:
        if not self._idle.empty():
            return self._idle.get_nowait()
        try:
            return await asyncio.wait_for(self._idle.get(), timeout=self._timeout)
        except asyncio.TimeoutError:
            raise _exhausted(self._driver, self._timeout) from None

    def give_back(self, connection: Any) -> None:
        self._idle.put_nowait(connection)

    def drain(self) -> list[Any]:
        idle = []
        while not self._idle.empty():
            idle.append(self._idle.get_nowait())
        return idle

    def __len__(self) -> int:
        return self._idle.qsize()
