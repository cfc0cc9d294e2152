"""Event stream that publishes events over a WebSocket connection."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import websockets

from navire_ledger.ports import EventStream

DEFAULT_URL = "wss://echo.websocket.events"

logger = logging.getLogger(__name__)


class WebSocketEventStream(EventStream):
    """Sends each event as a text message on a shared WebSocket."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection
        self._lock = asyncio.Lock()

    @classmethod
    async def connect(cls, url: str = DEFAULT_URL) -> WebSocketEventStream:
        """Open a connection to url and wrap it in a stream."""
        logger.info("Connecting to %s", url)
        connection = await websockets.connect(url)
        return cls(connection)

    async def send(self, event: str) -> None:
        async with self._lock:
            await self._connection.send(event)

    async def close(self) -> None:
        """Close the underlying connection."""
        async with self._lock:
            await self._connection.close()

    async def __aenter__(self) -> WebSocketEventStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()