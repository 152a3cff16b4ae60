"""Event hub subscription over a websocket.

The hub pushes one JSON event per text frame.  After connecting, the
client announces the rooms it wants with ``{"rooms": [room_id]}``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol

import aiohttp
from pydantic import ValidationError

from automute.models.event import Event

_logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class EventSource(Protocol):
    """Anything that yields hub events one at a time."""

    def events(self) -> AsyncIterator[Event]:
        ...


def parse_event(raw: str | bytes) -> Event | None:
    """Decode one hub frame; undecodable frames yield ``None``."""
    try:
        return Event.model_validate_json(raw)
    except ValidationError:
        _logger.debug("Skipping undecodable hub frame: %r", raw[:200], exc_info=True)
        return None


class HubEventSource:
    """Websocket client for the event hub that reconnects on close."""

    def __init__(
        self,
        url: str,
        room_id: str,
        http_session: aiohttp.ClientSession,
        *,
        reconnect_interval: float = 5.0,
        heartbeat: float = 30.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._url = url
        self._room_id = room_id
        self._http = http_session
        self._reconnect_interval = reconnect_interval
        self._heartbeat = heartbeat
        self._sleep = sleep

    async def events(self) -> AsyncIterator[Event]:
        while True:
            try:
                async with self._http.ws_connect(self._url, heartbeat=self._heartbeat) as ws:
                    await ws.send_json({"rooms": [self._room_id]})
                    _logger.info("Listening for events of %s from %s", self._room_id, self._url)
                    async for msg in ws:
                        if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                            event = parse_event(msg.data)
                            if event is not None:
                                yield event
                        elif msg.type == aiohttp.WSMsgType.ERROR:
                            _logger.warning("Event hub socket error: %s", ws.exception())
                            break
            except (aiohttp.ClientError, TimeoutError) as exc:
                _logger.error("Event hub connection to %s failed: %s", self._url, exc)

            if self._reconnect_interval <= 0:
                _logger.warning("Event hub connection closed")
                return
            _logger.warning("Event hub connection closed; reconnecting in %.0fs", self._reconnect_interval)
            await self._sleep(self._reconnect_interval)
