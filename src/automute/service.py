"""Wires the gate, the room manager, and the event hub together."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from automute._hub import EventSource, HubEventSource
from automute._transport import HttpTransport, Transport
from automute.config import AutoMuteConfig
from automute.gate import wait_until_enabled
from automute.state.dispatch import EventDispatcher, is_relevant
from automute.state.manager import RoomStateManager
from automute.state.resolver import DuplicateInputResolver

_logger = logging.getLogger(__name__)


class AutoMuteService:
    """Runs the mute reconciliation loop for one room.

    Usage::

        async with AutoMuteService(config) as service:
            await service.run()

    Events are handled strictly one after another; nothing else touches
    the room state while an event is being processed.
    """

    def __init__(
        self,
        config: AutoMuteConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        event_source: EventSource | None = None,
        api_transport: Transport | None = None,
        gate_transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._event_source = event_source
        self._api_transport = api_transport
        self._gate_transport = gate_transport
        self._manager: RoomStateManager | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> AutoMuteService:
        config = self._config
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        if self._api_transport is None:
            self._api_transport = HttpTransport(config.api_base_url, self._http_session)
        if self._gate_transport is None and config.gate_base_url is not None:
            self._gate_transport = HttpTransport(config.gate_base_url, self._http_session)
        if self._event_source is None:
            self._event_source = HubEventSource(
                config.hub_url,
                config.room_id,
                self._http_session,
                reconnect_interval=config.hub_reconnect_interval,
            )
        self._manager = RoomStateManager(
            config.room_id,
            self._api_transport,
            resolver=DuplicateInputResolver(unmute_singletons=config.unmute_singletons),
            refetch_on_resolve=config.refetch_on_resolve,
            mute_only_push=config.mute_only_push,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    @property
    def manager(self) -> RoomStateManager:
        if self._manager is None:
            raise RuntimeError("Service not initialized. Use 'async with AutoMuteService(...) as service:'")
        return self._manager

    async def run(self) -> None:
        """Pass the startup gate, load the room, and handle events.

        Startup failures propagate; failures while handling an event are
        logged and the loop continues.
        """
        manager = self.manager
        assert self._event_source is not None  # noqa: S101

        await wait_until_enabled(self._config, self._gate_transport)

        _logger.info("Initializing room %s on startup", manager.room_id)
        await manager.initialize()

        dispatcher = EventDispatcher(manager)
        async for event in self._event_source.events():
            if not is_relevant(event):
                continue
            _logger.debug("Handling event of type %s", event.key)
            await dispatcher.dispatch(event)
