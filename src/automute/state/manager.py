"""In-memory room state and its synchronisation with the inventory service."""

from __future__ import annotations

import logging
from typing import Any

from automute._api.rooms import fetch_room_state, push_room_state
from automute._transport import Transport
from automute.exceptions import AutoMuteError, MalformedIdentifierError
from automute.identifiers import parse_display_id
from automute.models.room import AudioDevice, RoomState
from automute.state import power
from automute.state.resolver import DuplicateInputResolver

_logger = logging.getLogger(__name__)


class RoomStateManager:
    """Owns the room state for the lifetime of the service.

    The state is fetched once by :meth:`initialize` and then mutated in
    place by events.  With ``refetch_on_resolve`` every full resolution
    starts from a fresh copy from the inventory service instead.
    Local changes are never rolled back when a push fails.
    """

    def __init__(
        self,
        room_id: str,
        transport: Transport,
        *,
        resolver: DuplicateInputResolver | None = None,
        room_state: RoomState | None = None,
        refetch_on_resolve: bool = False,
        mute_only_push: bool = True,
    ) -> None:
        self._room_id = room_id
        self._transport = transport
        self._resolver = resolver or DuplicateInputResolver()
        self._room_state = room_state
        self._refetch_on_resolve = refetch_on_resolve
        self._mute_only_push = mute_only_push

    @property
    def room_id(self) -> str:
        return self._room_id

    @property
    def resolver(self) -> DuplicateInputResolver:
        return self._resolver

    @property
    def room_state(self) -> RoomState:
        if self._room_state is None:
            raise AutoMuteError("Room state not initialized. Call 'await manager.initialize()' first")
        return self._room_state

    # ------------------------------------------------------------------
    # Inventory service
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Fetch the room state from the inventory service."""
        _logger.debug("Fetching room state for %s", self._room_id)
        self._room_state = await fetch_room_state(self._transport, self._room_id)
        _logger.debug("Room state: %s", self._room_state)

    async def push_state(self) -> None:
        await push_room_state(
            self._transport,
            self._room_id,
            self.room_state,
            mute_only=self._mute_only_push,
        )

    async def resolve_room(self) -> None:
        """Recompute mute assignment for every input and push the result."""
        if self._refetch_on_resolve:
            await self.initialize()
        await self._resolve_and_push()

    async def _resolve_and_push(self) -> None:
        chosen = self._resolver.resolve(self.room_state)
        _logger.debug("Audio assignment for %s: %s", self._room_id, chosen)
        await self.push_state()

    async def _apply_and_resolve(self, name: str, **changes: Any) -> None:
        """Set *changes* on device *name* and run a full resolution.

        With ``refetch_on_resolve`` the room is fetched first and the
        changes are applied to the fresh copy, so the event is not lost.
        """
        if self._refetch_on_resolve:
            await self.initialize()
        device = self.find_device(name)
        if device is not None:
            for field, value in changes.items():
                setattr(device, field, value)
        await self._resolve_and_push()

    # ------------------------------------------------------------------
    # Power
    # ------------------------------------------------------------------

    def is_on(self) -> bool:
        return power.is_on(self.room_state)

    async def power_on(self) -> None:
        _logger.info("Room %s powered on", self._room_id)
        if self._refetch_on_resolve:
            await self.initialize()
        power.power_on(self.room_state)
        await self._resolve_and_push()

    def power_off(self) -> None:
        _logger.info("Room %s powered off", self._room_id)
        power.power_off(self.room_state)

    # ------------------------------------------------------------------
    # Device lookups
    # ------------------------------------------------------------------

    def find_device(self, name: str) -> AudioDevice | None:
        return self.room_state.find_audio_device(name)

    def _device_for(self, device_id: str) -> AudioDevice | None:
        try:
            name = parse_display_id(device_id)
        except MalformedIdentifierError:
            return None
        return self.find_device(name)

    def compare_mute(self, device_id: str, muted: bool) -> tuple[AudioDevice | None, bool]:
        """Return the device behind *device_id* and whether its mute flag already matches.

        Devices that are not audio-capable displays report a match, since
        they emit these events too and have nothing to reconcile.
        """
        device = self._device_for(device_id)
        if device is None:
            return None, True
        return device, device.muted == muted

    def compare_input(self, device_id: str, input_id: str) -> tuple[AudioDevice | None, bool]:
        """Input counterpart of :meth:`compare_mute`."""
        device = self._device_for(device_id)
        if device is None:
            return None, True
        return device, device.input == input_id

    # ------------------------------------------------------------------
    # Event effects
    # ------------------------------------------------------------------

    async def set_muted(self, device_id: str, muted: bool) -> bool:
        """Record a reported mute change and re-resolve if it is new.

        Returns whether the state changed.
        """
        device, same = self.compare_mute(device_id, muted)
        if same or device is None:
            return False
        _logger.debug("%s muted=%s", device_id, muted)
        await self._apply_and_resolve(device.name, muted=muted)
        return True

    async def set_input(self, device_id: str, input_id: str) -> bool:
        """Record a reported input change and re-resolve if it is new."""
        device, same = self.compare_input(device_id, input_id)
        if same or device is None:
            return False
        _logger.debug("%s input=%s", device_id, input_id)
        await self._apply_and_resolve(device.name, input=input_id)
        return True

    async def master_mute(self) -> None:
        """Mute every audio device and push without resolving."""
        for device in self.room_state.audio_devices:
            device.muted = True
        await self.push_state()
