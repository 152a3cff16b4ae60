"""Event classification and dispatch.

Hub events are plain ``key``/``value`` pairs.  :func:`classify` turns
each one into a command from a closed set, and :class:`EventDispatcher`
applies the command to the room through a :class:`RoomStateManager`.

Only power commands run while the room is off; everything else is
dropped until the room powers back on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import assert_never

from automute._constants import (
    FALSE_VALUES,
    KEY_INPUT,
    KEY_MUTED,
    KEY_POWER,
    KEY_USER_INTERACTION,
    MASTER_MUTE_VALUE,
    MASTER_VOLUME_VALUE,
    TRUE_VALUES,
)
from automute.exceptions import AutoMuteError, InvalidValueError
from automute.models.event import Event
from automute.models.room import PowerState
from automute.state import power
from automute.state.manager import RoomStateManager

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetPower:
    target: PowerState


@dataclass(frozen=True)
class SetMute:
    device_id: str
    muted: bool


@dataclass(frozen=True)
class SetInput:
    device_id: str
    input_id: str


@dataclass(frozen=True)
class MasterMute:
    """Mute button pressed on a touch panel."""


@dataclass(frozen=True)
class MasterVolume:
    """Volume slider moved on a touch panel."""


@dataclass(frozen=True)
class Ignore:
    reason: str


RoomCommand = SetPower | SetMute | SetInput | MasterMute | MasterVolume | Ignore


def parse_bool(value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise InvalidValueError(f"not a boolean: {value!r}", key=KEY_MUTED, value=value)


def is_relevant(event: Event) -> bool:
    """Whether an event is worth handing to the dispatcher at all."""
    if event.key in (KEY_POWER, KEY_MUTED, KEY_INPUT):
        return True
    return event.key == KEY_USER_INTERACTION and event.value in (MASTER_MUTE_VALUE, MASTER_VOLUME_VALUE)


def classify(event: Event) -> RoomCommand:
    """Map an event to the command it asks for.

    Raises :class:`InvalidValueError` for a ``muted`` event whose value
    is not a boolean.
    """
    if event.key == KEY_POWER:
        target = PowerState(event.value)
        if target == PowerState.UNKNOWN:
            return Ignore(f"unknown power value {event.value!r}")
        return SetPower(target)

    if event.key == KEY_MUTED:
        return SetMute(event.device_id, parse_bool(event.value))

    if event.key == KEY_INPUT:
        return SetInput(event.device_id, event.value)

    if event.key == KEY_USER_INTERACTION:
        if event.value == MASTER_MUTE_VALUE:
            return MasterMute()
        if event.value == MASTER_VOLUME_VALUE:
            return MasterVolume()
        return Ignore(f"unhandled user interaction {event.value!r}")

    return Ignore(f"unhandled key {event.key!r}")


class EventDispatcher:
    """Applies classified events to one room, one at a time."""

    def __init__(self, manager: RoomStateManager) -> None:
        self._manager = manager

    @property
    def manager(self) -> RoomStateManager:
        return self._manager

    async def dispatch(self, event: Event) -> None:
        """Handle one event.  Errors are logged and the event dropped."""
        try:
            command = classify(event)
        except InvalidValueError as exc:
            _logger.error("Dropping %s event from %s: %s", event.key, event.device_id, exc)
            return

        if isinstance(command, Ignore):
            _logger.debug("Ignoring event: %s", command.reason)
            return

        _logger.debug("Handling %s event: %s", event.key, command)
        try:
            await self._apply(command)
        except AutoMuteError as exc:
            _logger.error("Failed to handle %s event from %s: %s", event.key, event.device_id, exc)

    async def _apply(self, command: SetPower | SetMute | SetInput | MasterMute | MasterVolume) -> None:
        manager = self._manager

        if isinstance(command, SetPower):
            transition = power.transition_for(manager.room_state, command.target)
            if transition == power.PowerTransition.POWER_OFF:
                manager.power_off()
            elif transition == power.PowerTransition.POWER_ON:
                await manager.power_on()
            return

        if not manager.is_on():
            _logger.debug("Room %s is off; dropping %s", manager.room_id, command)
            return

        if isinstance(command, SetMute):
            await manager.set_muted(command.device_id, command.muted)
        elif isinstance(command, SetInput):
            await manager.set_input(command.device_id, command.input_id)
        elif isinstance(command, MasterMute):
            _logger.debug("Master mute pressed in %s", manager.room_id)
            await manager.master_mute()
        elif isinstance(command, MasterVolume):
            _logger.debug("Master volume changed in %s; re-sending room state", manager.room_id)
            await manager.push_state()
        else:
            assert_never(command)
