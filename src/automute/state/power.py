"""Room-wide power state derived from individual audio devices.

Power is never stored on its own: the room is on exactly when no audio
device reports ``standby``.
"""

from __future__ import annotations

import enum
import logging

from automute.models.room import PowerState, RoomState

_logger = logging.getLogger(__name__)


class PowerTransition(enum.Enum):
    NONE = "none"
    POWER_ON = "power_on"
    POWER_OFF = "power_off"


def is_on(state: RoomState) -> bool:
    """Return ``True`` unless some audio device is in standby.

    A room with no audio devices counts as on.
    """
    return all(device.power != PowerState.STANDBY for device in state.audio_devices)


def transition_for(state: RoomState, target: PowerState) -> PowerTransition:
    """Decide what a ``power`` event with value *target* should do.

    Only a disagreement with the current derived state fires a
    transition; anything else is a no-op.
    """
    currently_on = is_on(state)
    if target == PowerState.STANDBY and currently_on:
        return PowerTransition.POWER_OFF
    if target == PowerState.ON and not currently_on:
        return PowerTransition.POWER_ON
    return PowerTransition.NONE


def power_on(state: RoomState) -> None:
    """Mark every audio device as on.

    Callers must run a full resolution afterwards so mute assignment is
    recomputed for the now-live devices.
    """
    _logger.debug("Powering on %d audio devices", len(state.audio_devices))
    for device in state.audio_devices:
        device.power = PowerState.ON


def power_off(state: RoomState) -> None:
    """Put every audio device in standby and clear its mute flag."""
    _logger.debug("Powering off %d audio devices", len(state.audio_devices))
    for device in state.audio_devices:
        device.power = PowerState.STANDBY
        device.muted = False
