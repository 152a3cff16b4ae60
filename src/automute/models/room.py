"""Room state models as served by the inventory service."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from automute.identifiers import is_display_name
from automute.models._base import AutoMuteBaseModel, AutoMuteEnum


class PowerState(AutoMuteEnum):
    """Device power as reported by the inventory service."""

    ON = "on"
    STANDBY = "standby"
    UNKNOWN = "unknown"


class Display(AutoMuteBaseModel):
    """A physical screen.  ``name`` joins it to an :class:`AudioDevice`."""

    name: str
    power: PowerState | None = None
    input: str | None = None
    blanked: bool | None = None


class AudioDevice(AutoMuteBaseModel):
    """A device that can produce audio.

    A device sharing its ``name`` with a :class:`Display` is a display
    with built-in speakers.
    """

    name: str
    power: PowerState = PowerState.UNKNOWN
    input: str = ""
    muted: bool = False
    volume: int | None = None


class RoomState(AutoMuteBaseModel):
    """Displays and audio devices of one room."""

    displays: list[Display] = Field(default_factory=list)
    audio_devices: list[AudioDevice] = Field(default_factory=list)

    def find_audio_device(self, name: str) -> AudioDevice | None:
        for device in self.audio_devices:
            if device.name == name:
                return device
        return None

    def trim_non_displays(self) -> list[str]:
        """Drop audio devices that are not displays (e.g. DSPs, mics).

        Returns the names that were removed.
        """
        removed = [d.name for d in self.audio_devices if not is_display_name(d.name)]
        if removed:
            self.audio_devices = [d for d in self.audio_devices if is_display_name(d.name)]
        return removed

    def to_payload(self, *, mute_only: bool = True) -> dict[str, Any]:
        """Serialize for a ``PUT`` to the inventory service.

        With *mute_only* only names and mute flags are sent, so the push
        cannot change power or input on the devices.
        """
        if not mute_only:
            return self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return {
            "displays": [{"name": d.name} for d in self.displays],
            "audioDevices": [{"name": d.name, "muted": d.muted} for d in self.audio_devices],
        }
