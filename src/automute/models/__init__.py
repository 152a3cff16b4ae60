"""Data models for room state and hub events."""

from automute.models.event import Event, TargetDevice
from automute.models.room import AudioDevice, Display, PowerState, RoomState

__all__ = [
    "AudioDevice",
    "Display",
    "Event",
    "PowerState",
    "RoomState",
    "TargetDevice",
]
