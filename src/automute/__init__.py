"""automute - keep one display per shared input carrying audio."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("automute")
except PackageNotFoundError:
    __version__ = "0+local"
from automute.config import AutoMuteConfig
from automute.exceptions import (
    AutoMuteConfigError,
    AutoMuteError,
    AutoMuteTransportError,
    InvalidValueError,
    MalformedIdentifierError,
    UnexpectedStatusError,
)
from automute.models import AudioDevice, Display, Event, PowerState, RoomState, TargetDevice
from automute.service import AutoMuteService
from automute.state.dispatch import EventDispatcher
from automute.state.manager import RoomStateManager
from automute.state.resolver import DuplicateInputResolver

__all__ = [
    "__version__",
    "AudioDevice",
    "AutoMuteConfig",
    "AutoMuteConfigError",
    "AutoMuteError",
    "AutoMuteService",
    "AutoMuteTransportError",
    "Display",
    "DuplicateInputResolver",
    "Event",
    "EventDispatcher",
    "InvalidValueError",
    "MalformedIdentifierError",
    "PowerState",
    "RoomState",
    "RoomStateManager",
    "TargetDevice",
    "UnexpectedStatusError",
]
