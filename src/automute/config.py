"""Service configuration for automute."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from automute.exceptions import AutoMuteConfigError, MalformedIdentifierError
from automute.identifiers import parse_room_id, room_id_from_device_id


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _with_scheme(address: str, scheme: str) -> str:
    address = address.strip().rstrip("/")
    if "://" in address:
        return address
    return f"{scheme}://{address}"


@dataclasses.dataclass(frozen=True)
class AutoMuteConfig:
    """Service configuration.

    Parameters
    ----------
    room_id : str
        Room to manage, as ``BUILDING-ROOM``.  Derived from *device_id*
        when left empty.
    hub_address : str
        Address of the event hub (``host:port`` or a ``ws://`` URL).
    api_address : str
        Address of the AV API serving room state.
    device_id : str or None
        Id of the control processor this instance runs on, as
        ``BUILDING-ROOM-DEVICE``.
    gate_address : str or None
        Address of the room configuration database.  When unset the
        ``autoMute`` flag is not checked and the service always runs.
    controller_pattern : str or None
        Regular expression the local hostname must match before the
        service considers running (e.g. ``"CP1"`` so only the first
        control processor of a room manages it).
    gate_retry_interval : float
        Seconds between ``autoMute`` re-checks while the flag is off or
        unreadable.  ``0`` parks the service for good after the first
        negative check.
    unmute_singletons : bool
        Unmute a display that is alone on its input during resolution.
    refetch_on_resolve : bool
        Re-fetch room state from the AV API before each resolution
        instead of trusting the in-memory copy.
    mute_only_push : bool
        Send only names and mute flags when pushing state.
    hub_reconnect_interval : float
        Seconds to wait before reconnecting to the event hub.  ``0``
        stops the service when the hub connection closes.
    log_level : str
        Logging level name.
    """

    room_id: str = ""
    hub_address: str = ""
    api_address: str = ""
    device_id: str | None = None
    gate_address: str | None = None
    controller_pattern: str | None = None
    gate_retry_interval: float = 0.0
    unmute_singletons: bool = True
    refetch_on_resolve: bool = False
    mute_only_push: bool = True
    hub_reconnect_interval: float = 5.0
    log_level: str = "info"

    def __post_init__(self) -> None:
        if not self.room_id and self.device_id:
            try:
                object.__setattr__(self, "room_id", room_id_from_device_id(self.device_id))
            except MalformedIdentifierError as exc:
                raise AutoMuteConfigError(str(exc)) from exc

    def validate(self) -> None:
        """Raise :class:`AutoMuteConfigError` if required settings are missing."""
        if not self.room_id:
            raise AutoMuteConfigError("Room ID required. Use --room-id or --device-id to identify the room")
        if not self.hub_address:
            raise AutoMuteConfigError("Event hub address required. Use --hub-address to provide it")
        if not self.api_address:
            raise AutoMuteConfigError("AV API address required. Use --av-api to provide it")
        try:
            parse_room_id(self.room_id)
        except MalformedIdentifierError as exc:
            raise AutoMuteConfigError(str(exc)) from exc
        if self.gate_retry_interval < 0:
            raise AutoMuteConfigError("gate_retry_interval must not be negative")

    @property
    def api_base_url(self) -> str:
        return _with_scheme(self.api_address, "http")

    @property
    def gate_base_url(self) -> str | None:
        if not self.gate_address:
            return None
        return _with_scheme(self.gate_address, "http")

    @property
    def hub_url(self) -> str:
        return f"{_with_scheme(self.hub_address, 'ws')}/subscribe"

    @classmethod
    def from_env(cls, **overrides: Any) -> AutoMuteConfig:
        """Create configuration from ``AUTOMUTE_*`` environment variables.

        Explicit keyword arguments override environment values; ``None``
        overrides are ignored so unset CLI flags fall through to the
        environment.
        """
        env = os.environ
        overrides = {k: v for k, v in overrides.items() if v is not None}

        _ENV_STR_MAP = {
            "AUTOMUTE_ROOM_ID": "room_id",
            "AUTOMUTE_DEVICE_ID": "device_id",
            "AUTOMUTE_HUB_ADDRESS": "hub_address",
            "AUTOMUTE_API_ADDRESS": "api_address",
            "AUTOMUTE_GATE_ADDRESS": "gate_address",
            "AUTOMUTE_CONTROLLER_PATTERN": "controller_pattern",
            "AUTOMUTE_LOG_LEVEL": "log_level",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "AUTOMUTE_GATE_RETRY_INTERVAL": "gate_retry_interval",
            "AUTOMUTE_HUB_RECONNECT_INTERVAL": "hub_reconnect_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = float(val)
                except ValueError as exc:
                    raise AutoMuteConfigError(f"{env_key} must be a number, got {val!r}") from exc

        _ENV_BOOL_MAP = {
            "AUTOMUTE_UNMUTE_SINGLETONS": ("unmute_singletons", True),
            "AUTOMUTE_REFETCH_ON_RESOLVE": ("refetch_on_resolve", False),
            "AUTOMUTE_MUTE_ONLY_PUSH": ("mute_only_push", True),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
