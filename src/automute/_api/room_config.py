"""Room configuration lookup (the auto-mute feature flag)."""

from __future__ import annotations

from automute._transport import Transport
from automute.exceptions import AutoMuteTransportError


async def fetch_auto_mute_enabled(transport: Transport, room_id: str) -> bool:
    """Return the ``configuration.autoMute`` flag of a room.

    A document without the flag raises rather than defaulting, so callers
    can tell a disabled room from a broken lookup in the logs.
    """
    endpoint = f"/rooms/{room_id}"
    data = await transport.get_json(endpoint)

    configuration = data.get("configuration") if isinstance(data, dict) else None
    if not isinstance(configuration, dict) or "autoMute" not in configuration:
        raise AutoMuteTransportError(f"Missing configuration.autoMute from {endpoint}", endpoint=endpoint)

    value = configuration["autoMute"]
    if not isinstance(value, bool):
        raise AutoMuteTransportError(
            f"configuration.autoMute from {endpoint} is not a boolean: {value!r}",
            endpoint=endpoint,
        )
    return value
