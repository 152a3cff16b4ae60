"""Room state endpoints of the inventory service (the AV API)."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from automute._transport import Transport
from automute.exceptions import AutoMuteTransportError
from automute.identifiers import parse_room_id
from automute.models.room import RoomState

_logger = logging.getLogger(__name__)


def room_endpoint(room_id: str) -> str:
    """Build ``/buildings/{building}/rooms/{room}`` for *room_id*."""
    building, room = parse_room_id(room_id)
    return f"/buildings/{building}/rooms/{room}"


async def fetch_room_state(transport: Transport, room_id: str) -> RoomState:
    """Fetch the current state of a room.

    Audio devices that are not displays are dropped from the result.
    """
    endpoint = room_endpoint(room_id)
    _logger.debug("Fetching room state for %s", room_id)
    data = await transport.get_json(endpoint)

    if not isinstance(data, dict):
        raise AutoMuteTransportError(f"Room state from {endpoint} is not an object", endpoint=endpoint)
    if data.get("audioDevices") is None:
        raise AutoMuteTransportError("no audio devices found in the room", endpoint=endpoint)

    try:
        state = RoomState.model_validate(data)
    except ValidationError as exc:
        raise AutoMuteTransportError(f"Malformed room state from {endpoint}: {exc}", endpoint=endpoint) from exc

    removed = state.trim_non_displays()
    if removed:
        _logger.debug("Ignoring non-display audio devices in %s: %s", room_id, removed)
    return state


async def push_room_state(
    transport: Transport,
    room_id: str,
    state: RoomState,
    *,
    mute_only: bool = True,
) -> None:
    """Send *state* to the inventory service, which applies it to the devices."""
    endpoint = room_endpoint(room_id)
    _logger.debug("Pushing room state for %s (mute_only=%s)", room_id, mute_only)
    await transport.put_json(endpoint, state.to_payload(mute_only=mute_only))
