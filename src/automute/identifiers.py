"""Parsing helpers for room, device, and display identifiers.

Rooms are named ``BUILDING-ROOM`` (``ITB-1106``) and devices
``BUILDING-ROOM-DEVICE`` (``ITB-1106-D2``).  Displays encode their
audio priority in the device name as ``D<number>``.
"""

from __future__ import annotations

from automute._constants import DISPLAY_NUMBER_PATTERN
from automute.exceptions import MalformedIdentifierError


def parse_room_id(room_id: str) -> tuple[str, str]:
    """Split a room id into ``(building, room)``."""
    tokens = room_id.split("-")
    if len(tokens) < 2:
        raise MalformedIdentifierError(f"invalid room id: {room_id}", identifier=room_id)
    return tokens[0], tokens[1]


def parse_device_id(device_id: str) -> tuple[str, str, str]:
    """Split a device id into ``(building, room, device)``.

    The device part is the trailing token.
    """
    tokens = device_id.split("-")
    if len(tokens) < 3:
        raise MalformedIdentifierError(f"invalid device id: {device_id}", identifier=device_id)
    return tokens[0], tokens[1], tokens[-1]


def parse_display_id(device_id: str) -> str:
    """Return the device name (``D2``) from a full device id."""
    return parse_device_id(device_id)[2]


def room_id_from_device_id(device_id: str) -> str:
    """Return the ``BUILDING-ROOM`` id of the room a device lives in."""
    building, room, _ = parse_device_id(device_id)
    return f"{building}-{room}"


def parse_display_number(name: str) -> int:
    """Return the number embedded in a display name.

    ``D1`` is 1 and ``D10`` is 10, so ordering is numeric rather than
    lexical.  Names without a ``D<number>`` part are not displays.
    """
    match = DISPLAY_NUMBER_PATTERN.search(name)
    if match is None:
        raise MalformedIdentifierError(
            f"failed to parse display name {name!r}; expected format `D#`",
            identifier=name,
        )
    return int(match.group(1))


def is_display_name(name: str) -> bool:
    try:
        parse_display_number(name)
    except MalformedIdentifierError:
        return False
    return True
