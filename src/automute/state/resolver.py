"""Duplicate-audio resolution for displays sharing an input.

When several displays show the same input only one of them should play
its audio.  The choice is made per input group:

1. the device remembered in the priority cache, if it is still in the
   group (a choice sticks across resolutions);
2. otherwise the device with the lowest display number (``D2`` before
   ``D10``);
3. otherwise the first device of the group.

The chosen device is unmuted and every other device on the same input
is muted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from automute.exceptions import MalformedIdentifierError
from automute.identifiers import parse_display_number
from automute.models.room import RoomState

_logger = logging.getLogger(__name__)

#: Input id -> name of the device carrying audio for that input.
PriorityCache = dict[str, str]


def display_priority(name: str) -> tuple[int, int]:
    """Sort key for picking the audio device of a group.

    Lower sorts first.  Names with a display number sort by that number;
    names without one sort after all numbered names.
    """
    try:
        return 0, parse_display_number(name)
    except MalformedIdentifierError:
        return 1, 0


def group_displays(state: RoomState) -> dict[str, list[str]]:
    """Group audio-capable display names by the input they show.

    Displays without an audio device of the same name are left out.
    Names keep the order of ``state.displays``.
    """
    groups: dict[str, list[str]] = {}
    for display in state.displays:
        device = state.find_audio_device(display.name)
        if device is None:
            continue
        groups.setdefault(device.input, []).append(display.name)
    return groups


class DuplicateInputResolver:
    """Assigns audio to one device per input and remembers the choice."""

    def __init__(self, cache: PriorityCache | None = None, *, unmute_singletons: bool = True) -> None:
        self._cache: PriorityCache = cache if cache is not None else {}
        self._unmute_singletons = unmute_singletons

    @property
    def cache(self) -> PriorityCache:
        return self._cache

    def choose(self, input_id: str, names: Sequence[str]) -> str:
        """Pick the device of *names* that keeps audio for *input_id*."""
        if not names:
            raise ValueError(f"cannot choose an audio device for empty group {input_id!r}")
        cached = self._cache.get(input_id)
        if cached is not None and cached in names:
            return cached
        # min() keeps the first of equal keys, so unnumbered groups fall back to names[0].
        return min(names, key=display_priority)

    def resolve_group(self, input_id: str, names: Sequence[str], state: RoomState) -> str:
        """Unmute the chosen device of a group and mute the rest of its input."""
        chosen = self.choose(input_id, names)
        self._cache[input_id] = chosen
        _logger.debug("Input %s: %s carries audio for %s", input_id, chosen, list(names))

        for device in state.audio_devices:
            if device.name == chosen:
                device.muted = False
            elif device.input == input_id:
                device.muted = True
        return chosen

    def resolve(self, state: RoomState) -> dict[str, str]:
        """Resolve every input group of *state* in place.

        Returns the chosen device per input.
        """
        groups = group_displays(state)
        _logger.debug("Display groups: %s", groups)

        chosen: dict[str, str] = {}
        for input_id, names in groups.items():
            if len(names) >= 2:
                chosen[input_id] = self.resolve_group(input_id, names, state)
                continue

            name = names[0]
            self._cache[input_id] = name
            chosen[input_id] = name
            if self._unmute_singletons:
                device = state.find_audio_device(name)
                if device is not None:
                    device.muted = False
        return chosen
