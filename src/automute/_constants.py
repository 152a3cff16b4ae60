"""Constants shared across automute modules."""

from __future__ import annotations

import re

USER_AGENT = "automute/0.1"

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

#: Display names carry their priority as ``D<number>`` (``D1`` beats ``D2``).
DISPLAY_NUMBER_PATTERN = re.compile(r"D([0-9]+)")

# Event keys the dispatcher understands.
KEY_POWER = "power"
KEY_MUTED = "muted"
KEY_INPUT = "input"
KEY_USER_INTERACTION = "user-interaction"

# ``user-interaction`` values sent by the touch panel UI.
MASTER_MUTE_VALUE = "master volume mute on display page"
MASTER_VOLUME_VALUE = "master volume set on display page"

#: Seconds between wake-ups while the service is parked by the startup gate.
PARK_SLEEP_SECONDS = 600.0

# Accepted spellings for boolean event values.
TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})
