"""Startup gate: decide whether this instance should manage the room.

Two checks run before the service subscribes to events:

* the local hostname must match ``controller_pattern`` (when set), so
  only one control processor per room does the work;
* the room's ``autoMute`` flag in the configuration database must be on
  (when a database address is configured).

An instance that fails the gate parks: it stays alive but idle, so the
process supervisor does not restart it in a loop.
"""

from __future__ import annotations

import asyncio
import logging
import re
import socket
from collections.abc import Awaitable, Callable
from typing import NoReturn

from automute._api.room_config import fetch_auto_mute_enabled
from automute._constants import PARK_SLEEP_SECONDS
from automute._transport import Transport
from automute.config import AutoMuteConfig
from automute.exceptions import AutoMuteError

_logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def hostname_matches(pattern: str, hostname: str | None = None) -> bool:
    if hostname is None:
        hostname = socket.gethostname()
    return re.search(pattern, hostname) is not None


async def check_room_enabled(transport: Transport, room_id: str) -> bool:
    """Return the room's ``autoMute`` flag; any lookup failure counts as off."""
    try:
        return await fetch_auto_mute_enabled(transport, room_id)
    except AutoMuteError as exc:
        _logger.warning("Failed to read room configuration for %s: %s", room_id, exc)
        return False


async def park(sleep: Sleep = asyncio.sleep) -> NoReturn:
    """Idle until the process is terminated."""
    _logger.info("Cancel conditions met; sleeping")
    while True:
        await sleep(PARK_SLEEP_SECONDS)


async def wait_until_enabled(
    config: AutoMuteConfig,
    transport: Transport | None,
    *,
    sleep: Sleep = asyncio.sleep,
    hostname: str | None = None,
) -> None:
    """Return once this instance should run; park forever otherwise.

    *transport* talks to the configuration database and may be ``None``
    when no database is configured.
    """
    if config.controller_pattern and not hostname_matches(config.controller_pattern, hostname):
        _logger.info("Host is not a room controller (pattern %r)", config.controller_pattern)
        await park(sleep)

    if transport is None:
        _logger.debug("No configuration database configured; skipping autoMute check")
        return

    _logger.info("Checking room configuration")
    while True:
        if await check_room_enabled(transport, config.room_id):
            _logger.info("Auto mute enabled for %s", config.room_id)
            return
        if config.gate_retry_interval <= 0:
            await park(sleep)
        _logger.info(
            "Auto mute disabled for %s; checking again in %.0fs",
            config.room_id,
            config.gate_retry_interval,
        )
        await sleep(config.gate_retry_interval)
