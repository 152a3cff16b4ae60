from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

import pytest

from automute._transport import HttpTransport
from automute.exceptions import InvalidValueError, UnexpectedStatusError
from automute.models import Event, PowerState, RoomState, TargetDevice
from automute.state.dispatch import (
    EventDispatcher,
    Ignore,
    MasterMute,
    MasterVolume,
    SetInput,
    SetMute,
    SetPower,
    classify,
    is_relevant,
    parse_bool,
)
from automute.state.manager import RoomStateManager

ROOM_ID = "ITB-1106"


class _FakeTransport:
    def __init__(self, state: dict[str, Any]) -> None:
        self.state = state
        self.put_error: Exception | None = None
        self.puts: list[dict[str, Any]] = []

    async def get_json(self, _endpoint: str) -> Any:
        return copy.deepcopy(self.state)

    async def put_json(self, _endpoint: str, payload: Mapping[str, Any]) -> None:
        if self.put_error is not None:
            raise self.put_error
        self.puts.append(dict(payload))


def _event(key: str, value: str, device: str = "") -> Event:
    device_id = f"{ROOM_ID}-{device}" if device else ""
    return Event(key=key, value=value, target_device=TargetDevice(device_id=device_id))


def _room_payload(power: str = "on") -> dict[str, Any]:
    return {
        "displays": [{"name": "D1"}, {"name": "D2"}],
        "audioDevices": [
            {"name": "D1", "power": power, "input": "VIA1", "muted": False},
            {"name": "D2", "power": power, "input": "VIA1", "muted": False},
        ],
    }


async def _dispatcher(power: str = "on") -> tuple[EventDispatcher, _FakeTransport]:
    transport = _FakeTransport(_room_payload(power))
    manager = RoomStateManager(ROOM_ID, transport)
    await manager.initialize()
    return EventDispatcher(manager), transport


def _muted(dispatcher: EventDispatcher) -> dict[str, bool]:
    return {d.name: d.muted for d in dispatcher.manager.room_state.audio_devices}


def test_parse_bool() -> None:
    assert parse_bool("true") is True
    assert parse_bool("T") is True
    assert parse_bool("0") is False
    with pytest.raises(InvalidValueError) as exc_info:
        parse_bool("maybe")
    assert exc_info.value.value == "maybe"


def test_classify_covers_every_key() -> None:
    assert classify(_event("power", "standby")) == SetPower(PowerState.STANDBY)
    assert classify(_event("power", "on")) == SetPower(PowerState.ON)
    assert isinstance(classify(_event("power", "rebooting")), Ignore)
    assert classify(_event("muted", "false", "D1")) == SetMute(f"{ROOM_ID}-D1", False)
    assert classify(_event("input", "PC1", "D2")) == SetInput(f"{ROOM_ID}-D2", "PC1")
    assert classify(_event("user-interaction", "master volume mute on display page")) == MasterMute()
    assert classify(_event("user-interaction", "master volume set on display page")) == MasterVolume()
    assert isinstance(classify(_event("user-interaction", "help requested")), Ignore)
    assert isinstance(classify(_event("volume", "30", "D1")), Ignore)


def test_classify_rejects_non_boolean_mute() -> None:
    with pytest.raises(InvalidValueError):
        classify(_event("muted", "loud", "D1"))


def test_is_relevant() -> None:
    assert is_relevant(_event("power", "on"))
    assert is_relevant(_event("muted", "true", "D1"))
    assert is_relevant(_event("input", "PC1", "D1"))
    assert is_relevant(_event("user-interaction", "master volume mute on display page"))
    assert is_relevant(_event("user-interaction", "master volume set on display page"))
    assert not is_relevant(_event("user-interaction", "page changed"))
    assert not is_relevant(_event("volume", "30", "D1"))


@pytest.mark.asyncio
async def test_power_off_event_resets_mute_without_push() -> None:
    dispatcher, transport = await _dispatcher()
    dispatcher.manager.room_state.audio_devices[1].muted = True

    await dispatcher.dispatch(_event("power", "standby", "D1"))

    assert not dispatcher.manager.is_on()
    assert _muted(dispatcher) == {"D1": False, "D2": False}
    assert transport.puts == []


@pytest.mark.asyncio
async def test_power_on_event_resolves_room() -> None:
    dispatcher, transport = await _dispatcher(power="standby")

    await dispatcher.dispatch(_event("power", "on", "D2"))

    assert dispatcher.manager.is_on()
    assert _muted(dispatcher) == {"D1": False, "D2": True}
    assert len(transport.puts) == 1


@pytest.mark.asyncio
async def test_power_event_matching_state_is_noop() -> None:
    dispatcher, transport = await _dispatcher()

    await dispatcher.dispatch(_event("power", "on", "D1"))

    assert transport.puts == []
    assert dispatcher.manager.resolver.cache == {}


@pytest.mark.asyncio
async def test_events_ignored_while_room_is_off() -> None:
    dispatcher, transport = await _dispatcher(power="standby")

    await dispatcher.dispatch(_event("input", "PC1", "D2"))
    await dispatcher.dispatch(_event("muted", "true", "D1"))
    await dispatcher.dispatch(_event("user-interaction", "master volume mute on display page"))

    assert transport.puts == []
    assert dispatcher.manager.room_state.audio_devices[1].input == "VIA1"
    assert _muted(dispatcher) == {"D1": False, "D2": False}


@pytest.mark.asyncio
async def test_mute_event_triggers_resolution() -> None:
    dispatcher, transport = await _dispatcher()

    await dispatcher.dispatch(_event("muted", "true", "D1"))

    # D1 is still the lowest display on VIA1, so it gets its audio back.
    assert _muted(dispatcher) == {"D1": False, "D2": True}
    assert transport.puts[-1]["audioDevices"] == [{"name": "D1", "muted": False}, {"name": "D2", "muted": True}]


@pytest.mark.asyncio
async def test_invalid_mute_value_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    dispatcher, transport = await _dispatcher()

    with caplog.at_level(logging.ERROR, logger="automute.state.dispatch"):
        await dispatcher.dispatch(_event("muted", "sometimes", "D1"))

    assert transport.puts == []
    assert "not a boolean" in caplog.text


@pytest.mark.asyncio
async def test_input_event_for_non_display_is_noop() -> None:
    dispatcher, transport = await _dispatcher()

    await dispatcher.dispatch(_event("input", "PC1", "VIA1"))

    assert transport.puts == []


@pytest.mark.asyncio
async def test_master_mute_bypasses_resolver() -> None:
    dispatcher, transport = await _dispatcher()

    await dispatcher.dispatch(_event("user-interaction", "master volume mute on display page"))

    assert _muted(dispatcher) == {"D1": True, "D2": True}
    assert transport.puts[-1]["audioDevices"] == [{"name": "D1", "muted": True}, {"name": "D2", "muted": True}]


@pytest.mark.asyncio
async def test_master_volume_resends_state_unchanged() -> None:
    dispatcher, transport = await _dispatcher()

    await dispatcher.dispatch(_event("user-interaction", "master volume set on display page"))

    assert _muted(dispatcher) == {"D1": False, "D2": False}
    assert transport.puts == [dispatcher.manager.room_state.to_payload()]


@pytest.mark.asyncio
async def test_push_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    dispatcher, transport = await _dispatcher()
    transport.put_error = UnexpectedStatusError("HTTP 502 from /buildings/ITB/rooms/1106", status_code=502)

    with caplog.at_level(logging.ERROR, logger="automute.state.dispatch"):
        await dispatcher.dispatch(_event("input", "PC1", "D2"))

    assert "HTTP 502" in caplog.text
    assert dispatcher.manager.room_state.audio_devices[1].input == "PC1"


class _TimeoutSession:
    def put(self, _url: str, **_kwargs: Any) -> Any:
        raise TimeoutError


@pytest.mark.asyncio
async def test_push_timeout_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    manager = RoomStateManager(
        ROOM_ID,
        HttpTransport("http://av-api:8000", _TimeoutSession()),  # type: ignore[arg-type]
        room_state=RoomState.model_validate(_room_payload()),
    )
    dispatcher = EventDispatcher(manager)

    with caplog.at_level(logging.ERROR, logger="automute.state.dispatch"):
        await dispatcher.dispatch(_event("input", "PC1", "D2"))

    assert "TimeoutError" in caplog.text
    assert manager.room_state.audio_devices[1].input == "PC1"
