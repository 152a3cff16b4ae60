"""Device state-change events delivered by the event hub."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from automute.models._base import AutoMuteBaseModel


class TargetDevice(AutoMuteBaseModel):
    model_config = ConfigDict(frozen=True)

    device_id: str = ""


class Event(AutoMuteBaseModel):
    """A single ``key``/``value`` change reported for a device.

    Hub events carry many more fields (timestamps, generating system,
    tags); only the ones the dispatcher needs are kept.
    """

    model_config = ConfigDict(frozen=True)

    key: str = ""
    value: str = ""
    target_device: TargetDevice = Field(default_factory=TargetDevice)

    @property
    def device_id(self) -> str:
        return self.target_device.device_id
