"""Base model and enum for inventory service payloads.

Every payload model inherits from :class:`AutoMuteBaseModel` which maps
the camelCase keys used on the wire (``audioDevices``, ``deviceId``) to
snake_case attributes.  Room models are mutable: the manager updates
them in place as events arrive.

String enums inherit from :class:`AutoMuteEnum` which adds an
``UNKNOWN`` member and a ``_missing_`` hook so unexpected values from
the API do not fail validation.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AutoMuteEnum(enum.StrEnum):
    """Base for string state enums.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> AutoMuteEnum:
        # pylint: disable=no-member
        if hasattr(cls, "UNKNOWN"):
            unknown: AutoMuteEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class AutoMuteBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=True,
    )
