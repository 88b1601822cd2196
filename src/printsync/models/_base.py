"""Base model and enum for control daemon payloads.

Every fragment model inherits from :class:`PrinterBaseModel` which
provides:

* ``extra="ignore"`` so new daemon fields never break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default (``None``, meaning "not carried") is used.
* A ``raw`` dict that captures the original payload.

State enums inherit from :class:`PrinterEnum` which resolves any value
without a mapped member to ``UNKNOWN`` instead of raising ``ValueError``.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PrinterEnum(enum.StrEnum):
    """Base for daemon state enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    """

    @classmethod
    def _missing_(cls, value: object) -> PrinterEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: PrinterEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class PrinterBaseModel(BaseModel):
    """Base for daemon response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop explicit nulls and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep a caller-provided raw (kwargs construction) untouched.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
