"""Environment-driven service settings."""
from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel

__all__: list[str] = [
    "LengthUnit",
    "OverflowPolicy",
    "Settings",
    "load_settings",
]


class OverflowPolicy(str, Enum):
    """What happens when a total does not fit in 32 bits."""

    WRAP = "wrap"
    SATURATE = "saturate"
    ERROR = "error"


class LengthUnit(str, Enum):
    """How string length is counted."""

    BYTES = "bytes"  # UTF-8 encoded length
    CHARS = "chars"  # Unicode code points


class Settings(BaseModel):
    log_level: str = "INFO"
    overflow: OverflowPolicy = OverflowPolicy.WRAP
    length_unit: LengthUnit = LengthUnit.BYTES
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"extra": "forbid", "frozen": True}


def load_settings() -> Settings:
    """
    Build Settings from the process environment.
    Raises pydantic.ValidationError on invalid values.
    """
    return Settings(
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        overflow=os.environ.get("AGGREGATOR_OVERFLOW", OverflowPolicy.WRAP.value).lower(),
        length_unit=os.environ.get("AGGREGATOR_LENGTH_UNIT", LengthUnit.BYTES.value).lower(),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
    )
