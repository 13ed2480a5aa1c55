"""Classification of raw JSON values into data items."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Union

__all__: list[str] = [
    "U32_MAX",
    "IntItem",
    "TextItem",
    "DataItem",
    "classify_item",
    "decode_items",
]

U32_MAX = 2**32 - 1


@dataclass(frozen=True)
class IntItem:
    value: int


@dataclass(frozen=True)
class TextItem:
    value: str


DataItem = Union[IntItem, TextItem]


def classify_item(raw: Any) -> DataItem:
    """
    Try an unsigned 32-bit integer first, then a string.
    Raises ValueError if the value is neither.
    """
    # bool is an int subclass but a JSON boolean is not a number
    if isinstance(raw, int) and not isinstance(raw, bool):
        if 0 <= raw <= U32_MAX:
            return IntItem(raw)
        raise ValueError(f"integer {raw} is outside the range 0..{U32_MAX}")
    if isinstance(raw, str):
        if not _is_valid_unicode(raw):
            raise ValueError("string contains an unpaired UTF-16 surrogate escape")
        return TextItem(raw)
    raise ValueError(f"expected a string or an unsigned 32-bit integer, got {_json_type(raw)}")


def decode_items(raw_values: Iterable[Any]) -> list[DataItem]:
    """Classify every value in order; the first failure rejects the whole list."""
    items: list[DataItem] = []
    for index, raw in enumerate(raw_values):
        try:
            items.append(classify_item(raw))
        except ValueError as exc:
            raise ValueError(f"data[{index}]: {exc}") from exc
    return items


def _json_type(raw: Any) -> str:
    if raw is None:
        return "null"
    if isinstance(raw, bool):
        return "boolean"
    if isinstance(raw, float):
        return "number"
    if isinstance(raw, dict):
        return "object"
    if isinstance(raw, list):
        return "array"
    return type(raw).__name__


def _is_valid_unicode(text: str) -> bool:
    # json accepts lone \ud800-style escapes; they have no UTF-8 encoding
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
