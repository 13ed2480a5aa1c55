"""Single-pass totals over decoded data items."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from data_aggregator.config import LengthUnit, OverflowPolicy
from data_aggregator.services.items import U32_MAX, DataItem, IntItem, TextItem

__all__: list[str] = [
    "AggregationOverflowError",
    "Aggregator",
    "Totals",
    "apply_overflow",
    "text_length",
]

_U32_MODULUS = U32_MAX + 1


class AggregationOverflowError(ValueError):
    """A total exceeded 32 bits while the overflow policy is 'error'."""


@dataclass(frozen=True)
class Totals:
    string_len: int
    int_sum: int


def text_length(text: str, unit: LengthUnit) -> int:
    if unit is LengthUnit.CHARS:
        return len(text)
    return len(text.encode("utf-8"))


def apply_overflow(total: int, policy: OverflowPolicy, field: str) -> int:
    """
    Fit a non-negative total into 32 bits according to policy.
    Raises AggregationOverflowError for the 'error' policy.
    """
    if total <= U32_MAX:
        return total
    if policy is OverflowPolicy.WRAP:
        return total % _U32_MODULUS
    if policy is OverflowPolicy.SATURATE:
        return U32_MAX
    raise AggregationOverflowError(f"'{field}' total {total} exceeds {U32_MAX}")


class Aggregator:
    """
    Computes string_len and int_sum for a decoded request.

    The logger receives the diagnostic record of each request and
    never influences the result.
    """

    def __init__(
        self,
        overflow: OverflowPolicy = OverflowPolicy.WRAP,
        length_unit: LengthUnit = LengthUnit.BYTES,
        logger: logging.Logger | None = None,
    ) -> None:
        self.overflow = OverflowPolicy(overflow)
        self.length_unit = LengthUnit(length_unit)
        self.logger = logger or logging.getLogger(__name__)

    def __call__(self, items: Sequence[DataItem]) -> Totals:
        self.logger.info("Received data request with %d items: %r", len(items), items)
        string_len = 0
        int_sum = 0
        # widened accumulators, policy applied once at the end
        for item in items:
            if isinstance(item, TextItem):
                string_len += text_length(item.value, self.length_unit)
            elif isinstance(item, IntItem):
                int_sum += item.value
        return Totals(
            string_len=apply_overflow(string_len, self.overflow, "string_len"),
            int_sum=apply_overflow(int_sum, self.overflow, "int_sum"),
        )
