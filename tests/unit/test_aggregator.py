import logging

import pytest
from data_aggregator.config import LengthUnit, OverflowPolicy
from data_aggregator.services.aggregator import (
    AggregationOverflowError,
    Aggregator,
    Totals,
    apply_overflow,
    text_length,
)
from data_aggregator.services.items import U32_MAX, IntItem, TextItem, decode_items


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_empty_request():
    assert Aggregator()([]) == Totals(string_len=0, int_sum=0)

def test_integers_only():
    assert Aggregator()(decode_items([1, 2, 3])) == Totals(string_len=0, int_sum=6)

def test_strings_only():
    assert Aggregator()(decode_items(["ab", "cde"])) == Totals(string_len=5, int_sum=0)

def test_mixed_items():
    assert Aggregator()(decode_items([1, "ab", 2, "c"])) == Totals(string_len=3, int_sum=3)

def test_order_does_not_matter():
    items = decode_items([10, "xyz", 5, "", "hello", 7])
    aggregator = Aggregator()
    assert aggregator(items) == aggregator(list(reversed(items)))

def test_wrap_is_the_default_overflow():
    items = [IntItem(U32_MAX), IntItem(U32_MAX)]
    assert Aggregator()(items).int_sum == 2**32 - 2

def test_saturate_overflow():
    items = [IntItem(U32_MAX), IntItem(U32_MAX)]
    assert Aggregator(overflow=OverflowPolicy.SATURATE)(items).int_sum == U32_MAX

def test_error_overflow():
    items = [IntItem(U32_MAX), IntItem(1)]
    with pytest.raises(AggregationOverflowError, match="int_sum"):
        Aggregator(overflow=OverflowPolicy.ERROR)(items)

def test_policy_accepts_plain_strings():
    aggregator = Aggregator(overflow="saturate", length_unit="chars")
    assert aggregator.overflow is OverflowPolicy.SATURATE
    assert aggregator.length_unit is LengthUnit.CHARS

def test_apply_overflow_leaves_fitting_totals_alone():
    for policy in OverflowPolicy:
        assert apply_overflow(U32_MAX, policy, "int_sum") == U32_MAX

def test_multibyte_text_counts_bytes_by_default():
    # "é" is two bytes in UTF-8, "€" is three
    assert Aggregator()([TextItem("é€")]).string_len == 5

def test_multibyte_text_counts_chars_when_configured():
    assert Aggregator(length_unit=LengthUnit.CHARS)([TextItem("é€")]).string_len == 2

def test_text_length_ascii_is_unit_independent():
    assert text_length("hello", LengthUnit.BYTES) == text_length("hello", LengthUnit.CHARS) == 5

def test_request_is_logged_to_injected_logger():
    logger = logging.getLogger("test.aggregator")
    logger.propagate = False
    logger.setLevel(logging.INFO)
    handler = ListHandler()
    logger.addHandler(handler)
    try:
        totals = Aggregator(logger=logger)(decode_items([4, "ab"]))
    finally:
        logger.removeHandler(handler)
    assert totals == Totals(string_len=2, int_sum=4)
    assert len(handler.records) == 1
    assert "2 items" in handler.records[0].getMessage()

def test_disabled_logger_does_not_change_result():
    logger = logging.getLogger("test.aggregator.disabled")
    logger.disabled = True
    assert Aggregator(logger=logger)(decode_items([1, "ab", 2, "c"])) == Totals(3, 3)
