"""Tests for wire values and IK / code helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from diga.utils import ik_number_with_prefix, ik_number_without_prefix, is_diga_test_code
from diga.values import (
    DateTimeString,
    amount,
    date_time_string,
    identifier,
    percent,
    quantity,
)


def test_identifier_scheme_is_optional() -> None:
    assert identifier("123").xml_attributes() == {}
    assert identifier("123", "XR01").xml_attributes() == {"schemeID": "XR01"}
    assert identifier("123", "XR01").xml_text() == "123"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("49.9", "49.90"),
        ("49.905", "49.90"),
        ("49.915", "49.92"),
        ("0", "0.00"),
        (10, "10.00"),
    ],
)
def test_amount_is_always_rounded_to_two_digits(raw, expected: str) -> None:
    value = amount(raw)

    assert value.xml_text() == expected
    assert value.value == Decimal(expected)


def test_amount_currency_only_when_given() -> None:
    assert amount("1").xml_attributes() == {}
    assert amount("1", "EUR").xml_attributes() == {"currencyID": "EUR"}


def test_percent_and_quantity_text() -> None:
    assert percent(Decimal("19")).xml_text() == "19"
    assert percent(Decimal("0")).xml_text() == "0"
    assert quantity(Decimal("1"), "C62").xml_text() == "1"
    assert quantity(Decimal("1"), "C62").xml_attributes() == {"unitCode": "C62"}


def test_date_time_string_from_date() -> None:
    value = date_time_string(date(2021, 3, 1))

    assert value.xml_text() == "20210301"
    assert value.xml_attributes() == {"format": "102"}


def test_date_time_string_uses_local_time_zone() -> None:
    aware = datetime(2021, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    expected = aware.astimezone().strftime("%Y%m%d")

    assert date_time_string(aware).xml_text() == expected
    assert date_time_string(datetime(2021, 3, 1, 23, 30)).xml_text() == "20210301"


def test_date_time_string_rejects_other_formats() -> None:
    with pytest.raises(ValueError):
        DateTimeString(value="2021-03-01", format="610")


@pytest.mark.parametrize("ik", ["IK123456789", "123456789", " IK109911114 "])
def test_ik_prefix_round_trip(ik: str) -> None:
    assert ik_number_with_prefix(ik_number_without_prefix(ik)) == ik_number_with_prefix(ik)
    assert ik_number_without_prefix(ik_number_with_prefix(ik)) == ik_number_without_prefix(ik)


def test_ik_forms() -> None:
    assert ik_number_without_prefix("IK123456789") == "123456789"
    assert ik_number_without_prefix("123456789") == "123456789"
    assert ik_number_with_prefix("123456789") == "IK123456789"
    assert ik_number_with_prefix("IK123456789") == "IK123456789"


def test_default_test_code_classifier() -> None:
    assert is_diga_test_code("77AAAAAAAAAAAGIS")
    assert not is_diga_test_code("2A4B6C8D0E2F4G6H")


def test_missing_ik_and_code_pass_through() -> None:
    assert ik_number_without_prefix(None) is None
    assert ik_number_with_prefix(None) is None
    assert not is_diga_test_code(None)
