"""Unit tests for finance_tracker.dates."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from finance_tracker.dates import (
    add_installment_months,
    add_one_month,
    classify_month,
    days_until,
    month_label,
    to_date,
)


def test_add_one_month_pins_to_end_of_february() -> None:
    assert add_one_month("2024-01-31") == "2024-02-29"
    assert add_one_month("2023-01-31") == "2023-02-28"
    assert add_one_month("2024-12-15") == "2025-01-15"


def test_add_one_month_empty_input() -> None:
    assert add_one_month("") == ""
    assert add_one_month(None) == ""


def test_add_installment_months_matches_one_month_helper() -> None:
    assert add_installment_months("2024-01-31", 1) == add_one_month("2024-01-31")
    assert add_installment_months("2024-05-15", 3) == "2024-08-15"


def test_add_installment_months_clamps_overflow() -> None:
    assert add_installment_months("2024-10-31", 4) == "2025-02-28"
    assert add_installment_months("2024-03-31", "2") == "2024-05-31"
    assert add_installment_months("2024-08-31", 1) == "2024-09-30"


@pytest.mark.parametrize(
    "start, count",
    [("2024-01-31", 0), ("2024-01-31", -2), ("", 3), ("not a date", 3), ("2024-01-31", "abc")],
)
def test_add_installment_months_degrades_to_empty(start, count) -> None:
    assert add_installment_months(start, count) == ""


def test_add_installment_months_accepts_date_objects() -> None:
    assert add_installment_months(date(2024, 1, 15), 12) == "2025-01-15"


def test_classify_month_uses_calendar_month_of_iso_dates() -> None:
    assert classify_month("2024-03-01", "Março")
    assert not classify_month("2024-03-01", "Fevereiro")
    assert classify_month("2024-12-31", "Dezembro")


def test_classify_month_accepts_english_names_and_any_case() -> None:
    assert classify_month(date(2024, 7, 4), "July")
    assert classify_month(datetime(2024, 7, 4, 23, 59), " julho ")
    assert classify_month("2024-03-10", "MARÇO")


@pytest.mark.parametrize("value", [None, "", "garbage", "2024-05-05", date(2020, 1, 1)])
def test_classify_month_all_sentinel_matches_everything(value) -> None:
    assert classify_month(value, "Todos")
    assert classify_month(value, "All")


def test_classify_month_unknown_name_is_permissive() -> None:
    assert classify_month("2024-05-05", "Smarch")
    assert classify_month(None, "Smarch")


def test_classify_month_unreadable_date_does_not_match() -> None:
    assert not classify_month("garbage", "Março")
    assert not classify_month(None, "Março")


def test_to_date_variants() -> None:
    assert to_date("2024-02-10T00:00:00") == date(2024, 2, 10)
    assert to_date(datetime(2024, 2, 10, 15, 30)) == date(2024, 2, 10)
    assert to_date(1704067200000) == date(2024, 1, 1)
    assert to_date("") is None
    assert to_date(True) is None


def test_month_label_and_days_until() -> None:
    assert month_label("2024-03-15") == "mar."
    assert month_label("") == ""
    assert days_until("2024-01-10", today=date(2024, 1, 5)) == 5
    assert days_until(date(2024, 1, 1), today=date(2024, 1, 5)) == -4
    assert days_until("", today=date(2024, 1, 5)) is None


@pytest.mark.parametrize(
    "start, count",
    [("9999-12-15", 1), ("9999-06-30", "12"), ("2024-01-31", 99999), ("2024-01-31", "1e300")],
)
def test_add_installment_months_past_last_year_is_empty(start, count) -> None:
    assert add_installment_months(start, count) == ""


def test_add_one_month_in_last_representable_month() -> None:
    assert add_one_month("9999-12-15") == ""
    assert add_one_month("9999-11-30") == "9999-12-30"
