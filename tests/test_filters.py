"""Unit tests for finance_tracker.filters."""

from __future__ import annotations

import pandas as pd
import pytest

from finance_tracker.filters import (
    aggregate_totals,
    filter_by_period,
    filter_by_text,
    filter_frame,
    filter_records,
    records_to_frame,
)
from finance_tracker.money import masked_text_to_number
from finance_tracker.records import InvestmentEntry, MonthlyClient, derive_investment


def _clients():
    return [
        {"nome": "Ana Souza", "telefone": "11987654321", "valor_total": 1100, "data_final": "2024-03-10"},
        {"nome": "Bruno Lima", "telefone": "21912345678", "valor_total": "850.50", "data_final": "2024-04-02"},
        {"nome": "Carla", "telefone": "", "valor_total": None, "data_final": None},
    ]


def test_filter_by_text_is_case_insensitive_substring() -> None:
    result = filter_by_text([{"nome": "Ana"}, {"nome": "Bruno"}], "an", ["nome"])
    assert result == [{"nome": "Ana"}]


def test_filter_by_text_empty_query_returns_everything() -> None:
    clients = _clients()
    assert filter_by_text(clients, "", ["nome"]) == clients
    assert filter_by_text(clients, None, ["nome"]) == clients


def test_filter_by_text_checks_every_selector() -> None:
    result = filter_by_text(_clients(), "2191", ["nome", "telefone"])
    assert [row["nome"] for row in result] == ["Bruno Lima"]

    by_callable = filter_by_text(_clients(), "CARLA", [lambda row: row["nome"]])
    assert [row["nome"] for row in by_callable] == ["Carla"]


def test_filter_by_text_reads_dataclass_records_by_column_name() -> None:
    records = [MonthlyClient(name="Ana"), MonthlyClient(name="Bruno")]
    assert filter_by_text(records, "bru", ["nome"]) == [records[1]]


def test_filter_by_period_selects_month() -> None:
    result = filter_by_period(_clients(), "Março", "data_final")
    assert [row["nome"] for row in result] == ["Ana Souza"]


def test_filter_by_period_all_keeps_undated_records() -> None:
    assert len(filter_by_period(_clients(), "Todos", "data_final")) == 3


def test_filter_by_period_unknown_month_drops_only_undated_records() -> None:
    result = filter_by_period(_clients(), "Smarch", "data_final")
    assert [row["nome"] for row in result] == ["Ana Souza", "Bruno Lima"]


def test_aggregate_totals_empty_list_is_zero() -> None:
    assert aggregate_totals([], ["valor_inicial", "valor_total"]) == {"valor_inicial": 0.0, "valor_total": 0.0}


def test_aggregate_totals_tolerates_missing_and_malformed_fields() -> None:
    records = _clients() + [{"nome": "Davi", "valor_total": "abc"}, {"nome": "Eva"}]
    totals = aggregate_totals(records, ["valor_total"])
    assert totals["valor_total"] == pytest.approx(1950.5)


def test_aggregate_totals_keeps_callable_selectors_apart() -> None:
    records = [{"a": 1, "b": 10}, {"a": 2, "b": 20}]
    totals = aggregate_totals(records, [lambda r: r["a"], lambda r: r["b"], "a"])
    assert totals == {"<lambda>": 3.0, "<lambda>[1]": 30.0, "a": 3.0}


def test_aggregate_totals_names_functions_after_themselves() -> None:
    def principal(record):
        return record["valor_inicial"]

    assert aggregate_totals([{"valor_inicial": 5}], [principal]) == {"principal": 5.0}


def test_filter_records_composes_text_then_period() -> None:
    clients = _clients()
    assert filter_records("cliente", clients, query="a", month_name="Abril") == [clients[1]]
    assert filter_records("cliente", clients, query="9876") == [clients[0]]

    cash_flow = [{"periodo": "2024-03-01", "valor_entrada": 10}, {"periodo": "2024-04-01", "valor_entrada": 20}]
    # cash flow has no searchable text; only the period applies
    assert filter_records("fluxo_caixa", cash_flow, query="zzz", month_name="Abril") == [cash_flow[1]]

    with pytest.raises(ValueError):
        filter_records("unknown", clients)


def test_end_to_end_masked_input_to_dashboard_total() -> None:
    initial = masked_text_to_number("R$ 1.000,00")
    assert initial == 1000

    first = derive_investment(InvestmentEntry(institution="Banco X", initial_amount=initial, total_amount=1150))
    assert first.interest_amount == 150
    assert first.interest_rate == pytest.approx(15.00)

    second = derive_investment(InvestmentEntry(institution="Banco Y", initial_amount=800, total_amount=850))
    totals = aggregate_totals(filter_by_text([first, second], "banco", ["instituicao"]), ["valor_total"])
    assert totals == {"valor_total": 2000.0}


def test_records_to_frame_uses_store_columns() -> None:
    frame = records_to_frame([MonthlyClient(name="Ana", total_amount=10), {"nome": "Bruno", "valor_total": 5}])
    assert list(frame["nome"]) == ["Ana", "Bruno"]
    assert list(frame["valor_total"]) == [10, 5]


def test_filter_frame_applies_search_and_month() -> None:
    df = pd.DataFrame(_clients())

    by_text = filter_frame(df, query="ana", text_columns=["nome", "telefone"])
    assert list(by_text["nome"]) == ["Ana Souza"]

    by_month = filter_frame(df, month_name="Abril", date_column="data_final")
    assert list(by_month["nome"]) == ["Bruno Lima"]

    untouched = filter_frame(df, month_name="Todos", date_column="data_final")
    assert len(untouched) == 3

    missing_column = filter_frame(df, month_name="Abril", date_column="periodo")
    assert missing_column.empty


def test_filter_frame_handles_empty_input() -> None:
    assert filter_frame(pd.DataFrame(), query="x").empty
    assert filter_frame(None).empty
