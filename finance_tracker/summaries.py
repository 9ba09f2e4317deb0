"""Dashboard figures computed from filtered record lists.

Every function here expects a list that has already been narrowed with
:mod:`finance_tracker.filters`.  Records may be store rows or record
dataclasses; column names are the store's (``valor_total``, ``periodo`` ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from . import config
from .dates import days_until, month_label, to_date
from .filters import aggregate_totals, field_value, records_to_frame
from .money import to_number_or_zero
from .records import interest_rate

OTHER_INVESTMENTS = "Outros"


# ---------------------------------------------------------------------------
# Summary cards
# ---------------------------------------------------------------------------


def client_summary(records: Iterable[Any]) -> Dict[str, float]:
    totals = aggregate_totals(records, ["valor_inicial", "valor_juros", "valor_total"])
    return {
        "initial": totals["valor_inicial"],
        "interest": totals["valor_juros"],
        "total": totals["valor_total"],
    }


def credit_summary(records: Iterable[Any]) -> Dict[str, float]:
    """Installment credit card; ``remaining`` is the principal share of the total."""
    totals = aggregate_totals(
        records,
        ["valor_inicial", "qnt_parcelas", "valor_parcelas", "valor_juros", "valor_total"],
    )
    return {
        "initial": totals["valor_inicial"],
        "installment_count": totals["qnt_parcelas"],
        "installment_amount": totals["valor_parcelas"],
        "interest": totals["valor_juros"],
        "total": totals["valor_total"],
        "remaining": round(totals["valor_total"] - totals["valor_juros"], 2),
    }


def cash_flow_summary(records: Iterable[Any]) -> Dict[str, float]:
    totals = aggregate_totals(records, ["valor_entrada", "valor_saida", "valor_saldo"])
    return {
        "inflow": totals["valor_entrada"],
        "outflow": totals["valor_saida"],
        "balance": totals["valor_saldo"],
    }


def expense_control_summary(records: Iterable[Any]) -> Dict[str, float]:
    totals = aggregate_totals(records, ["receita", "despesas_obrigatorias", "despesas_variaveis", "saldo"])
    return {
        "revenue": totals["receita"],
        "mandatory_expenses": totals["despesas_obrigatorias"],
        "variable_expenses": totals["despesas_variaveis"],
        "balance": totals["saldo"],
    }


def investment_summary(records: Iterable[Any]) -> Dict[str, float]:
    """Investment card; ``rate`` is the portfolio-wide return on principal."""
    totals = aggregate_totals(records, ["valor_inicial", "valor_juros", "valor_total"])
    return {
        "initial": totals["valor_inicial"],
        "interest": totals["valor_juros"],
        "total": totals["valor_total"],
        "rate": interest_rate(totals["valor_juros"], totals["valor_inicial"]),
    }


# ---------------------------------------------------------------------------
# Chart data
# ---------------------------------------------------------------------------


def investment_allocation(records: Iterable[Any]) -> pd.DataFrame:
    """Total invested per investment option, largest first.

    Blank options are grouped as ``Outros`` and non-positive totals are
    skipped.  Colors follow the order in which options first appear, before
    sorting, so a given portfolio keeps stable slice colors.
    """
    columns = ["option", "total", "color"]
    frame = records_to_frame(records)
    if frame.empty:
        return pd.DataFrame(columns=columns)

    options = _column(frame, "opcao_investimento").fillna("").astype(str).str.strip()
    options = options.where(options != "", OTHER_INVESTMENTS)
    totals = _column(frame, "valor_total").map(to_number_or_zero)

    working = pd.DataFrame({"option": options, "total": totals})
    working = working[working["total"] > 0]
    if working.empty:
        return pd.DataFrame(columns=columns)

    grouped = working.groupby("option", sort=False)["total"].sum().reset_index()
    palette = config.CHART_COLORS
    grouped["color"] = [palette[index % len(palette)] for index in range(len(grouped))]
    grouped["total"] = grouped["total"].round(2)
    return grouped.sort_values("total", ascending=False, kind="mergesort").reset_index(drop=True)[columns]


def monthly_series(records: Iterable[Any], date_field: str, value_fields: Sequence[str]) -> pd.DataFrame:
    """Per-record time series for line charts, ordered by date.

    Returns ``period`` (date), ``month`` (short label) and one numeric column
    per entry of ``value_fields``.  Records with unreadable dates are dropped.
    """
    columns = ["period", "month", *value_fields]
    frame = records_to_frame(records)
    if frame.empty or date_field not in frame.columns:
        return pd.DataFrame(columns=columns)

    series = pd.DataFrame({"period": frame[date_field].map(to_date)})
    series["month"] = series["period"].map(month_label)
    for name in value_fields:
        series[name] = _column(frame, name).map(to_number_or_zero)
    series = series[series["period"].notna()]
    return series.sort_values("period", kind="mergesort").reset_index(drop=True)[columns]


def _column(frame: pd.DataFrame, name: str) -> pd.Series:
    if name in frame.columns:
        return frame[name]
    return pd.Series([None] * len(frame), index=frame.index, dtype=object)


# ---------------------------------------------------------------------------
# Due-date reminders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DueReminder:
    """One bell entry.  Investments carry no due date and a ``rate`` instead."""

    kind: str
    name: str
    due_date: Optional[date]
    total: float
    interest: float
    days_left: Optional[int]
    rate: Optional[float] = None

    @property
    def overdue(self) -> bool:
        return self.days_left is not None and self.days_left < 0


def due_reminders(
    clients: Iterable[Any] = (),
    credits: Iterable[Any] = (),
    today: Optional[date] = None,
    days_overdue: Optional[int] = None,
    days_ahead: Optional[int] = None,
    investments: Iterable[Any] = (),
) -> List[DueReminder]:
    """Receivables due soon or recently overdue, most urgent first.

    A client or credit is included when its ``data_final`` lies between
    ``days_overdue`` days ago and ``days_ahead`` days from ``today`` (both
    inclusive).  Every investment is listed after the dated entries, in the
    order given.
    """
    today = today or date.today()
    lower = -(config.REMINDER_DAYS_OVERDUE if days_overdue is None else days_overdue)
    upper = config.REMINDER_DAYS_AHEAD if days_ahead is None else days_ahead

    reminders: List[DueReminder] = []
    for kind, records in (("client", clients), ("credit", credits)):
        for record in records:
            due = to_date(field_value(record, "data_final"))
            if due is None:
                continue
            remaining = days_until(due, today)
            if not lower <= remaining <= upper:
                continue
            reminders.append(
                DueReminder(
                    kind=kind,
                    name=str(field_value(record, "nome") or ""),
                    due_date=due,
                    total=to_number_or_zero(field_value(record, "valor_total")),
                    interest=to_number_or_zero(field_value(record, "valor_juros")),
                    days_left=remaining,
                )
            )
    reminders.sort(key=lambda reminder: reminder.days_left)

    for record in investments:
        reminders.append(
            DueReminder(
                kind="investment",
                name=str(field_value(record, "instituicao") or ""),
                due_date=None,
                total=to_number_or_zero(field_value(record, "valor_total")),
                interest=to_number_or_zero(field_value(record, "valor_juros")),
                days_left=None,
                rate=to_number_or_zero(field_value(record, "taxa_juros")),
            )
        )
    return reminders
