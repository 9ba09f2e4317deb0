#!/usr/bin/env python3
"""Print dashboard summaries for an exported record snapshot.

The snapshot is the JSON payload returned by the records API, i.e. an
object with ``serverClients``, ``serverCredits``, ``serverCashFlow``,
``serverControl`` and ``serverInvestment`` lists.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import config
from finance_tracker.filters import filter_records
from finance_tracker.logging_config import setup_logging
from finance_tracker.money import format_currency
from finance_tracker.summaries import (
    cash_flow_summary,
    client_summary,
    credit_summary,
    due_reminders,
    expense_control_summary,
    investment_allocation,
    investment_summary,
)

logger = logging.getLogger("finance_tracker.scripts.summarize")

# snapshot key -> (store table, title)
SNAPSHOT_KEYS = {
    "serverClients": ("cliente", "Monthly clients"),
    "serverCredits": ("credito_longo", "Installment credits"),
    "serverCashFlow": ("fluxo_caixa", "Cash flow"),
    "serverControl": ("controle_gasto", "Expense control"),
    "serverInvestment": ("investimento", "Investments"),
}

SUMMARIES = {
    "cliente": client_summary,
    "credito_longo": credit_summary,
    "fluxo_caixa": cash_flow_summary,
    "controle_gasto": expense_control_summary,
    "investimento": investment_summary,
}

# figures that are counts or percentages rather than money
PLAIN_FIGURES = {"installment_count", "rate"}


def load_snapshot(path: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Read a snapshot file and return its record lists keyed by store table."""
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported snapshot file '{path.name}'; expected .json")
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object")

    tables: Dict[str, List[Dict[str, Any]]] = {}
    for key, (table, _title) in SNAPSHOT_KEYS.items():
        rows = data.get(key) or []
        if not isinstance(rows, list):
            logger.warning("Ignoring malformed snapshot section", extra={"section": key})
            rows = []
        tables[table] = [row for row in rows if isinstance(row, dict)]
    return tables


def _format_figure(name: str, value: float) -> str:
    if name == "rate":
        return f"{value:.2f}%"
    if name in PLAIN_FIGURES:
        return f"{value:g}"
    return format_currency(value)


def render_report(tables: Dict[str, List[Dict[str, Any]]], month: str, search: str) -> List[str]:
    lines: List[str] = [f"Period: {month}" + (f" | Search: {search}" if search else "")]
    filtered: Dict[str, List[Dict[str, Any]]] = {}
    for key, (table, title) in SNAPSHOT_KEYS.items():
        rows = filter_records(table, tables.get(table, []), query=search, month_name=month)
        filtered[table] = rows
        lines.append("")
        lines.append(f"{title} ({len(rows)})")
        for name, value in SUMMARIES[table](rows).items():
            lines.append(f"  {name.replace('_', ' ')}: {_format_figure(name, value)}")

    allocation = investment_allocation(filtered["investimento"])
    if not allocation.empty:
        lines.append("")
        lines.append("Investment allocation")
        for _, row in allocation.iterrows():
            lines.append(f"  {row['option']}: {format_currency(row['total'])}")

    reminders = due_reminders(filtered["cliente"], filtered["credito_longo"])
    if reminders:
        lines.append("")
        lines.append("Due reminders")
        for reminder in reminders:
            status = f"overdue {abs(reminder.days_left)} days" if reminder.overdue else f"due in {reminder.days_left} days"
            lines.append(
                f"  [{reminder.kind}] {reminder.name} {reminder.due_date.isoformat()} "
                f"{format_currency(reminder.total)} ({status})"
            )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize an exported record snapshot.")
    parser.add_argument("snapshot", type=Path, help="Path to the JSON snapshot")
    parser.add_argument("--month", default=config.ALL_PERIODS, help="Month name or the all-periods label")
    parser.add_argument("--search", default="", help="Text to match against names, phones and options")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, static_fields={"month": args.month, "search": args.search})
    try:
        tables = load_snapshot(args.snapshot)
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        logger.error("Could not load snapshot", extra={"path": str(args.snapshot), "error": str(exc)})
        return 1

    logger.info(
        "Loaded snapshot",
        extra={"path": str(args.snapshot), "records": sum(len(rows) for rows in tables.values())},
    )
    print("\n".join(render_report(tables, args.month, args.search)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
