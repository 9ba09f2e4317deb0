"""Configuration management for the finance tracker.

This module centralizes the locale, period and reminder settings used by
the computation helpers, together with environment variable overrides.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List

# Currency rendering (pt-BR by default)
CURRENCY_SYMBOL = os.getenv("FINTRACK_CURRENCY_SYMBOL", "R$")
THOUSANDS_SEPARATOR = os.getenv("FINTRACK_THOUSANDS_SEPARATOR", ".")
DECIMAL_SEPARATOR = os.getenv("FINTRACK_DECIMAL_SEPARATOR", ",")

# Period selector
ALL_PERIODS = os.getenv("FINTRACK_ALL_PERIODS", "Todos")
ALL_PERIOD_ALIASES = {ALL_PERIODS.strip().lower(), "all", "todos"}

MONTH_NAMES: List[str] = [
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
]

ENGLISH_MONTH_NAMES: List[str] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

MONTH_ABBREVIATIONS: List[str] = [
    "jan.", "fev.", "mar.", "abr.", "mai.", "jun.",
    "jul.", "ago.", "set.", "out.", "nov.", "dez.",
]

PERIOD_OPTIONS: List[str] = [ALL_PERIODS, *MONTH_NAMES]

# Due-date reminders
REMINDER_DAYS_OVERDUE = int(os.getenv("FINTRACK_REMINDER_DAYS_OVERDUE", "10"))
REMINDER_DAYS_AHEAD = int(os.getenv("FINTRACK_REMINDER_DAYS_AHEAD", "5"))

# Investment allocation palette
CHART_COLORS: List[str] = [
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#6366f1",
    "#14b8a6",
]

LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()


def month_lookup() -> Dict[str, int]:
    """Map every accepted month name (lower-cased) to its 1-based number."""
    lookup: Dict[str, int] = {}
    for names in (MONTH_NAMES, ENGLISH_MONTH_NAMES):
        for number, name in enumerate(names, start=1):
            lookup[name.lower()] = number
    return lookup


def get_config() -> Dict[str, Any]:
    """Return a snapshot of the active configuration."""
    return {
        "currency_symbol": CURRENCY_SYMBOL,
        "thousands_separator": THOUSANDS_SEPARATOR,
        "decimal_separator": DECIMAL_SEPARATOR,
        "all_periods": ALL_PERIODS,
        "period_options": list(PERIOD_OPTIONS),
        "reminder_days_overdue": REMINDER_DAYS_OVERDUE,
        "reminder_days_ahead": REMINDER_DAYS_AHEAD,
        "chart_colors": list(CHART_COLORS),
        "log_level": LOG_LEVEL,
    }
