"""Search, period and aggregation helpers for record collections.

Records may be store rows (plain mappings) or the dataclasses from
:mod:`finance_tracker.records`.  Field selectors are attribute/column names
or callables taking a record.  Dashboards always narrow a list by text
first, then by period, and aggregate only the fully filtered list.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from . import config
from .dates import classify_month, is_all_periods
from .money import to_number_or_zero

FieldSelector = Union[str, Callable[[Any], Any]]

# text fields searched and date field filtered, per store table
CATEGORY_FILTERS: Dict[str, Dict[str, Any]] = {
    "cliente": {"text_fields": ["nome", "telefone"], "date_field": "data_final"},
    "credito_longo": {"text_fields": ["nome", "opcoes_credito", "telefone"], "date_field": "data_final"},
    "investimento": {"text_fields": ["instituicao", "opcao_investimento"], "date_field": "periodo"},
    "fluxo_caixa": {"text_fields": [], "date_field": "periodo"},
    "controle_gasto": {"text_fields": [], "date_field": "periodo"},
}


def field_value(record: Any, selector: FieldSelector) -> Any:
    """Read one field from a mapping or object; missing fields give ``None``.

    A dataclass record also answers to its store column names.
    """
    if callable(selector):
        return selector(record)
    if isinstance(record, Mapping):
        return record.get(selector)
    if hasattr(record, selector):
        return getattr(record, selector)
    resolve = getattr(record, "resolve_field", None)
    if resolve is not None:
        try:
            return getattr(record, resolve(selector))
        except ValueError:
            return None
    return None


def filter_by_text(records: Iterable[Any], query: Optional[str], field_selectors: Sequence[FieldSelector]) -> List[Any]:
    """Keep records where any selected field contains ``query``, ignoring case."""
    records = list(records)
    needle = (query or "").strip().lower()
    if not needle:
        return records
    matched = []
    for record in records:
        for selector in field_selectors:
            value = field_value(record, selector)
            if not _is_missing(value) and needle in str(value).lower():
                matched.append(record)
                break
    return matched


def filter_by_period(records: Iterable[Any], month_name: Optional[str], date_field_selector: FieldSelector) -> List[Any]:
    """Keep records whose date field falls in ``month_name``.

    With the all-periods sentinel every record is kept; otherwise records
    without a date are dropped.
    """
    records = list(records)
    if month_name is None or is_all_periods(month_name):
        return records
    return [
        record
        for record in records
        if _in_period(field_value(record, date_field_selector), month_name)
    ]


def aggregate_totals(records: Iterable[Any], field_selectors: Sequence[FieldSelector]) -> Dict[str, float]:
    """Sum each selected numeric field; missing or malformed values count as zero.

    Keys are the selector names (``__name__`` for callables).  A name already
    used by an earlier selector, such as a second lambda, is suffixed with
    the selector's position: ``<lambda>``, ``<lambda>[1]``.
    """
    keys = _selector_keys(field_selectors)
    totals: Dict[str, float] = {key: 0.0 for key in keys}
    for record in records:
        for key, selector in zip(keys, field_selectors):
            totals[key] += to_number_or_zero(field_value(record, selector))
    return {key: round(value, 2) for key, value in totals.items()}


def filter_records(
    table: str,
    records: Iterable[Any],
    query: Optional[str] = "",
    month_name: Optional[str] = config.ALL_PERIODS,
) -> List[Any]:
    """Apply a category's search fields, then its period filter."""
    try:
        preset = CATEGORY_FILTERS[table]
    except KeyError:
        raise ValueError(f"Unknown record table '{table}'") from None
    filtered = list(records)
    if preset["text_fields"]:
        filtered = filter_by_text(filtered, query, preset["text_fields"])
    return filter_by_period(filtered, month_name, preset["date_field"])


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _in_period(value: Any, month_name: str) -> bool:
    return not _is_missing(value) and classify_month(value, month_name)


def _selector_keys(field_selectors: Sequence[FieldSelector]) -> List[str]:
    keys: List[str] = []
    for index, selector in enumerate(field_selectors):
        key = getattr(selector, "__name__", repr(selector)) if callable(selector) else selector
        if key in keys:
            key = f"{key}[{index}]"
        keys.append(key)
    return keys


# ---------------------------------------------------------------------------
# DataFrame variants
# ---------------------------------------------------------------------------


def records_to_frame(records: Iterable[Any]) -> pd.DataFrame:
    """Build a DataFrame from store rows or record dataclasses.

    Dataclass records are written with their store column names so frames
    built from either source share the same columns.
    """
    rows = []
    for record in records:
        if hasattr(record, "to_row"):
            rows.append(record.to_row())
        elif is_dataclass(record):
            rows.append(asdict(record))
        else:
            rows.append(dict(record))
    return pd.DataFrame(rows)


def filter_frame(
    df: pd.DataFrame,
    query: Optional[str] = "",
    text_columns: Sequence[str] = (),
    month_name: Optional[str] = config.ALL_PERIODS,
    date_column: Optional[str] = None,
) -> pd.DataFrame:
    """DataFrame counterpart of :func:`filter_by_text` + :func:`filter_by_period`."""
    if df is None or df.empty:
        return pd.DataFrame() if df is None else df.copy()
    filtered = df.copy()

    search_text = (query or "").strip().lower()
    search_cols = [col for col in text_columns if col in filtered.columns]
    if search_text and search_cols:
        combined_mask = pd.Series(False, index=filtered.index)
        for col in search_cols:
            values = filtered[col].astype("string").str.lower()
            combined_mask = combined_mask | values.str.contains(search_text, regex=False, na=False)
        filtered = filtered[combined_mask]

    if date_column and month_name is not None and not is_all_periods(month_name):
        if date_column not in filtered.columns:
            return filtered.iloc[0:0]
        in_period = filtered[date_column].map(lambda value: _in_period(value, month_name)).astype(bool)
        filtered = filtered[in_period]

    return filtered
