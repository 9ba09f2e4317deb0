"""Record types and the formulas that derive their dependent fields.

Each category of financial record is a frozen dataclass.  Records are never
mutated: the ``derive_*`` functions take the current record plus, optionally,
the field that just changed and return a new record with every dependent
field recomputed.  The same call serves a live form (one keystroke at a
time) and a submit handler, so both always agree.

Persistence rows use the store's column names (``nome``, ``valor_inicial``,
``data_final`` ...); :meth:`from_row` and :meth:`to_row` translate between
those rows and the dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Type

from .dates import add_installment_months, add_one_month, to_date
from .money import round_cents, to_number_or_zero


class StoreRecord:
    """Row mapping shared by all record dataclasses."""

    TABLE: ClassVar[str] = ""
    # attribute name -> store column name
    COLUMNS: ClassVar[Dict[str, str]] = {}
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ()
    INTEGER_FIELDS: ClassVar[Tuple[str, ...]] = ()
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ()
    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def resolve_field(cls, name: str) -> str:
        """Return the attribute for ``name`` given as attribute or column name."""
        if name in cls.COLUMNS:
            return name
        for attr, column in cls.COLUMNS.items():
            if column == name:
                return attr
        raise ValueError(f"Unknown field '{name}' for {cls.__name__}")

    @classmethod
    def coerce(cls, attr: str, value: Any) -> Any:
        if attr in cls.OPTIONAL_FIELDS and value is None:
            return None
        if attr in cls.INTEGER_FIELDS:
            return int(to_number_or_zero(value))
        if attr in cls.NUMERIC_FIELDS:
            return to_number_or_zero(value)
        if attr in cls.DATE_FIELDS:
            parsed = to_date(value)
            return parsed.isoformat() if parsed else ""
        return "" if value is None else str(value)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        """Build a record from a store row, coercing numbers and dates."""
        values: Dict[str, Any] = {"id": row.get("id")}
        for attr, column in cls.COLUMNS.items():
            raw = row[column] if column in row else row.get(attr)
            values[attr] = cls.coerce(attr, raw)
        return cls(**values)

    def to_row(self) -> Dict[str, Any]:
        """Serialize back to store column names; ``id`` only when set."""
        row: Dict[str, Any] = {}
        if getattr(self, "id", None) is not None:
            row["id"] = self.id
        for attr, column in self.COLUMNS.items():
            row[column] = getattr(self, attr)
        return row

    def with_change(self, field: Optional[str] = None, value: Any = None):
        """Return a copy with ``field`` set to the coerced ``value``."""
        if field is None:
            return self
        attr = self.resolve_field(field)
        return replace(self, **{attr: self.coerce(attr, value)})


def interest_rate(interest: Any, initial: Any) -> float:
    """Simple interest rate in percent, ``0.0`` when there is no principal."""
    principal = to_number_or_zero(initial)
    if principal <= 0:
        return 0.0
    return round(to_number_or_zero(interest) / principal * 100, 2)


@dataclass(frozen=True)
class MonthlyClient(StoreRecord):
    """One-month receivable with a fixed interest add-on."""

    name: str = ""
    initial_amount: float = 0.0
    interest_amount: float = 0.0
    total_amount: float = 0.0
    start_date: str = ""
    end_date: str = ""
    phone: str = ""
    id: Optional[Any] = None

    TABLE: ClassVar[str] = "cliente"
    COLUMNS: ClassVar[Dict[str, str]] = {
        "name": "nome",
        "initial_amount": "valor_inicial",
        "interest_amount": "valor_juros",
        "total_amount": "valor_total",
        "start_date": "data_inicial",
        "end_date": "data_final",
        "phone": "telefone",
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ("initial_amount", "interest_amount", "total_amount")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("start_date", "end_date")


@dataclass(frozen=True)
class InstallmentCredit(StoreRecord):
    """Receivable repaid in fixed monthly installments."""

    name: str = ""
    credit_option: str = ""
    initial_amount: float = 0.0
    installment_count: int = 0
    installment_amount: float = 0.0
    interest_amount: float = 0.0
    total_amount: float = 0.0
    interest_rate: float = 0.0
    start_date: str = ""
    end_date: str = ""
    phone: str = ""
    id: Optional[Any] = None

    TABLE: ClassVar[str] = "credito_longo"
    COLUMNS: ClassVar[Dict[str, str]] = {
        "name": "nome",
        "credit_option": "opcoes_credito",
        "initial_amount": "valor_inicial",
        "installment_count": "qnt_parcelas",
        "installment_amount": "valor_parcelas",
        "interest_amount": "valor_juros",
        "total_amount": "valor_total",
        "interest_rate": "taxa_juros",
        "start_date": "data_inicial",
        "end_date": "data_final",
        "phone": "telefone",
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = (
        "initial_amount",
        "installment_amount",
        "interest_amount",
        "total_amount",
        "interest_rate",
    )
    INTEGER_FIELDS: ClassVar[Tuple[str, ...]] = ("installment_count",)
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("start_date", "end_date")


@dataclass(frozen=True)
class CashFlowEntry(StoreRecord):
    """Periodic inflow/outflow record.  ``balance_amount`` is caller supplied."""

    inflow_amount: float = 0.0
    outflow_amount: float = 0.0
    balance_amount: Optional[float] = None
    period: str = ""
    id: Optional[Any] = None

    TABLE: ClassVar[str] = "fluxo_caixa"
    COLUMNS: ClassVar[Dict[str, str]] = {
        "inflow_amount": "valor_entrada",
        "outflow_amount": "valor_saida",
        "balance_amount": "valor_saldo",
        "period": "periodo",
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ("inflow_amount", "outflow_amount", "balance_amount")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("period",)
    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = ("balance_amount",)


@dataclass(frozen=True)
class ExpenseControlEntry(StoreRecord):
    """Monthly personal budget: revenue minus mandatory and variable expenses."""

    revenue: float = 0.0
    mandatory_expenses: float = 0.0
    variable_expenses: float = 0.0
    balance: float = 0.0
    period: str = ""
    id: Optional[Any] = None

    TABLE: ClassVar[str] = "controle_gasto"
    COLUMNS: ClassVar[Dict[str, str]] = {
        "revenue": "receita",
        "mandatory_expenses": "despesas_obrigatorias",
        "variable_expenses": "despesas_variaveis",
        "balance": "saldo",
        "period": "periodo",
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ("revenue", "mandatory_expenses", "variable_expenses", "balance")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("period",)


@dataclass(frozen=True)
class InvestmentEntry(StoreRecord):
    """Principal and return for an institution/instrument pairing."""

    institution: str = ""
    investment_option: str = ""
    initial_amount: float = 0.0
    interest_amount: float = 0.0
    total_amount: float = 0.0
    interest_rate: float = 0.0
    period: str = ""
    id: Optional[Any] = None

    TABLE: ClassVar[str] = "investimento"
    COLUMNS: ClassVar[Dict[str, str]] = {
        "institution": "instituicao",
        "investment_option": "opcao_investimento",
        "initial_amount": "valor_inicial",
        "interest_amount": "valor_juros",
        "total_amount": "valor_total",
        "interest_rate": "taxa_juros",
        "period": "periodo",
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ("initial_amount", "interest_amount", "total_amount", "interest_rate")
    DATE_FIELDS: ClassVar[Tuple[str, ...]] = ("period",)


# ---------------------------------------------------------------------------
# Derivations
# ---------------------------------------------------------------------------


def derive_monthly_client(record: MonthlyClient, field: Optional[str] = None, value: Any = None) -> MonthlyClient:
    """total = initial + interest; due date one month after the start."""
    record = record.with_change(field, value)
    initial = round_cents(record.initial_amount)
    interest = round_cents(record.interest_amount)
    return replace(
        record,
        initial_amount=initial,
        interest_amount=interest,
        total_amount=round(initial + interest, 2),
        end_date=add_one_month(record.start_date),
    )


def derive_installment_credit(
    record: InstallmentCredit, field: Optional[str] = None, value: Any = None
) -> InstallmentCredit:
    """Total, interest, rate and final due date from the installment terms.

    ``total = count * installment``, ``interest = total - initial``,
    ``rate = interest / initial * 100`` (zero without principal) and the last
    installment falls ``count`` months after the start date.
    """
    record = record.with_change(field, value)
    initial = round_cents(record.initial_amount)
    count = int(to_number_or_zero(record.installment_count))
    installment = round_cents(record.installment_amount)
    total = round(count * installment, 2)
    interest = round(total - initial, 2)
    return replace(
        record,
        initial_amount=initial,
        installment_count=count,
        installment_amount=installment,
        total_amount=total,
        interest_amount=interest,
        interest_rate=interest_rate(interest, initial),
        end_date=add_installment_months(record.start_date, count),
    )


def derive_cash_flow(record: CashFlowEntry, field: Optional[str] = None, value: Any = None) -> CashFlowEntry:
    """Keep the supplied balance; fill ``inflow - outflow`` only when it is missing."""
    record = record.with_change(field, value)
    inflow = round_cents(record.inflow_amount)
    outflow = round_cents(record.outflow_amount)
    balance = record.balance_amount
    balance = round(inflow - outflow, 2) if balance is None else round_cents(balance)
    return replace(record, inflow_amount=inflow, outflow_amount=outflow, balance_amount=balance)


def derive_expense_control(
    record: ExpenseControlEntry, field: Optional[str] = None, value: Any = None
) -> ExpenseControlEntry:
    """balance = revenue - mandatory expenses - variable expenses."""
    record = record.with_change(field, value)
    revenue = round_cents(record.revenue)
    mandatory = round_cents(record.mandatory_expenses)
    variable = round_cents(record.variable_expenses)
    return replace(
        record,
        revenue=revenue,
        mandatory_expenses=mandatory,
        variable_expenses=variable,
        balance=round(revenue - mandatory - variable, 2),
    )


def derive_investment(record: InvestmentEntry, field: Optional[str] = None, value: Any = None) -> InvestmentEntry:
    """interest = total - initial; rate = interest / initial * 100."""
    record = record.with_change(field, value)
    initial = round_cents(record.initial_amount)
    total = round_cents(record.total_amount)
    interest = round(total - initial, 2)
    return replace(
        record,
        initial_amount=initial,
        total_amount=total,
        interest_amount=interest,
        interest_rate=interest_rate(interest, initial),
    )


DERIVATIONS: Dict[Type[StoreRecord], Callable[..., StoreRecord]] = {
    MonthlyClient: derive_monthly_client,
    InstallmentCredit: derive_installment_credit,
    CashFlowEntry: derive_cash_flow,
    ExpenseControlEntry: derive_expense_control,
    InvestmentEntry: derive_investment,
}

RECORD_TYPES: Dict[str, Type[StoreRecord]] = {cls.TABLE: cls for cls in DERIVATIONS}


def derive(record: StoreRecord, field: Optional[str] = None, value: Any = None) -> StoreRecord:
    """Recompute the dependent fields of any record type."""
    derivation = DERIVATIONS.get(type(record))
    if derivation is None:
        raise ValueError(f"Unsupported record type '{type(record).__name__}'")
    return derivation(record, field, value)


def record_type(table: str) -> Type[StoreRecord]:
    """Look up the record class stored in ``table``."""
    try:
        return RECORD_TYPES[table]
    except KeyError:
        raise ValueError(f"Unknown record table '{table}'") from None


def derive_row(table: str, row: Mapping[str, Any], field: Optional[str] = None, value: Any = None) -> Dict[str, Any]:
    """Store-row front end to :func:`derive` for callers that hold plain dicts."""
    record = record_type(table).from_row(row)
    return derive(record, field, value).to_row()
