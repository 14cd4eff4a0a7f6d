"""Raw input record -> BorrowerInput.

The input surface hands over a flat mapping of strings and numbers, often
half-filled while the user is still typing. Missing or blank required fields
are an IncompleteInput rejection (a neutral prompt); present but unusable
values are InvalidInput (an error).
"""

import math
from typing import Any, Mapping

from quoter.models.borrower import BorrowerInput, ChargeType, QuoteMode, RiskFlags
from quoter.models.rates import RateTable, SelectionStrategy
from quoter.models.results import Rejection, RejectionKind

_TRUTHY = {"yes", "y", "true", "1", "on"}


class _InputProblem(Exception):
    def __init__(self, kind: RejectionKind, field_name: str, reason: str):
        super().__init__(reason)
        self.rejection = Rejection(kind=kind, reason=reason, field_name=field_name)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _incomplete(field_name: str, label: str) -> _InputProblem:
    return _InputProblem(RejectionKind.INCOMPLETE_INPUT, field_name, f"Please enter the {label}.")


def _invalid(field_name: str, reason: str) -> _InputProblem:
    return _InputProblem(RejectionKind.INVALID_INPUT, field_name, reason)


def _to_float(raw: Mapping[str, Any], name: str, label: str) -> float | None:
    value = raw.get(name)
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise _invalid(name, f"Please enter a valid {label}.")
    if isinstance(value, str):
        value = value.strip().replace("£", "").replace(",", "")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise _invalid(name, f"Please enter a valid {label}.")
    if not math.isfinite(number):
        raise _invalid(name, f"Please enter a valid {label}.")
    return number


def _positive(raw: Mapping[str, Any], name: str, label: str, required: bool) -> float | None:
    number = _to_float(raw, name, label)
    if number is None:
        if required:
            raise _incomplete(name, label)
        return None
    if number <= 0:
        raise _invalid(name, f"Please enter a valid positive {label}.")
    return number


def _whole(raw: Mapping[str, Any], name: str, label: str) -> int | None:
    number = _to_float(raw, name, label)
    if number is None:
        return None
    if number != int(number) or number < 0:
        raise _invalid(name, f"{label.capitalize()} must be a whole number of months.")
    return int(number)


def _rate(raw: Mapping[str, Any], name: str, label: str) -> float | None:
    value = raw.get(name)
    if isinstance(value, str) and value.strip().endswith("%"):
        number = _to_float({name: value.strip()[:-1]}, name, label)
        return None if number is None else number / 100
    return _to_float(raw, name, label)


def _flag(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value).strip()


def _yes(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return not _is_blank(value) and str(value).strip().lower() in _TRUTHY


def normalise_fee_column(value: Any) -> str:
    """6, "6", "6%" and 0.06 all name the 6% fee column."""
    text = str(value).strip().rstrip("%")
    number = float(text)
    if 0 < number < 1:
        number *= 100
    return f"{round(number, 4):g}"


def _is_tracker(table: RateTable, product_type: str) -> bool:
    for by_product in table.products.values():
        product = by_product.get(product_type)
        if product is not None:
            return product.is_margin
    return False


def parse_flags(raw: Mapping[str, Any]) -> RiskFlags:
    values = {
        name: _flag(raw[name])
        for name in RiskFlags.field_names()
        if name in raw and not _is_blank(raw[name])
    }
    return RiskFlags(**values)


def _mode(raw: Mapping[str, Any], table: RateTable) -> QuoteMode:
    if _yes(raw.get("use_specific_net")):
        return QuoteMode.NET
    if table.strategy is SelectionStrategy.FEE_MATRIX and _is_blank(raw.get("gross_loan")):
        return QuoteMode.MAXIMUM
    return QuoteMode.GROSS


def _parse(raw: Mapping[str, Any], table: RateTable) -> BorrowerInput:
    mode = _mode(raw, table)
    is_btl = table.strategy is SelectionStrategy.FEE_MATRIX

    # BTL net-loan sizing can run on rent alone; every other path needs a value.
    property_value = _positive(
        raw, "property_value", "property value", required=not (is_btl and mode is QuoteMode.NET)
    )
    monthly_rent = _positive(raw, "monthly_rent", "monthly rent", required=is_btl)
    gross_loan = _positive(raw, "gross_loan", "gross loan amount", required=mode is QuoteMode.GROSS)
    net_loan = _positive(raw, "net_loan", "specific net loan amount", required=mode is QuoteMode.NET)

    first_charge = _to_float(raw, "first_charge", "first charge balance") or 0.0
    if first_charge < 0:
        raise _invalid("first_charge", "First charge balance cannot be negative.")

    charge_raw = raw.get("charge_type")
    try:
        charge_type = ChargeType(charge_raw.strip()) if not _is_blank(charge_raw) else ChargeType.FIRST
    except (AttributeError, ValueError):
        raise _invalid("charge_type", f"Unknown charge type: {charge_raw}")

    property_type = "Residential" if _is_blank(raw.get("property_type")) else str(raw["property_type"]).strip()
    if charge_type is ChargeType.SECOND and property_type != "Residential":
        raise _invalid("charge_type", "Second charges are only available for Residential properties.")

    product_type = None if _is_blank(raw.get("product_type")) else str(raw["product_type"]).strip()
    rate_basis = None
    if table.strategy is SelectionStrategy.FEE_MATRIX:
        product_type = product_type or table.product_types[0]
        if product_type not in table.product_types:
            raise _invalid("product_type", f"Unknown product type: {product_type}")
    elif table.strategy is SelectionStrategy.BAND:
        if property_type not in table.products:
            raise _invalid("property_type", f"No products available for property type {property_type}.")
    else:
        options_key = "Second Charge" if charge_type is ChargeType.SECOND else property_type
        options = table.product_options.get(options_key)
        if options is None:
            raise _invalid("property_type", f"No products available for property type {property_type}.")
        product_type = product_type or options[0]
        if product_type not in options:
            raise _invalid("product_type", f"{product_type} is not available for {options_key}.")
        rate_basis = "Fixed Rate" if _is_blank(raw.get("rate_basis")) else str(raw["rate_basis"]).strip()
        if rate_basis not in table.products:
            raise _invalid("rate_basis", f"Unknown rate basis: {rate_basis}")

    fee_column = None
    if not _is_blank(raw.get("fee_column")):
        try:
            fee_column = normalise_fee_column(raw["fee_column"])
        except ValueError:
            raise _invalid("fee_column", f"Unknown fee column: {raw['fee_column']}")
        if table.fee_columns and fee_column not in table.fee_columns:
            raise _invalid("fee_column", f"Fee column {fee_column}% is not offered.")

    # Term
    if table.min_term_months is not None:
        term = _whole(raw, "term_months", "loan term")
        term = table.default_term_months if term is None else term
        lo, hi = table.min_term_months, table.max_term_months or table.min_term_months
        if not lo <= term <= hi:
            raise _invalid("term_months", f"Loan term must be between {lo} and {hi} months.")
    else:
        term = table.term_for(product_type) if product_type else table.default_term_months

    # Rolled months
    rolled = _whole(raw, "rolled_months", "rolled months")
    if rolled is None:
        rolled = table.default_rolled_months
        if rolled is None:
            rolled = table.max_rolled_months
        rolled = min(rolled, term)
    if rolled > term:
        raise _invalid("rolled_months", "Rolled months cannot be greater than the loan term.")
    if not table.min_rolled_months <= rolled <= table.max_rolled_months:
        raise _invalid(
            "rolled_months",
            f"Rolled months must be between {table.min_rolled_months} and {table.max_rolled_months}.",
        )

    # Deferred interest
    tracker = table.strategy is SelectionStrategy.BAND or _is_tracker(table, product_type or "")
    cap = table.deferred_cap(tracker)
    deferred = _rate(raw, "deferred_rate", "deferred interest rate")
    if deferred is None:
        deferred = cap if table.default_deferred_rate is None else min(table.default_deferred_rate, cap)
    if not 0 <= deferred <= cap + 1e-12:
        raise _invalid("deferred_rate", f"Deferred interest must be between 0% and {cap * 100:.2f}%.")

    return BorrowerInput(
        mode=mode,
        property_value=property_value,
        monthly_rent=monthly_rent,
        gross_loan=gross_loan if mode is QuoteMode.GROSS else None,
        net_loan=net_loan if mode is QuoteMode.NET else None,
        product_type=product_type,
        fee_column=fee_column,
        property_type=property_type,
        rate_basis=rate_basis,
        charge_type=charge_type,
        first_charge=first_charge,
        term_months=term,
        rolled_months=rolled,
        deferred_rate=deferred,
        flags=parse_flags(raw),
    )


def parse_borrower_input(raw: Mapping[str, Any], table: RateTable) -> BorrowerInput | Rejection:
    """Build a BorrowerInput for ``table``'s variant, or the first problem found."""
    try:
        return _parse(raw, table)
    except _InputProblem as problem:
        return problem.rejection
