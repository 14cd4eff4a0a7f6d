"""Loan sizing and figure derivation.

Pure functions: floats in, dataclasses out. No I/O, no rounding.

Forward mode sizes or validates a gross loan and derives fee, rolled and
deferred interest, net loan and direct debit from it. Inverse mode starts
from the net loan the borrower wants and solves the linear relation

    net = gross * (1 - fee_pct - pay_rate/12 * rolled - deferred_rate/12 * term)

for the gross loan, so the forward figures of the solved gross reproduce the
target net exactly.
"""

import math
from dataclasses import dataclass, replace

from quoter.engine.display import gbp, whole_pct
from quoter.engine.products import (
    band_products,
    ltv_bands,
    select_product,
)
from quoter.models.borrower import BorrowerInput, QuoteMode
from quoter.models.rates import IcrBasis, RateTable, SelectionStrategy
from quoter.models.results import LoanFigures, ProductSelection, RateBasis, Rejection, RejectionKind

LTV_EPSILON = 1e-9
BRIDGING_LTV_EPSILON = 1e-10
CAP_EPSILON = 1e-6
MIN_STRESS_ADJUSTED = 1e-6


@dataclass(frozen=True)
class Solution:
    selection: ProductSelection
    basis: RateBasis
    figures: LoanFigures


def rate_basis(
    table: RateTable,
    selection: ProductSelection,
    term_months: int,
    rolled_months: int,
    deferred_rate: float,
) -> RateBasis:
    """Annualised full, pay and stress rates for a selected product.

    Monthly (bridging) coupons are annualised so every figure below can use
    the same rate / 12 * months arithmetic.
    """
    if table.rates_are_monthly:
        monthly = selection.coupon_rate + (table.standard_margin / 12 if selection.is_margin else 0.0)
        full_rate = monthly * 12
    else:
        full_rate = selection.coupon_rate + (table.standard_margin if selection.is_margin else 0.0)

    if selection.is_margin:
        stress = selection.coupon_rate + table.stress_margin
    else:
        stress = full_rate
    stress = max(stress, table.min_stress_rate)

    return RateBasis(
        full_rate=full_rate,
        pay_rate=max(full_rate - deferred_rate, 0.0),
        deferred_rate=deferred_rate,
        stress_rate=max(stress - deferred_rate, MIN_STRESS_ADJUSTED),
        term_months=term_months,
        rolled_months=rolled_months,
    )


def affordability_gross(table: RateTable, product_type: str, monthly_rent: float | None, basis: RateBasis) -> float:
    """Largest gross loan the rent supports at the minimum ICR under stress."""
    if monthly_rent is None or not table.min_icr:
        return math.inf
    icr = table.icr_for(product_type)
    if table.icr_basis is IcrBasis.ANNUAL:
        return monthly_rent * 12 / (icr * basis.stress_rate)
    serviced = max(basis.term_months - basis.rolled_months, 1)
    return (monthly_rent * basis.term_months) / (icr * (basis.stress_rate / 12) * serviced)


def net_factor(selection: ProductSelection, basis: RateBasis) -> float:
    """Share of the gross loan the borrower actually receives."""
    return (
        1
        - selection.fee_pct
        - basis.pay_rate / 12 * basis.rolled_months
        - basis.deferred_rate / 12 * basis.term_months
    )


def gross_from_net(net_loan: float, selection: ProductSelection, basis: RateBasis) -> float | Rejection:
    factor = net_factor(selection, basis)
    if factor <= 0:
        return Rejection(
            kind=RejectionKind.INFEASIBLE_FEES,
            reason="Fees and rolled interest consume the whole loan; reduce the rolled months.",
        )
    return net_loan / factor


def forward_figures(
    gross_loan: float,
    selection: ProductSelection,
    basis: RateBasis,
    property_value: float | None,
    first_charge: float = 0.0,
    net_target_capped: bool = False,
) -> LoanFigures:
    fee = gross_loan * selection.fee_pct
    rolled = gross_loan * basis.pay_rate / 12 * basis.rolled_months
    deferred = gross_loan * basis.deferred_rate / 12 * basis.term_months
    direct_debit = gross_loan * basis.pay_rate / 12 if basis.serviced_months > 0 else 0.0
    ltv = (gross_loan + first_charge) / property_value if property_value else None

    return LoanFigures(
        gross_loan=gross_loan,
        net_loan=gross_loan - fee - rolled - deferred,
        fee_amount=fee,
        rolled_interest=rolled,
        deferred_interest=deferred,
        total_interest=gross_loan * basis.full_rate / 12 * basis.term_months,
        monthly_direct_debit=direct_debit,
        ltv=ltv,
        ltv_cap=selection.ltv_cap,
        capped=abs(gross_loan - selection.max_loan) < CAP_EPSILON,
        below_minimum=gross_loan < selection.min_loan - CAP_EPSILON,
        net_target_capped=net_target_capped,
    )


def _size_band_rejection(selection: ProductSelection) -> Rejection:
    return Rejection(
        kind=RejectionKind.NO_ELIGIBLE_PRODUCT,
        reason=(
            f"Gross Loan must be between {gbp(selection.min_loan)} and "
            f"{gbp(selection.max_loan)} for this product."
        ),
    )


def _ltv_rejection(property_value: float, cap: float, first_charge: float = 0.0) -> Rejection:
    max_loan = max(property_value * cap - first_charge, 0.0)
    return Rejection(
        kind=RejectionKind.LTV_EXCEEDED,
        reason=f"Gross loan exceeds the maximum LTV of {whole_pct(cap)}%. Maximum loan is {gbp(max_loan)}.",
        max_loan=max_loan,
    )


# ---- fee matrix (BTL) ----

def solve_fee_matrix(table: RateTable, borrower: BorrowerInput, tier: str, fee_column: str) -> Solution | Rejection:
    selection = select_product(
        table, tier, borrower.product_type, 0.0, fee_column=fee_column, flags=borrower.flags.as_dict()
    )
    if isinstance(selection, Rejection):
        return selection

    basis = rate_basis(table, selection, borrower.term_months, borrower.rolled_months, borrower.deferred_rate)
    afford = affordability_gross(table, borrower.product_type, borrower.monthly_rent, basis)
    value_limit = borrower.property_value * selection.ltv_cap if borrower.property_value else math.inf
    limit = min(value_limit, afford, table.max_loan)

    net_capped = False
    if borrower.mode is QuoteMode.MAXIMUM:
        gross = limit
    elif borrower.mode is QuoteMode.GROSS:
        gross = borrower.gross_loan
        if not table.min_loan - CAP_EPSILON <= gross <= table.max_loan + CAP_EPSILON:
            return _size_band_rejection(selection)
        if gross > value_limit * (1 + LTV_EPSILON):
            return _ltv_rejection(borrower.property_value, selection.ltv_cap)
        if gross > afford + CAP_EPSILON:
            return Rejection(
                kind=RejectionKind.AFFORDABILITY_EXCEEDED,
                reason=f"Rental income supports a maximum gross loan of {gbp(afford)}.",
                max_loan=afford,
            )
    else:
        solved = gross_from_net(borrower.net_loan, selection, basis)
        if isinstance(solved, Rejection):
            return solved
        gross = solved
        if gross > limit:
            gross, net_capped = limit, True

    figures = forward_figures(gross, selection, basis, borrower.property_value, net_target_capped=net_capped)
    return Solution(selection, basis, figures)


# ---- band (Fusion) ----

def solve_band(table: RateTable, borrower: BorrowerInput) -> Solution | Rejection:
    segment = borrower.property_type

    def basis_for(selection: ProductSelection) -> RateBasis:
        return rate_basis(table, selection, borrower.term_months, borrower.rolled_months, borrower.deferred_rate)

    if borrower.mode is QuoteMode.NET:
        products = band_products(table, segment)
        if not products:
            return Rejection(kind=RejectionKind.NO_ELIGIBLE_PRODUCT, reason="Loan amount is out of range for any product.")
        # Approximate with the first product's rate, then re-solve at the band it lands in.
        approx = products[0]
        preliminary = gross_from_net(borrower.net_loan, approx, basis_for(approx))
        if isinstance(preliminary, Rejection):
            return preliminary
        selection = select_product(table, segment, None, preliminary)
        if isinstance(selection, Rejection):
            return selection
        gross = gross_from_net(borrower.net_loan, selection, basis_for(selection))
        if isinstance(gross, Rejection):
            return gross
    else:
        gross = borrower.gross_loan
        selection = select_product(table, segment, None, gross)
        if isinstance(selection, Rejection):
            return selection

    first_charge = borrower.effective_first_charge
    if (gross + first_charge) / borrower.property_value > selection.ltv_cap + LTV_EPSILON:
        return _ltv_rejection(borrower.property_value, selection.ltv_cap, first_charge)
    if not selection.min_loan <= gross <= selection.max_loan:
        return _size_band_rejection(selection)

    basis = basis_for(selection)
    return Solution(selection, basis, forward_figures(gross, selection, basis, borrower.property_value, first_charge))


# ---- LTV tier (Bridging) ----

def solve_ltv_tier(table: RateTable, borrower: BorrowerInput) -> Solution | Rejection:
    segment = borrower.rate_basis or next(iter(table.products))
    product_type = borrower.product_type
    first_charge = borrower.effective_first_charge
    value = borrower.property_value

    def basis_for(selection: ProductSelection) -> RateBasis:
        return rate_basis(table, selection, borrower.term_months, borrower.rolled_months, borrower.deferred_rate)

    bands = ltv_bands(table, segment, product_type)
    if not bands:
        return Rejection(
            kind=RejectionKind.NO_ELIGIBLE_PRODUCT,
            reason=f"{product_type} is not offered on a {segment} basis.",
        )
    top_cap = bands[-1].ltv_cap

    if borrower.mode is QuoteMode.NET:
        selection, gross, infeasible = None, None, []
        for band in bands:
            solved = gross_from_net(borrower.net_loan, band, basis_for(band))
            if isinstance(solved, Rejection):
                infeasible.append(solved)
                continue
            if (solved + first_charge) / value <= band.ltv_cap + BRIDGING_LTV_EPSILON:
                selection, gross = band, solved
                break
        if selection is None:
            if len(infeasible) == len(bands):
                return infeasible[0]
            return Rejection(
                kind=RejectionKind.NO_ELIGIBLE_PRODUCT,
                reason="LTV is too high for this product.",
                max_loan=max(value * top_cap - first_charge, 0.0),
            )
    else:
        gross = borrower.gross_loan
        selection = select_product(table, segment, product_type, (gross + first_charge) / value)
        if isinstance(selection, Rejection):
            return replace(selection, max_loan=max(value * top_cap - first_charge, 0.0))

    if not selection.min_loan <= gross <= selection.max_loan:
        return _size_band_rejection(selection)

    basis = basis_for(selection)
    return Solution(selection, basis, forward_figures(gross, selection, basis, value, first_charge))


def solve(table: RateTable, borrower: BorrowerInput, tier: str, fee_column: str | None = None) -> Solution | Rejection:
    """Size the loan for one product. BTL tables need a fee column."""
    if table.strategy is SelectionStrategy.BAND:
        return solve_band(table, borrower)
    if table.strategy is SelectionStrategy.LTV_TIER:
        return solve_ltv_tier(table, borrower)
    column = fee_column or borrower.fee_column
    if column is None:
        return Rejection(kind=RejectionKind.INVALID_INPUT, reason="A fee column is required.", field_name="fee_column")
    return solve_fee_matrix(table, borrower, tier, column)
