"""QuoteResult assembly: solver output plus display labels.

Labels only; figures pass through untouched.
"""

from quoter.engine.display import pct
from quoter.engine.solver import Solution
from quoter.models.rates import RateTable
from quoter.models.results import QuoteResult


def rate_text(table: RateTable, coupon_rate: float, full_rate: float, is_margin: bool) -> str:
    if table.rates_are_monthly:
        if is_margin:
            return f"{pct(coupon_rate)} pm + BBR"
        return f"{pct(full_rate / 12)} pm"
    if is_margin:
        return f"{pct(coupon_rate)} + BBR"
    return pct(full_rate)


def pay_rate_text(table: RateTable, coupon_rate: float, pay_rate: float, deferred_rate: float, is_margin: bool) -> str:
    """Rate paid monthly after deferral. Trackers keep the margin + BBR form."""
    if table.rates_are_monthly:
        if is_margin:
            return f"{pct(coupon_rate - deferred_rate / 12)} pm + BBR"
        return f"{pct(pay_rate / 12)} pm"
    if is_margin:
        return f"{pct(coupon_rate - deferred_rate)} + BBR"
    return pct(pay_rate)


def revert_rate_text(table: RateTable, tier: str) -> str | None:
    if table.mvr is None:
        return None
    add = table.revert_add(tier)
    return "MVR" if add == 0 else f"MVR + {pct(add)}"


def assemble(table: RateTable, tier: str, solution: Solution) -> QuoteResult:
    selection, basis, figures = solution.selection, solution.basis, solution.figures

    product_name = table.product_label.format(
        product_type=selection.product_type,
        tier=tier,
        segment=selection.segment,
        fee_column=selection.column,
    )
    term_text = table.term_label.format(
        term_months=basis.term_months,
        total_term_years=table.total_term_years,
    )

    return QuoteResult(
        variant=table.variant,
        product_name=product_name,
        product_type=selection.product_type,
        tier=tier,
        fee_column=selection.column,
        coupon_rate=selection.coupon_rate,
        full_rate=basis.full_rate,
        pay_rate=basis.pay_rate,
        full_rate_text=rate_text(table, selection.coupon_rate, basis.full_rate, selection.is_margin),
        pay_rate_text=pay_rate_text(
            table, selection.coupon_rate, basis.pay_rate, basis.deferred_rate, selection.is_margin
        ),
        fee_pct=selection.fee_pct,
        gross_loan=figures.gross_loan,
        net_loan=figures.net_loan,
        fee_amount=figures.fee_amount,
        rolled_interest=figures.rolled_interest,
        deferred_interest=figures.deferred_interest,
        total_interest=figures.total_interest,
        monthly_direct_debit=figures.monthly_direct_debit,
        direct_debit_from_month=basis.rolled_months + 1,
        ltv=figures.ltv,
        ltv_cap=figures.ltv_cap,
        term_months=basis.term_months,
        rolled_months=basis.rolled_months,
        serviced_months=basis.serviced_months,
        deferred_rate=basis.deferred_rate,
        term_text=term_text,
        revert_rate_text=revert_rate_text(table, tier),
        erc_text=" / ".join(table.erc_for(selection.product_type)),
        capped=figures.capped,
        below_minimum=figures.below_minimum,
        net_target_capped=figures.net_target_capped,
    )
