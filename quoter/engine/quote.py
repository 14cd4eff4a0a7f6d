"""Quote orchestrator: composes parsing, tiering, selection, solving and assembly.

Pure computation. No I/O. Raw record + RateTable in, QuoteResult / QuoteMatrix
or Rejection out.
"""

import logging
from dataclasses import replace
from typing import Any, Mapping

from quoter.engine.assembler import assemble
from quoter.engine.display import whole_pct
from quoter.engine.inputs import parse_borrower_input
from quoter.engine.products import fee_columns
from quoter.engine.solver import Solution, solve
from quoter.engine.tiers import classify
from quoter.models.borrower import BorrowerInput, QuoteMode
from quoter.models.rates import RateTable, SelectionStrategy
from quoter.models.results import (
    EXCLUDED,
    BasicGross,
    BestSummary,
    QuoteMatrix,
    QuoteResult,
    Rejection,
    RejectionKind,
)

logger = logging.getLogger(__name__)


def _prepare(raw: Mapping[str, Any], table: RateTable) -> tuple[BorrowerInput, str] | Rejection:
    borrower = parse_borrower_input(raw, table)
    if isinstance(borrower, Rejection):
        logger.debug("%s input rejected: %s", table.variant, borrower.reason)
        return borrower

    tier = classify(borrower.flags, table)
    if tier == EXCLUDED:
        logger.debug("%s case excluded by risk criteria", table.variant)
        return Rejection(
            kind=RejectionKind.EXCLUDED,
            reason="This case falls outside our lending criteria for this product.",
        )
    return borrower, tier


def _ltv_pct(amount: float, property_value: float | None) -> int | None:
    return whole_pct(amount / property_value) if property_value else None


def _solve_columns(table: RateTable, borrower: BorrowerInput, tier: str) -> dict[str, Solution | Rejection]:
    """Every column the borrower could be quoted on, keyed by column label."""
    if table.strategy is SelectionStrategy.FEE_MATRIX:
        columns = [borrower.fee_column] if borrower.fee_column else fee_columns(table, tier, borrower.product_type)
        return {col: solve(table, borrower, tier, col) for col in columns}
    if table.strategy is SelectionStrategy.LTV_TIER:
        return {
            segment: solve(table, replace(borrower, rate_basis=segment), tier)
            for segment in table.products
        }
    return {borrower.property_type: solve(table, borrower, tier)}


def _largest(solutions: list[Solution]) -> Solution | None:
    best = None
    for solution in solutions:
        if best is None or solution.figures.gross_loan > best.figures.gross_loan:
            best = solution
    return best


def build_quote(raw: Mapping[str, Any], table: RateTable) -> QuoteResult | Rejection:
    """Quote one product.

    BTL borrowers who name no fee column get the column with the largest
    gross loan.
    """
    prepared = _prepare(raw, table)
    if isinstance(prepared, Rejection):
        return prepared
    borrower, tier = prepared

    if table.strategy is SelectionStrategy.FEE_MATRIX and borrower.fee_column is None:
        outcomes = _solve_columns(table, borrower, tier)
        best = _largest([o for o in outcomes.values() if isinstance(o, Solution)])
        if best is None:
            rejections = [o for o in outcomes.values() if isinstance(o, Rejection)]
            return rejections[0] if rejections else Rejection(
                kind=RejectionKind.NO_ELIGIBLE_PRODUCT,
                reason=f"No fee columns are available for {borrower.product_type} ({tier}).",
            )
        return assemble(table, tier, best)

    outcome = solve(table, borrower, tier)
    if isinstance(outcome, Rejection):
        logger.debug("%s quote rejected: %s", table.variant, outcome.reason)
        return outcome
    return assemble(table, tier, outcome)


def basic_gross(table: RateTable, borrower: BorrowerInput, tier: str) -> list[BasicGross]:
    """Maximum gross per fee column with nothing rolled up or deferred."""
    plain = replace(borrower, mode=QuoteMode.MAXIMUM, gross_loan=None, net_loan=None, rolled_months=0, deferred_rate=0.0)
    out = []
    for col in fee_columns(table, tier, borrower.product_type):
        outcome = solve(table, plain, tier, col)
        if isinstance(outcome, Solution):
            gross = outcome.figures.gross_loan
            out.append(BasicGross(fee_column=col, gross_loan=gross, ltv_pct=_ltv_pct(gross, borrower.property_value)))
    return out


def build_matrix(raw: Mapping[str, Any], table: RateTable) -> QuoteMatrix | Rejection:
    """Quote every fee column (BTL) or rate basis (Bridging) side by side."""
    prepared = _prepare(raw, table)
    if isinstance(prepared, Rejection):
        return prepared
    borrower, tier = prepared

    # The matrix always shows every column, whichever one was picked.
    if table.strategy is SelectionStrategy.FEE_MATRIX:
        borrower = replace(borrower, fee_column=None)

    matrix = QuoteMatrix(variant=table.variant, tier=tier)
    solved = []
    for column, outcome in _solve_columns(table, borrower, tier).items():
        if isinstance(outcome, Rejection):
            matrix.rejected_columns[column] = outcome
            continue
        solved.append(outcome)
        matrix.columns.append(assemble(table, tier, outcome))

    best = _largest(solved)
    if best is not None:
        figures = best.figures
        value = borrower.property_value
        matrix.best = BestSummary(
            column=best.selection.column if table.strategy is SelectionStrategy.FEE_MATRIX else best.selection.segment,
            gross_loan=figures.gross_loan,
            gross_ltv_pct=_ltv_pct(figures.gross_loan, value),
            net_loan=figures.net_loan,
            net_ltv_pct=_ltv_pct(figures.net_loan, value),
        )

    if table.strategy is SelectionStrategy.FEE_MATRIX:
        matrix.basic_gross = basic_gross(table, borrower, tier)
    return matrix
