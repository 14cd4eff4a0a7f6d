"""Product selection: which coupon applies to this borrower.

Pure functions: rate table + segment + preliminary loan figures in,
ProductSelection or Rejection out. No I/O.

Three strategies:
    fee_matrix (BTL):  (tier, product type, fee column) lookup
    band (Fusion):     first product whose loan-size band holds the loan
    ltv_tier (Bridging): first LTV band the loan fits under
"""

from quoter.models.rates import RateTable, SelectionStrategy
from quoter.models.results import ProductSelection, Rejection, RejectionKind

LTV_EPSILON = 1e-10


def _no_product(reason: str, max_loan: float | None = None) -> Rejection:
    return Rejection(kind=RejectionKind.NO_ELIGIBLE_PRODUCT, reason=reason, max_loan=max_loan)


def fee_columns(table: RateTable, tier: str, product_type: str) -> list[str]:
    """Fee columns with a defined rate for this product, in display order."""
    product = table.product(tier, product_type)
    if product is None:
        return []
    return [col for col in table.fee_columns if product.coupon_for(col) is not None]


def select_fee_column(
    table: RateTable,
    tier: str,
    product_type: str,
    fee_column: str,
    flags: dict[str, str] | None = None,
) -> ProductSelection | Rejection:
    product = table.product(tier, product_type)
    if product is None:
        return _no_product(f"No {product_type} product is available for {tier}.")

    coupon = product.coupon_for(fee_column)
    if coupon is None:
        return _no_product(f"The {fee_column}% fee column is not available for {product_type} ({tier}).")

    return ProductSelection(
        segment=tier,
        product_type=product_type,
        column=fee_column,
        coupon_rate=coupon,
        is_margin=product.is_margin,
        fee_pct=float(fee_column) / 100,
        ltv_cap=table.ltv_cap(tier, flags),
        min_loan=table.min_loan,
        max_loan=table.max_loan,
    )


def band_products(table: RateTable, segment: str) -> list[ProductSelection]:
    """Priced products for a segment in declared (priority) order."""
    out = []
    for name, product in table.candidates(segment):
        column, coupon = next(
            ((col, rate) for col, rate in product.fee_rates.items() if rate is not None),
            (None, None),
        )
        if coupon is None:
            continue
        out.append(ProductSelection(
            segment=segment,
            product_type=name,
            column=column,
            coupon_rate=coupon,
            is_margin=product.is_margin,
            fee_pct=table.arrangement_fee_pct or 0.0,
            ltv_cap=table.ltv_cap(segment),
            min_loan=product.min_loan if product.min_loan is not None else table.min_loan,
            max_loan=product.max_loan if product.max_loan is not None else table.max_loan,
        ))
    return out


def select_band_product(table: RateTable, segment: str, gross_loan: float) -> ProductSelection | Rejection:
    """First product (in declared order) whose size band contains the loan."""
    for selection in band_products(table, segment):
        if selection.min_loan <= gross_loan <= selection.max_loan:
            return selection
    return _no_product("Loan amount is out of range for any product.")


def ltv_bands(table: RateTable, segment: str, product_type: str) -> list[ProductSelection]:
    """Every offered LTV band for a product, lowest cap first."""
    product = table.product(segment, product_type)
    if product is None:
        return []
    return [
        ProductSelection(
            segment=segment,
            product_type=product_type,
            column=band.label,
            coupon_rate=band.coupon_rate,
            is_margin=product.is_margin,
            fee_pct=table.arrangement_fee_pct or 0.0,
            ltv_cap=band.max_ltv,
            min_loan=product.min_loan if product.min_loan is not None else table.min_loan,
            max_loan=product.max_loan if product.max_loan is not None else table.max_loan,
        )
        for band in product.ltv_rates
        if band.coupon_rate is not None
    ]


def select_ltv_band(
    table: RateTable, segment: str, product_type: str, ltv: float
) -> ProductSelection | Rejection:
    bands = ltv_bands(table, segment, product_type)
    for band in bands:
        if ltv <= band.ltv_cap + LTV_EPSILON:
            return band
    if not bands:
        return _no_product(f"{product_type} is not offered on a {segment} basis.")
    return _no_product("LTV is too high for this product.")


def select_product(
    table: RateTable,
    segment: str,
    product_type: str | None,
    preliminary: float,
    fee_column: str | None = None,
    flags: dict[str, str] | None = None,
) -> ProductSelection | Rejection:
    """Dispatch on the table's strategy.

    ``preliminary`` is the gross loan for band selection and the achieved LTV
    for LTV-tier selection; fee-matrix selection ignores it.
    """
    if table.strategy is SelectionStrategy.BAND:
        return select_band_product(table, segment, preliminary)
    if table.strategy is SelectionStrategy.LTV_TIER:
        return select_ltv_band(table, segment, product_type or "", preliminary)
    if fee_column is None:
        return _no_product("A fee column is required for this product.")
    return select_fee_column(table, segment, product_type or "", fee_column, flags)
