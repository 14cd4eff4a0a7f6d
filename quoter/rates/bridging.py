"""Bridging rate sheet.

Coupons are monthly. Variable-rate coupons are margins over BBR (added as
BBR / 12). Each product is priced by the LTV band the loan falls under; a
``None`` coupon means the band is not offered for that product.
"""

from quoter.models.rates import LtvRate, ProductRate, RateTable, SelectionStrategy

BBR = 0.04
ARRANGEMENT_FEE_PCT = 0.02
MIN_TERM_MONTHS = 3
MAX_TERM_MONTHS = 18

LTV_BANDS = [("60% LTV", 0.60), ("70% LTV", 0.70), ("75% LTV", 0.75)]

_VARIABLE = {
    "Single Property": (0.0045, 0.0055, 0.0065),
    "Large Single Property": (0.0055, 0.0065, 0.0075),
    "BTL Portfolio Multi-Unit Dev Exit": (0.0050, 0.0060, 0.0070),
    "Permitted & Light Development": (0.0050, 0.0060, 0.0070),
    "Semi & Commercial": (0.0050, 0.0060, 0.0070),
    "Semi & Commercial Large Loans": (0.0055, 0.0065, 0.0075),
    "2nd Charge Residential Only": (0.0050, 0.0060, None),
}

_FIXED = {
    "Single Property": (0.0080, 0.0090, 0.0100),
    "Large Single Property": (0.0090, 0.0100, 0.0110),
    "BTL Portfolio Multi-Unit Dev Exit": (0.0085, 0.0095, 0.0105),
    "Permitted & Light Development": (0.0085, 0.0095, 0.0105),
    "Semi & Commercial": (0.0085, 0.0095, 0.0105),
    "Semi & Commercial Large Loans": (0.0090, 0.0100, 0.0110),
    "2nd Charge Residential Only": (0.0085, 0.0095, None),
}

LOAN_SIZES = {
    "Single Property": (100_000, 4_000_000),
    "Large Single Property": (4_000_001, 20_000_000),
    "BTL Portfolio Multi-Unit Dev Exit": (100_000, 50_000_000),
    "Permitted & Light Development": (100_000, 20_000_000),
    "Semi & Commercial": (100_000, 3_000_000),
    "Semi & Commercial Large Loans": (3_000_001, 15_000_000),
    "2nd Charge Residential Only": (100_000, 5_000_000),
}

PRODUCT_OPTIONS = {
    "Residential": [
        "Single Property",
        "Large Single Property",
        "BTL Portfolio Multi-Unit Dev Exit",
        "Permitted & Light Development",
    ],
    "Commercial & Semi Commercial": [
        "Semi & Commercial",
        "Semi & Commercial Large Loans",
        "BTL Portfolio Multi-Unit Dev Exit",
        "Permitted & Light Development",
    ],
    "Second Charge": ["2nd Charge Residential Only"],
}


def _priced(coupons: dict, is_margin: bool) -> dict[str, ProductRate]:
    out = {}
    for product, rates in coupons.items():
        min_loan, max_loan = LOAN_SIZES[product]
        out[product] = ProductRate(
            is_margin=is_margin,
            ltv_rates=[
                LtvRate(label=label, max_ltv=cap, coupon_rate=rate)
                for (label, cap), rate in zip(LTV_BANDS, rates)
            ],
            min_loan=min_loan,
            max_loan=max_loan,
        )
    return out


RATE_TABLE = RateTable(
    variant="bridging",
    strategy=SelectionStrategy.LTV_TIER,
    tiers=["Standard"],
    products={
        "Fixed Rate": _priced(_FIXED, is_margin=False),
        "Variable Rate": _priced(_VARIABLE, is_margin=True),
    },
    product_types=list(LOAN_SIZES),
    arrangement_fee_pct=ARRANGEMENT_FEE_PCT,
    default_ltv_cap=0.75,
    standard_margin=BBR,
    stress_margin=BBR,
    rates_are_monthly=True,
    min_loan=100_000,
    max_loan=50_000_000,
    default_term_months=MIN_TERM_MONTHS,
    min_term_months=MIN_TERM_MONTHS,
    max_term_months=MAX_TERM_MONTHS,
    max_rolled_months=MAX_TERM_MONTHS,
    default_rolled_months=0,
    term_label="{term_months} months",
    product_label="{product_type} ({segment})",
    product_options=PRODUCT_OPTIONS,
)
