"""Fusion rate sheet: tracker products priced by loan-size band per property type."""

from quoter.models.rates import ProductRate, RateTable, SelectionStrategy

BBR = 0.04
ARRANGEMENT_FEE_PCT = 0.02
TERM_MONTHS = 24
ERC = "Yr1 6% | Yr2 3% (25% ERC free after 6m, no ERC after 21m)"

# Bands are tried in this order; the first one containing the loan wins.
_BANDS = {
    "Residential": {
        "Standard": (0.0479, 100_000, 3_000_000),
        "Large": (0.0599, 3_000_001, 20_000_000),
    },
    "Semi / Full Commercial": {
        "Standard": (0.0529, 100_000, 3_000_000),
        "Large": (0.0649, 3_000_001, 20_000_000),
    },
}

RATE_TABLE = RateTable(
    variant="fusion",
    strategy=SelectionStrategy.BAND,
    tiers=["Standard"],
    products={
        property_type: {
            name: ProductRate(
                is_margin=True,
                fee_rates={"2": rate},
                min_loan=min_loan,
                max_loan=max_loan,
            )
            for name, (rate, min_loan, max_loan) in bands.items()
        }
        for property_type, bands in _BANDS.items()
    },
    product_types=list(_BANDS),
    fee_columns=["2"],
    arrangement_fee_pct=ARRANGEMENT_FEE_PCT,
    ltv_caps={"Residential": 0.75, "Semi / Full Commercial": 0.70},
    default_ltv_cap=0.75,
    standard_margin=BBR,
    stress_margin=BBR,
    min_loan=100_000,
    max_loan=20_000_000,
    default_term_months=TERM_MONTHS,
    min_rolled_months=6,
    max_rolled_months=12,
    default_rolled_months=6,
    deferred_cap_fixed=0.02,
    deferred_cap_tracker=0.02,
    default_deferred_rate=0.01,
    default_erc=[ERC],
    term_label="{term_months} Months (12m Extension Possible)",
    product_label="{segment} Fusion {product_type}",
)
