"""Prime (core) BTL rate sheet.

No rolled or deferred interest. Stress rate is floored at MIN_STRESS_RATE.
Holiday lets, first-time buyers, foreign nationals, offshore companies, flats
above commercial premises and any bankruptcy are outside the product.
"""

from quoter.models.rates import ProductRate, RateTable, SelectionStrategy, TierRules

PRODUCT_TYPES = ["2yr Fix", "3yr Fix", "2yr Tracker"]
FEE_COLUMNS = ["6", "4", "3", "2"]
MIN_STRESS_RATE = 0.055

_RATES = {
    "Tier 1": {
        "2yr Fix": {"6": 0.0529, "4": 0.0619, "3": 0.0679, "2": 0.0729},
        "3yr Fix": {"6": 0.0579, "4": 0.0649, "3": 0.0686, "2": 0.0719},
        "2yr Tracker": {"6": 0.0149, "4": 0.0249, "3": 0.0304, "2": 0.0354},
    },
    "Tier 2": {
        "2yr Fix": {"6": 0.0589, "4": 0.0679, "3": 0.0739, "2": 0.0789},
        "3yr Fix": {"6": 0.0639, "4": 0.0709, "3": 0.0746, "2": 0.0779},
        "2yr Tracker": {"6": 0.0169, "4": 0.0269, "3": 0.0324, "2": 0.0374},
    },
}

TIER_RULES = TierRules(
    dimensions={
        "hmo": {"No": 1, "Up to 6 beds": 2},
        "mufb": {"No": 1, "Up to 6 units": 2},
        "expat": {"No": 1, "UK footprint": 2},
        "first_time_landlord": {"No": 1, "Yes": 2},
        "development_exit": {"No": 1, "Yes": 2},
    },
    adverse={
        "mortgage_arrears": {"No": 1, "0 in 24": 1, "0 in 18": 2},
        "unsecured_arrears": {"No": 1, "0 in 24": 1, "0 in 12": 2},
        "ccj_defaults": {"No": 1, "0 in 24": 1, "0 in 18": 2},
    },
    exclusions={
        "holiday_let": ["Yes"],
        "first_time_buyer": ["Yes"],
        "expat": ["Foreign National"],
        "offshore_company": ["Yes"],
        "flat_above_commercial": ["Yes"],
    },
    exclude_unless={"bankruptcy": ["Never"]},
)

RATE_TABLE = RateTable(
    variant="prime",
    strategy=SelectionStrategy.FEE_MATRIX,
    tiers=["Tier 1", "Tier 2"],
    products={
        tier: {
            product: ProductRate(is_margin="Tracker" in product, fee_rates=rates)
            for product, rates in by_product.items()
        }
        for tier, by_product in _RATES.items()
    },
    product_types=PRODUCT_TYPES,
    fee_columns=FEE_COLUMNS,
    default_ltv_cap=0.75,
    standard_margin=0.04,
    stress_margin=0.0425,
    min_stress_rate=MIN_STRESS_RATE,
    min_icr={"Fix": 1.25, "Tracker": 1.30},
    icr_basis="term",
    min_loan=150_000,
    max_loan=3_000_000,
    term_months={"2yr Fix": 24, "3yr Fix": 36, "2yr Tracker": 24},
    max_rolled_months=0,
    deferred_cap_fixed=0.0,
    deferred_cap_tracker=0.0,
    revert_rate_add={"Tier 1": 0.0, "Tier 2": 0.004},
    mvr=0.0859,
    erc={
        "2yr Fix": ["4%", "3%", "then no ERC"],
        "3yr Fix": ["4%", "3%", "2%", "then no ERC"],
        "2yr Tracker": ["4%", "3%", "then no ERC"],
    },
    total_term_years=25,
    term_label="{term_months} month initial period, {total_term_years} year term",
    product_label="{product_type}, {tier}",
    tier_rules=TIER_RULES,
)
