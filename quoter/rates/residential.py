"""Residential BTL rate sheet: three tiers, four fee columns, fixed and tracker products."""

from quoter.models.rates import FlagLtvCap, ProductRate, RateTable, SelectionStrategy, TierRules

PRODUCT_TYPES = ["2yr Fix", "3yr Fix", "2yr Tracker"]
FEE_COLUMNS = ["6", "4", "3", "2"]

_RATES = {
    "Tier 1": {
        "2yr Fix": {"6": 0.0589, "4": 0.0679, "3": 0.0739, "2": 0.0789},
        "3yr Fix": {"6": 0.0639, "4": 0.0709, "3": 0.0746, "2": 0.0779},
        "2yr Tracker": {"6": 0.0159, "4": 0.0259, "3": 0.0314, "2": 0.0364},
    },
    "Tier 2": {
        "2yr Fix": {"6": 0.0639, "4": 0.0729, "3": 0.0789, "2": 0.0839},
        "3yr Fix": {"6": 0.0689, "4": 0.0759, "3": 0.0796, "2": 0.0829},
        "2yr Tracker": {"6": 0.0209, "4": 0.0309, "3": 0.0364, "2": 0.0414},
    },
    "Tier 3": {
        "2yr Fix": {"6": 0.0679, "4": 0.0769, "3": 0.0829, "2": 0.0879},
        "3yr Fix": {"6": 0.0729, "4": 0.0799, "3": 0.0836, "2": 0.0869},
        "2yr Tracker": {"6": 0.0239, "4": 0.0339, "3": 0.0394, "2": 0.0444},
    },
}

# Both the current "(Tier N)" labels and the older bare labels are accepted.
TIER_RULES = TierRules(
    dimensions={
        "hmo": {
            "No (Tier 1)": 1, "Up to 6 beds (Tier 2)": 2, "More than 6 beds (Tier 3)": 3,
            "No": 1, "Up to 6 beds": 2, "More than 6 beds": 3,
        },
        "mufb": {
            "No (Tier 1)": 1, "Up to 6 units (Tier 2)": 2, "Less than 30 units (Tier 3)": 3,
            "No": 1, "Up to 6 units": 2, "Less than 30 units": 3,
        },
        "expat": {
            "No (Tier 1)": 1, "UK footprint (Tier 2)": 2, "Yes (Tier 3)": 3,
            "No": 1, "UK footprint": 2, "Yes": 3,
        },
        "holiday_let": {"Yes": 3},
        "offshore_company": {"Yes": 3},
        "flat_above_commercial": {"Yes": 2},
        "first_time_landlord": {"Yes": 2},
    },
    adverse={
        "mortgage_arrears": {"0 in 24": 1, "0 in 18": 2, "2 in 18, 0 in 6": 3},
        "unsecured_arrears": {"0 in 24": 1, "0 in 12": 2, "2 in last 18": 3},
        "ccj_defaults": {"0 in 24": 1, "0 in 18": 2, "2 in 18, 0 in 6": 3},
        "bankruptcy": {"Never": 1, "Discharged >3yrs": 3, "All considered by referral": 3},
    },
)


def _products() -> dict[str, dict[str, ProductRate]]:
    return {
        tier: {
            product: ProductRate(is_margin="Tracker" in product, fee_rates=rates)
            for product, rates in by_product.items()
        }
        for tier, by_product in _RATES.items()
    }


RATE_TABLE = RateTable(
    variant="residential",
    strategy=SelectionStrategy.FEE_MATRIX,
    tiers=["Tier 1", "Tier 2", "Tier 3"],
    products=_products(),
    product_types=PRODUCT_TYPES,
    fee_columns=FEE_COLUMNS,
    default_ltv_cap=0.75,
    # Flat above commercial: Tier 2 capped at 60%, Tier 3 at 70%
    flag_ltv_caps=[
        FlagLtvCap(flag="flat_above_commercial", value="Yes", key="Tier 2", cap=0.60),
        FlagLtvCap(flag="flat_above_commercial", value="Yes", key="Tier 3", cap=0.70),
    ],
    standard_margin=0.04,
    stress_margin=0.0425,
    min_icr={"Fix": 1.25, "Tracker": 1.30},
    icr_basis="term",
    min_loan=150_000,
    max_loan=3_000_000,
    term_months={"2yr Fix": 24, "3yr Fix": 36, "2yr Tracker": 24},
    max_rolled_months=9,
    deferred_cap_fixed=0.0125,
    deferred_cap_tracker=0.02,
    revert_rate_add={"Tier 1": 0.0, "Tier 2": 0.004, "Tier 3": 0.01},
    mvr=0.0859,
    erc={
        "2yr Fix": ["4%", "3%", "then no ERC"],
        "3yr Fix": ["4%", "3%", "2%", "then no ERC"],
        "2yr Tracker": ["4%", "3%", "then no ERC"],
    },
    total_term_years=10,
    term_label="{term_months} month initial period, {total_term_years} year term",
    tier_rules=TIER_RULES,
)
