"""Commercial and semi-commercial BTL rate sheets.

Two tiers, three fee columns. Affordability is tested on annual rent against
annual stressed interest.
"""

from quoter.models.rates import ProductRate, RateTable, SelectionStrategy, TierRules

PRODUCT_TYPES = ["2yr Fix", "3yr Fix", "2yr Tracker"]
FEE_COLUMNS = ["6", "4", "2"]

_COMMERCIAL_RATES = {
    "Tier 1": {
        "2yr Fix": {"6": 0.0629, "4": 0.0719, "2": 0.0829},
        "3yr Fix": {"6": 0.0679, "4": 0.0749, "2": 0.0819},
        "2yr Tracker": {"6": 0.0304, "4": 0.0404, "2": 0.0499},
    },
    "Tier 2": {
        "2yr Fix": {"6": 0.0679, "4": 0.0769, "2": 0.0879},
        "3yr Fix": {"6": 0.0729, "4": 0.0799, "2": 0.0869},
        "2yr Tracker": {"6": 0.0334, "4": 0.0434, "2": 0.0529},
    },
}

_SEMI_COMMERCIAL_RATES = {
    "Tier 1": {
        "2yr Fix": {"6": 0.0619, "4": 0.0709, "2": 0.0819},
        "3yr Fix": {"6": 0.0669, "4": 0.0739, "2": 0.0809},
        "2yr Tracker": {"6": 0.0304, "4": 0.0404, "2": 0.0499},
    },
    "Tier 2": {
        "2yr Fix": {"6": 0.0659, "4": 0.0749, "2": 0.0859},
        "3yr Fix": {"6": 0.0709, "4": 0.0779, "2": 0.0849},
        "2yr Tracker": {"6": 0.0334, "4": 0.0434, "2": 0.0529},
    },
}

_YES_TIER_2 = {"Yes": 2}

TIER_RULES = TierRules(
    dimensions={
        "hmo": {"No (Tier 1)": 1, "Up to 12 beds (Tier 1)": 1, "More than 12 beds (Tier 2)": 2},
        "mufb": {"No (Tier 1)": 1, "Up to 12 units (Tier 1)": 1, "More than 12 units (Tier 2)": 2},
        "expat": {"No (Tier 1)": 1, "Yes (Tier 2)": 2, "No": 1, "Yes": 2},
        "owner_occupation": _YES_TIER_2,
        "development_exit": _YES_TIER_2,
        "flat_above_commercial": _YES_TIER_2,
        "first_time_landlord": _YES_TIER_2,
        "offshore_company": _YES_TIER_2,
    },
    adverse={
        "mortgage_arrears": {"0 in 24": 1, "0 in 18": 1, "2 in 18, 0 in 6": 2, "Other, more recent": 2},
        "unsecured_arrears": {"0 in 24": 1, "0 in 12": 1, "2 in last 18": 2, "Other, more recent": 2},
        "ccj_defaults": {"0 in 24": 1, "0 in 18": 1, "2 in 18, 0 in 6": 2, "Other, more recent": 2},
        "bankruptcy": {"Never": 1, "Discharged >3yrs": 1, "All considered by referral": 2},
    },
)


def _build(variant: str, rates: dict) -> RateTable:
    products = {
        tier: {
            product: ProductRate(is_margin="Tracker" in product, fee_rates=fee_rates)
            for product, fee_rates in by_product.items()
        }
        for tier, by_product in rates.items()
    }
    return RateTable(
        variant=variant,
        strategy=SelectionStrategy.FEE_MATRIX,
        tiers=["Tier 1", "Tier 2"],
        products=products,
        product_types=PRODUCT_TYPES,
        fee_columns=FEE_COLUMNS,
        default_ltv_cap=0.70,
        standard_margin=0.04,
        stress_margin=0.0425,
        min_icr={"Fix": 1.25, "Tracker": 1.30},
        icr_basis="annual",
        min_loan=150_000,
        max_loan=2_000_000,
        term_months={"2yr Fix": 24, "3yr Fix": 36, "2yr Tracker": 24},
        max_rolled_months=6,
        deferred_cap_fixed=0.0125,
        deferred_cap_tracker=0.015,
        revert_rate_add={"Tier 1": 0.003, "Tier 2": 0.015},
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


RATE_TABLE = _build("commercial", _COMMERCIAL_RATES)
SEMI_COMMERCIAL_RATE_TABLE = _build("semi_commercial", _SEMI_COMMERCIAL_RATES)
