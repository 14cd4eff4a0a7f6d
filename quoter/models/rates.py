"""Rate table models: the static lookup data each calculator variant is priced from.

Pydantic models so a table loaded from JSON is validated the same way as the
built-in ones. Tables are frozen once constructed.
"""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SelectionStrategy(str, Enum):
    FEE_MATRIX = "fee_matrix"  # BTL: (tier, product, fee column)
    BAND = "band"              # Fusion: first product whose loan band fits
    LTV_TIER = "ltv_tier"      # Bridging: first LTV band the loan fits under


class IcrBasis(str, Enum):
    TERM = "term"      # rent over the term vs interest over the serviced months
    ANNUAL = "annual"  # annual rent vs annual stressed interest


def _check_rate(value: float | None) -> float | None:
    if value is not None and (not math.isfinite(value) or value < 0):
        raise ValueError(f"coupon rate must be finite and non-negative, got {value}")
    return value


class LtvRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str  # "60% LTV"
    max_ltv: float = Field(gt=0, le=1)
    coupon_rate: float | None = None  # None = band not offered for this product

    @field_validator("coupon_rate")
    @classmethod
    def _coupon_valid(cls, v: float | None) -> float | None:
        return _check_rate(v)


class ProductRate(BaseModel):
    """Pricing for one product within one segment."""

    model_config = ConfigDict(frozen=True)

    is_margin: bool = False  # True: coupon is a margin over BBR (tracker)
    fee_rates: dict[str, float | None] = Field(default_factory=dict)
    ltv_rates: list[LtvRate] = Field(default_factory=list)
    min_loan: float | None = None
    max_loan: float | None = None

    @field_validator("fee_rates")
    @classmethod
    def _fee_rates_valid(cls, v: dict[str, float | None]) -> dict[str, float | None]:
        for rate in v.values():
            _check_rate(rate)
        return v

    @field_validator("ltv_rates")
    @classmethod
    def _ltv_rates_ascending(cls, v: list[LtvRate]) -> list[LtvRate]:
        caps = [r.max_ltv for r in v]
        if caps != sorted(caps):
            raise ValueError("ltv_rates must be ordered by ascending max_ltv")
        return v

    @model_validator(mode="after")
    def _band_ordered(self) -> "ProductRate":
        if self.min_loan is not None and self.max_loan is not None and self.min_loan > self.max_loan:
            raise ValueError(f"min_loan {self.min_loan} exceeds max_loan {self.max_loan}")
        return self

    def coupon_for(self, fee_column: str) -> float | None:
        return self.fee_rates.get(fee_column)


class FlagLtvCap(BaseModel):
    """LTV cap override applied when a risk flag holds a given option for a tier."""

    model_config = ConfigDict(frozen=True)

    flag: str
    value: str
    key: str  # tier or property type the override applies to
    cap: float = Field(gt=0, le=1)


class TierRules(BaseModel):
    """Risk classification ruleset.

    ``dimensions`` and ``adverse`` map a flag name to {option: tier level}.
    Options not listed count as level 1. ``exclusions`` lists options that put
    the borrower outside the product entirely; ``exclude_unless`` lists the
    only options that do *not* exclude.
    """

    model_config = ConfigDict(frozen=True)

    dimensions: dict[str, dict[str, int]] = Field(default_factory=dict)
    adverse: dict[str, dict[str, int]] = Field(default_factory=dict)
    exclusions: dict[str, list[str]] = Field(default_factory=dict)
    exclude_unless: dict[str, list[str]] = Field(default_factory=dict)


class RateTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    variant: str
    strategy: SelectionStrategy
    tiers: list[str] = Field(min_length=1)
    # segment -> product type -> pricing. Segment is the tier (BTL), the
    # property type (Fusion) or the rate basis (Bridging).
    products: dict[str, dict[str, ProductRate]]
    product_types: list[str] = Field(default_factory=list)
    fee_columns: list[str] = Field(default_factory=list)
    arrangement_fee_pct: float | None = None  # flat fee where not column based

    # LTV
    default_ltv_cap: float = Field(0.75, gt=0, le=1)
    ltv_caps: dict[str, float] = Field(default_factory=dict)
    flag_ltv_caps: list[FlagLtvCap] = Field(default_factory=list)

    # Base rate and stress
    standard_margin: float = 0.04  # BBR used for display/pay rates
    stress_margin: float = 0.0425  # BBR used for affordability stress
    min_stress_rate: float = 0.0
    rates_are_monthly: bool = False

    # Affordability
    min_icr: dict[str, float] = Field(default_factory=dict)  # "Fix" / "Tracker"
    icr_basis: IcrBasis = IcrBasis.TERM

    # Loan size
    min_loan: float = 0.0
    max_loan: float = math.inf

    # Term, rolled and deferred interest
    term_months: dict[str, int] = Field(default_factory=dict)
    default_term_months: int = 24
    min_term_months: int | None = None
    max_term_months: int | None = None
    min_rolled_months: int = 0
    max_rolled_months: int = 0
    default_rolled_months: int | None = None  # None = the maximum allowed
    deferred_cap_fixed: float = 0.0
    deferred_cap_tracker: float = 0.0
    default_deferred_rate: float | None = None  # None = the cap

    # Labels
    revert_rate_add: dict[str, float] = Field(default_factory=dict)
    mvr: float | None = None
    erc: dict[str, list[str]] = Field(default_factory=dict)
    default_erc: list[str] = Field(default_factory=lambda: ["—"])
    total_term_years: int | None = None
    term_label: str = "{term_months} months"
    product_label: str = "{product_type}, {tier}, {fee_column}% Fee"
    product_options: dict[str, list[str]] = Field(default_factory=dict)

    tier_rules: TierRules | None = None

    @field_validator("ltv_caps")
    @classmethod
    def _caps_in_range(cls, v: dict[str, float]) -> dict[str, float]:
        for key, cap in v.items():
            if not 0 < cap <= 1:
                raise ValueError(f"LTV cap for {key} must be in (0, 1], got {cap}")
        return v

    @model_validator(mode="after")
    def _table_consistent(self) -> "RateTable":
        if self.min_loan > self.max_loan:
            raise ValueError(f"min_loan {self.min_loan} exceeds max_loan {self.max_loan}")
        if self.strategy is SelectionStrategy.FEE_MATRIX:
            unknown = set(self.products) - set(self.tiers)
            if unknown:
                raise ValueError(f"products reference undeclared tiers: {sorted(unknown)}")
        return self

    # ---- lookups ----

    def product(self, segment: str, product_type: str) -> ProductRate | None:
        return self.products.get(segment, {}).get(product_type)

    def candidates(self, segment: str) -> list[tuple[str, ProductRate]]:
        """Products for a segment in declared (priority) order."""
        return list(self.products.get(segment, {}).items())

    def ltv_cap(self, key: str, flags: dict[str, str] | None = None) -> float:
        flags = flags or {}
        for rule in self.flag_ltv_caps:
            if rule.key == key and flags.get(rule.flag) == rule.value:
                return rule.cap
        return self.ltv_caps.get(key, self.default_ltv_cap)

    def icr_for(self, product_type: str) -> float:
        product_class = "Fix" if "Fix" in product_type else "Tracker"
        return self.min_icr.get(product_class, 1.25 if product_class == "Fix" else 1.30)

    def term_for(self, product_type: str) -> int:
        return self.term_months.get(product_type, self.default_term_months)

    def deferred_cap(self, is_tracker: bool) -> float:
        return self.deferred_cap_tracker if is_tracker else self.deferred_cap_fixed

    def erc_for(self, product_type: str) -> list[str]:
        return self.erc.get(product_type, self.default_erc)

    def revert_add(self, tier: str) -> float:
        return self.revert_rate_add.get(tier, 0.0)
