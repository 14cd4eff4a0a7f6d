from dataclasses import asdict, dataclass, field
from enum import Enum

EXCLUDED = "Excluded"


class RejectionKind(Enum):
    INCOMPLETE_INPUT = "incomplete_input"
    INVALID_INPUT = "invalid_input"
    NO_ELIGIBLE_PRODUCT = "no_eligible_product"
    INFEASIBLE_FEES = "infeasible_fees"
    LTV_EXCEEDED = "ltv_exceeded"
    AFFORDABILITY_EXCEEDED = "affordability_exceeded"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class Rejection:
    kind: RejectionKind
    reason: str
    field_name: str | None = None
    max_loan: float | None = None  # remediation: largest loan that would pass

    def to_record(self) -> dict:
        return {
            "kind": self.kind.value,
            "reason": self.reason,
            "field_name": self.field_name,
            "max_loan": self.max_loan,
        }


@dataclass(frozen=True)
class ProductSelection:
    """A priced product: everything the solver needs to know about the rate."""
    segment: str
    product_type: str
    column: str           # fee column ("6") or LTV band label ("60% LTV")
    coupon_rate: float
    is_margin: bool
    fee_pct: float
    ltv_cap: float
    min_loan: float
    max_loan: float


@dataclass(frozen=True)
class RateBasis:
    """Annualised rates derived from a selection and the borrower's choices."""
    full_rate: float
    pay_rate: float
    deferred_rate: float
    stress_rate: float
    term_months: int
    rolled_months: int

    @property
    def serviced_months(self) -> int:
        return max(self.term_months - self.rolled_months, 0)


@dataclass(frozen=True)
class LoanFigures:
    gross_loan: float
    net_loan: float
    fee_amount: float
    rolled_interest: float
    deferred_interest: float
    total_interest: float
    monthly_direct_debit: float
    ltv: float | None
    ltv_cap: float
    capped: bool = False
    below_minimum: bool = False
    net_target_capped: bool = False


@dataclass(frozen=True)
class QuoteResult:
    variant: str
    product_name: str
    product_type: str
    tier: str
    fee_column: str

    # Rates
    coupon_rate: float
    full_rate: float
    pay_rate: float
    full_rate_text: str
    pay_rate_text: str
    fee_pct: float

    # Figures
    gross_loan: float
    net_loan: float
    fee_amount: float
    rolled_interest: float
    deferred_interest: float
    total_interest: float
    monthly_direct_debit: float
    direct_debit_from_month: int
    ltv: float | None
    ltv_cap: float

    # Term
    term_months: int
    rolled_months: int
    serviced_months: int
    deferred_rate: float

    # Descriptors
    term_text: str
    revert_rate_text: str | None
    erc_text: str

    capped: bool = False
    below_minimum: bool = False
    net_target_capped: bool = False

    def to_record(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BasicGross:
    """Largest gross loan for a column with no rolled months and no deferred interest."""
    fee_column: str
    gross_loan: float
    ltv_pct: int | None


@dataclass(frozen=True)
class BestSummary:
    column: str
    gross_loan: float
    gross_ltv_pct: int | None
    net_loan: float
    net_ltv_pct: int | None


@dataclass
class QuoteMatrix:
    variant: str
    tier: str
    columns: list[QuoteResult] = field(default_factory=list)
    rejected_columns: dict[str, Rejection] = field(default_factory=dict)
    basic_gross: list[BasicGross] = field(default_factory=list)
    best: BestSummary | None = None

    def to_record(self) -> dict:
        return {
            "variant": self.variant,
            "tier": self.tier,
            "columns": [q.to_record() for q in self.columns],
            "rejected_columns": {k: r.to_record() for k, r in self.rejected_columns.items()},
            "basic_gross": [asdict(b) for b in self.basic_gross],
            "best": asdict(self.best) if self.best else None,
        }
