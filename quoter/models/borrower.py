from dataclasses import dataclass, field, fields
from enum import Enum


class QuoteMode(Enum):
    MAXIMUM = "maximum"        # size the largest eligible gross loan (BTL)
    GROSS = "gross"            # borrower states the gross loan
    NET = "net"                # borrower states the net loan, solve for gross


class ChargeType(Enum):
    FIRST = "First Charge"
    SECOND = "Second Charge"


@dataclass(frozen=True)
class RiskFlags:
    """Option labels as selected on the input surface.

    Values are kept as the raw option strings so each variant's tier rules can
    map its own labels ("Up to 6 beds (Tier 2)", "UK footprint", ...).
    """
    hmo: str = "No"
    mufb: str = "No"
    expat: str = "No"
    holiday_let: str = "No"
    flat_above_commercial: str = "No"
    first_time_landlord: str = "No"
    first_time_buyer: str = "No"
    offshore_company: str = "No"
    owner_occupation: str = "No"
    development_exit: str = "No"

    # Adverse credit
    adverse_credit: str = "No"
    mortgage_arrears: str = "0 in 24"
    unsecured_arrears: str = "0 in 24"
    ccj_defaults: str = "0 in 24"
    bankruptcy: str = "Never"

    @property
    def has_adverse(self) -> bool:
        return self.adverse_credit == "Yes"

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class BorrowerInput:
    mode: QuoteMode
    property_value: float | None = None
    monthly_rent: float | None = None
    gross_loan: float | None = None
    net_loan: float | None = None

    # Product choice
    product_type: str | None = None
    fee_column: str | None = None
    property_type: str = "Residential"
    rate_basis: str | None = None  # bridging: "Fixed Rate" / "Variable Rate"
    charge_type: ChargeType = ChargeType.FIRST
    first_charge: float = 0.0

    # Term and interest treatment
    term_months: int | None = None
    rolled_months: int | None = None
    deferred_rate: float | None = None

    flags: RiskFlags = field(default_factory=RiskFlags)

    @property
    def effective_first_charge(self) -> float:
        """Existing first-charge balance counts towards LTV on second charges only."""
        return self.first_charge if self.charge_type is ChargeType.SECOND else 0.0
