"""Display formatting. Figures are rounded here and nowhere else."""

from decimal import Decimal, ROUND_HALF_UP


def gbp(amount: float) -> str:
    """£1,234,567 (whole pounds, half up)."""
    pounds = Decimal(str(amount)).quantize(Decimal("1"), ROUND_HALF_UP)
    return f"£{pounds:,}"


def pct(rate: float, places: int = 2) -> str:
    """0.0479 -> '4.79%'."""
    value = (Decimal(str(rate)) * 100).quantize(Decimal(1).scaleb(-places), ROUND_HALF_UP)
    return f"{value}%"


def whole_pct(ratio: float) -> int:
    """0.7512 -> 75."""
    return int((Decimal(str(ratio)) * 100).quantize(Decimal("1"), ROUND_HALF_UP))
