"""Risk tier classification.

Pure functions: RiskFlags in, tier label out. No I/O.

Each risk dimension contributes a tier level (a step function of the selected
option) and the borrower's level is the maximum across dimensions. Adverse
credit sub-dimensions only count when adverse credit is declared. Hard
exclusions short-circuit to EXCLUDED before any level is computed.
"""

from quoter.models.borrower import RiskFlags
from quoter.models.rates import RateTable, TierRules
from quoter.models.results import EXCLUDED


def is_excluded(flags: RiskFlags, rules: TierRules) -> bool:
    values = flags.as_dict()
    for flag, excluded_options in rules.exclusions.items():
        if values.get(flag) in excluded_options:
            return True
    for flag, allowed_options in rules.exclude_unless.items():
        if values.get(flag) not in allowed_options:
            return True
    return False


def _level(mapping: dict[str, int], option: str | None) -> int:
    # Unrecognised options (including legacy labels not listed) count as Tier 1.
    return mapping.get(option, 1) if option is not None else 1


def tier_level(flags: RiskFlags, rules: TierRules) -> int:
    """Highest tier level any risk dimension pushes the borrower to (1-based)."""
    values = flags.as_dict()
    level = 1
    for flag, mapping in rules.dimensions.items():
        level = max(level, _level(mapping, values.get(flag)))

    if flags.has_adverse:
        adverse_level = max(
            (_level(mapping, values.get(flag)) for flag, mapping in rules.adverse.items()),
            default=1,
        )
        level = max(level, adverse_level)
    return level


def classify(flags: RiskFlags, table: RateTable) -> str:
    """Map risk flags to one of the table's tier labels, or EXCLUDED."""
    rules = table.tier_rules
    if rules is None:
        return table.tiers[0]
    if is_excluded(flags, rules):
        return EXCLUDED

    level = tier_level(flags, rules)
    return table.tiers[min(level, len(table.tiers)) - 1]
