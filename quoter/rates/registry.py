"""Rate table registry.

Built-in sheets are Python modules. When ``settings.rate_table_dir`` is set, a
``<variant>.json`` file in that directory replaces the built-in sheet; it is
validated with the same pydantic model, so a malformed file fails loudly at
load time rather than producing bad quotes.
"""

import functools
import logging
from pathlib import Path

from quoter.config import settings
from quoter.models.rates import RateTable
from quoter.rates import bridging, commercial, fusion, prime, residential

logger = logging.getLogger(__name__)

BUILTIN_TABLES: dict[str, RateTable] = {
    "fusion": fusion.RATE_TABLE,
    "residential": residential.RATE_TABLE,
    "commercial": commercial.RATE_TABLE,
    "semi_commercial": commercial.SEMI_COMMERCIAL_RATE_TABLE,
    "prime": prime.RATE_TABLE,
    "bridging": bridging.RATE_TABLE,
}

VARIANTS = list(BUILTIN_TABLES)


def load_rate_table(path: str | Path) -> RateTable:
    """Load and validate a rate table from a JSON file."""
    return RateTable.model_validate_json(Path(path).read_text(encoding="utf-8"))


@functools.lru_cache(maxsize=None)
def get_rate_table(variant: str) -> RateTable:
    """Return the rate table for a variant. Raises KeyError for unknown variants."""
    if variant not in BUILTIN_TABLES:
        raise KeyError(f"Unknown calculator variant: {variant}")

    if settings.rate_table_dir:
        override = Path(settings.rate_table_dir) / f"{variant}.json"
        if override.is_file():
            logger.info("Loading %s rate table from %s", variant, override)
            return load_rate_table(override)

    return BUILTIN_TABLES[variant]
