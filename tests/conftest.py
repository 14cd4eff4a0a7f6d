"""Shared fixtures.

Canonical cases:
    Fusion: £4M residential property, £3M gross, 6 months rolled, 1% deferred.
    Residential BTL: £500K property, £2,500/mo rent, 2yr Fix, 6% fee column.
    Bridging: £1M property, £500K gross, Single Property, 3 month term.
"""

import pytest

from quoter.models.rates import RateTable
from quoter.rates import bridging, commercial, fusion, prime, residential


@pytest.fixture
def fusion_table() -> RateTable:
    return fusion.RATE_TABLE


@pytest.fixture
def residential_table() -> RateTable:
    return residential.RATE_TABLE


@pytest.fixture
def commercial_table() -> RateTable:
    return commercial.RATE_TABLE


@pytest.fixture
def prime_table() -> RateTable:
    return prime.RATE_TABLE


@pytest.fixture
def bridging_table() -> RateTable:
    return bridging.RATE_TABLE


@pytest.fixture
def fusion_inputs() -> dict:
    return {
        "property_value": 4_000_000,
        "gross_loan": 3_000_000,
        "property_type": "Residential",
        "rolled_months": 6,
        "deferred_rate": 0.01,
    }


@pytest.fixture
def btl_inputs() -> dict:
    return {
        "property_value": 500_000,
        "monthly_rent": 2_500,
        "product_type": "2yr Fix",
        "fee_column": "6",
    }


@pytest.fixture
def bridging_inputs() -> dict:
    return {
        "property_value": 1_000_000,
        "gross_loan": 500_000,
        "product_type": "Single Property",
    }
