"""Tests for quote labels and display formatting."""

import pytest

from quoter.engine.assembler import assemble, pay_rate_text, rate_text, revert_rate_text
from quoter.engine.display import gbp, pct, whole_pct
from quoter.engine.inputs import parse_borrower_input
from quoter.engine.solver import solve


def _quote(raw, table, tier):
    borrower = parse_borrower_input(raw, table)
    return assemble(table, tier, solve(table, borrower, tier))


class TestDisplay:
    def test_gbp_rounds_half_up(self):
        assert gbp(116_850) == "£116,850"
        assert gbp(1_234.5) == "£1,235"

    def test_pct(self):
        assert pct(0.0479) == "4.79%"
        assert pct(0.004) == "0.40%"

    def test_whole_pct(self):
        assert whole_pct(0.745) == 75
        assert whole_pct(0.6) == 60


class TestRateText:
    def test_tracker(self, residential_table):
        assert rate_text(residential_table, 0.0159, 0.0559, is_margin=True) == "1.59% + BBR"

    def test_fixed(self, residential_table):
        assert rate_text(residential_table, 0.0589, 0.0589, is_margin=False) == "5.89%"

    def test_bridging_monthly(self, bridging_table):
        assert rate_text(bridging_table, 0.0080, 0.096, is_margin=False) == "0.80% pm"
        assert rate_text(bridging_table, 0.0045, 0.094, is_margin=True) == "0.45% pm + BBR"


class TestPayRateText:
    def test_tracker_margin_less_deferred(self, residential_table):
        assert pay_rate_text(residential_table, 0.0159, 0.0359, 0.02, is_margin=True) == "-0.41% + BBR"

    def test_fixed_is_absolute(self, residential_table):
        assert pay_rate_text(residential_table, 0.0589, 0.0464, 0.0125, is_margin=False) == "4.64%"

    def test_bridging_monthly(self, bridging_table):
        assert pay_rate_text(bridging_table, 0.0045, 0.094, 0.0, is_margin=True) == "0.45% pm + BBR"
        assert pay_rate_text(bridging_table, 0.0080, 0.096, 0.0, is_margin=False) == "0.80% pm"


class TestRevertRate:
    def test_tier_1_is_mvr(self, residential_table):
        assert revert_rate_text(residential_table, "Tier 1") == "MVR"

    def test_tier_3_adds(self, residential_table):
        assert revert_rate_text(residential_table, "Tier 3") == "MVR + 1.00%"

    def test_no_mvr(self, fusion_table):
        assert revert_rate_text(fusion_table, "Standard") is None


class TestAssemble:
    def test_fusion_labels(self, fusion_table, fusion_inputs):
        q = _quote(fusion_inputs, fusion_table, "Standard")
        assert q.product_name == "Residential Fusion Standard"
        assert q.full_rate_text == "4.79% + BBR"
        assert q.pay_rate_text == "3.79% + BBR"
        assert q.term_text == "24 Months (12m Extension Possible)"
        assert q.erc_text.startswith("Yr1 6%")
        assert q.direct_debit_from_month == 7
        assert q.serviced_months == 18

    def test_figures_pass_through(self, fusion_table, fusion_inputs):
        q = _quote(fusion_inputs, fusion_table, "Standard")
        assert q.gross_loan == 3_000_000
        assert q.net_loan == pytest.approx(2_763_150)
        assert q.capped

    def test_btl_labels(self, residential_table, btl_inputs):
        q = _quote(btl_inputs, residential_table, "Tier 1")
        assert q.product_name == "2yr Fix, Tier 1, 6% Fee"
        assert q.term_text == "24 month initial period, 10 year term"
        assert q.erc_text == "4% / 3% / then no ERC"
        assert q.revert_rate_text == "MVR"

    def test_prime_name_has_no_fee(self, prime_table, btl_inputs):
        q = _quote(btl_inputs, prime_table, "Tier 1")
        assert q.product_name == "2yr Fix, Tier 1"
        assert q.term_text == "24 month initial period, 25 year term"

    def test_bridging_labels(self, bridging_table, bridging_inputs):
        q = _quote(bridging_inputs, bridging_table, "Standard")
        assert q.product_name == "Single Property (Fixed Rate)"
        assert q.fee_column == "60% LTV"
        assert q.full_rate_text == "0.80% pm"
        assert q.term_text == "3 months"
        assert q.revert_rate_text is None

    def test_residential_tracker_pay_rate(self, residential_table, btl_inputs):
        btl_inputs["product_type"] = "2yr Tracker"
        q = _quote(btl_inputs, residential_table, "Tier 1")
        assert q.full_rate_text == "1.59% + BBR"
        assert q.pay_rate_text == "-0.41% + BBR"

    def test_prime_tracker_pay_rate_matches_full_rate(self, prime_table, btl_inputs):
        btl_inputs["product_type"] = "2yr Tracker"
        q = _quote(btl_inputs, prime_table, "Tier 1")
        assert q.full_rate_text == "1.49% + BBR"
        assert q.pay_rate_text == q.full_rate_text
