"""Tests for the quote orchestrator."""

import pytest

from quoter.engine.quote import build_matrix, build_quote
from quoter.models.rates import RateTable
from quoter.models.results import QuoteMatrix, QuoteResult, Rejection, RejectionKind


class TestBuildQuote:
    def test_fusion_scenario(self, fusion_table, fusion_inputs):
        q = build_quote(fusion_inputs, fusion_table)
        assert isinstance(q, QuoteResult)
        assert q.tier == "Standard"
        assert q.fee_amount == pytest.approx(60_000)
        assert q.rolled_interest == pytest.approx(116_850)
        assert q.deferred_interest == pytest.approx(60_000)
        assert q.net_loan == pytest.approx(2_763_150)
        assert q.ltv == pytest.approx(0.75)

    def test_incomplete_input_passes_through(self, fusion_table):
        result = build_quote({}, fusion_table)
        assert isinstance(result, Rejection)
        assert result.kind is RejectionKind.INCOMPLETE_INPUT

    def test_prime_holiday_let_excluded(self, prime_table, btl_inputs):
        btl_inputs["holiday_let"] = "Yes"
        result = build_quote(btl_inputs, prime_table)
        assert isinstance(result, Rejection)
        assert result.kind is RejectionKind.EXCLUDED

    def test_bridging_net_fees_consume_every_band(self, bridging_table, bridging_inputs):
        heavy_fee = RateTable.model_validate({**bridging_table.model_dump(), "arrangement_fee_pct": 0.9})
        del bridging_inputs["gross_loan"]
        bridging_inputs.update(use_specific_net="Yes", net_loan=400_000, term_months=18, rolled_months=18)

        result = build_quote(bridging_inputs, heavy_fee)
        assert isinstance(result, Rejection)
        assert result.kind is RejectionKind.INFEASIBLE_FEES

    def test_tier_drives_rate(self, residential_table, btl_inputs):
        btl_inputs["hmo"] = "Up to 6 beds (Tier 2)"
        q = build_quote(btl_inputs, residential_table)
        assert q.tier == "Tier 2"
        assert q.coupon_rate == 0.0639
        assert q.revert_rate_text == "MVR + 0.40%"

    def test_flat_above_commercial_cap(self, residential_table, btl_inputs):
        btl_inputs["flat_above_commercial"] = "Yes"
        q = build_quote(btl_inputs, residential_table)
        assert q.tier == "Tier 2"
        assert q.ltv_cap == 0.60
        assert q.gross_loan == pytest.approx(300_000)

    def test_best_column_when_none_given(self, residential_table, btl_inputs):
        del btl_inputs["fee_column"]
        btl_inputs["monthly_rent"] = 1_000
        q = build_quote(btl_inputs, residential_table)
        # Rent-limited: the 6% column's lower coupon supports the largest loan
        assert q.fee_column == "6"
        assert q.gross_loan == pytest.approx(331_034.4828)

    def test_idempotent(self, residential_table, btl_inputs):
        assert build_quote(btl_inputs, residential_table) == build_quote(btl_inputs, residential_table)


class TestBuildMatrix:
    def test_btl_all_columns(self, residential_table, btl_inputs):
        m = build_matrix(btl_inputs, residential_table)
        assert isinstance(m, QuoteMatrix)
        assert [q.fee_column for q in m.columns] == ["6", "4", "3", "2"]
        assert m.rejected_columns == {}

    def test_best_summary(self, residential_table, btl_inputs):
        btl_inputs["monthly_rent"] = 1_000
        m = build_matrix(btl_inputs, residential_table)
        assert m.best.column == "6"
        assert m.best.gross_loan == pytest.approx(331_034.4828)
        assert m.best.gross_ltv_pct == 66
        assert m.best.net_ltv_pct < m.best.gross_ltv_pct

    def test_basic_gross(self, residential_table, btl_inputs):
        btl_inputs["monthly_rent"] = 1_000
        m = build_matrix(btl_inputs, residential_table)
        assert [b.fee_column for b in m.basic_gross] == ["6", "4", "3", "2"]
        # No rolled months: 1,000 x 24 / (1.25 x 5.89% / 12 x 24) = 162,989
        assert m.basic_gross[0].gross_loan == pytest.approx(1_000 * 12 / (1.25 * 0.0589))
        assert m.basic_gross[0].ltv_pct == 33

    def test_bridging_both_rate_bases(self, bridging_table, bridging_inputs):
        m = build_matrix(bridging_inputs, bridging_table)
        assert [q.product_name for q in m.columns] == [
            "Single Property (Fixed Rate)",
            "Single Property (Variable Rate)",
        ]
        assert m.basic_gross == []
        assert m.best is not None

    def test_rejected_columns_collected(self, bridging_table, bridging_inputs):
        bridging_inputs["gross_loan"] = 800_000
        m = build_matrix(bridging_inputs, bridging_table)
        assert m.columns == []
        assert set(m.rejected_columns) == {"Fixed Rate", "Variable Rate"}
        assert m.best is None

    def test_excluded_is_rejection(self, prime_table, btl_inputs):
        btl_inputs["first_time_buyer"] = True
        result = build_matrix(btl_inputs, prime_table)
        assert result.kind is RejectionKind.EXCLUDED

    def test_to_record(self, residential_table, btl_inputs):
        record = build_matrix(btl_inputs, residential_table).to_record()
        assert record["variant"] == "residential"
        assert len(record["columns"]) == 4
        assert record["best"]["column"] == "6"
