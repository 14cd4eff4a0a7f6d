"""Tests for the quote CLI."""

from unittest.mock import AsyncMock, patch

import pytest

from quoter.data.webhook import DeliveryOutcome
from quoter.quote_cli import main, parse_assignments


class TestParseAssignments:
    def test_pairs(self):
        assert parse_assignments(["property_value=500,000", " fee_column = 6 "]) == {
            "property_value": "500,000",
            "fee_column": "6",
        }

    def test_value_may_contain_equals(self):
        assert parse_assignments(["note=a=b"]) == {"note": "a=b"}

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            parse_assignments(["property_value"])


class TestMain:
    async def test_quote_report(self, capsys):
        argv = ["quote_cli", "fusion", "--set", "property_value=4000000", "--set", "gross_loan=3000000"]
        with patch("sys.argv", argv):
            assert await main() == 0
        out = capsys.readouterr().out
        assert "Residential Fusion Standard" in out
        assert "£2,763,150" in out

    async def test_matrix_report(self, capsys):
        argv = ["quote_cli", "residential", "--set", "property_value=500000", "--set", "monthly_rent=1000", "--matrix"]
        with patch("sys.argv", argv):
            assert await main() == 0
        out = capsys.readouterr().out
        assert "Basic gross" in out
        assert "Best: 6" in out

    async def test_rejection_exit_code(self, capsys):
        argv = ["quote_cli", "prime", "--set", "property_value=500000", "--set", "monthly_rent=2500",
                "--set", "holiday_let=Yes"]
        with patch("sys.argv", argv):
            assert await main() == 1
        assert "excluded" in capsys.readouterr().out

    async def test_send_lead(self, capsys):
        argv = ["quote_cli", "fusion", "--set", "property_value=4000000", "--set", "gross_loan=3000000",
                "--send", "--name", "A Broker", "--phone", "07123456789", "--email", "a@broker.co.uk"]
        deliver = AsyncMock(return_value=DeliveryOutcome(delivered=True, method="json", status_code=200))
        with patch("sys.argv", argv), patch("quoter.quote_cli.LeadWebhookClient.deliver", deliver):
            assert await main() == 0
        deliver.assert_awaited_once()
        assert "delivered" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "contact",
        [
            ["--name", "", "--phone", "07123456789", "--email", "a@broker.co.uk"],
            ["--name", "A Broker", "--phone", "12345", "--email", "a@broker.co.uk"],
            ["--name", "A Broker", "--phone", "07123456789", "--email", "not-an-email"],
        ],
    )
    async def test_send_rejects_invalid_contact(self, capsys, contact):
        argv = ["quote_cli", "fusion", "--set", "property_value=4000000", "--set", "gross_loan=3000000", "--send"]
        deliver = AsyncMock()
        with patch("sys.argv", argv + contact), patch("quoter.quote_cli.LeadWebhookClient.deliver", deliver):
            with pytest.raises(SystemExit) as exc:
                await main()
        assert exc.value.code == 2
        deliver.assert_not_awaited()
        assert "error:" in capsys.readouterr().err
