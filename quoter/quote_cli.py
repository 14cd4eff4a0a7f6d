"""CLI for running a calculator from the terminal.

Usage:
    python -m quoter.quote_cli fusion --set property_value=4000000 --set gross_loan=3000000
    python -m quoter.quote_cli residential --set property_value=500000 --set monthly_rent=2500 --matrix
    python -m quoter.quote_cli bridging --set property_value=800000 --set gross_loan=500000 \\
        --send --name "A Broker" --phone 07123456789 --email a@broker.co.uk
"""

import argparse
import asyncio
import sys

from pydantic import ValidationError

from quoter.api.schemas import LeadContact
from quoter.data.webhook import LeadWebhookClient, build_lead_payload
from quoter.engine.display import gbp
from quoter.engine.quote import build_matrix, build_quote
from quoter.models.results import QuoteMatrix, QuoteResult, Rejection
from quoter.rates.registry import VARIANTS, get_rate_table


def parse_assignments(pairs: list[str]) -> dict[str, str]:
    inputs = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"expected key=value, got {pair!r}")
        inputs[key.strip()] = value.strip()
    return inputs


def _ltv(ltv: float | None) -> str:
    return f"{ltv:.2%}" if ltv is not None else "N/A"


def print_quote(q: QuoteResult) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {q.product_name}")
    print(f"{'=' * 60}")
    print(f"  Tier:               {q.tier}")
    print(f"  Rate:               {q.full_rate_text}  (pay rate {q.pay_rate_text})")
    print(f"  Term:               {q.term_text}")
    print(f"  Gross Loan:         {gbp(q.gross_loan)}")
    print(f"  Arrangement Fee:    {gbp(q.fee_amount)}  ({q.fee_pct:.2%})")
    print(f"  Rolled Interest:    {gbp(q.rolled_interest)}  ({q.rolled_months} months)")
    print(f"  Deferred Interest:  {gbp(q.deferred_interest)}")
    print(f"  Net Loan:           {gbp(q.net_loan)}")
    print(f"  Direct Debit:       {gbp(q.monthly_direct_debit)}/mo from month {q.direct_debit_from_month}")
    print(f"  LTV:                {_ltv(q.ltv)}  (max {q.ltv_cap:.0%})")
    if q.revert_rate_text:
        print(f"  Revert Rate:        {q.revert_rate_text}")
    print(f"  ERC:                {q.erc_text}")
    notes = [
        label for flag, label in (
            (q.capped, "capped at maximum loan"),
            (q.below_minimum, "below minimum loan"),
            (q.net_target_capped, "requested net loan not reachable"),
        ) if flag
    ]
    if notes:
        print(f"  Notes:              {'; '.join(notes)}")
    print()


def print_matrix(m: QuoteMatrix) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {m.variant.replace('_', ' ').title()} quote matrix ({m.tier})")
    print(f"{'=' * 60}")
    for q in m.columns:
        print(f"  [{q.fee_column:>8}]  gross {gbp(q.gross_loan):>12}  net {gbp(q.net_loan):>12}  {q.full_rate_text}")
    for column, rejection in m.rejected_columns.items():
        print(f"  [{column:>8}]  {rejection.reason}")
    if m.basic_gross:
        print()
        print("  Basic gross (no rolled or deferred interest):")
        for b in m.basic_gross:
            ltv = f"{b.ltv_pct}%" if b.ltv_pct is not None else "N/A"
            print(f"    {b.fee_column:>4}% fee: {gbp(b.gross_loan):>12}  ({ltv} LTV)")
    if m.best:
        print()
        print(f"  Best: {m.best.column}  gross {gbp(m.best.gross_loan)}  net {gbp(m.best.net_loan)}")
    print()


def print_rejection(r: Rejection) -> None:
    print(f"\n  Not quoted ({r.kind.value}): {r.reason}")
    if r.max_loan is not None:
        print(f"  Maximum loan: {gbp(r.max_loan)}")
    print()


async def main() -> int:
    parser = argparse.ArgumentParser(description="Loan quote calculator CLI")
    parser.add_argument("variant", choices=VARIANTS, help="Calculator to run")
    parser.add_argument("--set", dest="assignments", action="append", default=[], metavar="KEY=VALUE",
                        help="Input field, repeatable (e.g. --set property_value=500000)")
    parser.add_argument("--matrix", action="store_true", help="Show every fee column / rate basis")
    parser.add_argument("--send", action="store_true", help="Deliver the quote to the lead webhook")
    parser.add_argument("--name", default="", help="Contact name (with --send)")
    parser.add_argument("--phone", default="", help="Contact phone (with --send)")
    parser.add_argument("--email", default="", help="Contact email (with --send)")

    args = parser.parse_args()
    try:
        inputs = parse_assignments(args.assignments)
    except ValueError as e:
        parser.error(str(e))

    contact = None
    if args.send:
        try:
            contact = LeadContact(name=args.name, phone=args.phone, email=args.email)
        except ValidationError as e:
            parser.error("; ".join(err["msg"] for err in e.errors()))

    table = get_rate_table(args.variant)

    if args.matrix:
        matrix = build_matrix(inputs, table)
        if isinstance(matrix, Rejection):
            print_rejection(matrix)
            return 1
        print_matrix(matrix)
        return 0

    result = build_quote(inputs, table)
    if isinstance(result, Rejection):
        print_rejection(result)
        return 1
    print_quote(result)

    if args.send:
        payload = build_lead_payload(table, inputs, result, contact.model_dump())
        outcome = await LeadWebhookClient(variant=table.variant).deliver(payload)
        status = "delivered" if outcome.delivered else f"not delivered ({outcome.error})"
        print(f"  Lead {payload['request_id']}: {status}\n")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
