"""CLI client for the Dealdesk API: posts a deal and prints a plain-text deal sheet.

Usage:
    python deal-quote/quote_deal.py deal.json
    python deal-quote/quote_deal.py deal.json --down 3000 --term 60 --fico 712

The JSON file holds a quote request: {"deal": {...}, "dealer_settings": {...},
"customer": {...}, "lenders": [...]}. Command-line flags override the file.
"""

import argparse
import asyncio
import json
import sys
from decimal import Decimal
from pathlib import Path

import httpx

from dealdesk.config import settings


# ── Helpers ──────────────────────────────────────────────────────────────────

def _dollar(v) -> str:
    if v is None:
        return "N/A"
    return f"${float(v):,.2f}"


def _pct(v) -> str:
    if v is None:
        return "N/A"
    return f"{float(v):.2f}%"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_price_breakdown(deal: dict) -> None:
    _header("Price Breakdown")
    print(f"  Selling Price:    {_dollar(deal['selling_price'])}")
    print(f"  Doc Fee:          {_dollar(deal['doc_fee'])}")
    print(f"  CVR Fee:          {_dollar(deal['cvr_fee'])}")
    print(f"  State Fees:       {_dollar(deal['state_fees'])}")
    if float(deal["transit_fee"]):
        print(f"  Transit Fee:      {_dollar(deal['transit_fee'])}")
    rate = f" ({_pct(deal['tax_rate'])})" if deal.get("tax_rate") is not None else ""
    print(f"  Sales Tax:        {_dollar(deal['sales_tax'])}{rate}")
    print(f"  Out the Door:     {_dollar(deal['out_the_door_price'])}")


def print_structure(deal: dict) -> None:
    _header("Deal Structure")
    print(f"  Trade-In Value:   {_dollar(deal['trade_in_value'])}")
    print(f"  Trade Payoff:     {_dollar(deal['trade_in_payoff'])}")
    print(f"  Net Trade:        {_dollar(deal['net_trade_in'])}")
    print(f"  Cash Down:        {_dollar(deal['down_payment'])}")
    print(f"  Total Down:       {_dollar(deal['total_down'])}")
    print(f"  Subtotal:         {_dollar(deal['sub_total'])}")
    print(f"  Backend Products: {_dollar(deal['backend_products'])}")
    print(f"  Amount Financed:  {_dollar(deal['amount_to_finance'])}")
    if deal["is_overfunded"]:
        print(f"  Cash Back:        {_dollar(deal['cash_back'])}")
    print(f"  Payment:          {_dollar(deal['monthly_payment'])}/mo "
          f"x {deal['loan_term']} @ {_pct(deal['interest_rate'])}")
    print(f"  Front-End Gross:  {_dollar(deal.get('front_end_gross'))}")
    band = f" [{deal['ltv_band']}]" if deal.get("ltv_band") else ""
    print(f"  OTD LTV:          {_pct(deal.get('otd_ltv'))}{band}")


def print_lenders(eligibility: list[dict]) -> None:
    _header("Lender Eligibility")
    if not eligibility:
        print("  No lenders configured")
        return
    for result in eligibility:
        if result["eligible"]:
            tier = result["matched_tier"]
            rate = _pct(tier.get("min_rate")) if tier.get("min_rate") is not None else "rate N/A"
            print(f"  [YES] {result['lender_name']:<28} {tier['name']} from {rate}")
        else:
            print(f"  [NO]  {result['lender_name']}")
            for reason in result["rejection_reasons"]:
                print(f"          - {reason}")
        if result.get("fico_unknown"):
            print("          * FICO unknown, manual underwriting")


def print_breaches(breaches: list[str]) -> None:
    if not breaches:
        return
    _header("Customer Limits Exceeded")
    for breach in breaches:
        print(f"  - {breach}")


# ── Main ─────────────────────────────────────────────────────────────────────

async def main() -> None:
    parser = argparse.ArgumentParser(description="Quote a vehicle deal via the Dealdesk API")
    parser.add_argument("deal_file", type=Path, help="JSON quote request")
    parser.add_argument("--price", type=Decimal, help="Selling price override")
    parser.add_argument("--down", type=Decimal, help="Cash down override")
    parser.add_argument("--term", type=int, help="Loan term in months")
    parser.add_argument("--rate", type=Decimal, help="APR percent")
    parser.add_argument("--fico", type=int, help="Customer credit score")
    parser.add_argument(
        "--api-url",
        default=settings.api_base_url,
        help=f"API base URL (default: {settings.api_base_url})",
    )

    args = parser.parse_args()

    payload: dict = json.loads(args.deal_file.read_text())
    deal = payload.setdefault("deal", {})
    customer = payload.setdefault("customer", {})

    field_map = {
        "price": (deal, "price"),
        "down": (deal, "down_payment"),
        "term": (deal, "loan_term"),
        "rate": (deal, "interest_rate"),
        "fico": (customer, "credit_score"),
    }
    for cli_name, (target, api_name) in field_map.items():
        val = getattr(args, cli_name)
        if val is not None:
            target[api_name] = val if not isinstance(val, Decimal) else str(val)

    url = f"{args.api_url}/api/v1/deals/quote"

    async with httpx.AsyncClient(timeout=30) as client:
        try:
            resp = await client.post(url, json=payload)
        except httpx.ConnectError:
            print(f"Error: Could not connect to API at {args.api_url}", file=sys.stderr)
            print("Is the server running? Start with: uvicorn dealdesk.api.app:app --reload", file=sys.stderr)
            sys.exit(1)
        except httpx.TimeoutException:
            print("Error: Request timed out", file=sys.stderr)
            sys.exit(1)

        if resp.status_code != 200:
            print(f"Error: API returned {resp.status_code}", file=sys.stderr)
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            print(f"  {detail}", file=sys.stderr)
            sys.exit(1)

        data = resp.json()

    print(f"\nQuoted at {data['calculated_at']}")
    print_price_breakdown(data["resolved"])
    print_structure(data["resolved"])
    print_lenders(data["eligibility"])
    print_breaches(data.get("ceiling_breaches", []))
    print()


if __name__ == "__main__":
    asyncio.run(main())
