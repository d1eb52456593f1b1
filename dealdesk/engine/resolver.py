"""Deal financial resolver: raw deal inputs + dealer settings -> ResolvedDeal.

Pure computation. No I/O. Steps run in a fixed order because later totals
build on earlier roundings; a second resolve of the same inputs must
reproduce the stored snapshot exactly.
"""

from dataclasses import replace
from decimal import Decimal

from dealdesk.engine.amortization import monthly_payment, validate_term
from dealdesk.engine.errors import MalformedDealInputsError
from dealdesk.engine.ltv import loan_to_value, ltv_band
from dealdesk.engine.money import ZERO, clamp_non_negative, round2, to_decimal
from dealdesk.engine.sales_tax import compute_sales_tax
from dealdesk.models.deal import DealerSettings, DealInputs, ResolvedDeal


def _money(value, name: str) -> Decimal:
    amount = to_decimal(value, name)
    if amount < 0:
        raise MalformedDealInputsError(f"{name} cannot be negative, got {amount}")
    return amount


def _optional_money(value, name: str) -> Decimal | None:
    return None if value is None else _money(value, name)


def _optional_count(value, name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedDealInputsError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def resolve(inputs: DealInputs, settings: DealerSettings) -> ResolvedDeal:
    """Build the full price/fee/trade/finance breakdown for one deal.

    Raises:
        MalformedDealInputsError: a numeric field is non-finite or out of range
        InvalidTermError: loan term is not a positive integer
    """
    # Coerce everything up front so nothing partial is ever computed
    price = _money(inputs.price, "price")
    doc_fee = _money(settings.doc_fee if inputs.doc_fee is None else inputs.doc_fee, "doc_fee")
    cvr_fee = _money(settings.cvr_fee if inputs.cvr_fee is None else inputs.cvr_fee, "cvr_fee")
    state_fees = _money(inputs.state_fees, "state_fees")
    provided_tax = _optional_money(inputs.sales_tax, "sales_tax")
    provided_rate = _optional_money(inputs.sales_tax_rate, "sales_tax_rate")
    custom_rate = _optional_money(settings.custom_tax_rate, "custom_tax_rate")
    down_payment = _money(inputs.down_payment, "down_payment")
    trade_in_value = _money(inputs.trade_in_value, "trade_in_value")
    trade_in_payoff = _money(inputs.trade_in_payoff, "trade_in_payoff")
    backend_products = _money(inputs.backend_products, "backend_products")
    interest_rate = _money(inputs.interest_rate, "interest_rate")
    unit_cost = _optional_money(inputs.unit_cost, "unit_cost")
    trade_book = _optional_money(inputs.trade_book_value, "trade_book_value")
    retail_book = _optional_money(inputs.retail_book_value, "retail_book_value")
    mileage = _optional_count(inputs.mileage, "mileage")
    model_year = _optional_count(inputs.model_year, "model_year")
    term = validate_term(inputs.loan_term)

    # 1-2. Fees and tax
    tax_quote = compute_sales_tax(
        replace(settings, custom_tax_rate=custom_rate),
        price=price,
        trade_in_value=trade_in_value,
        doc_fee=doc_fee,
        cvr_fee=cvr_fee,
        provided_tax=provided_tax,
        provided_rate=provided_rate,
        override_state=inputs.registration_state,
    )
    transit_fee = _money(tax_quote.transit_fee, "out_of_state_transit_fee")
    fees_total = doc_fee + cvr_fee + state_fees + transit_fee
    sales_tax = tax_quote.tax

    # 3. OTD
    out_the_door = round2(price + fees_total + sales_tax)

    # 4-6. Trade, down, subtotal. Negative equity is a debit against the down.
    net_trade_in = trade_in_value - trade_in_payoff
    total_down = round2(down_payment + net_trade_in)
    sub_total = round2(out_the_door - total_down)

    # 7. Amount financed, floored at zero; the excess goes back to the customer
    financed_raw = round2(sub_total + backend_products)
    amount_to_finance = clamp_non_negative(financed_raw)
    is_overfunded = financed_raw < 0
    cash_back = -financed_raw if is_overfunded else round2(ZERO)

    # 8. Payment comes from amount_to_finance and nothing else
    payment = monthly_payment(amount_to_finance, interest_rate, term)

    # 9. Gross: None means unknown, which is not the same as zero
    front_end_gross = round2(price - unit_cost) if unit_cost is not None else None

    # 10. Desk LTVs against trade book, retail as fallback
    book = trade_book if trade_book else retail_book
    front_end_ltv = loan_to_value(sub_total, book)
    otd_ltv = loan_to_value(amount_to_finance, book)

    return ResolvedDeal(
        selling_price=round2(price),
        doc_fee=round2(doc_fee),
        cvr_fee=round2(cvr_fee),
        state_fees=round2(state_fees),
        transit_fee=round2(transit_fee),
        fees_total=round2(fees_total),
        tax_rate=tax_quote.rate,
        sales_tax=sales_tax,
        out_the_door_price=out_the_door,
        trade_in_value=round2(trade_in_value),
        trade_in_payoff=round2(trade_in_payoff),
        net_trade_in=round2(net_trade_in),
        down_payment=round2(down_payment),
        total_down=total_down,
        sub_total=sub_total,
        backend_products=round2(backend_products),
        amount_to_finance=amount_to_finance,
        is_overfunded=is_overfunded,
        cash_back=cash_back,
        loan_term=term,
        interest_rate=interest_rate,
        monthly_payment=payment,
        mileage=mileage,
        model_year=model_year,
        trade_book_value=trade_book,
        retail_book_value=retail_book,
        front_end_gross=front_end_gross,
        front_end_ltv=front_end_ltv,
        otd_ltv=otd_ltv,
        ltv_band=ltv_band(otd_ltv, settings.ltv_thresholds),
    )
