"""Sales tax and out-of-state handling.

A dealer only collects tax up to its home state's rate on out-of-state deals
(reciprocity); the buyer settles any difference when registering at home.
Out-of-state buyers also pay a transit permit fee to drive the car home.
"""

from dataclasses import dataclass
from decimal import Decimal

from dealdesk.config import settings
from dealdesk.engine.errors import MalformedDealInputsError
from dealdesk.engine.money import ZERO, round2
from dealdesk.models.deal import DealerSettings, TaxBasis


@dataclass(frozen=True)
class SalesTaxQuote:
    rate: Decimal | None  # Percent; None when the amount came pre-computed
    taxable_amount: Decimal | None
    tax: Decimal
    transit_fee: Decimal


def registration_state(dealer: DealerSettings, override: str | None = None) -> str:
    return (override or dealer.default_state).upper()


def is_out_of_state(dealer: DealerSettings, override: str | None = None) -> bool:
    return registration_state(dealer, override) != dealer.dealer_state.upper()


def state_rate(state: str) -> Decimal:
    """Published rate for a state, percent."""
    try:
        return settings.state_tax_rates[state.upper()]
    except KeyError:
        raise MalformedDealInputsError(f"no sales tax rate configured for state {state!r}") from None


def jurisdiction_rate(dealer: DealerSettings, override_state: str | None = None) -> Decimal:
    """Rate the dealer collects: the registration state's, capped at home for out-of-state deals."""
    state = registration_state(dealer, override_state)
    rate = state_rate(state)
    if is_out_of_state(dealer, override_state):
        rate = min(state_rate(dealer.dealer_state), rate)
    return rate


def taxable_amount(
    price: Decimal,
    trade_in_value: Decimal,
    doc_fee: Decimal,
    cvr_fee: Decimal,
    basis: TaxBasis,
) -> Decimal:
    if basis is TaxBasis.NET_OF_TRADE:
        return max(ZERO, price - trade_in_value) + doc_fee + cvr_fee
    return price


def compute_sales_tax(
    dealer: DealerSettings,
    price: Decimal,
    trade_in_value: Decimal,
    doc_fee: Decimal,
    cvr_fee: Decimal,
    provided_tax: Decimal | None = None,
    provided_rate: Decimal | None = None,
    override_state: str | None = None,
) -> SalesTaxQuote:
    """Tax for one deal.

    Precedence: pre-computed amount > rate on the deal > dealer custom rate
    > jurisdiction table.
    """
    transit_fee = dealer.out_of_state_transit_fee if is_out_of_state(dealer, override_state) else ZERO

    if provided_tax is not None:
        return SalesTaxQuote(rate=None, taxable_amount=None, tax=round2(provided_tax), transit_fee=transit_fee)

    if provided_rate is not None:
        rate = provided_rate
    elif dealer.custom_tax_rate is not None:
        rate = dealer.custom_tax_rate
    else:
        rate = jurisdiction_rate(dealer, override_state)

    taxable = taxable_amount(price, trade_in_value, doc_fee, cvr_fee, dealer.tax_basis)
    return SalesTaxQuote(
        rate=rate,
        taxable_amount=taxable,
        tax=round2(taxable * rate / 100),
        transit_fee=transit_fee,
    )
