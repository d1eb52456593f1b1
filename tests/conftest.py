"""Canonical test fixtures used across engine and API tests.

Deal: $30,000 vehicle, $500 doc + $200 CVR + $300 state fees, $1,800 tax,
$2,000 down, $5,000 trade owing $3,000, $1,500 backend, 72 mo at 6.99%.
Book: $26,000 trade / $30,000 retail, so $30,300 financed is 116.54% / 101% LTV.
"""

from decimal import Decimal

import pytest

from dealdesk.models.customer import CustomerProfile
from dealdesk.models.deal import DealerSettings, DealInputs
from dealdesk.models.lender import BookValueSource, LenderProfile, RateTier


@pytest.fixture
def canonical_settings() -> DealerSettings:
    """Michigan store, taxes at the state table rate on selling price."""
    return DealerSettings(
        doc_fee=Decimal("500"),
        cvr_fee=Decimal("200"),
        dealer_state="MI",
        default_state="MI",
        out_of_state_transit_fee=Decimal("15"),
    )


@pytest.fixture
def canonical_deal() -> DealInputs:
    return DealInputs(
        price=Decimal("30000"),
        mileage=30000,
        model_year=2021,
        trade_book_value=Decimal("26000"),
        retail_book_value=Decimal("30000"),
        unit_cost=Decimal("27000"),
        state_fees=Decimal("300"),
        sales_tax=Decimal("1800"),
        down_payment=Decimal("2000"),
        trade_in_value=Decimal("5000"),
        trade_in_payoff=Decimal("3000"),
        backend_products=Decimal("1500"),
        loan_term=72,
        interest_rate=Decimal("6.99"),
    )


@pytest.fixture
def prime_customer() -> CustomerProfile:
    return CustomerProfile(credit_score=720, monthly_income=Decimal("6000"))


@pytest.fixture
def prime_lender() -> LenderProfile:
    """Credit union advancing against retail book."""
    return LenderProfile(
        id="cu-1",
        name="Lakeshore Credit Union",
        book_value_source=BookValueSource.RETAIL,
        tiers=(
            RateTier(
                name="Tier 1",
                min_fico=720,
                max_ltv=Decimal("125"),
                min_rate=Decimal("4.5"),
                max_rate=Decimal("6.5"),
                max_term=84,
            ),
            RateTier(
                name="Tier 2",
                min_fico=660,
                max_fico=719,
                max_ltv=Decimal("115"),
                min_rate=Decimal("6.9"),
                max_rate=Decimal("9.9"),
                max_term=72,
            ),
        ),
    )


@pytest.fixture
def captive_lender() -> LenderProfile:
    """Bank advancing against trade book, tighter LTV."""
    return LenderProfile(
        id="bank-1",
        name="Great Lakes Bank",
        book_value_source=BookValueSource.TRADE,
        tiers=(
            RateTier(
                name="A",
                min_fico=700,
                max_fico=749,
                max_ltv=Decimal("120"),
                min_rate=Decimal("5.9"),
                max_rate=Decimal("7.9"),
                max_term=75,
            ),
        ),
    )


@pytest.fixture
def lender_catalog(prime_lender, captive_lender) -> list[LenderProfile]:
    return [captive_lender, prime_lender]
