from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from dealdesk.config import settings


class TaxBasis(Enum):
    SELLING_PRICE = "selling_price"
    NET_OF_TRADE = "net_of_trade"  # max(0, price - trade) + doc fee + CVR fee


class LtvBand(Enum):
    OK = "ok"
    WARN = "warn"
    DANGER = "danger"
    CRITICAL = "critical"


@dataclass(frozen=True)
class LtvThresholds:
    warn: Decimal = settings.ltv_warn
    danger: Decimal = settings.ltv_danger
    critical: Decimal = settings.ltv_critical


@dataclass(frozen=True)
class DealerSettings:
    """Per-dealer defaults. Owned by the dealer, read-only to the engine."""
    doc_fee: Decimal = Decimal("0")
    cvr_fee: Decimal = Decimal("0")
    dealer_state: str = settings.default_dealer_state  # Where the store is licensed
    default_state: str = settings.default_dealer_state  # Registration state unless the deal overrides
    out_of_state_transit_fee: Decimal = Decimal("0")
    custom_tax_rate: Decimal | None = None  # Percent; overrides the state table
    tax_basis: TaxBasis = TaxBasis.SELLING_PRICE
    ltv_thresholds: LtvThresholds = field(default_factory=LtvThresholds)
    default_term: int = 72
    default_apr: Decimal = Decimal("7.99")


@dataclass(frozen=True)
class DealInputs:
    # Vehicle
    price: Decimal
    mileage: int | None = None
    model_year: int | None = None
    trade_book_value: Decimal | None = None   # Wholesale/trade guide value
    retail_book_value: Decimal | None = None
    unit_cost: Decimal | None = None

    # Fees & tax
    doc_fee: Decimal | None = None  # None = dealer setting
    cvr_fee: Decimal | None = None  # None = dealer setting
    state_fees: Decimal = Decimal("0")  # Title/registration
    sales_tax: Decimal | None = None  # Pre-computed amount; wins over any rate
    sales_tax_rate: Decimal | None = None  # Percent
    registration_state: str | None = None

    # Structure
    down_payment: Decimal = Decimal("0")
    trade_in_value: Decimal = Decimal("0")
    trade_in_payoff: Decimal = Decimal("0")  # May exceed trade value (negative equity)
    backend_products: Decimal = Decimal("0")  # Warranty, GAP, etc.

    # Financing
    loan_term: int = 72  # Months
    interest_rate: Decimal = Decimal("0")  # Annual, percent

    notes: str = ""


@dataclass(frozen=True)
class ResolvedDeal:
    """Fully reconciled breakdown of one deal. Never the source of truth."""

    # Price & fees
    selling_price: Decimal
    doc_fee: Decimal
    cvr_fee: Decimal
    state_fees: Decimal
    transit_fee: Decimal
    fees_total: Decimal
    tax_rate: Decimal | None  # None when the tax amount was supplied
    sales_tax: Decimal
    out_the_door_price: Decimal

    # Trade & down
    trade_in_value: Decimal
    trade_in_payoff: Decimal
    net_trade_in: Decimal
    down_payment: Decimal
    total_down: Decimal
    sub_total: Decimal

    # Finance
    backend_products: Decimal
    amount_to_finance: Decimal
    is_overfunded: bool
    cash_back: Decimal
    loan_term: int
    interest_rate: Decimal
    monthly_payment: Decimal

    # Vehicle snapshot
    mileage: int | None = None
    model_year: int | None = None
    trade_book_value: Decimal | None = None
    retail_book_value: Decimal | None = None

    # Desk metrics
    front_end_gross: Decimal | None = None  # None = unit cost unknown
    front_end_ltv: Decimal | None = None
    otd_ltv: Decimal | None = None
    ltv_band: LtvBand | None = None
