"""Pydantic schemas for API request/response models.

Request models are the validation boundary: loosely typed records from the
UI or the storage layer are range-checked here and converted with
``to_domain()`` into the engine's frozen dataclasses.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dealdesk.models.customer import CustomerProfile
from dealdesk.models.deal import DealerSettings, DealInputs, LtvThresholds, TaxBasis
from dealdesk.models.lender import BookValueSource, LenderProfile, RateTier


def _check_range(low, high, label: str) -> None:
    if low is not None and high is not None and low > high:
        raise ValueError(f"{label}: minimum must be less than or equal to maximum")


# ---- Request schemas ----

class DealInputsRequest(BaseModel):
    # Vehicle
    price: Decimal = Field(..., ge=0, le=10_000_000, description="Selling price")
    mileage: int | None = Field(None, ge=0, le=1_000_000)
    model_year: int | None = Field(None, ge=1900, le=2100)
    trade_book_value: Decimal | None = Field(None, ge=0)
    retail_book_value: Decimal | None = Field(None, ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)

    # Fees & tax
    doc_fee: Decimal | None = Field(None, ge=0, le=10_000)
    cvr_fee: Decimal | None = Field(None, ge=0, le=10_000)
    state_fees: Decimal = Field(Decimal("0"), ge=0, le=50_000)
    sales_tax: Decimal | None = Field(None, ge=0, description="Pre-computed tax amount")
    sales_tax_rate: Decimal | None = Field(None, ge=0, le=20, description="Percent")
    registration_state: str | None = Field(None, min_length=2, max_length=2)

    # Structure
    down_payment: Decimal = Field(Decimal("0"), ge=0, le=10_000_000)
    trade_in_value: Decimal = Field(Decimal("0"), ge=0, le=500_000)
    trade_in_payoff: Decimal = Field(Decimal("0"), ge=0, le=500_000)
    backend_products: Decimal = Field(Decimal("0"), ge=0, le=50_000)

    # Financing
    loan_term: int = Field(72, ge=6, le=96, description="Months")
    interest_rate: Decimal = Field(Decimal("0"), ge=0, le=50, description="APR percent")

    notes: str = Field("", max_length=5000)

    def to_domain(self) -> DealInputs:
        return DealInputs(**self.model_dump())


class DealerSettingsRequest(BaseModel):
    doc_fee: Decimal = Field(Decimal("0"), ge=0, le=10_000)
    cvr_fee: Decimal = Field(Decimal("0"), ge=0, le=10_000)
    dealer_state: str | None = Field(None, min_length=2, max_length=2)
    default_state: str | None = Field(None, min_length=2, max_length=2)
    out_of_state_transit_fee: Decimal = Field(Decimal("0"), ge=0)
    custom_tax_rate: Decimal | None = Field(None, ge=0, le=20)
    tax_basis: TaxBasis = TaxBasis.SELLING_PRICE
    ltv_warn: Decimal | None = Field(None, ge=0, le=200)
    ltv_danger: Decimal | None = Field(None, ge=0, le=200)
    ltv_critical: Decimal | None = Field(None, ge=0, le=200)
    default_term: int = Field(72, ge=6, le=96)
    default_apr: Decimal = Field(Decimal("7.99"), ge=0, le=50)

    @model_validator(mode="after")
    def _ltv_order(self):
        defaults = LtvThresholds()
        warn = defaults.warn if self.ltv_warn is None else self.ltv_warn
        danger = defaults.danger if self.ltv_danger is None else self.ltv_danger
        critical = defaults.critical if self.ltv_critical is None else self.ltv_critical
        _check_range(warn, danger, "LTV warn/danger")
        _check_range(danger, critical, "LTV danger/critical")
        return self

    def to_domain(self) -> DealerSettings:
        defaults = DealerSettings()
        thresholds = LtvThresholds(
            warn=self.ltv_warn if self.ltv_warn is not None else defaults.ltv_thresholds.warn,
            danger=self.ltv_danger if self.ltv_danger is not None else defaults.ltv_thresholds.danger,
            critical=self.ltv_critical if self.ltv_critical is not None else defaults.ltv_thresholds.critical,
        )
        return DealerSettings(
            doc_fee=self.doc_fee,
            cvr_fee=self.cvr_fee,
            dealer_state=self.dealer_state or defaults.dealer_state,
            default_state=self.default_state or self.dealer_state or defaults.default_state,
            out_of_state_transit_fee=self.out_of_state_transit_fee,
            custom_tax_rate=self.custom_tax_rate,
            tax_basis=self.tax_basis,
            ltv_thresholds=thresholds,
            default_term=self.default_term,
            default_apr=self.default_apr,
        )


class CustomerProfileRequest(BaseModel):
    credit_score: int | None = Field(None, ge=300, le=850)
    monthly_income: Decimal | None = Field(None, ge=0, le=1_000_000)
    max_price: Decimal | None = Field(None, ge=0)
    max_payment: Decimal | None = Field(None, ge=0)
    max_mileage: int | None = Field(None, ge=0)
    max_otd_ltv: Decimal | None = Field(None, ge=0, le=200)

    def to_domain(self) -> CustomerProfile:
        return CustomerProfile(**self.model_dump())


class RateTierRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    min_fico: int | None = Field(None, ge=300, le=850)
    max_fico: int | None = Field(None, ge=300, le=850)
    max_ltv: Decimal | None = Field(None, ge=0, le=200)
    min_rate: Decimal | None = Field(None, ge=0, le=50)
    max_rate: Decimal | None = Field(None, ge=0, le=50)
    max_term: int | None = Field(None, ge=6, le=96)
    min_term: int | None = Field(None, ge=6, le=96)
    min_year: int | None = Field(None, ge=1900, le=2100)
    max_year: int | None = Field(None, ge=1900, le=2100)
    min_mileage: int | None = Field(None, ge=0)
    max_mileage: int | None = Field(None, ge=0, le=500_000)
    min_amount_financed: Decimal | None = Field(None, ge=0)
    max_amount_financed: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _ranges(self):
        _check_range(self.min_fico, self.max_fico, "FICO")
        _check_range(self.min_rate, self.max_rate, "rate")
        _check_range(self.min_term, self.max_term, "term")
        _check_range(self.min_year, self.max_year, "model year")
        _check_range(self.min_mileage, self.max_mileage, "mileage")
        _check_range(self.min_amount_financed, self.max_amount_financed, "amount financed")
        return self

    def to_domain(self) -> RateTier:
        return RateTier(**self.model_dump())


class LenderProfileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    active: bool = True
    book_value_source: BookValueSource | None = None
    min_income: Decimal | None = Field(None, ge=0)
    max_pti: Decimal | None = Field(None, ge=0, le=100)
    tiers: list[RateTierRequest] = []

    def to_domain(self) -> LenderProfile:
        return LenderProfile(
            id=self.id,
            name=self.name,
            active=self.active,
            book_value_source=self.book_value_source,
            min_income=self.min_income,
            max_pti=self.max_pti,
            tiers=tuple(t.to_domain() for t in self.tiers),
        )


class ResolveRequest(BaseModel):
    deal: DealInputsRequest
    dealer_settings: DealerSettingsRequest = Field(default_factory=DealerSettingsRequest)


class QuoteRequest(ResolveRequest):
    customer: CustomerProfileRequest = Field(default_factory=CustomerProfileRequest)
    lenders: list[LenderProfileRequest] = []


class PaymentRequest(BaseModel):
    principal: Decimal = Field(..., ge=0)
    annual_rate: Decimal = Field(..., ge=0, le=50, description="APR percent")
    term_months: int = Field(..., ge=1, le=120)


class LoanAmountRequest(BaseModel):
    monthly_payment: Decimal = Field(..., ge=0)
    annual_rate: Decimal = Field(..., ge=0, le=50, description="APR percent")
    term_months: int = Field(..., ge=1, le=120)


# ---- Response schemas ----

class ResolvedDealResponse(BaseModel):
    selling_price: Decimal
    doc_fee: Decimal
    cvr_fee: Decimal
    state_fees: Decimal
    transit_fee: Decimal
    fees_total: Decimal
    tax_rate: Decimal | None = None
    sales_tax: Decimal
    out_the_door_price: Decimal
    trade_in_value: Decimal
    trade_in_payoff: Decimal
    net_trade_in: Decimal
    down_payment: Decimal
    total_down: Decimal
    sub_total: Decimal
    backend_products: Decimal
    amount_to_finance: Decimal
    is_overfunded: bool
    cash_back: Decimal
    loan_term: int
    interest_rate: Decimal
    monthly_payment: Decimal
    mileage: int | None = None
    model_year: int | None = None
    trade_book_value: Decimal | None = None
    retail_book_value: Decimal | None = None
    front_end_gross: Decimal | None = None
    front_end_ltv: Decimal | None = None
    otd_ltv: Decimal | None = None
    ltv_band: str | None = None


class RateTierResponse(BaseModel):
    name: str
    min_fico: int | None = None
    max_fico: int | None = None
    max_ltv: Decimal | None = None
    min_rate: Decimal | None = None
    max_rate: Decimal | None = None
    max_term: int | None = None
    min_term: int | None = None
    min_year: int | None = None
    max_year: int | None = None
    min_mileage: int | None = None
    max_mileage: int | None = None
    min_amount_financed: Decimal | None = None
    max_amount_financed: Decimal | None = None


class EligibilityResponse(BaseModel):
    lender_id: str
    lender_name: str
    eligible: bool
    matched_tier: RateTierResponse | None = None
    rejection_reasons: list[str] = []
    fico_unknown: bool = False
    book_value_missing: bool = False
    book_value_source: str | None = None
    ltv: Decimal | None = None
    closest_tier: str | None = None


class QuoteResponse(BaseModel):
    calculated_at: datetime
    resolved: ResolvedDealResponse
    eligibility: list[EligibilityResponse]
    ceiling_breaches: list[str] = []


class PaymentResponse(BaseModel):
    monthly_payment: Decimal


class LoanAmountResponse(BaseModel):
    loan_amount: Decimal


class SchedulePaymentResponse(BaseModel):
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


class ScheduleResponse(BaseModel):
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal
    payments: list[SchedulePaymentResponse]
