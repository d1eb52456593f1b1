from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class BookValueSource(Enum):
    TRADE = "Trade"
    RETAIL = "Retail"


@dataclass(frozen=True)
class RateTier:
    """One bracket of a lender's rate sheet. Every bound is inclusive."""
    name: str
    min_fico: int | None = None
    max_fico: int | None = None  # None = unbounded
    max_ltv: Decimal | None = None  # Percent of book value
    min_rate: Decimal | None = None  # APR percent
    max_rate: Decimal | None = None
    max_term: int | None = None  # Months
    min_term: int | None = None

    # Vehicle restrictions
    min_year: int | None = None
    max_year: int | None = None
    min_mileage: int | None = None
    max_mileage: int | None = None

    min_amount_financed: Decimal | None = None
    max_amount_financed: Decimal | None = None


@dataclass(frozen=True)
class LenderProfile:
    id: str
    name: str
    active: bool = True
    book_value_source: BookValueSource | None = None
    min_income: Decimal | None = None  # Monthly
    max_pti: Decimal | None = None  # Payment-to-income, percent
    tiers: tuple[RateTier, ...] = field(default_factory=tuple)  # Most to least favorable
