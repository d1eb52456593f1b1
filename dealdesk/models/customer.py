from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CustomerProfile:
    credit_score: int | None = None  # FICO; None = not pulled yet
    monthly_income: Decimal | None = None

    # Shopping ceilings the customer asked for. Informational, not lender limits.
    max_price: Decimal | None = None
    max_payment: Decimal | None = None
    max_mileage: int | None = None
    max_otd_ltv: Decimal | None = None
