from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from dealdesk.models.customer import CustomerProfile
from dealdesk.models.deal import DealerSettings, DealInputs, ResolvedDeal
from dealdesk.models.lender import BookValueSource, LenderProfile, RateTier


@dataclass(frozen=True)
class TierCheck:
    """Outcome of testing one tier: which constraints failed and why."""
    tier: RateTier
    position: int  # Declaration order within the lender profile
    failures: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class EligibilityResult:
    lender: LenderProfile
    eligible: bool
    matched_tier: RateTier | None = None
    rejection_reasons: tuple[str, ...] = ()

    # Business-condition flags, rendered by the caller
    fico_unknown: bool = False
    book_value_missing: bool = False
    book_value_source: BookValueSource | None = None
    ltv: Decimal | None = None
    closest_tier: str | None = None  # Fewest failed constraints when nothing matched

    @property
    def lender_id(self) -> str:
        return self.lender.id

    @property
    def lender_name(self) -> str:
        return self.lender.name


@dataclass(frozen=True)
class DealQuote:
    """Resolve/rank pair computed from one set of inputs. The unit that gets persisted."""
    inputs: DealInputs
    dealer_settings: DealerSettings
    customer: CustomerProfile
    resolved: ResolvedDeal
    eligibility: tuple[EligibilityResult, ...]
    calculated_at: datetime
    ceiling_breaches: tuple[str, ...] = field(default_factory=tuple)

    @property
    def eligible_lenders(self) -> list[EligibilityResult]:
        return [r for r in self.eligibility if r.eligible]
