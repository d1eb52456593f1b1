"""Deal quote orchestrator: resolve + rank as one unit.

Composes the engine sub-modules the way the persistence layer needs them:
both halves of a quote always come from the same inputs.
"""

from collections.abc import Iterable
from datetime import datetime, timezone

from dealdesk.engine.ranking import rank
from dealdesk.engine.resolver import resolve
from dealdesk.models.customer import CustomerProfile
from dealdesk.models.deal import DealerSettings, DealInputs, ResolvedDeal
from dealdesk.models.lender import LenderProfile
from dealdesk.models.results import DealQuote


def ceiling_breaches(resolved: ResolvedDeal, customer: CustomerProfile) -> list[str]:
    """Customer shopping ceilings this deal exceeds. Informational only."""
    breaches: list[str] = []
    if customer.max_price is not None and resolved.selling_price > customer.max_price:
        breaches.append(f"Price ${resolved.selling_price:,.2f} over customer max ${customer.max_price:,.2f}")
    if customer.max_payment is not None and resolved.monthly_payment > customer.max_payment:
        breaches.append(
            f"Payment ${resolved.monthly_payment:,.2f} over customer max ${customer.max_payment:,.2f}"
        )
    if (
        customer.max_mileage is not None
        and resolved.mileage is not None
        and resolved.mileage > customer.max_mileage
    ):
        breaches.append(f"Mileage {resolved.mileage:,} over customer max {customer.max_mileage:,}")
    if (
        customer.max_otd_ltv is not None
        and resolved.otd_ltv is not None
        and resolved.otd_ltv > customer.max_otd_ltv
    ):
        breaches.append(f"OTD LTV {resolved.otd_ltv}% over customer max {customer.max_otd_ltv}%")
    return breaches


def build_quote(
    inputs: DealInputs,
    dealer_settings: DealerSettings,
    profiles: Iterable[LenderProfile] | None,
    customer: CustomerProfile,
    now: datetime | None = None,
) -> DealQuote:
    resolved = resolve(inputs, dealer_settings)
    eligibility = rank(resolved, profiles, customer)
    return DealQuote(
        inputs=inputs,
        dealer_settings=dealer_settings,
        customer=customer,
        resolved=resolved,
        eligibility=tuple(eligibility),
        calculated_at=now or datetime.now(timezone.utc),
        ceiling_breaches=tuple(ceiling_breaches(resolved, customer)),
    )
