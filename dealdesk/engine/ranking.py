"""Eligibility ranking across a dealer's lender catalog."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from dealdesk.engine.lender_rules import evaluate
from dealdesk.models.customer import CustomerProfile
from dealdesk.models.deal import ResolvedDeal
from dealdesk.models.lender import LenderProfile
from dealdesk.models.results import EligibilityResult

logger = logging.getLogger(__name__)


def _rate_key(result: EligibilityResult) -> tuple[int, Decimal]:
    # Unpriced tiers sort after priced ones
    rate = result.matched_tier.min_rate if result.matched_tier else None
    return (1, Decimal("0")) if rate is None else (0, rate)


def rank(
    resolved: ResolvedDeal,
    profiles: Iterable[LenderProfile] | None,
    customer: CustomerProfile,
) -> list[EligibilityResult]:
    """Evaluate every lender once and order the results.

    Eligible lenders come first, cheapest matched tier first. Ineligible
    lenders follow in catalog order, so "why not" can be listed without
    implying a ranking among rejections. An empty or malformed catalog
    yields an empty list: no lenders configured yet is a normal state.
    """
    if profiles is None:
        return []
    if isinstance(profiles, (str, bytes, Mapping)) or not isinstance(profiles, Iterable):
        logger.warning("Lender catalog is not a list (%s), treating as empty", type(profiles).__name__)
        return []

    eligible: list[EligibilityResult] = []
    ineligible: list[EligibilityResult] = []

    for profile in profiles:
        if not isinstance(profile, LenderProfile):
            logger.warning("Skipping malformed lender profile entry: %r", profile)
            continue
        result = evaluate(resolved, profile, customer)
        (eligible if result.eligible else ineligible).append(result)

    # sorted() is stable: equal rates keep catalog order
    return sorted(eligible, key=_rate_key) + ineligible
