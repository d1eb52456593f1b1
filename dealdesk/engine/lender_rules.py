"""Lender rule evaluation: one lender profile against one resolved deal.

Pure computation. No I/O. Each tier is tested constraint by constraint so a
rejected deal can say exactly what failed and by how much.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from dealdesk.engine.ltv import ltv_ratio
from dealdesk.engine.money import round2
from dealdesk.models.customer import CustomerProfile
from dealdesk.models.deal import ResolvedDeal
from dealdesk.models.lender import BookValueSource, LenderProfile, RateTier
from dealdesk.models.results import EligibilityResult, TierCheck

logger = logging.getLogger(__name__)

INACTIVE_REASON = "Lender inactive"
NO_TIERS_REASON = "No rate tiers configured"


def _num(value) -> str:
    """Compact display form: 125.00 -> 125, 125.50 -> 125.5."""
    if isinstance(value, Decimal):
        return f"{value.normalize():f}"
    return str(value)


def _money(value: Decimal) -> str:
    return f"${value:,.0f}"


def book_value_for(resolved: ResolvedDeal, profile: LenderProfile) -> tuple[BookValueSource, Decimal | None]:
    """Book value this lender advances against. No fallback to the other guide value."""
    source = profile.book_value_source
    if source is None:
        logger.warning(
            "Lender %s (%s) has no book value source, defaulting to Retail",
            profile.name, profile.id,
        )
        source = BookValueSource.RETAIL
    value = resolved.trade_book_value if source is BookValueSource.TRADE else resolved.retail_book_value
    if value is not None and value <= 0:
        value = None
    return source, value


def lender_gate_failures(resolved: ResolvedDeal, profile: LenderProfile, customer: CustomerProfile) -> list[str]:
    """Lender-wide requirements checked before any tier."""
    failures: list[str] = []
    income = customer.monthly_income

    if profile.min_income is not None and profile.min_income > 0:
        if income is None:
            failures.append(f"Income unknown (lender minimum {_money(profile.min_income)})")
        elif income < profile.min_income:
            failures.append(f"Income too low ({_money(income)} < {_money(profile.min_income)})")

    if profile.max_pti is not None and profile.max_pti > 0 and income and resolved.monthly_payment > 0:
        pti = resolved.monthly_payment / income * 100
        if pti > profile.max_pti:
            shown = pti.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            failures.append(f"PTI {_num(shown)}% exceeds lender max {_num(profile.max_pti)}%")

    return failures


def check_tier(
    tier: RateTier,
    position: int,
    resolved: ResolvedDeal,
    customer: CustomerProfile,
    ltv: Decimal | None,
    book_source: BookValueSource,
) -> TierCheck:
    failures: list[str] = []
    fico = customer.credit_score

    # Unknown FICO is not disqualifying; the caller flags it instead
    if fico is not None:
        if tier.min_fico is not None and fico < tier.min_fico:
            failures.append(f"FICO {fico} below tier min {tier.min_fico}")
        if tier.max_fico is not None and fico > tier.max_fico:
            failures.append(f"FICO {fico} above tier max {tier.max_fico}")

    if tier.max_ltv is not None:
        if ltv is None:
            failures.append(f"LTV cannot be checked: no {book_source.value.lower()} book value")
        elif ltv > tier.max_ltv:
            failures.append(f"LTV {_num(round2(ltv))}% exceeds tier max {_num(tier.max_ltv)}%")

    term = resolved.loan_term
    if tier.max_term is not None and term > tier.max_term:
        failures.append(f"Term {term} mo exceeds tier max {tier.max_term} mo")
    if tier.min_term is not None and term < tier.min_term:
        failures.append(f"Term {term} mo below tier min {tier.min_term} mo")

    year = resolved.model_year
    if tier.min_year is not None and (year is None or year < tier.min_year):
        failures.append(f"Model year {year or 'unknown'} older than tier min {tier.min_year}")
    if tier.max_year is not None and (year is None or year > tier.max_year):
        failures.append(f"Model year {year or 'unknown'} newer than tier max {tier.max_year}")

    miles = resolved.mileage
    if tier.min_mileage is not None and (miles is None or miles < tier.min_mileage):
        shown = "unknown" if miles is None else f"{miles:,}"
        failures.append(f"Mileage {shown} below tier min {tier.min_mileage:,}")
    if tier.max_mileage is not None and (miles is None or miles > tier.max_mileage):
        shown = "unknown" if miles is None else f"{miles:,}"
        failures.append(f"Mileage {shown} exceeds tier max {tier.max_mileage:,}")

    financed = resolved.amount_to_finance
    if tier.min_amount_financed is not None and financed < tier.min_amount_financed:
        failures.append(
            f"Amount financed {_money(financed)} below tier min {_money(tier.min_amount_financed)}"
        )
    if tier.max_amount_financed is not None and financed > tier.max_amount_financed:
        failures.append(
            f"Amount financed {_money(financed)} exceeds tier max {_money(tier.max_amount_financed)}"
        )

    return TierCheck(tier=tier, position=position, failures=tuple(failures))


def evaluate(resolved: ResolvedDeal, profile: LenderProfile, customer: CustomerProfile) -> EligibilityResult:
    """Select the first tier, in declaration order, that passes every constraint.

    Lenders list tiers from most to least favorable; that order is respected
    and never re-sorted by rate.
    """
    if profile.active is False:
        return EligibilityResult(lender=profile, eligible=False, rejection_reasons=(INACTIVE_REASON,))

    fico_unknown = customer.credit_score is None
    source, book_value = book_value_for(resolved, profile)
    ltv = ltv_ratio(resolved.amount_to_finance, book_value)
    context = dict(
        lender=profile,
        fico_unknown=fico_unknown,
        book_value_missing=book_value is None,
        book_value_source=source,
        ltv=None if ltv is None else round2(ltv),
    )

    gate_failures = lender_gate_failures(resolved, profile, customer)
    if gate_failures:
        return EligibilityResult(eligible=False, rejection_reasons=tuple(gate_failures), **context)

    if not profile.tiers:
        return EligibilityResult(eligible=False, rejection_reasons=(NO_TIERS_REASON,), **context)

    checks = [
        check_tier(tier, position, resolved, customer, ltv, source)
        for position, tier in enumerate(profile.tiers)
    ]

    for check in checks:
        if check.passed:
            logger.debug("Lender %s matched tier %s", profile.name, check.tier.name)
            return EligibilityResult(eligible=True, matched_tier=check.tier, **context)

    # Closest miss: fewest failed constraints, earliest declared on ties
    closest = min(checks, key=lambda c: (len(c.failures), c.position))
    logger.debug(
        "Lender %s rejected, closest tier %s failed %d constraint(s)",
        profile.name, closest.tier.name, len(closest.failures),
    )
    return EligibilityResult(
        eligible=False,
        rejection_reasons=closest.failures,
        closest_tier=closest.tier.name,
        **context,
    )
