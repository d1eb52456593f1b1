"""Loan-to-value helpers shared by the resolver and the lender rules."""

from decimal import Decimal

from dealdesk.engine.money import ZERO, round2
from dealdesk.models.deal import LtvBand, LtvThresholds


def ltv_ratio(amount: Decimal, book_value: Decimal | None) -> Decimal | None:
    """amount / book * 100 at full precision. None when there is no usable book value.

    Lender ceilings are compared against this figure; rounding is for display only.
    """
    if book_value is None or book_value <= 0:
        return None
    if amount <= 0:
        return ZERO
    return amount / book_value * 100


def loan_to_value(amount: Decimal, book_value: Decimal | None) -> Decimal | None:
    """ltv_ratio rounded to 2 places, the figure shown on the deal."""
    ratio = ltv_ratio(amount, book_value)
    return None if ratio is None else round2(ratio)


def ltv_band(ltv: Decimal | None, thresholds: LtvThresholds) -> LtvBand | None:
    if ltv is None:
        return None
    if ltv > thresholds.critical:
        return LtvBand.CRITICAL
    if ltv > thresholds.danger:
        return LtvBand.DANGER
    if ltv > thresholds.warn:
        return LtvBand.WARN
    return LtvBand.OK
