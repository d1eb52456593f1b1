"""Fixed-rate installment loan math.

Pure functions: Decimal in, Decimal/dataclass out. No I/O.
Rates are annual percentages (6.99 = 6.99% APR), terms are months.
"""

from dataclasses import dataclass
from decimal import Decimal

from dealdesk.engine.errors import InvalidTermError, MalformedDealInputsError
from dealdesk.engine.money import ZERO, round2, to_decimal


@dataclass(frozen=True)
class AmortizationPayment:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[AmortizationPayment]
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal

    @property
    def total_of_payments(self) -> Decimal:
        return self.total_interest + self.total_principal


def validate_term(term_months) -> int:
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months <= 0:
        raise InvalidTermError(f"loan term must be a positive whole number of months, got {term_months!r}")
    return term_months


def _monthly_rate(annual_rate_pct) -> Decimal:
    rate = to_decimal(annual_rate_pct, "annual_rate_pct")
    if rate < 0:
        raise MalformedDealInputsError(f"annual_rate_pct cannot be negative, got {rate}")
    return rate / 100 / 12


def monthly_payment(principal, annual_rate_pct, term_months: int) -> Decimal:
    """Level monthly payment that retires principal over term_months."""
    n = validate_term(term_months)
    r = _monthly_rate(annual_rate_pct)
    p = to_decimal(principal, "principal")
    if p <= 0:
        return round2(ZERO)
    if r == 0:
        return round2(p / n)

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    return round2(p * (r * factor) / (factor - 1))


def loan_amount(payment, annual_rate_pct, term_months: int) -> Decimal:
    """Principal a given monthly payment will carry. Inverse of monthly_payment."""
    n = validate_term(term_months)
    r = _monthly_rate(annual_rate_pct)
    pmt = to_decimal(payment, "payment")
    if pmt <= 0:
        return round2(ZERO)
    if r == 0:
        return round2(pmt * n)

    # P = M * [1 - (1+r)^-n] / r
    return round2(pmt * (1 - (1 + r) ** -n) / r)


def amortization_schedule(principal, annual_rate_pct, term_months: int) -> AmortizationSchedule:
    """Month-by-month breakdown. The last payment absorbs rounding so the balance ends at zero."""
    pmt = monthly_payment(principal, annual_rate_pct, term_months)
    r = _monthly_rate(annual_rate_pct)
    balance = round2(principal)

    payments: list[AmortizationPayment] = []
    total_interest = ZERO
    total_principal = ZERO

    for period in range(1, term_months + 1):
        if balance <= 0:
            break
        interest = round2(balance * r)
        principal_paid = pmt - interest

        # Final payment adjustment
        if principal_paid > balance or period == term_months:
            principal_paid = balance
            actual_payment = interest + principal_paid
        else:
            actual_payment = pmt

        balance -= principal_paid
        total_interest += interest
        total_principal += principal_paid

        payments.append(AmortizationPayment(
            period=period,
            payment=actual_payment,
            principal=principal_paid,
            interest=interest,
            balance=balance,
        ))

    return AmortizationSchedule(
        payments=payments,
        monthly_payment=pmt,
        total_interest=total_interest,
        total_principal=total_principal,
    )
