"""Loan calculator routes used by the desk's floating finance tools."""

from fastapi import APIRouter

from dealdesk.api.schemas import (
    LoanAmountRequest,
    LoanAmountResponse,
    PaymentRequest,
    PaymentResponse,
    SchedulePaymentResponse,
    ScheduleResponse,
)
from dealdesk.engine.amortization import amortization_schedule, loan_amount, monthly_payment

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


@router.post("/monthly", response_model=PaymentResponse)
def payment_for_principal(req: PaymentRequest):
    return PaymentResponse(
        monthly_payment=monthly_payment(req.principal, req.annual_rate, req.term_months)
    )


@router.post("/loan-amount", response_model=LoanAmountResponse)
def principal_for_payment(req: LoanAmountRequest):
    """How much a target payment buys at the given rate and term."""
    return LoanAmountResponse(
        loan_amount=loan_amount(req.monthly_payment, req.annual_rate, req.term_months)
    )


@router.post("/schedule", response_model=ScheduleResponse)
def payment_schedule(req: PaymentRequest):
    schedule = amortization_schedule(req.principal, req.annual_rate, req.term_months)
    return ScheduleResponse(
        monthly_payment=schedule.monthly_payment,
        total_interest=schedule.total_interest,
        total_principal=schedule.total_principal,
        payments=[
            SchedulePaymentResponse(
                period=p.period,
                payment=p.payment,
                principal=p.principal,
                interest=p.interest,
                balance=p.balance,
            )
            for p in schedule.payments
        ],
    )
