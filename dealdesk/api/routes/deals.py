"""Deal routes: the primary API entry point.

Stateless. The web UI calls these on every edit; the persistence layer
calls /deals/quote right before it writes a saved deal.
"""

from dataclasses import asdict

from fastapi import APIRouter

from dealdesk.api.schemas import (
    EligibilityResponse,
    QuoteRequest,
    QuoteResponse,
    RateTierResponse,
    ResolvedDealResponse,
    ResolveRequest,
)
from dealdesk.engine.quote import build_quote
from dealdesk.engine.ranking import rank
from dealdesk.engine.resolver import resolve
from dealdesk.models.deal import ResolvedDeal
from dealdesk.models.results import EligibilityResult

router = APIRouter(prefix="/api/v1/deals", tags=["deals"])


def _resolved_to_response(resolved: ResolvedDeal) -> ResolvedDealResponse:
    data = asdict(resolved)
    data["ltv_band"] = resolved.ltv_band.value if resolved.ltv_band else None
    return ResolvedDealResponse(**data)


def _eligibility_to_response(result: EligibilityResult) -> EligibilityResponse:
    tier = result.matched_tier
    matched = None
    if tier is not None:
        matched = RateTierResponse(**asdict(tier))
    return EligibilityResponse(
        lender_id=result.lender_id,
        lender_name=result.lender_name,
        eligible=result.eligible,
        matched_tier=matched,
        rejection_reasons=list(result.rejection_reasons),
        fico_unknown=result.fico_unknown,
        book_value_missing=result.book_value_missing,
        book_value_source=result.book_value_source.value if result.book_value_source else None,
        ltv=result.ltv,
        closest_tier=result.closest_tier,
    )


@router.post("/resolve", response_model=ResolvedDealResponse)
def resolve_deal(req: ResolveRequest):
    """Financial breakdown only: fees, tax, OTD, trade, amount financed, payment."""
    resolved = resolve(req.deal.to_domain(), req.dealer_settings.to_domain())
    return _resolved_to_response(resolved)


@router.post("/eligibility", response_model=list[EligibilityResponse])
def deal_eligibility(req: QuoteRequest):
    """Ranked lender eligibility for the deal as currently structured."""
    resolved = resolve(req.deal.to_domain(), req.dealer_settings.to_domain())
    results = rank(resolved, [lender.to_domain() for lender in req.lenders], req.customer.to_domain())
    return [_eligibility_to_response(r) for r in results]


@router.post("/quote", response_model=QuoteResponse)
def quote_deal(req: QuoteRequest):
    """Resolve + rank from one set of inputs, timestamped. This is what gets saved."""
    quote = build_quote(
        inputs=req.deal.to_domain(),
        dealer_settings=req.dealer_settings.to_domain(),
        profiles=[lender.to_domain() for lender in req.lenders],
        customer=req.customer.to_domain(),
    )
    return QuoteResponse(
        calculated_at=quote.calculated_at,
        resolved=_resolved_to_response(quote.resolved),
        eligibility=[_eligibility_to_response(r) for r in quote.eligibility],
        ceiling_breaches=list(quote.ceiling_breaches),
    )
