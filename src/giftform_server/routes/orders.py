"""Order endpoints — quote a draft order and submit a finished one.

Both endpoints recompute the total from the posted answers; a total sent
by the client is never used.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from giftform_rules.checkout import CheckoutService
from giftform_rules.models.order import OrderState

from giftform_server.dependencies import get_service

router = APIRouter(prefix="/forms", tags=["orders"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class QuoteRequest(BaseModel):
    """Body for POST /forms/{form_id}/quote."""
    answers: dict[str, Any] = Field(default_factory=dict)


class QuoteResponse(BaseModel):
    state: OrderState
    # Answers after gift over-selection was trimmed
    answers: dict[str, Any]


class SubmitRequest(BaseModel):
    """Body for POST /forms/{form_id}/submit."""
    answers: dict[str, Any] = Field(default_factory=dict)
    email: str | None = None


class SubmitResponse(BaseModel):
    success: bool
    submission_id: str
    total: int


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/{form_id}/quote")
def quote_order(
    form_id: str,
    body: QuoteRequest,
    service: CheckoutService = Depends(get_service),
) -> QuoteResponse:
    """Return the live total and gift allowances for a draft answer set."""
    state, answers = service.quote(form_id, body.answers)
    return QuoteResponse(state=state, answers=answers)


@router.post("/{form_id}/submit", status_code=201)
async def submit_order(
    form_id: str,
    body: SubmitRequest,
    service: CheckoutService = Depends(get_service),
) -> SubmitResponse:
    """Finalise and store an order.

    Returns 201 on success, 404 for an unknown form, and 502 when the
    submission sink fails.
    """
    receipt = await service.submit(form_id, body.answers, email=body.email)
    return SubmitResponse(
        success=True,
        submission_id=receipt.submission_id,
        total=receipt.total,
    )
