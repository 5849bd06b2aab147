"""Payment history page."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from hotel_shared.endpoints import payments as payment_endpoints
from hotel_shared.endpoints.base import ApiSession
from hotel_shared.models.auth import User
from hotel_shared.models.errors import ApiError
from hotel_web.dependencies import get_api
from hotel_web.security import require_user
from hotel_web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])

HISTORY_LOAD_FAILED = "Failed to load payment history. Please try again later."


@router.get(
    "/payments",
    summary="Payment history",
    description="Transactions recorded for the signed-in user, newest first.",
    response_class=HTMLResponse,
)
async def payments_page(
    request: Request,
    user: User = Depends(require_user()),
    api: ApiSession = Depends(get_api),
) -> HTMLResponse:
    transactions = []
    error = None
    try:
        transactions = await api.query(payment_endpoints.get_payment_history)
    except ApiError as e:
        logger.warning("Payment history failed for user %s: %s", user.id, e.message)
        error = HISTORY_LOAD_FAILED

    transactions = sorted(
        transactions, key=lambda t: t.created_at.timestamp() if t.created_at else 0, reverse=True
    )
    return await render(
        request,
        "payments.html",
        {"transactions": transactions, "error": error},
        api=api,
    )
