"""Cancellation with refund: preview, confirmation and success views.

The refund amounts, fee and policy text all come from the backend; this
module only decides how to present them and validates the guest's input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hotel_shared.models.enums import Severity
from hotel_shared.models.reservation import CancellationResponse, RefundCalculation
from hotel_shared.utils.formatting import format_datetime, format_money

REASON_REQUIRED = "Please provide a reason for cancellation"
ACKNOWLEDGE_REQUIRED = "You must acknowledge the cancellation policy"
CANCEL_FAILED = "Failed to cancel reservation"


class CancellationStep(str, Enum):
    PREVIEW = "preview"
    CONFIRM = "confirm"
    SUCCESS = "success"


@dataclass(frozen=True)
class RefundPreview:
    severity: Severity
    original_amount: str
    refund_amount: str
    cancellation_fee: Optional[str]
    refund_percentage: int
    days_until_check_in: int
    policy_description: str
    explanation: str

    @property
    def show_fee(self) -> bool:
        return self.cancellation_fee is not None


def refund_severity(calculation: RefundCalculation) -> Severity:
    if calculation.is_full_refund:
        return Severity.SUCCESS
    if calculation.is_no_refund:
        return Severity.ERROR
    return Severity.WARNING


def build_refund_preview(calculation: RefundCalculation) -> RefundPreview:
    """Present a refund calculation; the fee line is omitted when there is no fee."""
    fee = format_money(calculation.cancellation_fee) if calculation.cancellation_fee > 0 else None
    return RefundPreview(
        severity=refund_severity(calculation),
        original_amount=format_money(calculation.original_amount),
        refund_amount=format_money(calculation.refund_amount),
        cancellation_fee=fee,
        refund_percentage=calculation.refund_percentage,
        days_until_check_in=calculation.days_until_check_in,
        policy_description=calculation.policy_description,
        explanation=calculation.explanation,
    )


def validate_cancellation(reason: Optional[str], acknowledged: bool) -> Optional[str]:
    """Check the preview form before moving to confirmation.

    Returns:
        An error message, or None when the guest may continue.
    """
    if not reason or not reason.strip():
        return REASON_REQUIRED
    if not acknowledged:
        return ACKNOWLEDGE_REQUIRED
    return None


@dataclass(frozen=True)
class CancellationSummary:
    reservation_id: str
    refund_amount: str
    cancellation_fee: Optional[str]
    original_amount: str
    refund_percentage: int
    refund_status: str
    estimated_refund_time: str
    cancelled_at: str
    message: str


def build_cancellation_summary(response: CancellationResponse) -> CancellationSummary:
    fee = format_money(response.cancellation_fee) if response.cancellation_fee > 0 else None
    return CancellationSummary(
        reservation_id=response.reservation_id,
        refund_amount=format_money(response.refund_amount),
        cancellation_fee=fee,
        original_amount=format_money(response.original_amount),
        refund_percentage=response.refund_percentage,
        refund_status=response.refund_status,
        estimated_refund_time=response.estimated_refund_time,
        cancelled_at=format_datetime(response.cancelled_at),
        message=response.message,
    )
