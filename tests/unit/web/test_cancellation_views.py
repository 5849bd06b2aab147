"""Unit tests for the cancellation preview, validation and summary."""

import pytest

from hotel_shared.models.enums import Severity
from hotel_shared.models.reservation import CancellationResponse, RefundCalculation
from hotel_web.components.cancellation import (
    ACKNOWLEDGE_REQUIRED,
    REASON_REQUIRED,
    build_cancellation_summary,
    build_refund_preview,
    validate_cancellation,
)


class TestRefundPreview:
    def test_full_refund_has_no_fee_line(self):
        preview = build_refund_preview(
            RefundCalculation(
                original_amount=750,
                refund_amount=750,
                cancellation_fee=0,
                refund_percentage=100,
                is_full_refund=True,
            )
        )

        assert preview.severity == Severity.SUCCESS
        assert preview.refund_amount == "$750.00"
        assert preview.cancellation_fee is None
        assert not preview.show_fee

    def test_partial_refund_shows_fee(self):
        preview = build_refund_preview(
            RefundCalculation(
                original_amount=750,
                refund_amount=375,
                cancellation_fee=375,
                refund_percentage=50,
            )
        )

        assert preview.severity == Severity.WARNING
        assert preview.cancellation_fee == "$375.00"
        assert preview.refund_percentage == 50

    def test_no_refund_is_error_severity(self):
        preview = build_refund_preview(
            RefundCalculation(original_amount=750, cancellation_fee=750, is_no_refund=True)
        )

        assert preview.severity == Severity.ERROR

    def test_backend_camel_case_payload(self):
        calculation = RefundCalculation.model_validate(
            {
                "originalAmount": 500,
                "refundAmount": 250,
                "cancellationFee": 250,
                "refundPercentage": 50,
                "daysUntilCheckIn": 5,
                "policyDescription": "50% refund within 7 days",
            }
        )

        preview = build_refund_preview(calculation)

        assert preview.days_until_check_in == 5
        assert preview.policy_description == "50% refund within 7 days"


class TestValidateCancellation:
    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_reason_required(self, reason):
        assert validate_cancellation(reason, True) == REASON_REQUIRED

    def test_acknowledgement_required(self):
        assert validate_cancellation("Change of plans", False) == ACKNOWLEDGE_REQUIRED

    def test_valid(self):
        assert validate_cancellation("Change of plans", True) is None


class TestCancellationSummary:
    def test_formats_amounts(self):
        summary = build_cancellation_summary(
            CancellationResponse(
                reservation_id="res-1",
                original_amount=750,
                refund_amount=750,
                refund_percentage=100,
                refund_status="PROCESSING",
                estimated_refund_time="5-10 business days",
            )
        )

        assert summary.refund_amount == "$750.00"
        assert summary.cancellation_fee is None
        assert summary.cancelled_at == ""
        assert summary.estimated_refund_time == "5-10 business days"
