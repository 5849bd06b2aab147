"""Unit tests for SSMService against moto's Parameter Store."""

from typing import Generator
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from hotel_shared.services.ssm_service import SSMService, SSMServiceError

KEY_PARAMETER = "/hotel/test/stripe/publishable_key"


@pytest.fixture
def ssm_client() -> Generator:
    with mock_aws():
        client = boto3.client("ssm", region_name="eu-west-1")
        client.put_parameter(
            Name=KEY_PARAMETER,
            Value="pk_test_from_ssm",
            Type="SecureString",
        )
        yield client


class TestGetParameter:
    def test_reads_secure_string(self, ssm_client):
        service = SSMService(client=ssm_client)

        assert service.get_parameter(KEY_PARAMETER) == "pk_test_from_ssm"

    def test_missing_parameter_raises(self, ssm_client):
        service = SSMService(client=ssm_client)

        with pytest.raises(SSMServiceError, match="not found"):
            service.get_parameter("/hotel/test/missing")

    def test_value_is_cached(self, ssm_client):
        service = SSMService(client=ssm_client)
        service.get_parameter(KEY_PARAMETER)

        ssm_client.put_parameter(
            Name=KEY_PARAMETER, Value="pk_test_rotated", Type="SecureString", Overwrite=True
        )

        assert service.get_parameter(KEY_PARAMETER) == "pk_test_from_ssm"
        assert service.get_parameter(KEY_PARAMETER, use_cache=False) == "pk_test_rotated"

    def test_clear_cache_rereads(self, ssm_client):
        service = SSMService(client=ssm_client)
        service.get_parameter(KEY_PARAMETER)
        ssm_client.put_parameter(
            Name=KEY_PARAMETER, Value="pk_test_rotated", Type="SecureString", Overwrite=True
        )

        service.clear_cache()

        assert service.get_parameter(KEY_PARAMETER) == "pk_test_rotated"


class TestAccessErrors:
    def test_access_denied_mentions_iam(self):
        client = MagicMock()
        client.get_parameter.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "GetParameter"
        )

        with pytest.raises(SSMServiceError, match="ssm:GetParameter"):
            SSMService(client=client).get_parameter(KEY_PARAMETER)

    def test_other_client_error_is_wrapped(self):
        client = MagicMock()
        client.get_parameter.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "GetParameter"
        )

        with pytest.raises(SSMServiceError, match="Failed to retrieve"):
            SSMService(client=client).get_parameter(KEY_PARAMETER)
