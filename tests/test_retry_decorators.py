"""
Tests for retry and error handling decorators.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from aws_resilience.errors.decorators import handle_aws_errors
from aws_resilience.errors.models import AWSServiceError, ErrorCategory, ServiceOrigin
from aws_resilience.retry.backoff import ExponentialBackoff
from aws_resilience.retry.decorators import with_retry
from aws_resilience.retry.models import RetryConfig, RetryError
from aws_resilience.utils.log import AWSOperationLogger


class TestWithRetry:
    """Tests for @with_retry decorator."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_retry_bare_decorator(self):
        """Test that @with_retry works without arguments."""

        @with_retry
        async def fetch(key):
            return {"key": key}

        assert await fetch("a") == {"key": "a"}
        assert isinstance(fetch.retry, ExponentialBackoff)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_retry_retries_and_returns_result(self, make_error):
        """Test that failures are retried and the bare result is returned."""
        calls = AsyncMock(side_effect=[make_error("ThrottlingException"), "stored"])

        @with_retry(config=RetryConfig(jitter_type="none", base_delay=0))
        async def put_item(item):
            return await calls(item)

        assert await put_item({"id": 1}) == "stored"
        assert calls.await_count == 2
        calls.assert_awaited_with({"id": 1})

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_retry_raises_retry_error(self, make_error):
        """Test that terminal failures surface as RetryError."""

        @with_retry(
            config=RetryConfig(max_retries=1, jitter_type="none", base_delay=0),
            operation_name="Repo.save",
        )
        async def save():
            raise make_error("ThrottlingException", "slow down")

        with pytest.raises(RetryError, match="Repo.save failed after 2 attempts"):
            await save()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_retry_uses_qualname(self, make_error):
        """Test that the operation name defaults to the function qualname."""

        class Repository:
            @with_retry(config=RetryConfig(max_retries=0))
            async def load(self):
                raise make_error("BadInput", "Invalid id")

        with pytest.raises(RetryError) as exc_info:
            await Repository().load()

        assert exc_info.value.operation_name.endswith("Repository.load")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_retry_injected_policy(self):
        """Test that a custom policy is passed to the orchestrator."""
        policy = MagicMock()
        policy.is_retryable.return_value = False

        @with_retry(policy=policy)
        async def boom():
            raise RuntimeError("timeout")

        with pytest.raises(RetryError):
            await boom()
        policy.is_retryable.assert_called_once()

    @pytest.mark.unit
    def test_with_retry_raises_on_sync_function(self):
        """Test that @with_retry raises TypeError for sync functions."""
        with pytest.raises(TypeError, match="can only be applied to async functions"):

            @with_retry
            def sync_call():
                return 1

    @pytest.mark.unit
    def test_with_retry_preserves_function_metadata(self):
        """Test that decorator preserves function metadata."""

        @with_retry
        async def get_document(document_id):
            """Fetch a document."""
            return document_id

        assert get_document.__name__ == "get_document"
        assert "Fetch a document" in get_document.__doc__


@pytest.mark.requires_aws
class TestDecoratorsWithBotocore:
    """Tests combining decorators with stubbed boto3 clients."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stubbed_dynamodb_throttling_is_retried(self):
        """Test a throttled DynamoDB call is retried until it succeeds."""
        import boto3
        from botocore.stub import Stubber

        client = boto3.client(
            "dynamodb",
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        stubber = Stubber(client)
        stubber.add_client_error(
            "get_item",
            service_error_code="ProvisionedThroughputExceededException",
            service_message="Throughput exceeded",
            http_status_code=400,
        )
        stubber.add_response(
            "get_item",
            {"Item": {"id": {"S": "user123"}}},
            {"TableName": "users", "Key": {"id": {"S": "user123"}}},
        )

        @handle_aws_errors(origin=ServiceOrigin.DYNAMODB)
        @with_retry(config=RetryConfig(jitter_type="none", base_delay=0))
        async def get_user(user_id):
            return client.get_item(TableName="users", Key={"id": {"S": user_id}})

        with stubber:
            response = await get_user("user123")

        assert response["Item"]["id"]["S"] == "user123"
        stubber.assert_no_pending_responses()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stubbed_s3_access_denied_is_classified(self):
        """Test a denied S3 call is wrapped with the S3 verdict."""
        import boto3
        from botocore.stub import Stubber

        client = boto3.client(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        stubber = Stubber(client)
        stubber.add_client_error(
            "put_object",
            service_error_code="AccessDenied",
            service_message="Access Denied",
            http_status_code=403,
        )

        @handle_aws_errors(origin=ServiceOrigin.S3)
        async def upload(body):
            return client.put_object(Bucket="docs", Key="id.pdf", Body=body)

        with stubber, patch.object(AWSOperationLogger, "log_error") as log_error:
            with pytest.raises(AWSServiceError) as exc_info:
                await upload(b"%PDF")

        error = exc_info.value
        assert error.category == ErrorCategory.AUTHORIZATION
        assert error.technical_message == "S3 access denied"
        assert error.http_status_code == 403
        assert error.error_code == "AccessDenied"
        log_error.assert_called_once()
