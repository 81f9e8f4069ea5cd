"""
Generation orchestrator unit tests.

Tests for WorkoutGenerator's attempt handling against a scripted fake model.
"""

import logging

import pytest

from application.exceptions import ModelTransportError
from application.ports.model_client import TokenUsage
from services.llm.prompts import RETRY_PROMPT_SUFFIX
from services.workout_generator import (
    ERROR_KIND_OUTPUT,
    ERROR_KIND_TRANSPORT,
    WorkoutGenerator,
)
from shared.ai_context import AIRequestContext
from tests.fakes import FakeModelClient

INVALID_RESPONSE = "Sure! Here's a great chest workout for you."


@pytest.mark.unit
class TestFirstAttemptSuccess:
    """A valid first response needs a single model call."""

    @pytest.mark.asyncio
    async def test_returns_validated_workout(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[valid_model_response])
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert result.success
        assert len(result.data.exercises) == 3
        assert result.attempts == 1
        assert result.error is None
        assert result.raw_response == valid_model_response
        assert model.call_count == 1

    @pytest.mark.asyncio
    async def test_call_parameters(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[valid_model_response])
        generator = WorkoutGenerator(model)

        await generator.generate(sample_request)

        call = model.calls[0]
        assert call["max_tokens"] == 1600
        assert call["temperature"] == 0.7
        assert RETRY_PROMPT_SUFFIX not in model.prompts[0]

    @pytest.mark.asyncio
    async def test_reports_usage_and_model(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[valid_model_response])
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert result.token_usage.total_tokens == 150
        assert result.model == FakeModelClient.MODEL
        assert result.elapsed_ms >= 0

    @pytest.mark.asyncio
    async def test_custom_temperature(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[valid_model_response])
        generator = WorkoutGenerator(model, temperature=0.2)

        await generator.generate(sample_request)

        assert model.calls[0]["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_context_passed_to_model(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[valid_model_response])
        generator = WorkoutGenerator(model)
        context = AIRequestContext(user_id="user-1", feature_name="workout_generation")

        await generator.generate(sample_request, context=context)

        assert model.calls[0]["context"] is context


@pytest.mark.unit
class TestRetryOnInvalidOutput:
    """Invalid output triggers exactly one stricter retry."""

    @pytest.mark.asyncio
    async def test_second_attempt_succeeds(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[INVALID_RESPONSE, valid_model_response])
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert result.success
        assert result.attempts == 2
        assert model.call_count == 2
        assert result.raw_responses == [INVALID_RESPONSE, valid_model_response]

    @pytest.mark.asyncio
    async def test_retry_prompt_is_stricter(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[INVALID_RESPONSE, valid_model_response])
        generator = WorkoutGenerator(model)

        await generator.generate(sample_request)

        assert RETRY_PROMPT_SUFFIX not in model.prompts[0]
        assert model.prompts[1] == model.prompts[0] + RETRY_PROMPT_SUFFIX

    @pytest.mark.asyncio
    async def test_usage_summed_across_attempts(self, sample_request, valid_model_response):
        model = FakeModelClient(
            responses=[INVALID_RESPONSE, valid_model_response],
            usage=TokenUsage(prompt_tokens=200, completion_tokens=100, total_tokens=300),
        )
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert result.token_usage.prompt_tokens == 400
        assert result.token_usage.total_tokens == 600

    @pytest.mark.asyncio
    async def test_schema_violation_is_retried(self, sample_request, valid_model_response):
        bad_schema = '{"workout": {"exercises": [{"name": "Dips", "sets": 0, "reps": 10, "rest_time_seconds": 60}]}}'
        model = FakeModelClient(responses=[bad_schema, valid_model_response])
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert result.success
        assert result.attempts == 2

    @pytest.mark.asyncio
    async def test_invalid_twice_fails(self, sample_request):
        model = FakeModelClient(responses=[INVALID_RESPONSE, "still not json"])
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert not result.success
        assert result.error_kind == ERROR_KIND_OUTPUT
        assert result.attempts == 2
        assert model.call_count == 2
        assert result.raw_responses == [INVALID_RESPONSE, "still not json"]
        assert result.data is None

    @pytest.mark.asyncio
    async def test_invalid_twice_logs_every_raw_response(self, sample_request, caplog):
        model = FakeModelClient(responses=["FIRST-REPLY not json", "SECOND-REPLY not json"])
        generator = WorkoutGenerator(model)

        with caplog.at_level(logging.ERROR, logger="services.workout_generator"):
            await generator.generate(sample_request)

        assert "FIRST-REPLY not json" in caplog.text
        assert "SECOND-REPLY not json" in caplog.text

    @pytest.mark.asyncio
    async def test_raw_response_log_truncated(self, sample_request, caplog):
        model = FakeModelClient(responses=["x" * 5000])
        generator = WorkoutGenerator(model)

        with caplog.at_level(logging.ERROR, logger="services.workout_generator"):
            await generator.generate(sample_request)

        assert "x" * 2000 in caplog.text
        assert "x" * 2001 not in caplog.text

    @pytest.mark.asyncio
    async def test_never_more_than_two_calls(self, sample_request):
        model = FakeModelClient(responses=[INVALID_RESPONSE])
        generator = WorkoutGenerator(model)

        await generator.generate(sample_request)

        assert model.call_count == WorkoutGenerator.MAX_ATTEMPTS


@pytest.mark.unit
class TestTransportFailures:
    """Transport failures and timeouts are never retried."""

    @pytest.mark.asyncio
    async def test_transport_error_not_retried(self, sample_request, valid_model_response):
        model = FakeModelClient(
            responses=[ModelTransportError("connection reset"), valid_model_response]
        )
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert not result.success
        assert result.error_kind == ERROR_KIND_TRANSPORT
        assert result.attempts == 1
        assert model.call_count == 1
        assert result.raw_responses == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_transport(self, sample_request):
        model = FakeModelClient(responses=[RuntimeError("socket closed")])
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert not result.success
        assert result.error_kind == ERROR_KIND_TRANSPORT
        assert result.error == ModelTransportError.public_message
        assert "socket closed" not in result.error

    @pytest.mark.asyncio
    async def test_timeout_is_transport(self, sample_request, valid_model_response):
        model = FakeModelClient(responses=[valid_model_response], delay_seconds=0.2)
        generator = WorkoutGenerator(model, timeout_seconds=0.05)

        result = await generator.generate(sample_request)

        assert not result.success
        assert result.error_kind == ERROR_KIND_TRANSPORT
        assert model.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_on_retry_keeps_first_raw(self, sample_request):
        model = FakeModelClient(
            responses=[INVALID_RESPONSE, ModelTransportError("upstream 503")]
        )
        generator = WorkoutGenerator(model)

        result = await generator.generate(sample_request)

        assert not result.success
        assert result.error_kind == ERROR_KIND_TRANSPORT
        assert result.attempts == 2
        assert result.raw_responses == [INVALID_RESPONSE]
