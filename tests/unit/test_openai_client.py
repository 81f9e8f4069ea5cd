"""
OpenAI adapter unit tests.

AsyncOpenAI is replaced by a mock; no network calls are made.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APITimeoutError

from application.exceptions import ModelTransportError
from services.llm.client import OpenAIWorkoutModel
from shared.ai_context import AIRequestContext


def make_response(content='{"workout": {"exercises": []}}', choices=True):
    response = MagicMock()
    response.model = "gpt-4o-mini-2024-07-18"
    response.usage = MagicMock(prompt_tokens=120, completion_tokens=80, total_tokens=200)
    message = MagicMock(content=content)
    response.choices = [MagicMock(message=message)] if choices else []
    return response


@pytest.fixture
def openai_mock():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_response())
    return client


@pytest.mark.unit
class TestOpenAIWorkoutModel:
    @pytest.mark.asyncio
    async def test_sends_single_system_message(self, openai_mock):
        model = OpenAIWorkoutModel(api_key="sk-test", client=openai_mock)

        completion = await model.complete("PROMPT", max_tokens=1600, temperature=0.7)

        kwargs = openai_mock.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "system", "content": "PROMPT"}]
        assert kwargs["max_tokens"] == 1600
        assert kwargs["temperature"] == 0.7
        assert kwargs["response_format"] == {"type": "json_object"}
        assert completion.text == '{"workout": {"exercises": []}}'
        assert completion.usage.total_tokens == 200
        assert completion.model == "gpt-4o-mini-2024-07-18"

    @pytest.mark.asyncio
    async def test_context_sent_as_metadata(self, openai_mock):
        model = OpenAIWorkoutModel(api_key="sk-test", client=openai_mock)
        context = AIRequestContext(
            user_id="user-1", feature_name="workout_generation", environment="test"
        )

        await model.complete("PROMPT", max_tokens=1200, temperature=0.7, context=context)

        kwargs = openai_mock.chat.completions.create.call_args.kwargs
        assert kwargs["user"] == "user-1"
        assert kwargs["extra_headers"]["X-Workout-Feature-Name"] == "workout_generation"
        assert kwargs["extra_headers"]["X-Workout-Environment"] == "test"

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, openai_mock):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        openai_mock.chat.completions.create.side_effect = APITimeoutError(request=request)
        model = OpenAIWorkoutModel(api_key="sk-test", client=openai_mock)

        with pytest.raises(ModelTransportError):
            await model.complete("PROMPT", max_tokens=1200, temperature=0.7)

    @pytest.mark.asyncio
    async def test_no_choices_is_transport_error(self, openai_mock):
        openai_mock.chat.completions.create.return_value = make_response(choices=False)
        model = OpenAIWorkoutModel(api_key="sk-test", client=openai_mock)

        with pytest.raises(ModelTransportError):
            await model.complete("PROMPT", max_tokens=1200, temperature=0.7)

    @pytest.mark.asyncio
    async def test_empty_content_returns_empty_text(self, openai_mock):
        openai_mock.chat.completions.create.return_value = make_response(content=None)
        model = OpenAIWorkoutModel(api_key="sk-test", client=openai_mock)

        completion = await model.complete("PROMPT", max_tokens=1200, temperature=0.7)

        assert completion.text == ""

    def test_sdk_retries_disabled(self):
        model = OpenAIWorkoutModel(api_key="sk-test")

        assert model._client.max_retries == 0
        assert model.model == "gpt-4o-mini"
