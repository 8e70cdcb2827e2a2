"""
Unit tests for the OpenAI estimator service and JSON extraction.

Tests verify:
- Tolerant JSON extraction from model prose
- complete() sends model, messages, temperature and token budget
- The client is configured for a single attempt with a bounded timeout
"""
import pytest
from unittest.mock import MagicMock

from offer_engine.llm.openai_service import OpenAIService, extract_json_object


class TestExtractJsonObject:

    def test_pure_json(self):
        assert extract_json_object('{"score": 0.5}') == {"score": 0.5}

    def test_json_in_prose_and_code_fence(self):
        text = 'Sure!\n```json\n{"minAmount": 10, "maxAmount": 20}\n```\nAnything else?'
        assert extract_json_object(text) == {"minAmount": 10, "maxAmount": 20}

    def test_first_balanced_object_wins(self):
        text = '{"score": 0.4, "meta": {"model": "x"}} and later {"score": 0.9}'
        assert extract_json_object(text) == {"score": 0.4, "meta": {"model": "x"}}

    def test_braces_inside_strings_are_ignored(self):
        text = 'Result: {"reasoning": "uses } and { and \\" quotes", "score": 0.7}'
        data = extract_json_object(text)
        assert data["score"] == 0.7
        assert data["reasoning"] == 'uses } and { and " quotes'

    @pytest.mark.parametrize("text", ["", "no json at all", '{"score": 0.5', "{not: json}"])
    def test_invalid_inputs_raise(self, text):
        with pytest.raises(ValueError):
            extract_json_object(text)


class TestOpenAIService:

    @pytest.fixture
    def service(self):
        """Create service with mocked client."""
        svc = OpenAIService(api_key="test", model="test-model", timeout_seconds=7.5)
        svc.client = MagicMock()

        mock_message = MagicMock()
        mock_message.content = '{"score": 0.5}'
        mock_choice = MagicMock()
        mock_choice.message = mock_message
        mock_response = MagicMock()
        mock_response.choices = [mock_choice]
        svc.client.chat.completions.create.return_value = mock_response

        return svc

    def test_client_makes_single_attempt(self):
        svc = OpenAIService(api_key="test", timeout_seconds=7.5)
        assert svc.client.max_retries == 0
        assert svc.timeout_seconds == 7.5

    def test_complete_sends_request(self, service):
        text = service.complete("Price this", max_tokens=500, temperature=0.3, system_prompt="Be terse")

        assert text == '{"score": 0.5}'
        call_kwargs = service.client.chat.completions.create.call_args[1]
        assert call_kwargs['model'] == "test-model"
        assert call_kwargs['max_tokens'] == 500
        assert call_kwargs['temperature'] == 0.3
        assert call_kwargs['messages'] == [
            {"role": "system", "content": "Be terse"},
            {"role": "user", "content": "Price this"},
        ]

    def test_complete_without_system_prompt(self, service):
        service.complete("Price this", max_tokens=10, temperature=0.0)

        call_kwargs = service.client.chat.completions.create.call_args[1]
        assert call_kwargs['messages'] == [{"role": "user", "content": "Price this"}]

    def test_empty_content_raises(self, service):
        service.client.chat.completions.create.return_value.choices[0].message.content = None

        with pytest.raises(ValueError, match="no text content"):
            service.complete("Price this", max_tokens=10, temperature=0.0)

    def test_no_choices_raises(self, service):
        service.client.chat.completions.create.return_value.choices = []

        with pytest.raises(ValueError, match="Unexpected completion response shape"):
            service.complete("Price this", max_tokens=10, temperature=0.0)

    def test_api_errors_propagate_to_caller(self, service):
        service.client.chat.completions.create.side_effect = ConnectionError("down")

        with pytest.raises(ConnectionError):
            service.complete("Price this", max_tokens=10, temperature=0.0)
