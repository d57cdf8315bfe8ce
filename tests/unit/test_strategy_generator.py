"""
Tests for app/services/strategy_generator.py

Tests prompt rendering, truncation budgets, and response parsing with a
mocked Claude client.
"""

import json
import pytest
from types import SimpleNamespace
from unittest.mock import Mock

from conftest import make_message, text_block
from app.models.submission import NormalizedRecord
from app.services.strategy_generator import StrategyGenerator, parse_strategy, strip_code_fence
from core.config import Config
from core.exceptions import ModelResponseMalformed, UpstreamRejected


@pytest.fixture
def record():
    return NormalizedRecord(client_name="Acme", industry="SaaS")


@pytest.fixture
def mock_client():
    return Mock()


@pytest.fixture
def generator(mock_client):
    return StrategyGenerator(client_factory=lambda: mock_client)


class TestBuildPrompt:
    """Tests for StrategyGenerator.build_prompt()"""

    @pytest.mark.unit
    def test_missing_sections_use_fallback_lines(self, generator, record):
        prompt = generator.build_prompt(record)

        assert "- **Client Name:** Acme" in prompt
        assert "- **Industry:** SaaS" in prompt
        assert "No meeting transcript provided" in prompt
        assert "No audit deck provided" in prompt
        assert "No website content available" in prompt
        assert "No social profile information available" in prompt
        assert '"executiveSummary"' in prompt

    @pytest.mark.unit
    def test_truncates_each_field_to_budget(self, generator):
        record = NormalizedRecord(
            client_name="Acme",
            industry="SaaS",
            meeting_transcript='t' * 20000,
            audit_deck_content='d' * 20000,
            website_content='w' * 20000,
        )

        prompt = generator.build_prompt(record)

        assert 't' * Config.MAX_TRANSCRIPT_PROMPT_CHARS + Config.TRUNCATION_MARKER in prompt
        assert 't' * (Config.MAX_TRANSCRIPT_PROMPT_CHARS + 1) not in prompt
        assert 'd' * Config.MAX_AUDIT_DECK_PROMPT_CHARS + Config.TRUNCATION_MARKER in prompt
        assert 'w' * Config.MAX_WEBSITE_PROMPT_CHARS + Config.TRUNCATION_MARKER in prompt
        assert 'w' * (Config.MAX_WEBSITE_PROMPT_CHARS + 1) not in prompt

    @pytest.mark.unit
    def test_placeholders_are_embedded(self, generator):
        record = NormalizedRecord(
            client_name="Acme",
            industry="SaaS",
            website_content="[Error fetching website content]",
            social_content="[Social profile URL provided: https://x.com/acme]"
        )

        prompt = generator.build_prompt(record)

        assert "[Error fetching website content]" in prompt
        assert "[Social profile URL provided: https://x.com/acme]" in prompt


class TestGenerate:
    """Tests for StrategyGenerator.generate()"""

    @pytest.mark.unit
    def test_returns_parsed_strategy(self, generator, mock_client, record, sample_strategy):
        mock_client.create_message.return_value = make_message(text_block(json.dumps(sample_strategy)))

        result = generator.generate(record)

        assert result == sample_strategy
        kwargs = mock_client.create_message.call_args[1]
        assert kwargs['model'] == Config.CLAUDE_MODEL
        assert kwargs['max_tokens'] == Config.CLAUDE_MAX_TOKENS

    @pytest.mark.unit
    def test_uses_first_text_block(self, generator, mock_client, record, sample_strategy):
        mock_client.create_message.return_value = make_message(
            SimpleNamespace(type='thinking', thinking='...'),
            text_block(json.dumps(sample_strategy)),
            text_block('not json')
        )

        assert generator.generate(record)['executiveSummary'] == sample_strategy['executiveSummary']

    @pytest.mark.unit
    def test_no_text_block(self, generator, mock_client, record):
        mock_client.create_message.return_value = make_message(
            SimpleNamespace(type='tool_use', id='tool_1', name='x', input={})
        )

        with pytest.raises(ModelResponseMalformed, match="No text response"):
            generator.generate(record)

    @pytest.mark.unit
    def test_invalid_json(self, generator, mock_client, record):
        mock_client.create_message.return_value = make_message(text_block("Here is your strategy: {oops"))

        with pytest.raises(ModelResponseMalformed) as exc_info:
            generator.generate(record)

        assert "Invalid strategy format" in str(exc_info.value)
        assert "Here is your strategy" in str(exc_info.value)

    @pytest.mark.unit
    def test_upstream_error_propagates(self, generator, mock_client, record):
        mock_client.create_message.side_effect = UpstreamRejected("rate limited", status_code=429)

        with pytest.raises(UpstreamRejected):
            generator.generate(record)


class TestParseStrategy:
    """Tests for parse_strategy() and strip_code_fence()"""

    @pytest.mark.unit
    def test_accepts_code_fenced_json(self, sample_strategy):
        text = "```json\n" + json.dumps(sample_strategy) + "\n```"
        assert parse_strategy(text) == sample_strategy

    @pytest.mark.unit
    def test_rejects_wrong_shape(self):
        with pytest.raises(ModelResponseMalformed) as exc_info:
            parse_strategy('{"executiveSummary": "only this"}')

        assert exc_info.value.excerpt == '{"executiveSummary": "only this"}'

    @pytest.mark.unit
    def test_excerpt_limited(self):
        with pytest.raises(ModelResponseMalformed) as exc_info:
            parse_strategy('x' * 1000)

        assert len(exc_info.value.excerpt) == 500
        assert str(exc_info.value).endswith('x' * 100)

    @pytest.mark.unit
    def test_strip_code_fence_passthrough(self):
        assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'
