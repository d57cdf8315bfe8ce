"""
Tests for app/routes/strategy.py and app/main.py

Exercises the HTTP surface with FastAPI's TestClient. The aggregator and
generator are swapped through dependency overrides.
"""

import pytest
from unittest.mock import Mock, patch
from fastapi.testclient import TestClient

from app.main import app
from app.routes.strategy import AUTH_ERROR_MESSAGE, get_content_aggregator, get_strategy_generator
from app.services.content_aggregator import ContentAggregator
from app.services.strategy_generator import StrategyGenerator
from core.exceptions import ConfigurationMissing, ModelResponseMalformed, UpstreamRejected


@pytest.fixture
def mock_generator():
    return Mock(spec=StrategyGenerator)


@pytest.fixture
def aggregator():
    return ContentAggregator(fetcher=Mock(), retriever=Mock(), transcriber_factory=Mock())


@pytest.fixture
def client(aggregator, mock_generator):
    app.dependency_overrides[get_content_aggregator] = lambda: aggregator
    app.dependency_overrides[get_strategy_generator] = lambda: mock_generator
    yield TestClient(app)
    app.dependency_overrides.clear()


def post_form(client, **fields):
    data = {'clientName': 'Acme', 'industry': 'SaaS'}
    data.update(fields)
    return client.post('/api/generate-strategy', data=data)


class TestGenerateStrategy:
    """Tests for POST /api/generate-strategy"""

    @pytest.mark.unit
    def test_success(self, client, mock_generator, sample_strategy):
        mock_generator.generate.return_value = sample_strategy

        response = post_form(
            client,
            meetingRecordingType='transcript',
            meetingRecordingContent='Hello world'
        )

        assert response.status_code == 200
        body = response.json()
        assert body['strategy']['executiveSummary'] == sample_strategy['executiveSummary']
        assert body['strategy']['messagingFramework']['toneOfVoice'] == "Confident and practical"

        record = mock_generator.generate.call_args[0][0]
        assert record.client_name == 'Acme'
        assert record.meeting_transcript == 'Hello world'
        assert record.audit_deck_content is None

    @pytest.mark.unit
    def test_uploaded_audit_deck(self, client, mock_generator, sample_strategy):
        mock_generator.generate.return_value = sample_strategy

        response = client.post(
            '/api/generate-strategy',
            data={'clientName': 'Acme', 'industry': 'SaaS'},
            files={'auditDeck': ('deck.pptx', b'PK\x03\x04', 'application/octet-stream')}
        )

        assert response.status_code == 200
        record = mock_generator.generate.call_args[0][0]
        assert record.audit_deck_content == '[File uploaded: deck.pptx]'

    @pytest.mark.unit
    def test_missing_client_name(self, client, mock_generator):
        response = client.post('/api/generate-strategy', data={'industry': 'SaaS'})

        assert response.status_code == 400
        assert response.json() == {'error': 'clientName is required'}
        mock_generator.generate.assert_not_called()

    @pytest.mark.unit
    def test_missing_credentials(self, client, mock_generator):
        mock_generator.generate.side_effect = ConfigurationMissing("Anthropic API key not found")

        response = post_form(client)

        assert response.status_code == 401
        body = response.json()
        assert body['error'] == AUTH_ERROR_MESSAGE
        assert body['details'] == "Anthropic API key not found"
        assert 'ANTHROPIC_API_KEY' in body['help']

    @pytest.mark.unit
    def test_upstream_unauthorized(self, client, mock_generator):
        mock_generator.generate.side_effect = UpstreamRejected("invalid x-api-key", status_code=401)

        assert post_form(client).status_code == 401

    @pytest.mark.unit
    def test_no_text_response_is_server_error(self, client, mock_generator):
        mock_generator.generate.side_effect = ModelResponseMalformed("No text response from Claude")

        response = post_form(client)

        assert response.status_code == 500
        assert response.json() == {'error': 'Failed to generate strategy: No text response from Claude'}

    @pytest.mark.unit
    def test_upstream_failure_is_server_error(self, client, mock_generator):
        mock_generator.generate.side_effect = UpstreamRejected("Overloaded", status_code=529)

        response = post_form(client)

        assert response.status_code == 500
        assert response.json()['error'] == 'Failed to generate strategy: Overloaded'


class TestServiceEndpoints:
    """Tests for / and /health"""

    @pytest.mark.unit
    def test_root(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.json()['status'] == 'online'

    @pytest.mark.unit
    def test_health_reports_credentials(self, client, monkeypatch):
        monkeypatch.setenv('ANTHROPIC_API_KEY', 'test-key')
        monkeypatch.delenv('DEEPGRAM_API_KEY', raising=False)

        body = client.get('/health').json()

        assert body['status'] == 'healthy'
        assert body['credentials']['anthropic'] is True
        assert body['credentials']['deepgram'] is False


class TestDependencies:
    """Tests for the per-request aggregator dependency"""

    @pytest.mark.unit
    def test_aggregator_session_closed_after_request(self):
        with patch('app.services.content_aggregator.requests.Session') as mock_session_cls:
            dependency = get_content_aggregator()
            aggregator = next(dependency)

            assert isinstance(aggregator, ContentAggregator)
            mock_session_cls.return_value.close.assert_not_called()

            dependency.close()

        mock_session_cls.return_value.close.assert_called_once()
