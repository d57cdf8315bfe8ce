"""
Tests for processors/file_transcriber.py

DeepgramClient is patched; tests cover option passing and transcript selection.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import patch

from processors.file_transcriber import FileTranscriber


def deepgram_response(transcript, paragraphs_transcript=None):
    paragraphs = SimpleNamespace(transcript=paragraphs_transcript) if paragraphs_transcript else None
    alternative = SimpleNamespace(transcript=transcript, paragraphs=paragraphs)
    channel = SimpleNamespace(alternatives=[alternative])
    return SimpleNamespace(results=SimpleNamespace(channels=[channel]))


@pytest.fixture
def mock_deepgram():
    with patch('processors.file_transcriber.DeepgramClient') as mock_cls:
        yield mock_cls.return_value


class TestFileTranscriber:
    """Tests for FileTranscriber"""

    @pytest.mark.unit
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv('DEEPGRAM_API_KEY', raising=False)

        with pytest.raises(ValueError, match="DeepGram API key not found"):
            FileTranscriber()

    @pytest.mark.unit
    def test_prefers_paragraph_transcript(self, mock_deepgram):
        transcribe = mock_deepgram.listen.v1.media.transcribe_file
        transcribe.return_value = deepgram_response("flat text", "Speaker 0: paragraph text")

        result = FileTranscriber(api_key='dg-key').transcribe_bytes(b'audio', 'call.mp3')

        assert result == "Speaker 0: paragraph text"
        kwargs = transcribe.call_args[1]
        assert kwargs['request'] == b'audio'
        assert kwargs['diarize'] is True
        assert 'language' not in kwargs

    @pytest.mark.unit
    def test_language_option(self, mock_deepgram):
        transcribe = mock_deepgram.listen.v1.media.transcribe_file
        transcribe.return_value = deepgram_response("hola")

        assert FileTranscriber(api_key='dg-key').transcribe_bytes(b'audio', 'call.wav', language='es') == "hola"
        assert transcribe.call_args[1]['language'] == 'es'

    @pytest.mark.unit
    def test_empty_transcript_raises(self, mock_deepgram):
        mock_deepgram.listen.v1.media.transcribe_file.return_value = deepgram_response("   ")

        with pytest.raises(ValueError, match="empty transcript"):
            FileTranscriber(api_key='dg-key').transcribe_bytes(b'audio', 'silence.m4a')
