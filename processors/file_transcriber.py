#!/usr/bin/env python3
"""
File Transcriber
Transcribes uploaded meeting recordings using DeepGram API with Braintrust logging
"""

import logging
from pathlib import Path
from typing import Optional
from deepgram import DeepgramClient
import braintrust

from core.config import Config


SUPPORTED_FORMATS = {
    '.mp3', '.mp4', '.mpeg', '.mpga', '.m4a', '.wav', '.webm',
    '.flac', '.aac', '.ogg', '.wma', '.3gp', '.amr', '.aiff', '.mov'
}


class FileTranscriber:
    def __init__(self, api_key: Optional[str] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._setup_deepgram(api_key)

    def _setup_deepgram(self, api_key: Optional[str]):
        """Setup DeepGram client with API key"""
        api_key = api_key or Config.get_api_keys().get('deepgram')

        if not api_key:
            raise ValueError("DeepGram API key not found. Please set DEEPGRAM_API_KEY environment variable or add it to .env.local file")

        self.client = DeepgramClient(api_key=api_key)
        self.logger.info("✅ DeepGram client initialized successfully")

    @braintrust.traced
    def transcribe_bytes(self, data: bytes, filename: str, language: Optional[str] = None) -> str:
        """
        Transcribe an uploaded audio/video recording

        Args:
            data: File contents
            filename: Original filename (used for logging and format checks)
            language: Optional language code, auto-detected when omitted

        Returns:
            Transcript text

        Raises:
            ValueError: If DeepGram returned an empty transcript
        """
        suffix = Path(filename).suffix.lower()
        if suffix not in SUPPORTED_FORMATS:
            self.logger.warning(f"⚠️ File format '{suffix}' may not be supported")

        self.logger.info(f"📁 File: {filename}")
        self.logger.info(f"📏 Size: {len(data) / 1024 / 1024:.1f}MB")
        self.logger.info("📡 Sending audio to DeepGram API...")

        options = {
            "model": Config.DEEPGRAM_MODEL,
            "smart_format": True,
            "punctuate": True,
            "paragraphs": True,
            "diarize": True
        }

        if language:
            options["language"] = language

        braintrust.current_span().log(
            input={
                "filename": filename,
                "file_size_mb": len(data) / 1024 / 1024,
                "language": language or "auto",
                "options": options
            },
            metadata={
                "provider": "deepgram",
                "model": Config.DEEPGRAM_MODEL
            }
        )

        response = self.client.listen.v1.media.transcribe_file(
            request=data,
            **options
        )

        result = response.results.channels[0].alternatives[0]

        # Paragraphs carry speaker turns when diarization is on
        transcript_text = result.transcript
        paragraphs = getattr(result, 'paragraphs', None)
        if paragraphs and getattr(paragraphs, 'transcript', None):
            transcript_text = paragraphs.transcript

        transcript_text = (transcript_text or '').strip()
        if not transcript_text:
            raise ValueError(f"DeepGram returned an empty transcript for {filename}")

        braintrust.current_span().log(
            output={"transcript_length": len(transcript_text)}
        )

        self.logger.info(f"✅ Transcription completed ({len(transcript_text)} chars)")
        return transcript_text


_file_transcriber: Optional[FileTranscriber] = None


def get_file_transcriber() -> FileTranscriber:
    """Get or create the DeepGram transcriber (singleton)"""
    global _file_transcriber

    if _file_transcriber is None:
        _file_transcriber = FileTranscriber()

    return _file_transcriber


def reset_file_transcriber():
    global _file_transcriber
    _file_transcriber = None
