#!/usr/bin/env python3
"""
Content Aggregator

Resolves each optional field of a submission into plain text and assembles a
NormalizedRecord. Fields are extracted concurrently and independently; a
failed extraction becomes a bracketed placeholder instead of aborting the
submission.
"""

import asyncio
import logging
from typing import Callable, Optional
import requests

from app.models.submission import NormalizedRecord, SubmissionInput, UploadedFile
from core.config import Config
from core.content_fetcher import ContentFetcher, GOOGLE_SHARING_HINT
from core.exceptions import MissingRequiredField, SourceUnavailable
from core.url_classifier import StrategyKind, classify_url
from processors.document_extractor import AUDIT_DECK_ERROR_PLACEHOLDER, extract_document_text
from processors.fathom_retriever import FathomTranscriptRetriever
from processors.file_transcriber import get_file_transcriber


WEBSITE_ERROR_PLACEHOLDER = "[Error fetching website content]"


def audit_link_placeholder(link: str) -> str:
    return f"[Could not fetch content from: {link}. {GOOGLE_SHARING_HINT}]"


def meeting_link_placeholder(link: str, reason: str) -> str:
    return f"[Could not retrieve meeting transcript from: {link}. {reason}]"


def meeting_file_placeholder(filename: str) -> str:
    return f"[Error transcribing meeting recording: {filename}]"


def social_placeholder(profile: str) -> str:
    return f"[Social profile URL provided: {profile}]"


class ContentAggregator:
    """Builds a NormalizedRecord from a SubmissionInput"""

    def __init__(
        self,
        fetcher: Optional[ContentFetcher] = None,
        retriever: Optional[FathomTranscriptRetriever] = None,
        transcriber_factory: Optional[Callable] = None
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        # Session shared by the default fetcher and retriever, closed by close()
        self._session = requests.Session() if fetcher is None or retriever is None else None
        self.fetcher = fetcher if fetcher else ContentFetcher(self._session)
        self.retriever = retriever if retriever else FathomTranscriptRetriever(self._session, fetcher=self.fetcher)
        # Speech-to-text client is created lazily, only when a recording file is uploaded
        self.transcriber_factory = transcriber_factory if transcriber_factory else get_file_transcriber

    def close(self):
        """Close the HTTP session this aggregator opened, if any"""
        if self._session is not None:
            self._session.close()
            self._session = None

    async def aggregate(self, submission: SubmissionInput) -> NormalizedRecord:
        """
        Resolve every field of a submission

        Args:
            submission: The form submission

        Returns:
            NormalizedRecord with text, None, or a placeholder per content field

        Raises:
            MissingRequiredField: If client name or industry is blank
        """
        client_name = (submission.client_name or '').strip()
        industry = (submission.industry or '').strip()

        if not client_name:
            raise MissingRequiredField("clientName is required")
        if not industry:
            raise MissingRequiredField("industry is required")

        self.logger.info(f"📥 [AGGREGATE] Collecting content for: {client_name} ({industry})")

        meeting_transcript, audit_deck_content, website_content = await asyncio.gather(
            asyncio.to_thread(self.resolve_meeting_transcript, submission),
            asyncio.to_thread(self.resolve_audit_deck, submission),
            asyncio.to_thread(self.resolve_website, submission.website_url),
        )

        record = NormalizedRecord(
            client_name=client_name,
            industry=industry,
            website_url=submission.website_url or None,
            social_profile=submission.social_profile or None,
            meeting_transcript=meeting_transcript,
            audit_deck_content=audit_deck_content,
            website_content=website_content,
            social_content=self.resolve_social(submission.social_profile),
        )

        self.logger.info(
            f"✅ [AGGREGATE] Content lengths - Transcript: {len(record.meeting_transcript or '')}, "
            f"Audit: {len(record.audit_deck_content or '')}, "
            f"Website: {len(record.website_content or '')}"
        )
        return record

    def resolve_meeting_transcript(self, submission: SubmissionInput) -> Optional[str]:
        recording = submission.meeting_recording
        if recording is None:
            return None

        if recording.kind == 'transcript':
            return recording.content or None

        if recording.kind == 'link':
            if not recording.content:
                return None
            return self._fetch_meeting_link(recording.content.strip())

        if recording.kind == 'file':
            if recording.file is None:
                return None
            return self._transcribe_recording(recording.file)

        self.logger.warning(f"⚠️ [MEETING] Unknown recording type: {recording.kind}")
        return None

    def _fetch_meeting_link(self, link: str) -> str:
        strategy = classify_url(link)
        self.logger.info(f"🔗 [MEETING] Fetching transcript link ({strategy.kind.value}): {link}")

        try:
            if strategy.kind == StrategyKind.RECORDING_SERVICE:
                result = self.retriever.retrieve(link)
                if result['success']:
                    return result['transcript']
                return meeting_link_placeholder(link, result['error'])

            return self.fetcher.fetch(link, max_chars=Config.MAX_LINK_CONTENT_CHARS)
        except SourceUnavailable as e:
            self.logger.warning(f"⚠️ [MEETING] Could not fetch transcript link: {e}")
            return meeting_link_placeholder(link, str(e))
        except Exception as e:
            self.logger.error(f"❌ [MEETING] Unexpected error retrieving transcript link: {e}", exc_info=True)
            return meeting_link_placeholder(link, "Please paste the transcript instead.")

    def _transcribe_recording(self, upload: UploadedFile) -> str:
        try:
            transcriber = self.transcriber_factory()
            return transcriber.transcribe_bytes(upload.data, upload.filename)
        except Exception as e:
            self.logger.error(f"❌ [MEETING] Transcription failed for {upload.filename}: {e}")
            return meeting_file_placeholder(upload.filename)

    def resolve_audit_deck(self, submission: SubmissionInput) -> Optional[str]:
        """Link takes priority over an uploaded file; a failed link does not fall back"""
        link = (submission.audit_link or '').strip()

        if link:
            self.logger.info(f"🔗 [AUDIT] Fetching audit link: {link}")
            try:
                content = self.fetcher.fetch(link, max_chars=Config.MAX_LINK_CONTENT_CHARS)
            except Exception as e:
                self.logger.error(f"❌ [AUDIT] Error fetching audit link: {e}")
                return audit_link_placeholder(link)
            self.logger.info(f"✅ [AUDIT] Audit content fetched, length: {len(content)} chars")
            self.logger.debug(f"[AUDIT] Preview: {content[:500]}")
            return content

        if submission.audit_deck_file is not None:
            upload = submission.audit_deck_file
            try:
                return extract_document_text(upload.data, upload.filename)
            except Exception as e:
                self.logger.error(f"❌ [AUDIT] Error processing audit deck: {e}")
                return AUDIT_DECK_ERROR_PLACEHOLDER

        return None

    def resolve_website(self, website_url: Optional[str]) -> Optional[str]:
        website_url = (website_url or '').strip()
        if not website_url:
            return None

        self.logger.info(f"🌐 [WEBSITE] Fetching website: {website_url}")
        try:
            return self.fetcher.fetch(website_url, max_chars=Config.MAX_WEBSITE_CONTENT_CHARS)
        except Exception as e:
            self.logger.error(f"❌ [WEBSITE] Error fetching website: {e}")
            return WEBSITE_ERROR_PLACEHOLDER

    @staticmethod
    def resolve_social(social_profile: Optional[str]) -> Optional[str]:
        """Social profiles are not fetched; only the URL is recorded"""
        social_profile = (social_profile or '').strip()
        if not social_profile:
            return None
        return social_placeholder(social_profile)
