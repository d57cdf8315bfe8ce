#!/usr/bin/env python3
"""
Fathom Transcript Retriever

Recovers a meeting transcript from a Fathom share link. The public API does
not guarantee a transcript for every share identifier, so several strategies
are tried in order and the first one that yields a transcript wins:

1. Transcript endpoints keyed by share, call and recording id, then a bare call lookup
2. A scan of recent calls on the account for one matching the share link
3. The share page itself: embedded call ids, transcript arrays, and page-data blobs

Failures never raise; they are reported in the result dict so the caller can
substitute a placeholder.
"""

import re
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
import requests
from bs4 import BeautifulSoup

from core.config import Config
from core.content_fetcher import ContentFetcher
from core.exceptions import SourceUnavailable
from core.text_utils import cap_text
from core.url_classifier import classify_url, extract_recording_id


logger = logging.getLogger(__name__)

CALL_ID_PATTERNS = [
    re.compile(r'"call_id"\s*:\s*"?(\d+)'),
    re.compile(r'"callId"\s*:\s*"?(\d+)'),
    re.compile(r'/calls/(\d+)'),
]
EMBEDDED_TRANSCRIPT_PATTERN = re.compile(r'"transcript"\s*:\s*\[')
INITIAL_STATE_PATTERN = re.compile(r'window\.__INITIAL_STATE__\s*=\s*')


def is_transcript_entries(value: Any) -> bool:
    """Check if a value is a non-empty list of {speaker, text} entries"""
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(entry, dict) and 'speaker' in entry and 'text' in entry for entry in value)
    )


def find_transcript(obj: Any, depth: int = 0, max_depth: int = Config.FATHOM_MAX_SEARCH_DEPTH) -> Optional[Any]:
    """
    Recursively search decoded JSON for transcript-shaped data

    Returns the first non-empty 'transcript' value that is a string, list or
    object, or the first list whose entries all expose 'speaker' and 'text'.
    Flags such as "transcript": true are skipped. Traversal stops at
    max_depth levels.
    """
    if depth > max_depth:
        return None

    if isinstance(obj, dict):
        transcript = obj.get('transcript')
        if transcript and isinstance(transcript, (str, list, dict)):
            return transcript
        for value in obj.values():
            found = find_transcript(value, depth + 1, max_depth)
            if found is not None:
                return found

    elif isinstance(obj, list):
        if is_transcript_entries(obj):
            return obj
        for item in obj:
            found = find_transcript(item, depth + 1, max_depth)
            if found is not None:
                return found

    return None


def _speaker_name(speaker: Any) -> str:
    if isinstance(speaker, dict):
        return speaker.get('display_name') or speaker.get('name') or 'Unknown'
    if speaker:
        return str(speaker)
    return 'Unknown'


def format_transcript(data: Any, depth: int = 0) -> str:
    """
    Render transcript data as plain text

    - list of {speaker, text, timestamp} entries: "[timestamp] speaker: text" lines
    - string: returned unchanged
    - object with a 'transcript' field: unwrapped recursively
    - anything else: pretty-printed JSON

    Examples:
        >>> format_transcript([{'speaker': 'Ann', 'text': 'Hi', 'timestamp': '00:01'}])
        '[00:01] Ann: Hi'
    """
    if isinstance(data, str):
        return data

    if isinstance(data, list) and data and all(isinstance(entry, dict) for entry in data):
        lines = []
        for entry in data:
            speaker = _speaker_name(entry.get('speaker'))
            text = entry.get('text', '')
            timestamp = entry.get('timestamp')
            if timestamp not in (None, ''):
                lines.append(f"[{timestamp}] {speaker}: {text}")
            else:
                lines.append(f"{speaker}: {text}")
        return '\n'.join(lines)

    if isinstance(data, dict) and 'transcript' in data and depth < Config.FATHOM_MAX_SEARCH_DEPTH:
        return format_transcript(data['transcript'], depth + 1)

    return json.dumps(data, indent=2, ensure_ascii=False)


def first_success(candidates: List[Tuple[str, Callable[[], Optional[str]]]]) -> Tuple[Optional[str], Optional[str]]:
    """
    Run candidate operations in order until one returns a value

    Args:
        candidates: (name, operation) pairs; an operation signals failure by returning None

    Returns:
        Tuple of (result, name of the operation that produced it), or (None, None)
    """
    for name, operation in candidates:
        result = operation()
        if result:
            return result, name
    return None, None


class FathomTranscriptRetriever:
    """Retrieves meeting transcripts from Fathom share links"""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        fetcher: Optional[ContentFetcher] = None
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.session = session if session else requests.Session()
        self.api_key = api_key if api_key is not None else Config.get_api_keys().get('fathom')
        self.base_url = (base_url or Config.get_fathom_base_url()).rstrip('/')
        self.fetcher = fetcher if fetcher else ContentFetcher(self.session)

    def retrieve(self, url: str) -> Dict:
        """
        Retrieve the transcript behind a Fathom share link

        Args:
            url: Fathom share or call URL

        Returns:
            Dict with 'success' and either 'transcript' and 'method', or 'error'
        """
        share_id = classify_url(url).resource_id

        if not share_id:
            self.logger.warning(f"⚠️ [FATHOM] No share or call ID found in: {url}")
            return {
                'success': False,
                'error': (
                    "Could not find a Fathom share or call ID in the link. "
                    "Please paste the meeting transcript manually instead."
                ),
                'share_id': None
            }

        self.logger.info(f"🎙️ [FATHOM] Retrieving transcript for share: {share_id}")

        transcript, method = first_success([
            ('api', lambda: self._try_api_endpoints(share_id)),
            ('call_list', lambda: self._search_recent_calls(share_id)),
            ('share_page', lambda: self._scrape_share_page(url, share_id)),
        ])

        if transcript:
            transcript = cap_text(transcript, Config.MAX_LINK_CONTENT_CHARS)
            self.logger.info(f"✅ [FATHOM] Transcript found via {method} ({len(transcript)} chars)")
            return {
                'success': True,
                'transcript': transcript,
                'share_id': share_id,
                'method': method
            }

        self.logger.warning(f"⚠️ [FATHOM] All retrieval strategies failed for share: {share_id}")
        return {
            'success': False,
            'error': (
                f"Could not retrieve a transcript for Fathom share {share_id}. "
                "Copy the transcript from Fathom and paste it into the form instead."
            ),
            'share_id': share_id
        }

    def _api_get(self, url: str, params: Optional[Dict] = None) -> Optional[Any]:
        """GET a Fathom API URL, returning decoded JSON or None on any failure"""
        if not self.api_key:
            return None

        try:
            response = self.session.get(
                url,
                headers={'X-Api-Key': self.api_key, 'Accept': 'application/json'},
                params=params,
                timeout=Config.SHORT_TIMEOUT
            )
        except requests.RequestException as e:
            self.logger.debug(f"[FATHOM API] Request to {url} failed: {e}")
            return None

        if not response.ok:
            self.logger.debug(f"[FATHOM API] HTTP {response.status_code} from {url}")
            return None

        try:
            return response.json()
        except ValueError:
            self.logger.debug(f"[FATHOM API] Non-JSON response from {url}")
            return None

    def _transcript_from_payload(self, payload: Any) -> Optional[str]:
        if payload is None:
            return None
        if isinstance(payload, str):
            return payload.strip() or None

        transcript = find_transcript(payload)
        if not transcript:
            return None

        text = format_transcript(transcript)
        return text.strip() or None

    def _try_api_endpoints(self, call_id: str) -> Optional[str]:
        """Try each candidate transcript endpoint shape for an identifier"""
        if not self.api_key:
            self.logger.info("ℹ️ [FATHOM API] No FATHOM_API_KEY configured, skipping API lookup")
            return None

        endpoints = [
            ('by-share', f"{self.base_url}/share/{call_id}/transcript"),
            ('by-call', f"{self.base_url}/calls/{call_id}/transcript"),
            ('by-recording', f"{self.base_url}/recordings/{call_id}/transcript"),
            ('call-lookup', f"{self.base_url}/calls/{call_id}"),
        ]

        for name, endpoint in endpoints:
            transcript = self._transcript_from_payload(self._api_get(endpoint))
            if transcript:
                self.logger.info(f"✅ [FATHOM API] Transcript from {name} endpoint")
                return transcript
            self.logger.debug(f"[FATHOM API] No transcript from {name} endpoint")

        return None

    def _search_recent_calls(self, share_id: str) -> Optional[str]:
        """Scan recent calls on the account for one matching the share id"""
        if not self.api_key:
            return None

        payload = self._api_get(f"{self.base_url}/meetings", params={'include_transcript': 'true'})

        calls = None
        if isinstance(payload, list):
            calls = payload
        elif isinstance(payload, dict):
            for key in ('items', 'meetings', 'calls', 'data'):
                if isinstance(payload.get(key), list):
                    calls = payload[key]
                    break

        if not calls:
            return None

        self.logger.info(f"🔍 [FATHOM API] Scanning {len(calls)} recent calls for share {share_id}")

        for call in calls:
            if not isinstance(call, dict) or not self._call_matches(call, share_id):
                continue

            transcript = self._transcript_from_payload(call)
            if transcript:
                return transcript

            # Matched call without an embedded transcript: look it up by its own id
            for id_field in ('recording_id', 'call_id', 'id'):
                call_id = call.get(id_field)
                if call_id and str(call_id) != share_id:
                    return self._try_api_endpoints(str(call_id))
            return None

        return None

    @staticmethod
    def _call_matches(call: Dict, share_id: str) -> bool:
        for url_field in ('share_url', 'url', 'recording_url'):
            value = call.get(url_field)
            if isinstance(value, str) and extract_recording_id(value) == share_id:
                return True
        for id_field in ('id', 'recording_id', 'call_id', 'share_id'):
            value = call.get(id_field)
            if value is not None and str(value) == share_id:
                return True
        return False

    def _scrape_share_page(self, url: str, share_id: str) -> Optional[str]:
        """Search the share page HTML for a call id, a transcript array, or page data"""
        try:
            html = self.fetcher.fetch_page(url)
        except SourceUnavailable as e:
            self.logger.warning(f"⚠️ [FATHOM PAGE] Could not load share page: {e}")
            return None

        self.logger.info(f"📄 [FATHOM PAGE] Loaded share page ({len(html)} chars)")

        # (a) Embedded call id, retried against the API
        call_ids = [call_id for call_id in self._find_call_ids(html) if call_id != share_id]
        for call_id in call_ids[:Config.FATHOM_MAX_EMBEDDED_CALL_IDS]:
            self.logger.info(f"🔍 [FATHOM PAGE] Found embedded call ID: {call_id}")
            transcript = self._try_api_endpoints(call_id)
            if transcript:
                return transcript

        # (b) Embedded transcript array
        transcript = self._find_embedded_transcript(html)
        if transcript:
            self.logger.info("✅ [FATHOM PAGE] Found embedded transcript array")
            return transcript

        # (c) Page-data blobs, searched recursively
        for blob in self._extract_page_data(html):
            found = find_transcript(blob)
            if found:
                text = format_transcript(found).strip()
                if text:
                    self.logger.info("✅ [FATHOM PAGE] Found transcript in page data")
                    return text

        return None

    @staticmethod
    def _find_call_ids(html: str) -> List[str]:
        call_ids = []
        for pattern in CALL_ID_PATTERNS:
            for match in pattern.finditer(html):
                if match.group(1) not in call_ids:
                    call_ids.append(match.group(1))
        return call_ids

    @staticmethod
    def _find_embedded_transcript(html: str) -> Optional[str]:
        decoder = json.JSONDecoder()
        for match in EMBEDDED_TRANSCRIPT_PATTERN.finditer(html):
            try:
                value, _ = decoder.raw_decode(html, match.end() - 1)
            except ValueError:
                continue
            if is_transcript_entries(value):
                return format_transcript(value)
        return None

    def _extract_page_data(self, html: str) -> List[Any]:
        """Decode the JSON page-data blobs embedded in a share page"""
        soup = BeautifulSoup(html, 'html.parser')
        raw_blobs = []

        next_data = soup.find('script', id='__NEXT_DATA__')
        if next_data and next_data.string:
            raw_blobs.append(next_data.string)

        # Inertia apps carry page props in a data-page attribute
        for element in soup.find_all(attrs={'data-page': True}):
            raw_blobs.append(element['data-page'])

        decoded = []
        for raw in raw_blobs:
            try:
                decoded.append(json.loads(raw))
            except ValueError:
                self.logger.debug("[FATHOM PAGE] Skipping undecodable page-data blob")

        decoder = json.JSONDecoder()
        for script in soup.find_all('script'):
            if not script.string:
                continue
            match = INITIAL_STATE_PATTERN.search(script.string)
            if not match:
                continue
            try:
                value, _ = decoder.raw_decode(script.string, match.end())
            except ValueError:
                continue
            decoded.append(value)

        return decoded
