#!/usr/bin/env python3
"""
URL Classification

Decides which fetch strategy applies to a submitted URL:
Google Docs/Slides export, Google Drive direct download,
a Fathom call recording, or a generic web page.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlparse, parse_qs


logger = logging.getLogger(__name__)


class StrategyKind(str, Enum):
    GOOGLE_DOCS_EXPORT = "google_docs_export"
    GOOGLE_SLIDES_EXPORT = "google_slides_export"
    GOOGLE_DRIVE_DOWNLOAD = "google_drive_download"
    RECORDING_SERVICE = "recording_service"
    GENERIC = "generic"


@dataclass(frozen=True)
class FetchStrategy:
    """Represents the classified fetch strategy for a URL"""
    kind: StrategyKind
    url: str
    fetch_url: str
    resource_id: Optional[str] = None

    @property
    def is_google(self) -> bool:
        return is_google_url(self.url)


# (kind, host, path pattern, fetch url template)
GOOGLE_PATTERNS = [
    (
        StrategyKind.GOOGLE_DOCS_EXPORT,
        'docs.google.com',
        re.compile(r'^/document/d/([a-zA-Z0-9_-]+)'),
        'https://docs.google.com/document/d/{resource_id}/export?format=txt',
    ),
    (
        StrategyKind.GOOGLE_SLIDES_EXPORT,
        'docs.google.com',
        re.compile(r'^/presentation/d/([a-zA-Z0-9_-]+)'),
        'https://docs.google.com/presentation/d/{resource_id}/export?format=txt',
    ),
    (
        StrategyKind.GOOGLE_DRIVE_DOWNLOAD,
        'drive.google.com',
        re.compile(r'^/file/d/([a-zA-Z0-9_-]+)'),
        'https://drive.google.com/uc?export=download&id={resource_id}',
    ),
]

DRIVE_DOWNLOAD_TEMPLATE = 'https://drive.google.com/uc?export=download&id={resource_id}'

RECORDING_SERVICE_DOMAINS = ['fathom.video', 'fathom.ai']
RECORDING_ID_PATTERN = re.compile(r'/(?:share|calls|recording|recordings)/([a-zA-Z0-9_-]+)')


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or '').lower()
    except ValueError:
        return ''


def is_google_url(url: str) -> bool:
    """Check if a URL is hosted on a Google domain"""
    host = _hostname(url)
    return host == 'google.com' or host.endswith('.google.com')


def is_recording_service_url(url: str) -> bool:
    """Check if a URL belongs to the call-recording service"""
    host = _hostname(url)
    return any(host == domain or host.endswith('.' + domain) for domain in RECORDING_SERVICE_DOMAINS)


def extract_recording_id(url: str) -> Optional[str]:
    """
    Extract the share or call identifier from a recording-service URL

    Examples:
        >>> extract_recording_id('https://fathom.video/share/abc_123')
        'abc_123'
        >>> extract_recording_id('https://fathom.video/calls/98765')
        '98765'
    """
    try:
        path = urlparse(url).path
    except ValueError:
        return None

    match = RECORDING_ID_PATTERN.search(path)
    return match.group(1) if match else None


def classify_url(url: str) -> FetchStrategy:
    """
    Classify a URL into a fetch strategy

    Unmatched or unparsable URLs fall through to GENERIC. A recording-service
    URL without a recognizable identifier is still tagged RECORDING_SERVICE
    with resource_id None.

    Args:
        url: URL submitted by the user

    Returns:
        FetchStrategy describing how to retrieve the content
    """
    url = (url or '').strip()

    try:
        parsed = urlparse(url)
        host = (parsed.hostname or '').lower()
    except ValueError:
        return FetchStrategy(StrategyKind.GENERIC, url, url)

    for kind, pattern_host, pattern, template in GOOGLE_PATTERNS:
        if host != pattern_host:
            continue
        match = pattern.match(parsed.path)
        if match:
            resource_id = match.group(1)
            return FetchStrategy(kind, url, template.format(resource_id=resource_id), resource_id)

    # Legacy Drive share links: drive.google.com/open?id=<id>
    if host == 'drive.google.com' and parsed.path.rstrip('/') == '/open':
        ids = parse_qs(parsed.query).get('id')
        if ids and re.fullmatch(r'[a-zA-Z0-9_-]+', ids[0]):
            return FetchStrategy(
                StrategyKind.GOOGLE_DRIVE_DOWNLOAD,
                url,
                DRIVE_DOWNLOAD_TEMPLATE.format(resource_id=ids[0]),
                ids[0],
            )

    if is_recording_service_url(url):
        recording_id = extract_recording_id(url)
        if not recording_id:
            logger.debug(f"Recording-service URL without identifier: {url}")
        return FetchStrategy(StrategyKind.RECORDING_SERVICE, url, url, recording_id)

    return FetchStrategy(StrategyKind.GENERIC, url, url)


def convert_to_fetchable_url(url: str) -> str:
    """Rewrite Google Docs/Slides/Drive links to their export or download URL"""
    return classify_url(url).fetch_url
