#!/usr/bin/env python3
"""
Generic Content Fetcher

Fetches a URL with browser headers and reduces the response to bounded plain
text. Google Docs, Slides and Drive links are rewritten to their export or
download URL before fetching.
"""

import logging
from typing import Optional
import requests

from core.config import Config
from core.exceptions import SourceUnavailable
from core.text_utils import cap_text, html_to_text
from core.url_classifier import classify_url, is_google_url


GOOGLE_SHARING_HINT = 'Make sure sharing is set to "Anyone with the link can view"'


class ContentFetcher:
    """Fetches remote content and normalizes it into plain text"""

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = Config.DEFAULT_TIMEOUT):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.session = session if session else requests.Session()
        self.timeout = timeout

    def _get(self, url: str, original_url: Optional[str] = None) -> requests.Response:
        """
        GET a URL, raising SourceUnavailable on transport errors or non-2xx status

        Args:
            url: URL to request
            original_url: URL the user submitted (used for Google sharing hints)
        """
        original_url = original_url or url

        try:
            response = self.session.get(
                url,
                headers=Config.get_default_headers(),
                timeout=self.timeout,
                allow_redirects=True
            )
        except requests.RequestException as e:
            self.logger.warning(f"⚠️ [FETCH] Request failed for {url}: {e}")
            raise SourceUnavailable(f"Failed to fetch: {e}", url=original_url) from e

        if not response.ok:
            self.logger.warning(f"⚠️ [FETCH] HTTP {response.status_code} for {url}")
            if is_google_url(original_url):
                raise SourceUnavailable(
                    f"Google link not accessible. {GOOGLE_SHARING_HINT}",
                    url=original_url
                )
            raise SourceUnavailable(f"Failed to fetch: {response.status_code}", url=original_url)

        return response

    def fetch(self, url: str, max_chars: int = Config.MAX_LINK_CONTENT_CHARS) -> str:
        """
        Fetch a URL and return its content as plain text

        Args:
            url: URL submitted by the user
            max_chars: Maximum characters returned

        Returns:
            Plain text content, capped at max_chars

        Raises:
            SourceUnavailable: If the request failed or returned a non-success status
        """
        strategy = classify_url(url)
        fetch_url = strategy.fetch_url

        if fetch_url != url:
            self.logger.info(f"🔗 [FETCH] Rewrote {strategy.kind.value} link to: {fetch_url}")

        response = self._get(fetch_url, original_url=url)

        content_type = response.headers.get('content-type', '')
        text = response.text

        # Plain text (e.g. Google Docs export) is returned as-is
        if 'text/plain' in content_type:
            content = cap_text(text, max_chars)
        else:
            content = html_to_text(text, max_chars)

        self.logger.info(f"✅ [FETCH] Fetched {len(content)} chars from {url}")
        return content

    def fetch_page(self, url: str) -> str:
        """
        Fetch a URL and return the raw response body

        Raises:
            SourceUnavailable: If the request failed or returned a non-success status
        """
        return self._get(url).text
