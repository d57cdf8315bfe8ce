#!/usr/bin/env python3
"""
Text Utilities

Provides text normalization functions for prompt content.
"""

import re
from typing import Optional
from bs4 import BeautifulSoup

from core.config import Config


def cap_text(text: str, max_chars: int) -> str:
    """
    Cut text to at most max_chars characters, without a marker

    Examples:
        >>> cap_text("abcdef", 3)
        'abc'
    """
    return text[:max_chars] if len(text) > max_chars else text


def truncate_text(text: Optional[str], max_chars: int, marker: str = Config.TRUNCATION_MARKER) -> Optional[str]:
    """
    Truncate text to max_chars, appending a visible marker when cut

    Args:
        text: Text to truncate (None and empty strings pass through as None)
        max_chars: Maximum characters kept from the input
        marker: Suffix appended when the text was cut

    Returns:
        Truncated text, or None if there was no text

    Examples:
        >>> truncate_text("Hello world", 5)
        'Hello... [truncated]'
        >>> truncate_text("Hi", 5)
        'Hi'
    """
    if not text:
        return None
    if len(text) > max_chars:
        return text[:max_chars] + marker
    return text


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim"""
    return re.sub(r'\s+', ' ', text).strip()


def html_to_text(html: str, max_chars: Optional[int] = None) -> str:
    """
    Reduce an HTML document to plain text

    Drops <script> and <style> blocks, removes remaining tags, collapses
    whitespace, trims, and optionally caps the length.

    Examples:
        >>> html_to_text("<p>Hello <b>world</b></p><script>x()</script>")
        'Hello world'
    """
    soup = BeautifulSoup(html, 'html.parser')

    for element in soup(['script', 'style']):
        element.decompose()

    text = collapse_whitespace(soup.get_text(separator=' '))

    if max_chars is not None:
        text = cap_text(text, max_chars)
    return text
