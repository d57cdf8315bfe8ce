"""
Unit tests for core/text_utils.py

Tests truncation with markers, capping, and HTML-to-text reduction.
"""

import pytest

from core.config import Config
from core.text_utils import cap_text, collapse_whitespace, html_to_text, truncate_text


class TestTruncateText:
    """Tests for truncate_text() function"""

    @pytest.mark.unit
    @pytest.mark.parametrize('cap', [1, 10, 8000, 15000])
    def test_truncation_law(self, cap):
        """Cut output should be cap chars of input followed by the marker"""
        text = 'abcdefghij' * 2000
        result = truncate_text(text, cap)

        assert len(result) == cap + len(Config.TRUNCATION_MARKER)
        assert result.startswith(text[:cap])
        assert result.endswith(Config.TRUNCATION_MARKER)

    @pytest.mark.unit
    def test_short_text_unchanged(self):
        assert truncate_text("Hello world", 100) == "Hello world"

    @pytest.mark.unit
    def test_exact_length_unchanged(self):
        assert truncate_text("12345", 5) == "12345"

    @pytest.mark.unit
    @pytest.mark.parametrize('value', [None, ''])
    def test_empty_returns_none(self, value):
        assert truncate_text(value, 10) is None

    @pytest.mark.unit
    def test_marker_format(self):
        assert truncate_text("Hello world", 5) == "Hello... [truncated]"


class TestCapText:
    """Tests for cap_text() function"""

    @pytest.mark.unit
    def test_caps_without_marker(self):
        assert cap_text("abcdef", 3) == "abc"

    @pytest.mark.unit
    def test_short_text_unchanged(self):
        assert cap_text("abc", 10) == "abc"


class TestHtmlToText:
    """Tests for html_to_text() function"""

    @pytest.mark.unit
    def test_strips_scripts_styles_and_tags(self, mock_html_content):
        result = html_to_text(mock_html_content)

        assert 'Acme Analytics' in result
        assert 'We help teams ship faster.' in result
        assert 'console.log' not in result
        assert 'color: red' not in result
        assert '<' not in result

    @pytest.mark.unit
    def test_collapses_whitespace_and_trims(self):
        assert html_to_text("  <div>\n  one \t two </div>  ") == "one two"

    @pytest.mark.unit
    def test_respects_max_chars(self, mock_html_content):
        assert len(html_to_text(mock_html_content, max_chars=10)) == 10

    @pytest.mark.unit
    def test_is_deterministic(self, mock_html_content):
        assert html_to_text(mock_html_content) == html_to_text(mock_html_content)

    @pytest.mark.unit
    def test_collapse_whitespace(self):
        assert collapse_whitespace("  a \n\n b  ") == "a b"
