"""
Shared pytest fixtures for onboarding strategy backend tests

This file contains fixtures that are available to all test files.
"""

import json
import pytest
from types import SimpleNamespace
from typing import Any, Dict, Optional
from unittest.mock import Mock
import requests


def make_response(
    status_code: int = 200,
    text: str = '',
    content_type: str = 'text/html; charset=utf-8',
    json_data: Optional[Any] = None
) -> Mock:
    """Build a mock requests.Response"""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = {'content-type': content_type}

    if json_data is not None:
        response.text = json.dumps(json_data)
        response.json.return_value = json_data
    else:
        response.text = text
        response.json.side_effect = ValueError("No JSON object could be decoded")

    return response


def make_message(*blocks) -> SimpleNamespace:
    """Build a fake Anthropic Message from content blocks"""
    return SimpleNamespace(content=list(blocks))


def text_block(text: str) -> SimpleNamespace:
    return SimpleNamespace(type='text', text=text)


@pytest.fixture
def mock_session() -> Mock:
    """Mock requests session"""
    return Mock(spec=requests.Session)


@pytest.fixture
def sample_urls() -> Dict[str, str]:
    """Sample URLs for testing"""
    return {
        'google_doc': 'https://docs.google.com/document/d/1AbC-dEf_123/edit?usp=sharing',
        'google_slides': 'https://docs.google.com/presentation/d/9ZyX_wvu-88/edit#slide=id.p',
        'google_drive': 'https://drive.google.com/file/d/0BxYz-123_abc/view?usp=sharing',
        'google_drive_open': 'https://drive.google.com/open?id=0BxYz-123_abc',
        'fathom_share': 'https://fathom.video/share/xYz123_AbC',
        'fathom_call': 'https://fathom.video/calls/445566',
        'fathom_no_id': 'https://fathom.video/home',
        'website': 'https://acme.example.com/',
        'blog_post': 'https://example.com/blog/my-article',
    }


@pytest.fixture
def sample_strategy() -> Dict:
    """Strategy JSON as returned by the model"""
    return {
        "executiveSummary": "Focus on product-led growth.",
        "targetAudience": "Mid-market operations leaders.",
        "keyInsights": ["Strong NPS", "Weak SEO", "Founder-led sales"],
        "contentStrategy": {
            "pillars": ["Education", "Proof"],
            "themes": ["Automation", "ROI"],
            "formats": ["Case studies", "Webinars"]
        },
        "channelStrategy": {
            "primary": ["LinkedIn", "Email"],
            "secondary": ["YouTube"]
        },
        "messagingFramework": {
            "valueProposition": "Ship operations work in half the time.",
            "keyMessages": ["Fast setup", "Measurable ROI"],
            "toneOfVoice": "Confident and practical"
        },
        "quickWins": ["Fix homepage headline"],
        "longTermInitiatives": ["Build a community"],
        "kpis": ["MQLs", "Trial conversion"]
    }


@pytest.fixture
def sample_transcript_entries():
    """Transcript entries in the recording-service JSON shape"""
    return [
        {'speaker': {'display_name': 'Dana'}, 'text': 'Thanks for joining.', 'timestamp': '00:00:05'},
        {'speaker': 'Lee', 'text': 'Happy to be here.', 'timestamp': '00:00:09'},
    ]


@pytest.fixture
def mock_html_content() -> str:
    """Sample HTML page with scripts and styles"""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Acme</title>
        <style>body { color: red; }</style>
        <script type="text/javascript">window.track = function() { return 1; };</script>
    </head>
    <body>
        <h1>Acme   Analytics</h1>
        <p>We help   teams
        ship faster.</p>
        <script>console.log("hidden");</script>
    </body>
    </html>
    """
