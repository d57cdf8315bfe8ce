#!/usr/bin/env python3
"""
Prompts for marketing strategy generation

Prompts are version-controlled here; the class metadata mirrors the slug and
model settings used when they are pushed to Braintrust.
"""

from typing import Optional

from core.config import Config


STRATEGY_JSON_SCHEMA = """{
  "executiveSummary": "A 2-3 paragraph executive summary of the recommended marketing strategy",
  "targetAudience": "Detailed description of the ideal target audience based on the information provided",
  "keyInsights": ["insight 1", "insight 2", "insight 3", "insight 4", "insight 5"],
  "contentStrategy": {
    "pillars": ["pillar 1", "pillar 2", "pillar 3"],
    "themes": ["theme 1", "theme 2", "theme 3", "theme 4"],
    "formats": ["format 1", "format 2", "format 3", "format 4"]
  },
  "channelStrategy": {
    "primary": ["channel 1", "channel 2"],
    "secondary": ["channel 3", "channel 4"]
  },
  "messagingFramework": {
    "valueProposition": "Clear value proposition statement",
    "keyMessages": ["message 1", "message 2", "message 3"],
    "toneOfVoice": "Description of recommended tone of voice"
  },
  "quickWins": ["quick win 1", "quick win 2", "quick win 3"],
  "longTermInitiatives": ["initiative 1", "initiative 2", "initiative 3"],
  "kpis": ["KPI 1", "KPI 2", "KPI 3", "KPI 4", "KPI 5"]
}"""


class MarketingStrategyPrompt:
    """
    Prompt for turning onboarding material into a marketing strategy

    Output: raw JSON object matching STRATEGY_JSON_SCHEMA
    """

    # Braintrust metadata
    SLUG = "marketing-strategy"
    NAME = "Marketing Strategy"
    MODEL = Config.CLAUDE_MODEL
    MAX_TOKENS = Config.CLAUDE_MAX_TOKENS

    NO_TRANSCRIPT = "No meeting transcript provided"
    NO_AUDIT_DECK = "No audit deck provided"
    NO_WEBSITE = "No website content available"
    NO_SOCIAL = "No social profile information available"

    @staticmethod
    def build(
        client_name: str,
        industry: str,
        meeting_transcript: Optional[str] = None,
        audit_deck_content: Optional[str] = None,
        website_content: Optional[str] = None,
        social_content: Optional[str] = None
    ) -> str:
        """
        Build the strategy prompt

        Content arguments are expected to be truncated already; missing
        sections are replaced by a fixed "not provided" line.

        Returns:
            Complete prompt string ready for Claude API
        """
        return f"""You are a senior marketing strategist. Based on the following client information, create a comprehensive marketing strategy.

## Client Information
- **Client Name:** {client_name}
- **Industry:** {industry}

## Meeting Notes/Transcript
{meeting_transcript or MarketingStrategyPrompt.NO_TRANSCRIPT}

## Audit Deck Content
{audit_deck_content or MarketingStrategyPrompt.NO_AUDIT_DECK}

## Website Content
{website_content or MarketingStrategyPrompt.NO_WEBSITE}

## Social Media Presence
{social_content or MarketingStrategyPrompt.NO_SOCIAL}

---

Based on all the above information, create a detailed marketing strategy. You must respond with ONLY a valid JSON object (no markdown, no code blocks, just raw JSON) in the following format:

{STRATEGY_JSON_SCHEMA}

Make the strategy specific, actionable, and tailored to the client's industry and the information provided. If certain information is missing, make reasonable assumptions based on the industry."""
