#!/usr/bin/env python3
"""
Strategy Generator

Renders a NormalizedRecord into the strategy prompt, sends it to Claude, and
parses the response into a validated Strategy.
"""

import re
import json
import logging
from typing import Callable, Dict, Optional
from pydantic import ValidationError

from app.models.strategy import Strategy
from app.models.submission import NormalizedRecord
from core.claude_client import get_claude_client
from core.config import Config
from core.exceptions import ModelResponseMalformed
from core.prompts import MarketingStrategyPrompt
from core.text_utils import truncate_text


CODE_FENCE_PATTERN = re.compile(r'^```(?:json)?\s*(.*?)\s*```$', re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a single markdown code fence wrapping the whole response"""
    stripped = text.strip()
    match = CODE_FENCE_PATTERN.match(stripped)
    return match.group(1) if match else stripped


def parse_strategy(text: str) -> Dict:
    """
    Parse model output into a strategy dict with camelCase keys

    Raises:
        ModelResponseMalformed: If the text is not JSON or does not match the Strategy schema
    """
    try:
        data = json.loads(strip_code_fence(text))
        strategy = Strategy.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logging.getLogger(__name__).error(
            f"❌ [STRATEGY] Failed to parse strategy JSON ({e.__class__.__name__}). Response was: {text[:500]}"
        )
        raise ModelResponseMalformed(
            f"Invalid strategy format from AI. Response started with: {text[:100]}",
            excerpt=text[:500]
        ) from e

    return strategy.model_dump(by_alias=True)


class StrategyGenerator:
    """Generates a marketing strategy from normalized onboarding content"""

    def __init__(self, client_factory: Optional[Callable] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.client_factory = client_factory if client_factory else get_claude_client

    def build_prompt(self, record: NormalizedRecord) -> str:
        """Truncate each content field to its budget and render the prompt"""
        meeting_transcript = truncate_text(record.meeting_transcript, Config.MAX_TRANSCRIPT_PROMPT_CHARS)
        audit_deck_content = truncate_text(record.audit_deck_content, Config.MAX_AUDIT_DECK_PROMPT_CHARS)
        website_content = truncate_text(record.website_content, Config.MAX_WEBSITE_PROMPT_CHARS)

        self.logger.info(
            f"📝 [PROMPT] Content lengths - Transcript: {len(meeting_transcript or '')}, "
            f"Audit: {len(audit_deck_content or '')}, Website: {len(website_content or '')}"
        )

        return MarketingStrategyPrompt.build(
            client_name=record.client_name,
            industry=record.industry,
            meeting_transcript=meeting_transcript,
            audit_deck_content=audit_deck_content,
            website_content=website_content,
            social_content=record.social_content,
        )

    def generate(self, record: NormalizedRecord) -> Dict:
        """
        Generate a strategy for a normalized record

        Returns:
            Strategy dict with camelCase keys

        Raises:
            ConfigurationMissing: If no Claude credential is configured
            UpstreamRejected: If the Claude API call failed
            ModelResponseMalformed: If the response has no text block or invalid JSON
        """
        prompt = self.build_prompt(record)

        client = self.client_factory()
        message = client.create_message(
            prompt,
            model=MarketingStrategyPrompt.MODEL,
            max_tokens=MarketingStrategyPrompt.MAX_TOKENS
        )

        text_block = next(
            (block for block in message.content if getattr(block, 'type', None) == 'text'),
            None
        )
        if text_block is None:
            self.logger.error("❌ [STRATEGY] Claude response contained no text block")
            raise ModelResponseMalformed("No text response from Claude")

        strategy = parse_strategy(text_block.text)
        self.logger.info(f"✅ [STRATEGY] Strategy generated for {record.client_name}")
        return strategy
