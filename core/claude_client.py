#!/usr/bin/env python3
"""
Claude API Client
Handles all interactions with the Anthropic Messages API
"""

import logging
import threading
from typing import Optional
import anthropic
import braintrust

from core.config import Config
from core.exceptions import ConfigurationMissing, UpstreamRejected


logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Anthropic API key not found. Please set ANTHROPIC_API_KEY environment variable "
    "or authenticate via the Claude CLI (run 'claude login' or 'anthropic auth login')."
)


class ClaudeClient:
    """Client for interacting with the Anthropic Messages API"""

    def __init__(self, api_key: str, timeout: float = Config.LONG_TIMEOUT):
        """
        Initialize Claude client

        Args:
            api_key: Anthropic API key
            timeout: Request timeout in seconds
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        # Failures are reported to the caller, never retried
        self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

    @braintrust.traced
    def create_message(
        self,
        prompt: str,
        model: str = Config.CLAUDE_MODEL,
        max_tokens: int = Config.CLAUDE_MAX_TOKENS
    ):
        """
        Send a single-turn prompt to Claude

        Args:
            prompt: The prompt to send
            model: Model identifier
            max_tokens: Output token budget

        Returns:
            The SDK Message object (content is a list of typed blocks)

        Raises:
            UpstreamRejected: If the API call failed
        """
        self.logger.info(f"   🤖 [CLAUDE API] Sending prompt ({len(prompt)} chars) to {model}")

        braintrust.current_span().log(
            input={"prompt_length": len(prompt)},
            metadata={"provider": "anthropic", "model": model, "max_tokens": max_tokens}
        )

        try:
            message = self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{
                    "role": "user",
                    "content": prompt
                }]
            )
        except anthropic.APIStatusError as e:
            self.logger.error(f"   ❌ Claude API returned HTTP {e.status_code}: {e}")
            raise UpstreamRejected(str(e), status_code=e.status_code) from e
        except anthropic.APIError as e:
            self.logger.error(f"   ❌ Exception in Claude API call: {e}")
            raise UpstreamRejected(str(e)) from e

        block_types = [getattr(block, 'type', None) for block in message.content]
        self.logger.info(f"   ✅ [CLAUDE API] Response received (blocks: {block_types})")
        braintrust.current_span().log(output={"block_types": block_types})

        return message


_claude_client: Optional[ClaudeClient] = None
_claude_client_lock = threading.Lock()


def get_claude_client() -> ClaudeClient:
    """
    Get or create the Claude client (singleton, safe to call from worker threads)

    Raises:
        ConfigurationMissing: If no API key is configured
    """
    global _claude_client

    with _claude_client_lock:
        if _claude_client is None:
            api_key = Config.resolve_anthropic_api_key()
            if not api_key:
                raise ConfigurationMissing(MISSING_KEY_MESSAGE)

            _claude_client = ClaudeClient(api_key)
            logger.info("✅ Claude client initialized")

        return _claude_client


def reset_claude_client():
    global _claude_client
    with _claude_client_lock:
        _claude_client = None
