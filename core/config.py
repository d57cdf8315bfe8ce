"""
Configuration management for onboarding strategy backend
"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional


logger = logging.getLogger(__name__)


class Config:
    """Centralized configuration constants and environment management"""

    # Content limits (characters)
    MAX_LINK_CONTENT_CHARS = 20000
    MAX_WEBSITE_CONTENT_CHARS = 10000
    MAX_TRANSCRIPT_PROMPT_CHARS = 15000
    MAX_AUDIT_DECK_PROMPT_CHARS = 15000
    MAX_WEBSITE_PROMPT_CHARS = 8000
    TRUNCATION_MARKER = "... [truncated]"

    # HTTP timeouts (seconds)
    DEFAULT_TIMEOUT = 30
    LONG_TIMEOUT = 300
    SHORT_TIMEOUT = 15

    # Claude API settings
    CLAUDE_MODEL = "claude-sonnet-4-20250514"
    CLAUDE_MAX_TOKENS = 4096

    # Deepgram settings
    DEEPGRAM_MODEL = "nova-2"

    # Fathom settings
    FATHOM_API_BASE_URL = "https://api.fathom.ai/external/v1"
    FATHOM_MAX_SEARCH_DEPTH = 10
    FATHOM_MAX_EMBEDDED_CALL_IDS = 3

    # Keys recognized inside CLI credential files, in priority order
    CREDENTIAL_KEY_NAMES = [
        'api_key',
        'apiKey',
        'anthropic_api_key',
        'key',
        'claudeApiKey',
        'token',
    ]

    @staticmethod
    def get_api_keys() -> Dict[str, Optional[str]]:
        """Get all configured API keys"""
        return {
            'claude': os.getenv('ANTHROPIC_API_KEY'),
            'deepgram': os.getenv('DEEPGRAM_API_KEY'),
            'fathom': os.getenv('FATHOM_API_KEY'),
        }

    @staticmethod
    def get_fathom_base_url() -> str:
        """Get the Fathom external API base URL"""
        return os.getenv('FATHOM_API_BASE_URL', Config.FATHOM_API_BASE_URL).rstrip('/')

    @staticmethod
    def get_cors_origins() -> List[str]:
        return os.getenv("CORS_ORIGINS", "*").split(",")

    @staticmethod
    def get_default_headers() -> Dict[str, str]:
        """Get default HTTP headers"""
        return {
            'User-Agent': os.getenv(
                'USER_AGENT',
                'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
                '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
            ),
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        }

    @staticmethod
    def get_credential_paths(home_dir: Optional[Path] = None) -> List[Path]:
        """
        Candidate CLI credential files, in lookup order

        Covers both the Claude CLI (~/.claude/) and the Anthropic CLI
        (~/.anthropic/, ~/.config/anthropic/) locations.
        """
        home = home_dir or Path.home()
        return [
            home / '.claude' / 'credentials.json',
            home / '.claude' / 'config.json',
            home / '.claude' / 'auth.json',
            home / '.anthropic' / 'credentials.json',
            home / '.config' / 'anthropic' / 'credentials.json',
            home / '.anthropic' / 'auth.json',
            home / '.config' / 'anthropic' / 'auth.json',
        ]

    @staticmethod
    def read_cli_api_key(home_dir: Optional[Path] = None) -> Optional[str]:
        """
        Read an Anthropic API key from a CLI credential file

        Args:
            home_dir: Home directory to search (defaults to the current user's)

        Returns:
            The first key found, or None if no candidate file holds one
        """
        for cred_path in Config.get_credential_paths(home_dir):
            if not cred_path.exists():
                continue

            try:
                with open(cred_path, 'r', encoding='utf-8') as f:
                    credentials = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"⚠️ Failed to read credentials from {cred_path}: {e}")
                continue

            if not isinstance(credentials, dict):
                continue

            for key_name in Config.CREDENTIAL_KEY_NAMES:
                api_key = credentials.get(key_name)
                if api_key:
                    logger.info(f"🔑 Loaded API key from CLI credentials: {cred_path}")
                    return api_key

        return None

    @staticmethod
    def resolve_anthropic_api_key(home_dir: Optional[Path] = None) -> Optional[str]:
        """
        Resolve the Anthropic API key

        Priority: 1. ANTHROPIC_API_KEY environment variable, 2. CLI credential files
        """
        api_key = os.getenv('ANTHROPIC_API_KEY')
        if api_key:
            return api_key
        return Config.read_cli_api_key(home_dir)

    @staticmethod
    def validate_environment() -> Dict[str, bool]:
        """Validate configured credentials and return status"""
        api_keys = Config.get_api_keys()
        return {
            'anthropic': bool(Config.resolve_anthropic_api_key()),
            'deepgram': bool(api_keys['deepgram']),
            'fathom': bool(api_keys['fathom']),
        }
