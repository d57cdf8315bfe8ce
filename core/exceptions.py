"""
Error types raised by the content pipeline and strategy generator
"""

from typing import Optional


AUTH_ERROR_PATTERNS = [
    "API key",
    "authentication",
    "401",
    "Unauthorized",
    "invalid_api_key",
]


class StrategyPipelineError(Exception):
    """Base class for pipeline errors"""


class SourceUnavailable(StrategyPipelineError):
    """A single field's external source could not be fetched or extracted"""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ConfigurationMissing(StrategyPipelineError):
    """No Claude credential could be resolved"""


class ModelResponseMalformed(StrategyPipelineError):
    """The model response had no text block or was not a valid strategy"""

    def __init__(self, message: str, excerpt: Optional[str] = None):
        super().__init__(message)
        self.excerpt = excerpt


class UpstreamRejected(StrategyPipelineError):
    """The completion API call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MissingRequiredField(StrategyPipelineError):
    """A required submission field was blank"""


def is_auth_error(error: Exception) -> bool:
    """
    Decide whether an error should be reported as an authentication failure

    Missing credentials are always authentication-class. Upstream errors count
    when they carry a 401 status, otherwise the message is matched against
    known patterns.
    """
    if isinstance(error, ConfigurationMissing):
        return True

    if not isinstance(error, UpstreamRejected):
        return False

    if error.status_code == 401:
        return True

    message = str(error)
    return any(pattern in message for pattern in AUTH_ERROR_PATTERNS)
