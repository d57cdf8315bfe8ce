"""
Pydantic models for strategy API responses
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentStrategy(CamelModel):
    pillars: List[str]
    themes: List[str]
    formats: List[str]


class ChannelStrategy(CamelModel):
    primary: List[str]
    secondary: List[str]


class MessagingFramework(CamelModel):
    value_proposition: str
    key_messages: List[str]
    tone_of_voice: str


class Strategy(CamelModel):
    """Model for a generated marketing strategy"""
    executive_summary: str
    target_audience: str
    key_insights: List[str]
    content_strategy: ContentStrategy
    channel_strategy: ChannelStrategy
    messaging_framework: MessagingFramework
    quick_wins: List[str]
    long_term_initiatives: List[str]
    kpis: List[str]


class StrategyResponse(BaseModel):
    """Response model for POST /api/generate-strategy"""
    strategy: Strategy


class ErrorResponse(BaseModel):
    """Error body for failed strategy generation"""
    error: str
    details: Optional[str] = None
    help: Optional[str] = None
