"""LLM provider adapters"""

from .base import (
    ContentDelta,
    MessageStart,
    MessageStop,
    Other,
    Provider,
    ProviderConfig,
    QueryRequest,
    StreamEvent,
)
from .router import PROVIDERS, available_providers, create_provider

__all__ = [
    "ContentDelta",
    "MessageStart",
    "MessageStop",
    "Other",
    "PROVIDERS",
    "Provider",
    "ProviderConfig",
    "QueryRequest",
    "StreamEvent",
    "available_providers",
    "create_provider",
]
