"""Provider registry and construction"""

from typing import TYPE_CHECKING, Dict, Mapping, Optional, Type

import httpx

from aika.exceptions import NotSupportedError

from .anthropic import AnthropicProvider
from .base import Provider
from .mistral import MistralProvider
from .openai import OpenAIProvider

if TYPE_CHECKING:
    from aika.config import Config


# Map of provider names to provider classes
PROVIDERS: Dict[str, Type[Provider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "mistral": MistralProvider,
}


def available_providers() -> list[str]:
    return list(PROVIDERS)


def create_provider(
    name: str,
    config: Optional["Config"],
    http: Optional[httpx.Client] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Provider:
    """Get a provider instance by its (case-sensitive) name.

    Raises NotSupportedError for unknown names and AuthError when no API key
    can be resolved; neither touches the network.
    """
    provider_class = PROVIDERS.get(name)
    if provider_class is None:
        raise NotSupportedError(name)
    return provider_class.from_config(config, http=http, environ=environ)
