"""Mistral provider implementation"""

from .base import QueryRequest
from .openai import OpenAICompatibleProvider


class MistralProvider(OpenAICompatibleProvider):
    """Provider for Mistral models, served over the chat completions protocol"""

    name = "mistral"
    display_name = "Mistral"
    API_BASE = "https://api.mistral.ai/v1"
    DEFAULT_MODEL = "mistral-large-latest"
    ENV_VAR = "MISTRAL_API_KEY"
    CREDENTIAL_FIELD = "mistral_api_key"

    def _build_body(self, request: QueryRequest) -> dict:
        return {
            "model": request.model,
            "temperature": request.temperature,
            "messages": request.messages(),
            "max_tokens": request.max_tokens,
            "stream": request.stream,
        }
