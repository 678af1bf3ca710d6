"""OpenAI provider implementation (chat completions API)"""

from typing import Optional

from pydantic import BaseModel

from .base import (
    ContentDelta,
    MessageStart,
    MessageStop,
    Other,
    Provider,
    QueryRequest,
    StreamEvent,
    parse_json,
)
from .sse import DONE_SENTINEL


class ChatMessage(BaseModel):
    role: str
    content: Optional[str] = None


class Choice(BaseModel):
    message: ChatMessage
    finish_reason: Optional[str] = None
    index: int = 0


class ChatCompletion(BaseModel):
    choices: list[Choice]


class Delta(BaseModel):
    content: Optional[str] = None
    role: Optional[str] = None


class StreamChoice(BaseModel):
    delta: Delta
    finish_reason: Optional[str] = None
    index: int = 0


class ChatCompletionChunk(BaseModel):
    choices: list[StreamChoice]


def parse_chat_chunk(data: str) -> StreamEvent:
    """Decode one streamed chat-completions chunk; only the first choice is used"""
    chunk = parse_json(data, ChatCompletionChunk)
    if not chunk.choices:
        return Other(raw=data)

    choice = chunk.choices[0]
    if choice.delta.content is not None:
        return ContentDelta(text=choice.delta.content)
    if choice.finish_reason is not None:
        return MessageStop()
    if choice.delta.role is not None:
        return MessageStart()
    return Other(raw=data)


class OpenAICompatibleProvider(Provider):
    """Shared behaviour of vendors speaking the chat completions protocol"""

    COMPLETION_ROUTE = "/chat/completions"
    STREAM_SENTINEL = DONE_SENTINEL

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def _parse_response(self, body: bytes) -> str:
        response = parse_json(body, ChatCompletion)
        return "".join(
            choice.message.content or ""
            for choice in response.choices
            if choice.message.role == "assistant"
        )

    def _parse_event(self, data: str) -> StreamEvent:
        return parse_chat_chunk(data)


class OpenAIProvider(OpenAICompatibleProvider):
    """Provider for OpenAI GPT models"""

    name = "openai"
    display_name = "OpenAI"
    API_BASE = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-4o"
    ENV_VAR = "OPENAI_API_KEY"
    CREDENTIAL_FIELD = "openai_api_key"

    def _build_body(self, request: QueryRequest) -> dict:
        # no temperature field; the server default applies
        return {
            "model": request.model,
            "messages": request.messages(),
            "max_completion_tokens": request.max_tokens,
            "stream": request.stream,
        }

    def _parse_models(self, body: bytes) -> dict[str, str]:
        models = super()._parse_models(body)
        return {
            model_id: display_name
            for model_id, display_name in models.items()
            if model_id.startswith("gpt-") and "instruct" not in model_id
        }
