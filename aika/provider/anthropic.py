"""Anthropic provider implementation (messages API)"""

import json
from typing import Optional

from pydantic import BaseModel, ValidationError

from aika.exceptions import DecodeError

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

ANTHROPIC_VERSION = "2023-06-01"


class ContentItem(BaseModel):
    type: str
    text: str = ""


class MessagesResponse(BaseModel):
    content: list[ContentItem]


class TextDelta(BaseModel):
    text: Optional[str] = None


class ContentBlockDeltaEvent(BaseModel):
    delta: TextDelta


def parse_anthropic_event(data: str) -> StreamEvent:
    """Decode one streamed messages-API event by its ``type`` tag"""
    try:
        event = json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON in Anthropic stream event: {e}") from e
    if not isinstance(event, dict):
        raise DecodeError(f"Anthropic stream event is not an object: {data!r}")

    event_type = event.get("type")
    if event_type == "content_block_delta":
        try:
            block = ContentBlockDeltaEvent.model_validate(event)
        except ValidationError as e:
            raise DecodeError(f"Malformed content_block_delta event: {e}") from e
        return ContentDelta(text=block.delta.text)
    elif event_type == "message_start":
        return MessageStart()
    elif event_type == "message_stop":
        return MessageStop()
    return Other(raw=event)


class AnthropicProvider(Provider):
    """Provider for Anthropic Claude models"""

    name = "anthropic"
    display_name = "Anthropic"
    API_BASE = "https://api.anthropic.com/v1"
    DEFAULT_MODEL = "claude-3-5-sonnet-latest"
    ENV_VAR = "ANTHROPIC_API_KEY"
    CREDENTIAL_FIELD = "anthropic_api_key"
    COMPLETION_ROUTE = "/messages"

    def _headers(self) -> dict:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def _build_body(self, request: QueryRequest) -> dict:
        return {
            "model": request.model,
            "temperature": request.temperature,
            "messages": request.messages(),
            "max_tokens": request.max_tokens,
            "stream": request.stream,
        }

    def _parse_response(self, body: bytes) -> str:
        response = parse_json(body, MessagesResponse)
        # every text block, in order
        return "".join(item.text for item in response.content if item.type == "text")

    def _parse_event(self, data: str) -> StreamEvent:
        return parse_anthropic_event(data)

    def _format_model(self, model_id: str, display_name: str) -> str:
        return f"  {model_id} - {display_name}"
