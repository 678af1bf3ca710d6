"""Provider abstraction for LLM APIs"""

import logging
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError
from rich.console import Console

from aika.auth import ConfigSource, EnvSource, resolve_api_key
from aika.exceptions import ApiError, AuthError, DecodeError, NetworkError

from .sse import decode_events

if TYPE_CHECKING:
    from aika.config import Config

logger = logging.getLogger(__name__)

ERROR_BODY_PLACEHOLDER = "Failed to read error body"
DEFAULT_TIMEOUT = 120.0
MAX_TOKENS = 4096


# ==== stream events ====
@dataclass(frozen=True)
class ContentDelta:
    """A fragment of generated text; ``text`` may be absent"""
    text: Optional[str] = None


@dataclass(frozen=True)
class MessageStart:
    pass


@dataclass(frozen=True)
class MessageStop:
    pass


@dataclass(frozen=True)
class Other:
    """An event that carries nothing we use, kept for diagnostics"""
    raw: Any = None


StreamEvent = Union[ContentDelta, MessageStart, MessageStop, Other]


# ==== requests ====
@dataclass(frozen=True)
class ProviderConfig:
    """Everything an adapter needs to talk to its vendor"""
    name: str
    api_key: str = field(repr=False)
    model: str
    base_url: str

    def __post_init__(self):
        if not self.api_key or not self.api_key.strip():
            raise AuthError(f"Empty API key for provider {self.name}")


@dataclass(frozen=True)
class QueryRequest:
    model: str
    prompt: str
    stream: bool = False
    temperature: float = 0.0
    max_tokens: int = MAX_TOKENS

    def messages(self) -> list[dict]:
        return [{"role": "user", "content": self.prompt}]


Sink = Callable[[str], None]


def stdout_sink(chunk: str) -> None:
    """Write a chunk to stdout as soon as it arrives"""
    sys.stdout.write(chunk)
    sys.stdout.flush()


M = TypeVar("M", bound=BaseModel)


def parse_json(data: Union[str, bytes], schema: type[M]) -> M:
    """Validate a JSON document against a pydantic schema, raising DecodeError on mismatch"""
    try:
        return schema.model_validate_json(data)
    except ValidationError as e:
        raise DecodeError(f"Response does not match {schema.__name__}: {e}") from e


class ModelInfo(BaseModel):
    id: str
    display_name: Optional[str] = None


class ModelsResponse(BaseModel):
    data: list[ModelInfo]


class Provider(ABC):
    """Base class for LLM providers.

    Subclasses describe their vendor through the class attributes and the
    ``_headers``/``_build_body``/``_parse_*`` hooks; the request flow, status
    handling and stream decoding live here.
    """

    name: str
    display_name: str
    API_BASE: str
    DEFAULT_MODEL: str
    ENV_VAR: str
    CREDENTIAL_FIELD: str

    COMPLETION_ROUTE: str
    MODELS_ROUTE = "/models"
    # payload that ends a stream, for vendors that send one
    STREAM_SENTINEL: Optional[str] = None

    def __init__(
        self,
        config: ProviderConfig,
        http: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.config = config
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(timeout=timeout)

    @classmethod
    def from_config(
        cls,
        config: Optional["Config"],
        http: Optional[httpx.Client] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Provider":
        """Build the adapter, resolving its API key from the environment first, then the config file"""
        api_key = resolve_api_key([
            EnvSource(cls.ENV_VAR, environ),
            ConfigSource(cls.CREDENTIAL_FIELD, config),
        ])
        settings = config.provider_settings(cls.name) if config is not None else None
        provider_config = ProviderConfig(
            name=cls.name,
            api_key=api_key,
            model=(settings and settings.model) or cls.DEFAULT_MODEL,
            base_url=(settings and settings.base_url) or cls.API_BASE,
        )
        return cls(provider_config, http=http)

    @property
    def model(self) -> str:
        """Model used when the caller does not pick one"""
        return self.config.model

    # ==== vendor hooks ====
    @abstractmethod
    def _headers(self) -> dict:
        pass

    @abstractmethod
    def _build_body(self, request: QueryRequest) -> dict:
        pass

    @abstractmethod
    def _parse_response(self, body: bytes) -> str:
        """Assemble the reply text from a whole (non-streamed) response body"""
        pass

    @abstractmethod
    def _parse_event(self, data: str) -> StreamEvent:
        """Decode one ``data:`` payload; raise DecodeError when it is malformed"""
        pass

    def _parse_models(self, body: bytes) -> dict[str, str]:
        response = parse_json(body, ModelsResponse)
        return {m.id: m.display_name or m.id for m in response.data}

    def _format_model(self, model_id: str, display_name: str) -> str:
        return f"  {model_id}"

    # ==== operations ====
    def models(self) -> dict[str, str]:
        """Fetch the model listing, mapping model id to display name"""
        response = self._request("GET", self.MODELS_ROUTE)
        return self._parse_models(response.content)

    def list_models(self, console: Optional[Console] = None) -> None:
        """Print the available models, one per line"""
        console = console or Console()
        listing = self.models()
        lines = [f"Available {self.display_name} models:"]
        lines += [self._format_model(model_id, name) for model_id, name in listing.items()]
        for line in lines:
            console.print(line, markup=False, highlight=False, soft_wrap=True)

    def query(
        self,
        model: str,
        prompt: str,
        streaming: bool = False,
        sink: Optional[Sink] = None,
    ) -> str:
        """Send a prompt.

        Without streaming the assembled reply is returned. With streaming every
        chunk goes to ``sink`` (stdout by default) as it arrives and the empty
        string is returned; use :meth:`stream` to collect the chunks instead.
        """
        if streaming:
            sink = sink or stdout_sink
            for chunk in self.stream(model, prompt):
                sink(chunk)
            return ""

        request = QueryRequest(model=model, prompt=prompt, stream=False)
        response = self._request("POST", self.COMPLETION_ROUTE, json=self._build_body(request))
        return self._parse_response(response.content)

    def stream(self, model: str, prompt: str) -> Iterator[str]:
        """Yield reply text chunks in arrival order"""
        request = QueryRequest(model=model, prompt=prompt, stream=True)
        with self._stream("POST", self.COMPLETION_ROUTE, json=self._build_body(request)) as response:
            events = decode_events(response.iter_lines(), self._parse_event, self.STREAM_SENTINEL)
            for event in events:
                if isinstance(event, ContentDelta) and event.text:
                    yield event.text
                elif isinstance(event, Other):
                    logger.debug(f"Ignoring stream event: {event.raw!r}")

    # ==== http ====
    def _url(self, route: str) -> str:
        return f"{self.config.base_url.rstrip('/')}{route}"

    def _request(self, method: str, route: str, **kwargs) -> httpx.Response:
        url = self._url(route)
        logger.debug(f"{method} {url}")
        try:
            response = self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError(f"{self.display_name} request failed: {e}") from e
        self._check_status(response)
        return response

    @contextmanager
    def _stream(self, method: str, route: str, **kwargs) -> Iterator[httpx.Response]:
        url = self._url(route)
        logger.debug(f"{method} {url} (streaming)")
        try:
            with self.http.stream(method, url, headers=self._headers(), **kwargs) as response:
                self._check_status(response)
                yield response
        except httpx.HTTPError as e:
            raise NetworkError(f"{self.display_name} request failed: {e}") from e

    def _check_status(self, response: httpx.Response) -> None:
        """Turn any status other than 200 into an ApiError carrying the body text"""
        logger.debug(f"{response.request.method} {response.request.url} returned {response.status_code}")
        if response.status_code == 200:
            return

        try:
            response.read()
            body = response.text
        except (httpx.HTTPError, httpx.StreamError):
            body = ERROR_BODY_PLACEHOLDER
        logger.warning(f"{response.request.method} {response.request.url} returned {response.status_code}")
        raise ApiError(self.display_name, response.status_code, body)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
