"""Exceptions raised by aika"""


class AikaError(Exception):
    """Base class for all aika errors."""


class ConfigError(AikaError):
    """The configuration file could not be read, or names something it does not define."""


class InputError(AikaError):
    """Gathering the prompt input failed (command error, unreadable path)."""


# ==== providers ====
class AuthError(AikaError):
    """No credential could be resolved for a provider."""


class NotSupportedError(AikaError):
    """The requested provider is not known."""

    def __init__(self, name: str):
        super().__init__(f"Unsupported provider: {name}")
        self.name = name


class NetworkError(AikaError):
    """The request could not be completed at the transport level."""


class ApiError(NetworkError):
    """The vendor API answered with a status other than 200."""

    def __init__(self, provider: str, status_code: int, body: str):
        super().__init__(f"{provider} API error ({status_code}): {body}")
        self.provider = provider
        self.status_code = status_code
        self.body = body


class DecodeError(AikaError):
    """A response body or stream event did not match the expected schema."""
