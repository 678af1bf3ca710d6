"""Credential sources for providers"""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Sequence

from aika.exceptions import AuthError

if TYPE_CHECKING:
    from aika.config import Config


class CredentialSource(Protocol):
    """Somewhere an API key may be found"""

    @property
    def description(self) -> str: ...

    def get(self) -> Optional[str]: ...


@dataclass(frozen=True)
class EnvSource:
    """API key taken from an environment variable"""

    var: str
    environ: Optional[Mapping[str, str]] = None

    @property
    def description(self) -> str:
        return f"{self.var} environment variable"

    def get(self) -> Optional[str]:
        env = os.environ if self.environ is None else self.environ
        return env.get(self.var) or None


@dataclass(frozen=True)
class ConfigSource:
    """API key taken from the [credentials] table of the config file"""

    field: str
    config: Optional["Config"]

    @property
    def description(self) -> str:
        return f"credentials.{self.field} in config"

    def get(self) -> Optional[str]:
        if self.config is None:
            return None
        return self.config.credential(self.field) or None


def resolve_api_key(sources: Sequence[CredentialSource]) -> str:
    """Return the first key found, checking sources in order.

    Raises AuthError naming every source that was checked when none has a key.
    """
    for source in sources:
        key = source.get()
        if key and key.strip():
            return key.strip()

    checked = " and ".join(source.description for source in sources) or "no credential sources"
    raise AuthError(f"No API key found (checked {checked})")
