"""Configuration management"""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from aika.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "aika" / "config.toml"

COMMIT_MESSAGE_PROMPT = (
    "Generate a concise and descriptive git commit message for the following changes:\n\n"
    "```\n{input}\n```"
)


class Credentials(BaseModel):
    anthropic_api_key: str | None = None
    mistral_api_key: str | None = None
    openai_api_key: str | None = None


class ProviderSettings(BaseModel):
    model: str | None = None
    base_url: str | None = None


class InputSettings(BaseModel):
    command: str


class PromptSettings(BaseModel):
    prompt: str


class Config(BaseModel):
    credentials: Credentials | None = None
    providers: dict[str, ProviderSettings] = Field(default_factory=dict)
    inputs: dict[str, InputSettings] = Field(default_factory=dict)
    prompts: dict[str, PromptSettings] = Field(default_factory=dict)

    @classmethod
    def default(cls) -> "Config":
        """Configuration used when no config file exists"""
        return cls(
            providers={"anthropic": ProviderSettings(model="claude-3-5-sonnet-latest")},
            inputs={"git-diff-cached": InputSettings(command="git diff --cached")},
            prompts={"commit-message": PromptSettings(prompt=COMMIT_MESSAGE_PROMPT)},
        )

    @classmethod
    def from_toml(cls, text: str) -> "Config":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in config: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config: {e}") from e

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from file, falling back to the defaults when it does not exist"""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        if not path.exists():
            logger.warning(f"Config file not found at {path}, using default configuration.")
            return cls.default()

        try:
            text = path.read_text()
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_toml(text)

    def provider_settings(self, name: str) -> ProviderSettings:
        return self.providers.get(name) or ProviderSettings()

    def credential(self, field: str) -> str | None:
        if self.credentials is None:
            return None
        return getattr(self.credentials, field, None)

    def get_input(self, name: str) -> InputSettings:
        if name not in self.inputs:
            raise ConfigError(
                f"Unknown input: {name}. Available: {', '.join(self.inputs) or '(none)'}"
            )
        return self.inputs[name]

    def get_prompt(self, name: str) -> PromptSettings:
        if name not in self.prompts:
            raise ConfigError(
                f"Unknown prompt: {name}. Available: {', '.join(self.prompts) or '(none)'}"
            )
        return self.prompts[name]
