"""Configuration for aika"""

from .config import Config, Credentials, InputSettings, PromptSettings, ProviderSettings

__all__ = ["Config", "Credentials", "InputSettings", "PromptSettings", "ProviderSettings"]
