"""Credential resolution for aika"""

from .credentials import ConfigSource, CredentialSource, EnvSource, resolve_api_key

__all__ = ["ConfigSource", "CredentialSource", "EnvSource", "resolve_api_key"]
