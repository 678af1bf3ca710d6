"""Pytest configuration and shared fixtures"""

import pytest

from aika.config import Config, Credentials
from tests.utils import MockBackend

API_KEY_VARS = ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "MISTRAL_API_KEY")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real API keys out of every test"""
    for var in API_KEY_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
def config():
    """Config with a file credential for every vendor"""
    return Config(
        credentials=Credentials(
            anthropic_api_key="cfg-anthropic",
            openai_api_key="cfg-openai",
            mistral_api_key="cfg-mistral",
        )
    )
