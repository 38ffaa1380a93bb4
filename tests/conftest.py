from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from bug_butler.client import CompletionClient
from bug_butler.config import Settings
from bug_butler.credentials import CredentialHolder, MemoryStore, STORAGE_KEY
from bug_butler.engine import ConversationEngine

VALID_KEY = "sk-test-0123456789abcdef"


def completion(text: str | None) -> SimpleNamespace:
    """Shape of an OpenAI chat completion, as far as the client reads it."""
    message = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(store_path=tmp_path / "store.json")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore({STORAGE_KEY: VALID_KEY})


@pytest.fixture
def credentials(store) -> CredentialHolder:
    return CredentialHolder(store)


@pytest.fixture
def sdk_factory() -> MagicMock:
    factory = MagicMock()
    factory.return_value.chat.completions.create.return_value = completion("Got it. What happened instead?")
    return factory


@pytest.fixture
def client(settings, sdk_factory) -> CompletionClient:
    return CompletionClient(settings, client_factory=sdk_factory)


@pytest.fixture
def engine(client, credentials, settings) -> ConversationEngine:
    return ConversationEngine(client, credentials, settings)


@pytest.fixture
def make_completion():
    return completion
