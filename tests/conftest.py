"""Shared pytest fixtures.

Provides a stand-in for the OpenAI SDK client and a FastAPI test client
wired to it, so no test touches the network.
"""

from types import SimpleNamespace
from typing import Any, Iterator, List, Optional

import pytest
from fastapi.testclient import TestClient

from workout_api.config import Settings
from workout_api.main import create_app
from workout_api.services import get_openai_client


def make_chunk(content: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeTranscriptions:
    def __init__(self) -> None:
        self.text: str = "30 minutes"
        self.error: Optional[Exception] = None
        self.calls: List[dict] = []

    def create(self, **kwargs: Any) -> str:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.text


class FakeCompletions:
    def __init__(self) -> None:
        self.chunks: List[Optional[str]] = ["Warm-up: ", "jog 2 min", "\nCool-down: stretch"]
        self.error: Optional[Exception] = None
        self.stream_error: Optional[Exception] = None
        self.calls: List[dict] = []

    def create(self, **kwargs: Any) -> Iterator[SimpleNamespace]:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self._stream()

    def _stream(self) -> Iterator[SimpleNamespace]:
        for content in self.chunks:
            yield make_chunk(content)
        if self.stream_error is not None:
            raise self.stream_error


class FakeOpenAI:
    def __init__(self) -> None:
        self.audio = SimpleNamespace(transcriptions=FakeTranscriptions())
        self.chat = SimpleNamespace(completions=FakeCompletions())


@pytest.fixture
def settings() -> Settings:
    return Settings(OPENAI_API_KEY="sk-test")


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def client(settings: Settings, fake_openai: FakeOpenAI) -> Iterator[TestClient]:
    app = create_app(settings)
    app.dependency_overrides[get_openai_client] = lambda: fake_openai
    with TestClient(app) as test_client:
        yield test_client
