"""Pytest configuration and shared fixtures."""
import os

import pytest

from rehabchat.llm import ChatSession, ChatTurn, LLMProvider, LLMResponse, StreamingResponse
from rehabchat.media import VideoFile
from rehabchat.relay import EvaluationRelay
from rehabchat.storage import ChatStore, InMemoryBackend, StoreConfig

TEST_INSTRUCTION = "Evaluate the child and the therapist."


class FakeProvider(LLMProvider):
    """Scripted provider: replays fragments, optionally failing part way."""

    def __init__(
        self,
        api_key: str,
        fragments: tuple[str, ...] = ("Hello", ", ", "world"),
        error: Exception | None = None,
        fail_after: int | None = None,
    ):
        self.api_key = api_key
        self.fragments = tuple(fragments)
        self.error = error
        self.fail_after = fail_after
        self.calls: list[tuple[str, object]] = []
        self.history: list[ChatTurn] | None = None
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    def _raise_now(self) -> None:
        if self.error is not None and self.fail_after is None:
            raise self.error

    async def _fragments(self):
        for i, fragment in enumerate(self.fragments):
            if self.error is not None and self.fail_after == i:
                raise self.error
            yield fragment
        if self.error is not None and self.fail_after is not None and self.fail_after >= len(self.fragments):
            raise self.error

    async def _respond(self, name: str, payload: object) -> LLMResponse:
        self.calls.append((name, payload))
        self._raise_now()
        return LLMResponse(content="".join(self.fragments), model=self.model)

    async def _respond_stream(self, name: str, payload: object) -> StreamingResponse:
        self.calls.append((name, payload))
        self._raise_now()
        return StreamingResponse(self._fragments())

    async def generate_content(self, parts, **kwargs):
        return await self._respond("generate_content", parts)

    async def generate_content_stream(self, parts, **kwargs):
        return await self._respond_stream("generate_content_stream", parts)

    def start_chat(self, history):
        self.history = list(history)
        return FakeChatSession(self)

    async def close(self) -> None:
        self.closed = True


class FakeChatSession(ChatSession):
    def __init__(self, provider: FakeProvider):
        self._provider = provider

    async def send_message(self, text: str) -> LLMResponse:
        return await self._provider._respond("send_message", text)

    async def send_message_stream(self, text: str) -> StreamingResponse:
        return await self._provider._respond_stream("send_message_stream", text)


class FakeProviderFactory:
    """Provider factory that remembers every provider it built."""

    def __init__(self, **provider_kwargs):
        self.provider_kwargs = provider_kwargs
        self.providers: list[FakeProvider] = []

    def __call__(self, api_key: str) -> FakeProvider:
        provider = FakeProvider(api_key, **self.provider_kwargs)
        self.providers.append(provider)
        return provider

    @property
    def last(self) -> FakeProvider:
        return self.providers[-1]


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY"),
    }


@pytest.fixture(scope="session")
def instruction():
    """Fixed instruction used by relays built in tests."""
    return TEST_INSTRUCTION


@pytest.fixture(scope="session")
def factory_cls():
    """FakeProviderFactory class, usable from hypothesis tests."""
    return FakeProviderFactory


@pytest.fixture
def fake_factory():
    """Factory replaying the default fragments."""
    return FakeProviderFactory()


@pytest.fixture
def relay(fake_factory):
    """Relay wired to the fake factory."""
    return EvaluationRelay(fake_factory, instruction=TEST_INSTRUCTION)


@pytest.fixture
def sample_video(tmp_path):
    """Create a small fake video file."""
    path = tmp_path / "session.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42fake-video")
    return VideoFile(path=path)


@pytest.fixture
def memory_store():
    """ChatStore over an in-memory backend with a known default key."""
    return ChatStore(InMemoryBackend(), StoreConfig(default_api_key="default-key"))


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI store at a temporary file and clear any ambient key."""
    store_path = tmp_path / "store.json"
    monkeypatch.setenv("REHABCHAT_STORE", "json")
    monkeypatch.setenv("REHABCHAT_STORE_PATH", str(store_path))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return store_path
