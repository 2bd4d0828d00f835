"""
Shared test fixtures and configuration for entire test suite.

Provides: Settings without ambient credentials, a scripted chat model factory,
model clients and a conversion service wired to them
Dependencies: pytest, langchain_core
System role: Test infrastructure and fixture management
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage

from pagecraft.application.services import ConversionService
from pagecraft.configs import ModelSettings, PipelineSettings
from pagecraft.core.model_tasks import ModelClient

CREDENTIAL_ENV_VARS = ("GOOGLE_API_KEY", "MODEL_GOOGLE_API_KEY", "MODEL_ID", "MODEL_MODEL_ID")


class ScriptedChatModelFactory:
    """
    Stand-in for the ChatGoogleGenerativeAI constructor.

    Each built model answers with the next scripted response. A scripted
    Exception instance is raised instead of returned.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.build_kwargs: list[dict] = []
        self.messages: list[list] = []

    def __call__(self, **kwargs):
        self.build_kwargs.append(kwargs)
        model = MagicMock()
        model.ainvoke = AsyncMock(side_effect=self._respond)
        return model

    def _respond(self, messages):
        self.messages.append(messages)
        if not self.responses:
            raise RuntimeError("No scripted response left")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return AIMessage(content=item)

    @property
    def call_count(self) -> int:
        return len(self.messages)


@pytest.fixture(autouse=True)
def clear_credential_env(monkeypatch):
    """Keep developer credentials out of the test run."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def model_settings() -> ModelSettings:
    """Provide configured model settings."""
    return ModelSettings(_env_file=None, google_api_key="test-key", request_timeout_seconds=5)


@pytest.fixture
def unconfigured_model_settings() -> ModelSettings:
    """Provide model settings without credentials."""
    return ModelSettings(_env_file=None)


@pytest.fixture
def pipeline_settings() -> PipelineSettings:
    """Provide pipeline settings with a small chunk threshold."""
    return PipelineSettings(_env_file=None, chunk_token_threshold=50)


@pytest.fixture
def chat_factory() -> ScriptedChatModelFactory:
    """Provide an empty scripted chat model factory."""
    return ScriptedChatModelFactory()


@pytest.fixture
def model_client(model_settings: ModelSettings, chat_factory: ScriptedChatModelFactory) -> ModelClient:
    """Provide configured model client backed by the scripted factory."""
    return ModelClient(model_settings, chat_model_factory=chat_factory)


@pytest.fixture
def conversion_service(model_client: ModelClient, pipeline_settings: PipelineSettings) -> ConversionService:
    """Provide conversion service using the scripted model."""
    return ConversionService(model_client=model_client, pipeline_settings=pipeline_settings)


@pytest.fixture
def typesetting_json() -> str:
    """Provide a well-formed typesetting response."""
    return json.dumps({
        "formattedContent": "<h1>Title</h1><p>Body</p>",
        "styling": {"css": "body { margin: 0; }", "layout": "Single column"},
        "suggestions": ["Add a table of contents"],
    })


@pytest.fixture
def make_paragraphs():
    """Provide a builder for text of `count` distinct paragraphs of roughly `size` characters."""

    def build(count: int, size: int = 120) -> str:
        return "\n\n".join(
            f"Paragraph {i}. " + ("lorem ipsum " * (size // 12)).strip() for i in range(count)
        )

    return build
