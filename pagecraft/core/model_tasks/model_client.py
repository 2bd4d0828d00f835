"""
Hosted language model client.

Thin async wrapper around LangChain's ChatGoogleGenerativeAI that issues one
JSON-mode completion per call. Per-call temperature and output budget come
from the model task; credentials, model id and timeout come from settings.
The client is constructed explicitly and injected, never created at import.

Retries are left to the pipeline, so the underlying client runs with
max_retries=0 and every call is a single attempt bounded by the timeout.

Dependencies: langchain_google_genai, langchain_core.messages
System role: Boundary adapter between model tasks and the hosted model
"""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from pagecraft.configs.model import ModelSettings
from pagecraft.core.exceptions import ModelConfigurationError, ModelUnavailableError

logger = logging.getLogger(__name__)

ChatModelFactory = Callable[..., BaseChatModel]

SCHEMA_INSTRUCTIONS = """

Respond with a single JSON object that conforms to this JSON Schema:
{schema}

IMPORTANT: You must respond with valid JSON only. Do not include any markdown formatting, explanations, or text outside the JSON structure. Ensure all strings are properly escaped."""


@dataclass(frozen=True)
class ModelRequest:
    """
    One model call.

    Attributes:
        system_prompt: Role and output instructions
        user_prompt: Task input
        response_schema: JSON Schema the response must follow
        max_output_tokens: Output budget for this call
        temperature: Sampling temperature
        task: Task name for logging
    """

    system_prompt: str
    user_prompt: str
    response_schema: dict[str, Any]
    max_output_tokens: int
    temperature: float
    task: str = "model"


def default_chat_model_factory(**kwargs: Any) -> BaseChatModel:
    return ChatGoogleGenerativeAI(**kwargs)


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return ""


class ModelClient:
    """
    JSON completion client for model tasks.

    Usage:
        client = ModelClient(settings.model)
        if client.is_configured:
            raw = await client.acomplete(request)
    """

    def __init__(
        self,
        settings: ModelSettings,
        chat_model_factory: ChatModelFactory | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Model credentials, id and limits
            chat_model_factory: Builds the chat model for a call; defaults to ChatGoogleGenerativeAI
        """
        self._settings = settings
        self._factory = chat_model_factory or default_chat_model_factory

        if not self.is_configured:
            logger.warning(f"{__name__}:__init__ - Model credentials not found. Using fallback mode.")

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    @property
    def settings(self) -> ModelSettings:
        return self._settings

    @property
    def model_id(self) -> str:
        return self._settings.model_id

    def _build_model(self, request: ModelRequest) -> BaseChatModel:
        return self._factory(
            model=self._settings.model_id,
            google_api_key=self._settings.google_api_key,
            temperature=request.temperature,
            max_output_tokens=request.max_output_tokens,
            max_retries=0,
            response_mime_type="application/json",
        )

    async def acomplete(self, request: ModelRequest) -> str:
        """
        Run one completion and return the raw response text.

        Args:
            request: Prompts, schema and per-call limits

        Returns:
            str: Raw model output (expected to be JSON)

        Raises:
            ModelConfigurationError: If credentials are missing
            ModelUnavailableError: On timeout, provider error or empty response
        """
        if not self.is_configured:
            raise ModelConfigurationError()

        system_prompt = request.system_prompt + SCHEMA_INSTRUCTIONS.format(
            schema=json.dumps(request.response_schema)
        )
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=request.user_prompt)]
        timeout = self._settings.request_timeout_seconds

        logger.debug(
            f"{__name__}:acomplete - Calling model",
            extra={
                "task": request.task,
                "model_id": self._settings.model_id,
                "max_output_tokens": request.max_output_tokens,
                "prompt_chars": len(system_prompt) + len(request.user_prompt),
            },
        )

        try:
            model = self._build_model(request)
            response = await asyncio.wait_for(model.ainvoke(messages), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{__name__}:acomplete - Model call timed out after {timeout}s", extra={"task": request.task})
            raise ModelUnavailableError(
                f"Model call timed out after {timeout}s",
                task=request.task,
            ) from e
        except Exception as e:
            logger.error(
                f"{__name__}:acomplete - Model call failed: {type(e).__name__}: {e}",
                extra={"task": request.task, "error_type": type(e).__name__},
            )
            raise ModelUnavailableError(
                f"Model call failed: {e}",
                task=request.task,
                details={"error_type": type(e).__name__},
            ) from e

        text = _message_text(getattr(response, "content", None))
        if not text.strip():
            raise ModelUnavailableError("No response from model", task=request.task)

        logger.debug(
            f"{__name__}:acomplete - Model responded",
            extra={"task": request.task, "response_chars": len(text)},
        )
        return text
