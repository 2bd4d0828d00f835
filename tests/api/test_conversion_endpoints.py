"""
Test suite for the conversion endpoints.

Covers request validation, the collecting endpoints' error mapping and the
SSE framing of the streaming endpoints.

System role: Verification of the conversion HTTP API
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from pagecraft.api.deps import get_conversion_service
from pagecraft.application.services import ConversionService
from pagecraft.core.exceptions import PagecraftException
from pagecraft.core.model_tasks import ModelClient
from pagecraft.core.pipeline.fallbacks import FALLBACK_NOTICE
from pagecraft.main import create_app
from pagecraft.models.results import RefinementResult, Styling, TypesettingResult


def parse_sse(body: str) -> list[tuple[str, dict]]:
    """Split an SSE body into (event, data) pairs."""
    frames = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        frames.append((lines["event"], json.loads(lines["data"])))
    return frames


@pytest.fixture
def app():
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def mock_service(app) -> MagicMock:
    service = MagicMock(spec=ConversionService)
    app.dependency_overrides[get_conversion_service] = lambda: service
    return service


@pytest.fixture
def scripted_service(app, conversion_service) -> ConversionService:
    app.dependency_overrides[get_conversion_service] = lambda: conversion_service
    return conversion_service


@pytest.fixture
def fallback_service(app, unconfigured_model_settings, pipeline_settings) -> ConversionService:
    service = ConversionService(
        model_client=ModelClient(unconfigured_model_settings),
        pipeline_settings=pipeline_settings,
    )
    app.dependency_overrides[get_conversion_service] = lambda: service
    return service


class TestTypesettingEndpoint:
    """Test suite for POST /api/v1/typesetting."""

    def test_should_return_camel_case_result(self, client, mock_service) -> None:
        # Arrange
        mock_service.typeset = AsyncMock(
            return_value=TypesettingResult(
                formatted_content="<p>x</p>",
                styling=Styling(css="p {}", layout="Single column"),
                suggestions=["Add a cover"],
            )
        )

        # Act
        response = client.post("/api/v1/typesetting", json={"content": "x", "documentType": "report"})

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "formattedContent": "<p>x</p>",
            "styling": {"css": "p {}", "layout": "Single column"},
            "suggestions": ["Add a cover"],
        }
        request = mock_service.typeset.call_args.args[0]
        assert request.document_type == "report"

    @pytest.mark.parametrize("content", ["", "   "])
    def test_blank_content_should_be_rejected(self, client, mock_service, content) -> None:
        response = client.post("/api/v1/typesetting", json={"content": content})

        assert response.status_code == 422

    def test_unknown_document_type_should_be_rejected(self, client, mock_service) -> None:
        response = client.post("/api/v1/typesetting", json={"content": "x", "documentType": "poster"})

        assert response.status_code == 422

    def test_processing_error_should_map_to_500(self, client, mock_service) -> None:
        mock_service.typeset = AsyncMock(side_effect=PagecraftException("Nothing to combine: every chunk failed"))

        response = client.post("/api/v1/typesetting", json={"content": "x"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Typesetting failed: Nothing to combine: every chunk failed"

    def test_without_credentials_should_return_fallback(self, client, fallback_service) -> None:
        response = client.post("/api/v1/typesetting", json={"content": "Hello.\n\nWorld."})

        assert response.status_code == 200
        assert FALLBACK_NOTICE in response.json()["suggestions"]


class TestTypesettingStreamEndpoint:
    """Test suite for POST /api/v1/typesetting/stream."""

    def test_should_stream_progress_then_complete(self, client, fallback_service) -> None:
        # Act
        response = client.post("/api/v1/typesetting/stream", json={"content": "Hello."})

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["x-accel-buffering"] == "no"

        frames = parse_sse(response.text)
        assert [event for event, _ in frames] == ["progress", "complete"]
        assert [data["type"] for _, data in frames] == ["progress", "complete"]
        assert frames[-1][1]["percentage"] == 100
        assert FALLBACK_NOTICE in frames[-1][1]["result"]["suggestions"]

    def test_should_stream_chunk_progress(self, client, scripted_service, chat_factory, make_paragraphs) -> None:
        # Arrange
        chat_factory.responses.extend(
            json.dumps({"formattedContent": f"<p>{i}</p>", "styling": {"css": "", "layout": "L"}})
            for i in range(3)
        )

        # Act
        response = client.post("/api/v1/typesetting/stream", json={"content": make_paragraphs(3)})

        # Assert
        frames = parse_sse(response.text)
        progress = [data for event, data in frames if event == "progress"]
        assert [data["step"] for data in progress[:3]] == [
            "Processing chunk 1 of 3...",
            "Processing chunk 2 of 3...",
            "Processing chunk 3 of 3...",
        ]
        assert progress[0]["totalChunks"] == 3
        assert frames[-1][0] == "complete"
        assert frames[-1][1]["result"]["formattedContent"] == "<p>0</p>\n\n<p>1</p>\n\n<p>2</p>"

    def test_failed_run_should_stream_error_event(self, client, mock_service) -> None:
        # Arrange
        async def failing_stream(request, is_cancelled=None):
            raise RuntimeError("stream broke")
            yield

        mock_service.stream_typesetting = failing_stream

        # Act
        response = client.post("/api/v1/typesetting/stream", json={"content": "x"})

        # Assert
        assert response.status_code == 200
        frames = parse_sse(response.text)
        assert frames == [
            (
                "error",
                {"type": "error", "step": "Error occurred during processing", "percentage": 100, "error": "stream broke"},
            )
        ]


class TestOtherConversionEndpoints:
    """Test suite for the structure, website and refinement routes."""

    def test_structure_should_return_result(self, client, fallback_service) -> None:
        response = client.post("/api/v1/content-structure", json={"content": "Intro\n\nBody text."})

        assert response.status_code == 200
        body = response.json()
        assert "<h2>Intro</h2>" in body["structuredContent"]
        assert body["title"] == "Document"

    def test_website_stream_should_complete(self, client, fallback_service) -> None:
        response = client.post(
            "/api/v1/website-generation/stream",
            json={"content": "Design Studio\n\nWe build things.", "websiteType": "portfolio"},
        )

        frames = parse_sse(response.text)
        assert frames[-1][0] == "complete"
        assert "Design Studio" in frames[-1][1]["result"]["html"]

    def test_refinement_should_use_css_wire_key(self, client, mock_service) -> None:
        # Arrange
        mock_service.refine = AsyncMock(
            return_value=RefinementResult(refined_content="<p>b</p>", refined_css="p { font-size: 14px; }")
        )

        # Act
        response = client.post(
            "/api/v1/refinement",
            json={
                "currentContent": "<p>a</p>",
                "currentCSS": "p {}",
                "userFeedback": "Larger text",
                "contentType": "website",
            },
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["refinedCSS"] == "p { font-size: 14px; }"
        request = mock_service.refine.call_args.args[0]
        assert request.current_css == "p {}"

    def test_refinement_should_reject_unknown_target(self, client, mock_service) -> None:
        response = client.post(
            "/api/v1/refinement",
            json={"currentContent": "<p>a</p>", "userFeedback": "x", "contentType": "slides"},
        )

        assert response.status_code == 422
