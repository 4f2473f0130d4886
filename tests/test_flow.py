"""End-to-end pipeline runs against an in-memory Gemini client."""

from __future__ import annotations

import json

import pytest
from google.genai import types

from conftest import FakeGeminiClient, remote_file, study_document
from app.pipelines.audio import (
    AudioPayload,
    ErrorKind,
    PipelineError,
    RemoteAssetUploader,
    StudyMaterialPipeline,
)
from app.services.gemini_client import GeminiInvocationError
from app.services.prompt_builder import ProcessingOptions


def _pipeline(client, fake_clock=None, **kwargs) -> StudyMaterialPipeline:
    uploader = None
    if fake_clock is not None:
        uploader = RemoteAssetUploader(
            client, poll_interval=0.5, poll_timeout=5.0, sleep=fake_clock.sleep, clock=fake_clock
        )
    return StudyMaterialPipeline(client, uploader=uploader, inline_limit=64, **kwargs)


@pytest.mark.asyncio
async def test_small_payload_with_partial_options():
    response = {
        "title": "Cell Biology",
        "confidenceScore": 80,
        "accuracyNote": "Good audio.",
        "summary": [],
        "examples": [],
        "runningNotes": "## Notes",
        "quiz": [],
    }
    client = FakeGeminiClient(response_text=json.dumps(response))
    options = ProcessingOptions(summary=False, theses=False, examples=False)

    content = await _pipeline(client).run(AudioPayload(b"12345", "audio/mpeg"), options)

    assert client.uploads == []
    call = client.generations[0]
    for word in ("summary", "theses", "examples"):
        assert word not in call["instructions"]
    assert call["audio_part"].inline_data.data == b"12345"
    assert call["temperature"] == 0.3
    assert call["thinking_budget"] == 0
    assert content.summary == []
    assert content.theses == []
    assert content.examples == []
    assert content.running_notes == "## Notes"


@pytest.mark.asyncio
async def test_large_payload_uses_uploaded_reference(fake_clock):
    client = FakeGeminiClient(poll_states=["PROCESSING", "ACTIVE"])

    content = await _pipeline(client, fake_clock).run(AudioPayload(b"x" * 64, "audio/mpeg"))

    assert client.uploads == [
        {"size": 64, "mime_type": "audio/mpeg", "display_name": "Audio Upload"}
    ]
    audio_part = client.generations[0]["audio_part"]
    assert isinstance(audio_part, types.Part)
    assert audio_part.file_data.file_uri == client.upload_result.uri
    assert content.title == study_document()["title"]


@pytest.mark.asyncio
async def test_huge_integer_confidence_is_clamped_end_to_end():
    client = FakeGeminiClient(response_text=json.dumps(study_document(confidenceScore=10**400)))

    content = await _pipeline(client).run(AudioPayload(b"abc", "audio/mpeg"))

    assert content.confidence_score == 100.0


@pytest.mark.asyncio
async def test_payload_over_ceiling_is_rejected_before_remote_calls():
    client = FakeGeminiClient()

    with pytest.raises(PipelineError) as exc_info:
        await _pipeline(client, max_payload_bytes=10).run(AudioPayload(b"x" * 11, "audio/mpeg"))

    assert exc_info.value.kind is ErrorKind.REQUEST_ENTITY_TOO_LARGE
    assert client.uploads == []
    assert client.generations == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("client_kwargs", "expected"),
    [
        ({"response_text": ""}, ErrorKind.EMPTY_OR_INVALID_RESPONSE),
        ({"response_text": "I cannot help with that."}, ErrorKind.EMPTY_OR_INVALID_RESPONSE),
        (
            {"generate_error": GeminiInvocationError("Gemini HTTP 403", status_code=403)},
            ErrorKind.AUTH_FAILURE,
        ),
        (
            {"generate_error": GeminiInvocationError("reset", transport=True)},
            ErrorKind.NETWORK_FAILURE,
        ),
        ({"generate_error": RuntimeError("kaboom")}, ErrorKind.UNCLASSIFIED),
    ],
)
async def test_generation_failures_surface_as_pipeline_errors(client_kwargs, expected):
    client = FakeGeminiClient(**client_kwargs)

    with pytest.raises(PipelineError) as exc_info:
        await _pipeline(client).run(AudioPayload(b"abc", "audio/mpeg"))

    assert exc_info.value.kind is expected
    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_failed_remote_processing(fake_clock):
    client = FakeGeminiClient(poll_states=["FAILED"])

    with pytest.raises(PipelineError) as exc_info:
        await _pipeline(client, fake_clock).run(AudioPayload(b"x" * 100, "audio/mpeg"))

    assert exc_info.value.kind is ErrorKind.REMOTE_PROCESSING_FAILURE
    assert client.generations == []


@pytest.mark.asyncio
async def test_upload_without_uri(fake_clock):
    client = FakeGeminiClient(upload_result=remote_file("PROCESSING", uri=None))

    with pytest.raises(PipelineError) as exc_info:
        await _pipeline(client, fake_clock).run(AudioPayload(b"x" * 100, "audio/mpeg"))

    assert exc_info.value.kind is ErrorKind.UPLOAD_STRUCTURE_FAILURE


def test_stage_description_is_ordered():
    stages = list(StudyMaterialPipeline.describe())

    assert [stage.order for stage in stages] == [1, 2, 3, 4]
    assert stages[0].module == "app.pipelines.audio.encoding"
