"""Shared fixtures and in-memory fakes for the study-material tests."""

from __future__ import annotations

import json
from pathlib import Path
import sys
from types import SimpleNamespace
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.pipelines.audio.types import AudioPayload, RemoteReference  # noqa: E402


def study_document(**overrides: Any) -> dict[str, Any]:
    """A response body that satisfies the study-material contract."""

    document: dict[str, Any] = {
        "title": "Photosynthesis Basics",
        "confidenceScore": 92,
        "accuracyNote": "Clear recording with a single speaker.",
        "summary": ["Plants convert light into chemical energy."],
        "theses": ["Chlorophyll absorbs mostly red and blue light."],
        "examples": ["Leaves turning toward a window."],
        "runningNotes": "# Lecture\n- light reactions\n- Calvin cycle",
        "quiz": [
            {
                "question": "Where do the light reactions happen?",
                "options": ["Stroma", "Thylakoid membrane", "Nucleus"],
                "correctAnswer": 1,
                "explanation": "They run on the thylakoid membrane.",
            }
        ],
    }
    document.update(overrides)
    return document


def remote_file(
    state: str = "ACTIVE",
    *,
    name: str | None = "files/abc123",
    uri: str | None = "https://generativelanguage.googleapis.com/v1beta/files/abc123",
    mime_type: str | None = "audio/mpeg",
) -> SimpleNamespace:
    """Stand-in for the SDK ``File`` object."""

    return SimpleNamespace(name=name, uri=uri, mime_type=mime_type, state=state)


class FakeGeminiClient:
    """Records calls and replays scripted Files API / generation results."""

    def __init__(
        self,
        *,
        response_text: str | None = None,
        upload_result: Any = None,
        poll_states: list[str] | None = None,
        generate_error: Exception | None = None,
        upload_error: Exception | None = None,
    ) -> None:
        self.response_text = (
            json.dumps(study_document()) if response_text is None else response_text
        )
        self.upload_result = upload_result or remote_file("PROCESSING")
        self.poll_states = list(poll_states or ["ACTIVE"])
        self.generate_error = generate_error
        self.upload_error = upload_error
        self.uploads: list[dict[str, Any]] = []
        self.polls: list[str] = []
        self.generations: list[dict[str, Any]] = []

    async def upload_file(self, data: bytes, *, mime_type: str, display_name: str | None = None):
        self.uploads.append(
            {"size": len(data), "mime_type": mime_type, "display_name": display_name}
        )
        if self.upload_error is not None:
            raise self.upload_error
        return self.upload_result

    async def get_file(self, name: str):
        self.polls.append(name)
        state = self.poll_states.pop(0) if len(self.poll_states) > 1 else self.poll_states[0]
        return remote_file(
            state,
            name=name,
            uri=self.upload_result.uri,
            mime_type=self.upload_result.mime_type,
        )

    async def generate(self, **kwargs: Any) -> str | None:
        self.generations.append(kwargs)
        if self.generate_error is not None:
            raise self.generate_error
        return self.response_text


class RecordingUploader:
    """Uploader double that records whether the Files API path was taken."""

    def __init__(self) -> None:
        self.calls: list[AudioPayload] = []

    async def upload(self, payload: AudioPayload) -> RemoteReference:
        self.calls.append(payload)
        return RemoteReference(media_type=payload.media_type, uri="https://files.example/abc")


class FakeClock:
    """Monotonic clock advanced by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_client() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
