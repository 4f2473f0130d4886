"""Typed containers shared across the study-material pipeline.

Audio enters as an `AudioPayload`, leaves the encoder as a
`TransmissionUnit` (inline or uploaded) and reaches Gemini wrapped in a
`GenerationRequest`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class AudioPayload:
    """Raw audio captured by the caller, consumed once by the encoder."""

    data: bytes = field(repr=False)
    media_type: str

    @property
    def byte_length(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class EmbeddedPayload:
    """Audio transmitted inline as base64 text."""

    media_type: str
    base64_data: str = field(repr=False)


@dataclass(frozen=True)
class RemoteReference:
    """Audio already uploaded to the remote service, referenced by URI."""

    media_type: str
    uri: str


TransmissionUnit = Union[EmbeddedPayload, RemoteReference]


class AssetState(str, Enum):
    """Readiness of an uploaded remote asset."""

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not AssetState.PROCESSING


@dataclass(frozen=True)
class RemoteAsset:
    """Snapshot of an uploaded resource as reported by the remote service."""

    name: str
    uri: str | None
    media_type: str | None
    state: AssetState


@dataclass(frozen=True)
class SamplingConfig:
    """Deterministic sampling settings sent with every generation call."""

    temperature: float
    thinking_budget: int = 0


@dataclass(frozen=True)
class GenerationRequest:
    """Normalized payload handed to the generation client."""

    unit: TransmissionUnit
    instructions: str
    response_schema: Mapping[str, Any]
    sampling: SamplingConfig


__all__ = [
    "AssetState",
    "AudioPayload",
    "EmbeddedPayload",
    "GenerationRequest",
    "RemoteAsset",
    "RemoteReference",
    "SamplingConfig",
    "TransmissionUnit",
]
