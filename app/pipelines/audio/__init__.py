"""Audio-to-study-material pipeline package.

Modules are organised by the order in which `/study/generate` executes:

1. `ingestion` – turn the HTTP upload into an `AudioPayload`.
2. `encoding` – pick inline base64 or Files API transport by size.
3. `upload` – upload large payloads and poll until the asset is ready.
4. `prompts` – build instructions + response schema from the options.
5. `llm` – call Gemini once and validate the structured response.
6. `errors` – classify any failure into the user-facing taxonomy.
7. `flow` – the pipeline boundary tying the stages together.
"""

from .encoding import encode_payload
from .errors import ErrorKind, PipelineError, PipelineFailure, classify_failure
from .flow import PipelineStage, StudyMaterialPipeline
from .ingestion import read_audio_payload, resolve_content_type
from .llm import LlmOutcome, call_generation_llm
from .prompts import build_generation_request
from .types import (
    AssetState,
    AudioPayload,
    EmbeddedPayload,
    GenerationRequest,
    RemoteReference,
    TransmissionUnit,
)
from .upload import RemoteAssetUploader

__all__ = [
    "AssetState",
    "AudioPayload",
    "EmbeddedPayload",
    "ErrorKind",
    "GenerationRequest",
    "LlmOutcome",
    "PipelineError",
    "PipelineFailure",
    "PipelineStage",
    "RemoteAssetUploader",
    "RemoteReference",
    "StudyMaterialPipeline",
    "TransmissionUnit",
    "build_generation_request",
    "call_generation_llm",
    "classify_failure",
    "encode_payload",
    "read_audio_payload",
    "resolve_content_type",
]
