"""Orchestration for the study-material pipeline.

The HTTP controller in ``app/controllers/study.py`` only adapts the upload;
this module owns the canonical execution order and the error boundary:

1. ``encoding`` – embed small payloads, hand large ones to the uploader.
2. ``upload`` – push bytes to the Files API and poll until the asset is ready.
3. ``prompts`` – build instructions + response schema from the options.
4. ``llm`` – one structured generation call, then contract validation.

Every failure is classified by ``errors.classify_failure`` and re-raised as a
single :class:`PipelineError` carrying only the user-facing message.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List

from app.config.settings import settings
from app.services.gemini_client import GeminiClient
from app.services.prompt_builder import ProcessingOptions
from app.services.response_contract import GeneratedContent
from app.telemetry import observe_pipeline_failure, observe_pipeline_run

from .encoding import AssetUploader, encode_payload
from .errors import FailureCode, PipelineError, PipelineFailure, classify_failure
from .llm import call_generation_llm
from .prompts import build_generation_request
from .types import AudioPayload, EmbeddedPayload
from .upload import RemoteAssetUploader

logger = logging.getLogger("app.services.audio_pipeline")


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the pipeline."""

    order: int
    name: str
    module: str
    summary: str


class StudyMaterialPipeline:
    """Audio payload in, validated :class:`GeneratedContent` out."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Payload Encoding",
            "app.pipelines.audio.encoding",
            "Embed payloads below the inline limit as base64, otherwise defer to the uploader.",
        ),
        PipelineStage(
            2,
            "Remote Asset Upload",
            "app.pipelines.audio.upload",
            "Upload through the Files API and poll until the asset is ready or failed.",
        ),
        PipelineStage(
            3,
            "Prompt Assembly",
            "app.pipelines.audio.prompts",
            "Render instructions for the requested sections plus the fixed response schema.",
        ),
        PipelineStage(
            4,
            "Structured Generation",
            "app.pipelines.audio.llm",
            "Call Gemini once and validate the structured JSON response.",
        ),
    ]

    def __init__(
        self,
        client: GeminiClient,
        *,
        uploader: AssetUploader | None = None,
        inline_limit: int | None = None,
        max_payload_bytes: int | None = None,
    ) -> None:
        self._client = client
        self._uploader = uploader or RemoteAssetUploader(client)
        self._inline_limit = inline_limit
        self._max_payload_bytes = (
            max_payload_bytes if max_payload_bytes is not None else settings.max_upload_bytes
        )

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    async def run(
        self,
        payload: AudioPayload,
        options: ProcessingOptions | None = None,
    ) -> GeneratedContent:
        """Run every stage; failures surface as a classified :class:`PipelineError`."""

        options = options or ProcessingOptions()
        started = time.perf_counter()
        transport = "unknown"
        try:
            if payload.byte_length > self._max_payload_bytes:
                raise PipelineFailure(
                    FailureCode.PAYLOAD_CEILING,
                    f"{payload.byte_length} bytes exceeds {self._max_payload_bytes}.",
                )
            unit = await encode_payload(
                payload,
                uploader=self._uploader,
                inline_limit=self._inline_limit,
            )
            transport = "inline" if isinstance(unit, EmbeddedPayload) else "file"
            request = build_generation_request(unit, options)
            outcome = await call_generation_llm(request, client=self._client)
        except Exception as exc:
            failure = classify_failure(exc)
            logger.exception(
                "Pipeline failed kind=%s bytes=%s transport=%s",
                failure.kind.value,
                payload.byte_length,
                transport,
                exc_info=exc,
            )
            observe_pipeline_failure(failure.kind.value)
            observe_pipeline_run(transport, "error", time.perf_counter() - started)
            raise failure.to_error() from exc

        observe_pipeline_run(transport, "ok", time.perf_counter() - started)
        logger.info(
            "Pipeline complete title=%r confidence=%s transport=%s",
            outcome.content.title,
            outcome.content.confidence_score,
            transport,
        )
        return outcome.content


__all__ = ["PipelineError", "PipelineStage", "StudyMaterialPipeline"]
