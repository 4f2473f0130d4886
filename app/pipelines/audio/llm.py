"""Generation stage for the study-material pipeline.

One structured call per invocation, no retries: an empty response is a
``NO_RESPONSE`` failure, an unparseable one a ``MALFORMED_OUTPUT`` failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.services.gemini_client import GeminiClient, inline_part, uri_part
from app.services.response_contract import GeneratedContent, ResponseContractError

from .errors import FailureCode, PipelineFailure
from .types import EmbeddedPayload, GenerationRequest, RemoteReference

logger = logging.getLogger("app.services.audio_pipeline")


@dataclass(frozen=True)
class LlmOutcome:
    """Validated content plus the raw text it was parsed from."""

    content: GeneratedContent
    raw_response: str


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def _audio_part(request: GenerationRequest):
    unit = request.unit
    if isinstance(unit, EmbeddedPayload):
        return inline_part(unit.media_type, unit.base64_data)
    if isinstance(unit, RemoteReference):
        return uri_part(unit.media_type, unit.uri)
    raise TypeError(f"Unsupported transmission unit: {type(unit).__name__}")


async def request_generation(request: GenerationRequest, *, client: GeminiClient) -> str:
    """Issue exactly one generation call and return the raw response text."""

    raw_response = await client.generate(
        audio_part=_audio_part(request),
        instructions=request.instructions,
        response_schema=request.response_schema,
        temperature=request.sampling.temperature,
        thinking_budget=request.sampling.thinking_budget,
    )
    if not raw_response:
        raise PipelineFailure(FailureCode.NO_RESPONSE, "Gemini returned no text.")
    return raw_response


def validate_response(raw_response: str) -> GeneratedContent:
    """Parse and normalize the raw text, surfacing contract violations."""

    try:
        return GeneratedContent.from_json(raw_response)
    except ResponseContractError as exc:
        logger.warning("Gemini produced invalid JSON: %s", exc)
        raise PipelineFailure(FailureCode.MALFORMED_OUTPUT, str(exc)) from exc


async def call_generation_llm(request: GenerationRequest, *, client: GeminiClient) -> LlmOutcome:
    """Invoke Gemini and validate the study-material contract."""

    raw_response = await request_generation(request, client=client)
    logger.info("Raw Gemini response: %s", _truncate(raw_response))

    content = validate_response(raw_response)
    for idx in content.invalid_quiz_items():
        item = content.quiz[idx]
        logger.warning(
            "Quiz item %s answer index %s outside %s options",
            idx,
            item.correct_answer,
            len(item.options),
        )
    return LlmOutcome(content=content, raw_response=raw_response)


__all__ = [
    "LlmOutcome",
    "call_generation_llm",
    "request_generation",
    "validate_response",
]
