"""Prompt construction stage for the study-material pipeline.

Turns the caller's :class:`ProcessingOptions` plus the chosen transmission
unit into a :class:`GenerationRequest` for the generation client.
"""

from __future__ import annotations

import logging

from app.config.settings import settings
from app.services.prompt_builder import ProcessingOptions, build_prompt

from .types import GenerationRequest, SamplingConfig, TransmissionUnit

logger = logging.getLogger("app.services.audio_pipeline")


def _truncate(value: str, max_length: int = 240) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def build_generation_request(
    unit: TransmissionUnit,
    options: ProcessingOptions,
) -> GenerationRequest:
    """Assemble instructions, schema and sampling for one generation call."""

    bundle = build_prompt(options)

    logger.info(
        "Prompt built sections=%s transport=%s\nINSTRUCTIONS> %s",
        ",".join(options.enabled_sections()) or "-",
        type(unit).__name__,
        _truncate(bundle.instructions, 500),
    )

    return GenerationRequest(
        unit=unit,
        instructions=bundle.instructions,
        response_schema=bundle.response_schema,
        sampling=SamplingConfig(
            temperature=settings.gemini.temperature,
            thinking_budget=settings.gemini.thinking_budget,
        ),
    )


__all__ = ["build_generation_request"]
