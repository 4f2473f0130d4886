"""Pydantic models for validating Gemini study-material responses.

The generation stage runs every raw response through these schemas so that
downstream code receives normalized, type-safe objects. Only two repairs are
made: an invalid confidence score is forced to 0 with a fixed accuracy note,
and a missing ``theses`` list defaults to empty. Anything else missing is a
contract violation.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, model_validator

logger = logging.getLogger("app.services.audio_pipeline")

UNVERIFIED_ACCURACY_NOTE = "Could not verify accuracy."

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


class ResponseContractError(ValueError):
    """Raised when the Gemini response contract cannot be validated."""


class QuizItem(BaseModel):
    question: str
    options: list[str]
    correct_answer: int = Field(alias="correctAnswer")
    explanation: str

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def answer_in_range(self) -> bool:
        """True when ``correct_answer`` indexes into a non-empty ``options``."""

        return 0 <= self.correct_answer < len(self.options)


class GeneratedContent(BaseModel):
    title: str
    confidence_score: float = Field(alias="confidenceScore", ge=0.0, le=100.0)
    accuracy_note: str = Field(alias="accuracyNote")
    # The response schema requires every section, disabled ones included;
    # only ``theses`` is repaired when absent.
    summary: list[str]
    theses: list[str] = Field(default_factory=list)
    examples: list[str]
    running_notes: str = Field(alias="runningNotes")
    quiz: list[QuizItem]

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def apply_guardrails(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return normalize_payload(data)
        return data

    def invalid_quiz_items(self) -> list[int]:
        """Indexes of quiz items whose answer does not point at an option."""

        return [idx for idx, item in enumerate(self.quiz) if not item.answer_in_range]

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_json(cls, payload: str) -> "GeneratedContent":
        cleaned = clean_json_payload(payload)
        if not cleaned:
            raise ResponseContractError("Empty JSON payload.")
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ResponseContractError(f"Invalid JSON payload: {exc}") from exc
        if not isinstance(data, dict):
            raise ResponseContractError(
                f"Expected a JSON object, got {type(data).__name__}."
            )
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ResponseContractError(f"JSON payload violates the contract: {exc}") from exc


def _clamp_score(value: Any) -> float | None:
    """Clamp a numeric score into 0-100; ``None`` when it is not a usable number."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, int):
        # Integers of any size compare exactly; float() would overflow first.
        return float(max(0, min(100, value)))
    if not math.isfinite(value):
        return None
    return max(0.0, min(100.0, value))


def normalize_payload(data: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the confidence and theses repairs to a parsed response."""

    normalized = dict(data)
    score = normalized.get("confidenceScore", normalized.get("confidence_score"))
    normalized.pop("confidence_score", None)
    clamped = _clamp_score(score)
    if clamped is not None:
        normalized["confidenceScore"] = clamped
    else:
        logger.info("Invalid confidenceScore %r; marking accuracy unverified", score)
        normalized["confidenceScore"] = 0.0
        normalized.pop("accuracy_note", None)
        normalized["accuracyNote"] = UNVERIFIED_ACCURACY_NOTE

    if normalized.get("theses") is None:
        logger.info("Response missing theses; defaulting to empty list")
        normalized["theses"] = []
    return normalized


def clean_json_payload(payload: str | None) -> str:
    """Strip Markdown code fences and trim to the outermost JSON object."""

    if not payload:
        return ""

    cleaned = _FENCE_OPEN.sub("", payload.strip())
    cleaned = _FENCE_CLOSE.sub("", cleaned).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "GeneratedContent",
    "QuizItem",
    "ResponseContractError",
    "UNVERIFIED_ACCURACY_NOTE",
    "clean_json_payload",
    "normalize_payload",
]
