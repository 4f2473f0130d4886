"""Helpers to construct the instruction text and output schema for Gemini.

Given the caller's `ProcessingOptions`, we emit:
* Instruction text: a fixed base, one clause per enabled section, and the
  guardrail clauses (confidence score, accuracy note, title).
* A response schema that always declares every top-level field so parsing
  never branches on the options.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

BASE_INSTRUCTION = (
    "Analyze the audio content with academic rigor. Stay faithful to what is said, "
    "but do integrate relevant external knowledge (definitions, historical context, "
    "related theories) to provide a complete picture. Do not hallucinate. "
    "Generate a single CONCISE JSON object. Do not wrap it in markdown code blocks "
    "or add any text before or after it. English only."
)

# One clause per optional section, in output order.
SECTION_CLAUSES: dict[str, str] = {
    "summary": (
        "'summary': Provide 5-7 detailed 'Key Takeaways' as an ordered list, "
        "focusing on the most substantial insights."
    ),
    "theses": (
        "'theses': Extract 3-5 core arguments, hypotheses, or central claims as an "
        "ordered list. Articulate them with academic precision."
    ),
    "examples": (
        "'examples': Provide 3 detailed real-world applications or case studies "
        "mentioned or inferred, expanding on why they are relevant."
    ),
    "running_notes": (
        "'runningNotes': Write a 'Deep Dive' study guide (approx 600-800 words). "
        "Expand on the audio concepts with definitions, context, and related ideas. "
        "Use Markdown formatting (## Headers, - Bullet points, **Bold** terms)."
    ),
    "quiz": (
        "'quiz': Generate 5 challenging multiple choice questions that test synthesis "
        "and application, not just recall. Each item has 'question', 'options', "
        "'correctAnswer' (zero-based index into options) and 'explanation'."
    ),
}

GUARDRAIL_CLAUSES: tuple[str, ...] = (
    "'confidenceScore': Rate your confidence (0-100) based on audio clarity and "
    "content completeness.",
    "'accuracyNote': A brief assessment of extraction quality.",
    "'title': A descriptive, academic title.",
)

_STRING_LIST = {"type": "ARRAY", "items": {"type": "STRING"}}

QUIZ_ITEM_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "question": {"type": "STRING"},
        "options": dict(_STRING_LIST),
        "correctAnswer": {"type": "INTEGER"},
        "explanation": {"type": "STRING"},
    },
    "required": ["question", "options", "correctAnswer", "explanation"],
}

REQUIRED_FIELDS: tuple[str, ...] = (
    "title",
    "confidenceScore",
    "accuracyNote",
    "summary",
    "theses",
    "examples",
    "runningNotes",
    "quiz",
)


class ProcessingOptions(BaseModel):
    """Which optional output sections the caller wants generated."""

    summary: bool = Field(default=True, alias="shortNotes")
    theses: bool = True
    examples: bool = True
    running_notes: bool = Field(default=True, alias="runningNotes")
    quiz: bool = True

    model_config = {"populate_by_name": True, "frozen": True}

    def enabled_sections(self) -> list[str]:
        return [name for name in SECTION_CLAUSES if getattr(self, name)]


@dataclass(frozen=True)
class PromptBundle:
    instructions: str
    response_schema: dict[str, Any]


def build_instructions(options: ProcessingOptions) -> str:
    """Compose the instruction text for the enabled sections."""

    clauses = [BASE_INSTRUCTION]
    clauses.extend(SECTION_CLAUSES[name] for name in options.enabled_sections())
    clauses.extend(GUARDRAIL_CLAUSES)
    return " ".join(clauses)


def build_response_schema() -> dict[str, Any]:
    """Return the fixed output schema; every top-level field is required."""

    return {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "confidenceScore": {
                "type": "NUMBER",
                "description": "Self-eval score 0-100",
            },
            "accuracyNote": {"type": "STRING"},
            "summary": dict(_STRING_LIST),
            "theses": {**_STRING_LIST, "description": "Core arguments or claims"},
            "examples": dict(_STRING_LIST),
            "runningNotes": {"type": "STRING"},
            "quiz": {"type": "ARRAY", "items": copy.deepcopy(QUIZ_ITEM_SCHEMA)},
        },
        "required": list(REQUIRED_FIELDS),
    }


def build_prompt(options: ProcessingOptions) -> PromptBundle:
    """Deterministic mapping from options to (instructions, schema)."""

    return PromptBundle(
        instructions=build_instructions(options),
        response_schema=build_response_schema(),
    )


__all__ = [
    "ProcessingOptions",
    "PromptBundle",
    "REQUIRED_FIELDS",
    "build_instructions",
    "build_prompt",
    "build_response_schema",
]
