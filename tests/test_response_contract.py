"""Validation and normalization of Gemini study-material responses."""

from __future__ import annotations

import json

import pytest

from conftest import study_document
from app.services.response_contract import (
    UNVERIFIED_ACCURACY_NOTE,
    GeneratedContent,
    ResponseContractError,
    clean_json_payload,
    normalize_payload,
)


def test_invalid_confidence_and_missing_theses_are_repaired():
    raw = (
        '{"title":"T","confidenceScore":"bad","accuracyNote":"x","summary":[],'
        '"examples":[],"runningNotes":"","quiz":[]}'
    )

    content = GeneratedContent.from_json(raw)

    assert content.confidence_score == 0
    assert content.accuracy_note == UNVERIFIED_ACCURACY_NOTE
    assert content.theses == []
    assert content.title == "T"
    assert content.summary == []
    assert content.examples == []
    assert content.running_notes == ""
    assert content.quiz == []


def test_fenced_json_matches_unwrapped():
    body = json.dumps(study_document())

    fenced = GeneratedContent.from_json(f"```json\n{body}\n```")

    assert fenced == GeneratedContent.from_json(body)


def test_text_around_object_is_ignored():
    body = json.dumps(study_document())

    assert clean_json_payload(f"Here you go:\n{body}\nThanks") == body


def test_normalization_is_idempotent():
    content = GeneratedContent.from_json(json.dumps(study_document()))
    wire = content.to_wire()

    assert normalize_payload(wire) == wire
    assert GeneratedContent.model_validate(wire) == content


@pytest.mark.parametrize("score", [None, True, float("nan"), [50]])
def test_non_numeric_scores_are_unverified(score):
    content = GeneratedContent.model_validate(study_document(confidenceScore=score))

    assert content.confidence_score == 0.0
    assert content.accuracy_note == UNVERIFIED_ACCURACY_NOTE


def test_out_of_range_score_is_clamped():
    content = GeneratedContent.model_validate(study_document(confidenceScore=140))

    assert content.confidence_score == 100.0
    assert content.accuracy_note == "Clear recording with a single speaker."


@pytest.mark.parametrize(("score", "expected"), [(10**400, 100.0), (-(10**400), 0.0)])
def test_huge_integer_scores_are_clamped(score, expected):
    content = GeneratedContent.from_json(json.dumps(study_document(confidenceScore=score)))

    assert content.confidence_score == expected
    assert content.accuracy_note == "Clear recording with a single speaker."


@pytest.mark.parametrize("field", ["summary", "examples"])
def test_sections_are_required_even_when_not_requested(field):
    document = study_document()
    del document[field]

    with pytest.raises(ResponseContractError):
        GeneratedContent.from_json(json.dumps(document))


def test_answer_outside_options_is_accepted_but_flagged():
    quiz = [
        {
            "question": "Pick one",
            "options": ["A", "B"],
            "correctAnswer": 2,
            "explanation": "Index 2 does not exist.",
        }
    ]

    content = GeneratedContent.model_validate(study_document(quiz=quiz))

    assert content.quiz[0].correct_answer == 2
    assert content.quiz[0].answer_in_range is False
    assert content.invalid_quiz_items() == [0]


def test_valid_quiz_has_no_flagged_items():
    content = GeneratedContent.model_validate(study_document())

    assert content.invalid_quiz_items() == []


@pytest.mark.parametrize("field", ["title", "summary", "examples", "runningNotes", "quiz"])
def test_missing_required_field_is_rejected(field):
    document = study_document()
    del document[field]

    with pytest.raises(ResponseContractError):
        GeneratedContent.from_json(json.dumps(document))


@pytest.mark.parametrize("raw", ["", "   ", "not json", "[1, 2]", '{"title": '])
def test_unparseable_payloads_are_rejected(raw):
    with pytest.raises(ResponseContractError):
        GeneratedContent.from_json(raw)
