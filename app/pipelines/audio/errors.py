"""Failure taxonomy and classifier for the study-material pipeline.

Lower stages raise :class:`PipelineFailure` with a :class:`FailureCode`, or let
``GeminiInvocationError`` (which carries the remote status code) bubble up.
The pipeline boundary funnels everything through :func:`classify_failure`,
which maps it onto exactly one :class:`ErrorKind` with a stable user message.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import httpx

logger = logging.getLogger("app.services.audio_pipeline")


class FailureCode(str, Enum):
    """Internal failure tags raised by the pipeline stages themselves."""

    UPLOAD_STRUCTURE = "upload_structure"
    PROCESSING_FAILED = "processing_failed"
    PROCESSING_TIMEOUT = "processing_timeout"
    NO_RESPONSE = "no_response"
    MALFORMED_OUTPUT = "malformed_output"
    PAYLOAD_CEILING = "payload_ceiling"


class PipelineFailure(RuntimeError):
    """Raised by a pipeline stage for a condition it detected itself."""

    def __init__(self, code: FailureCode, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail or code.value
        super().__init__(f"{code.value}: {self.detail}")


class ErrorKind(str, Enum):
    PAYLOAD_TOO_LARGE = "payload_too_large"
    AUTH_FAILURE = "auth_failure"
    NETWORK_FAILURE = "network_failure"
    UPLOAD_STRUCTURE_FAILURE = "upload_structure_failure"
    REMOTE_PROCESSING_FAILURE = "remote_processing_failure"
    EMPTY_OR_INVALID_RESPONSE = "empty_or_invalid_response"
    REQUEST_ENTITY_TOO_LARGE = "request_entity_too_large"
    UNCLASSIFIED = "unclassified"


USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.PAYLOAD_TOO_LARGE: (
        "The audio file is too complex or large for a single pass. "
        "Please try a shorter clip (under 20 minutes) or a smaller file size."
    ),
    ErrorKind.AUTH_FAILURE: "Access denied. Please check your API Key configuration.",
    ErrorKind.NETWORK_FAILURE: "Network connection lost. Please check your internet connection.",
    ErrorKind.UPLOAD_STRUCTURE_FAILURE: (
        "We couldn't upload this specific file format. "
        "Please try converting it to a standard MP3 or WAV file."
    ),
    ErrorKind.REMOTE_PROCESSING_FAILURE: (
        "The server failed to process the audio file. It might be corrupted."
    ),
    ErrorKind.EMPTY_OR_INVALID_RESPONSE: (
        "The AI couldn't generate a valid analysis. The audio might be silent, "
        "unclear, or in an unsupported language."
    ),
    ErrorKind.REQUEST_ENTITY_TOO_LARGE: "File is too large. Please upload a file smaller than 50MB.",
    ErrorKind.UNCLASSIFIED: "An unexpected error occurred. Please try again.",
}


class PipelineError(Exception):
    """Terminal error surfaced to callers; carries only the user-facing message."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or USER_MESSAGES[kind]
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ClassifiedFailure:
    kind: ErrorKind
    message: str
    original: BaseException

    def to_error(self) -> PipelineError:
        return PipelineError(self.kind, self.message)


@dataclass(frozen=True)
class _FailureSignal:
    code: Optional[FailureCode]
    status: Optional[int]
    transport: bool
    text: str

    @property
    def structured(self) -> bool:
        return self.code is not None or self.status is not None or self.transport

    def mentions(self, *needles: str) -> bool:
        return any(needle in self.text for needle in needles)

    def mentions_status(self, *codes: int) -> bool:
        return any(re.search(rf"\b{code}\b", self.text) for code in codes)


_TRANSPORT_ERRORS = (httpx.TransportError, ConnectionError, TimeoutError)


def _status_of(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _signal_of(exc: BaseException) -> _FailureSignal:
    code = exc.code if isinstance(exc, PipelineFailure) else None
    transport = bool(getattr(exc, "transport", False)) or isinstance(exc, _TRANSPORT_ERRORS)
    cause = exc.__cause__
    if cause is not None and not transport:
        transport = isinstance(cause, _TRANSPORT_ERRORS)
    return _FailureSignal(
        code=code,
        status=None if code is not None else _status_of(exc),
        transport=transport,
        text=str(exc) or type(exc).__name__,
    )


_Predicate = Callable[[_FailureSignal], bool]


def _rule(structured: _Predicate, textual: _Predicate) -> _Predicate:
    """Structured data decides when present; message text is the fallback."""

    def check(signal: _FailureSignal) -> bool:
        if signal.structured:
            return structured(signal)
        return textual(signal)

    return check


# Evaluated top to bottom; first match wins.
_RULES: tuple[tuple[ErrorKind, _Predicate], ...] = (
    (
        ErrorKind.PAYLOAD_TOO_LARGE,
        _rule(
            lambda s: s.status == 400,
            lambda s: s.mentions_status(400) or s.mentions("Payload", "Too Large"),
        ),
    ),
    (
        ErrorKind.AUTH_FAILURE,
        _rule(
            lambda s: s.status in (401, 403),
            lambda s: s.mentions_status(401, 403) or s.mentions("API_KEY", "API key"),
        ),
    ),
    (
        ErrorKind.NETWORK_FAILURE,
        _rule(
            lambda s: s.transport,
            lambda s: s.mentions("Failed to fetch", "Network", "network"),
        ),
    ),
    (
        ErrorKind.UPLOAD_STRUCTURE_FAILURE,
        _rule(lambda s: s.code is FailureCode.UPLOAD_STRUCTURE, lambda s: False),
    ),
    (
        ErrorKind.REMOTE_PROCESSING_FAILURE,
        _rule(
            lambda s: s.code in (FailureCode.PROCESSING_FAILED, FailureCode.PROCESSING_TIMEOUT),
            lambda s: False,
        ),
    ),
    (
        ErrorKind.EMPTY_OR_INVALID_RESPONSE,
        _rule(
            lambda s: s.code in (FailureCode.NO_RESPONSE, FailureCode.MALFORMED_OUTPUT),
            lambda s: s.mentions("NO_RESPONSE", "JSON"),
        ),
    ),
    (
        ErrorKind.REQUEST_ENTITY_TOO_LARGE,
        _rule(
            lambda s: s.status == 413 or s.code is FailureCode.PAYLOAD_CEILING,
            lambda s: s.mentions_status(413),
        ),
    ),
)


def classify_failure(exc: BaseException) -> ClassifiedFailure:
    """Map any failure onto the fixed taxonomy. Never raises."""

    if isinstance(exc, PipelineError):
        return ClassifiedFailure(exc.kind, exc.message, exc)

    try:
        signal = _signal_of(exc)
        for kind, matches in _RULES:
            if matches(signal):
                return ClassifiedFailure(kind, USER_MESSAGES[kind], exc)
    except Exception:  # pragma: no cover - classification must not fail
        logger.warning("Failure classification raised; treating as unclassified", exc_info=True)
    return ClassifiedFailure(
        ErrorKind.UNCLASSIFIED, USER_MESSAGES[ErrorKind.UNCLASSIFIED], exc
    )


__all__ = [
    "ClassifiedFailure",
    "ErrorKind",
    "FailureCode",
    "PipelineError",
    "PipelineFailure",
    "USER_MESSAGES",
    "classify_failure",
]
