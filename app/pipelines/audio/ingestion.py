"""Request ingestion helpers: turn an HTTP upload into an AudioPayload."""

from __future__ import annotations

import logging
import mimetypes
from typing import Final

from fastapi import HTTPException, UploadFile, status

from app.config.settings import settings

from .errors import ErrorKind, PipelineError
from .types import AudioPayload

logger = logging.getLogger("app.services.audio_pipeline")

_ALLOWED_CONTENT_TYPES: Final[set[str]] = {
    "audio/mpeg",
    "audio/mp3",
    "audio/mp4",
    "audio/x-m4a",
    "audio/m4a",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/aac",
    "audio/x-aac",
    "audio/webm",
    "audio/ogg",
}


def resolve_content_type(audio_file: UploadFile) -> str:
    """Accept common audio uploads regardless of whether the client set a content-type."""

    content_type = audio_file.content_type
    # Browsers send "audio/webm;codecs=opus" for recordings.
    if content_type:
        content_type = content_type.split(";", 1)[0].strip().lower()
    if (not content_type or content_type == "application/octet-stream") and audio_file.filename:
        guessed_type, _ = mimetypes.guess_type(audio_file.filename)
        content_type = guessed_type or content_type

    if not content_type or content_type == "application/octet-stream":
        content_type = settings.gemini.default_media_type

    if content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only MP3, WAV, M4A, AAC, OGG or WebM audio files are supported",
        )
    return content_type


async def read_audio_payload(
    audio_file: UploadFile,
    content_type: str,
    *,
    max_bytes: int | None = None,
) -> AudioPayload:
    """Load the upload fully into memory, rejecting empty or oversized payloads.

    When the multipart parser reports the upload size, the ceiling is enforced
    before the body is read into memory.
    """

    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes
    declared_size = audio_file.size
    if declared_size is not None and declared_size > limit:
        await audio_file.close()
        logger.warning(
            "Upload rejected before read file=%s bytes=%s limit=%s",
            audio_file.filename,
            declared_size,
            limit,
        )
        raise PipelineError(ErrorKind.REQUEST_ENTITY_TOO_LARGE)

    audio_bytes = await audio_file.read()
    await audio_file.close()

    if not audio_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded audio file is empty",
        )
    return AudioPayload(data=audio_bytes, media_type=content_type)


__all__ = ["resolve_content_type", "read_audio_payload"]
