"""Payload encoding stage: choose inline vs. uploaded transport by size."""

from __future__ import annotations

import base64
import logging
from typing import Protocol

from fastapi.concurrency import run_in_threadpool

from app.config.settings import settings

from .types import AudioPayload, EmbeddedPayload, RemoteReference, TransmissionUnit

logger = logging.getLogger("app.services.audio_pipeline")


class AssetUploader(Protocol):
    async def upload(self, payload: AudioPayload) -> RemoteReference: ...


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


async def encode_payload(
    payload: AudioPayload,
    *,
    uploader: AssetUploader,
    inline_limit: int | None = None,
) -> TransmissionUnit:
    """Embed payloads below the inline limit; upload everything else."""

    limit = inline_limit if inline_limit is not None else settings.gemini.inline_size_limit_bytes
    media_type = payload.media_type or settings.gemini.default_media_type

    if payload.byte_length < limit:
        logger.info(
            "Inline transport bytes=%s limit=%s media_type=%s",
            payload.byte_length,
            limit,
            media_type,
        )
        encoded = await run_in_threadpool(to_base64, payload.data)
        return EmbeddedPayload(media_type=media_type, base64_data=encoded)

    logger.info(
        "Files API transport bytes=%s limit=%s media_type=%s",
        payload.byte_length,
        limit,
        media_type,
    )
    return await uploader.upload(payload)


__all__ = ["AssetUploader", "encode_payload", "to_base64"]
