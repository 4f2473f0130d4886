"""Remote asset upload stage: push large payloads and wait until usable.

Polling is an explicit state machine over :class:`AssetState`:

* ``PROCESSING -> PROCESSING`` when a poll observes no change,
* ``PROCESSING -> READY`` once the remote asset is active,
* ``PROCESSING -> FAILED`` when the remote side gives up.

A deadline bounds the whole wait; hitting it raises ``PROCESSING_TIMEOUT``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from app.config.settings import settings
from app.services.gemini_client import GeminiClient
from app.telemetry import observe_asset_poll

from .errors import FailureCode, PipelineFailure
from .types import AssetState, AudioPayload, RemoteAsset, RemoteReference

logger = logging.getLogger("app.services.audio_pipeline")

_REMOTE_STATES = {
    "PROCESSING": AssetState.PROCESSING,
    "ACTIVE": AssetState.READY,
    "FAILED": AssetState.FAILED,
}


def parse_asset_state(raw_state: Any) -> AssetState:
    """Map the SDK's file state onto ours; unknown states are still processing."""

    if raw_state is None:
        return AssetState.PROCESSING
    name = getattr(raw_state, "name", None) or str(raw_state)
    return _REMOTE_STATES.get(name.rsplit(".", 1)[-1].upper(), AssetState.PROCESSING)


def to_remote_asset(remote_file: Any) -> RemoteAsset:
    """Normalize an SDK ``File`` (or lookalike) into a :class:`RemoteAsset`."""

    return RemoteAsset(
        name=getattr(remote_file, "name", None) or "",
        uri=getattr(remote_file, "uri", None) or None,
        media_type=getattr(remote_file, "mime_type", None) or None,
        state=parse_asset_state(getattr(remote_file, "state", None)),
    )


def next_state(current: AssetState, observed: AssetState) -> AssetState:
    """Apply one poll observation; terminal states never transition again."""

    if current.is_terminal:
        raise ValueError(f"Asset already settled in state {current.value}")
    return observed


class RemoteAssetUploader:
    """Upload audio through the Files API and poll until it is ready."""

    def __init__(
        self,
        client: GeminiClient,
        *,
        poll_interval: float | None = None,
        poll_timeout: float | None = None,
        display_name: str | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._poll_interval = (
            poll_interval if poll_interval is not None else settings.gemini.poll_interval_seconds
        )
        self._poll_timeout = (
            poll_timeout if poll_timeout is not None else settings.gemini.poll_timeout_seconds
        )
        self._display_name = display_name or settings.gemini.upload_display_name
        self._sleep = sleep
        self._clock = clock

    async def upload(
        self,
        payload: AudioPayload,
        *,
        timeout: float | None = None,
    ) -> RemoteReference:
        """Upload the payload and return a reference once the asset is ready."""

        media_type = payload.media_type or settings.gemini.default_media_type
        uploaded = await self._client.upload_file(
            payload.data,
            mime_type=media_type,
            display_name=self._display_name,
        )
        asset = to_remote_asset(uploaded)
        if not asset.uri:
            logger.error(
                "Upload response missing uri name=%s state=%s",
                asset.name or "-",
                asset.state.value,
            )
            raise PipelineFailure(
                FailureCode.UPLOAD_STRUCTURE,
                "Upload response did not include a file uri.",
            )
        if not asset.name and not asset.state.is_terminal:
            logger.error("Upload response missing name uri=%s state=%s", asset.uri, asset.state.value)
            raise PipelineFailure(
                FailureCode.UPLOAD_STRUCTURE,
                "Upload response did not include a file name to poll.",
            )

        logger.info(
            "File uploaded uri=%s name=%s state=%s",
            asset.uri,
            asset.name,
            asset.state.value,
        )
        asset = await self._wait_until_settled(
            asset, timeout if timeout is not None else self._poll_timeout
        )

        if asset.state is AssetState.FAILED:
            raise PipelineFailure(
                FailureCode.PROCESSING_FAILED,
                f"Remote processing failed for {asset.name}.",
            )

        return RemoteReference(
            media_type=asset.media_type or media_type,
            uri=asset.uri,
        )

    async def _wait_until_settled(self, asset: RemoteAsset, timeout: float) -> RemoteAsset:
        deadline = self._clock() + timeout
        state = asset.state
        polls = 0

        while not state.is_terminal:
            if self._clock() >= deadline:
                logger.error(
                    "File still processing after %.1fs name=%s polls=%s",
                    timeout,
                    asset.name,
                    polls,
                )
                raise PipelineFailure(
                    FailureCode.PROCESSING_TIMEOUT,
                    f"Asset {asset.name} was not ready after {timeout:.1f}s.",
                )

            await self._sleep(self._poll_interval)
            refreshed = to_remote_asset(await self._client.get_file(asset.name))
            polls += 1
            state = next_state(state, refreshed.state)
            observe_asset_poll(state.value)
            logger.info("File processing name=%s poll=%s state=%s", asset.name, polls, state.value)

            asset = RemoteAsset(
                name=asset.name,
                uri=refreshed.uri or asset.uri,
                media_type=refreshed.media_type or asset.media_type,
                state=state,
            )

        return asset


__all__ = [
    "RemoteAssetUploader",
    "next_state",
    "parse_asset_state",
    "to_remote_asset",
]
