"""Thin Gemini client wrapper for file uploads and structured generation."""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Callable, Mapping, TypeVar

import httpx
from fastapi.concurrency import run_in_threadpool
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.config.settings import GeminiConfig, settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GeminiInvocationError(RuntimeError):
    """Raised when a Gemini call fails; keeps the remote status for classification."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        transport: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.transport = transport


def _wrap_error(exc: Exception) -> GeminiInvocationError:
    if isinstance(exc, GeminiInvocationError):
        return exc
    if isinstance(exc, genai_errors.APIError):
        return GeminiInvocationError(
            f"Gemini HTTP {exc.code}: {exc.message or exc.status}",
            status_code=exc.code,
        )
    if isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError)):
        return GeminiInvocationError(f"Gemini transport failure: {exc}", transport=True)
    return GeminiInvocationError(str(exc) or type(exc).__name__)


def inline_part(media_type: str, base64_data: str) -> types.Part:
    """Build an inline-data part from base64 text."""

    return types.Part.from_bytes(data=base64.b64decode(base64_data), mime_type=media_type)


def uri_part(media_type: str, uri: str) -> types.Part:
    """Build a file-data part referencing an uploaded asset."""

    return types.Part.from_uri(file_uri=uri, mime_type=media_type)


class GeminiClient:
    """Invoke the Gemini API with standard configuration."""

    def __init__(self, config: GeminiConfig | None = None) -> None:
        self._config = config or settings.gemini
        self._client: genai.Client | None = None

    @property
    def config(self) -> GeminiConfig:
        return self._config

    def _sdk(self) -> genai.Client:
        if self._client is None:
            api_key = (
                self._config.api_key.get_secret_value() if self._config.api_key else ""
            )
            if not api_key:
                raise GeminiInvocationError(
                    "GEMINI_API_KEY is not configured", status_code=401
                )
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def _call(self, func: Callable[[], T]) -> T:
        try:
            return await run_in_threadpool(func)
        except Exception as exc:
            raise _wrap_error(exc) from exc

    async def upload_file(
        self,
        data: bytes,
        *,
        mime_type: str,
        display_name: str | None = None,
    ) -> types.File:
        """Upload raw bytes through the Files API and return the remote file."""

        def _upload() -> types.File:
            return self._sdk().files.upload(
                file=io.BytesIO(data),
                config=types.UploadFileConfig(
                    mime_type=mime_type,
                    display_name=display_name or self._config.upload_display_name,
                ),
            )

        return await self._call(_upload)

    async def get_file(self, name: str) -> types.File:
        """Re-fetch an uploaded file to observe its processing state."""

        return await self._call(lambda: self._sdk().files.get(name=name))

    async def generate(
        self,
        *,
        audio_part: types.Part,
        instructions: str,
        response_schema: Mapping[str, Any],
        temperature: float | None = None,
        thinking_budget: int | None = None,
        model: str | None = None,
    ) -> str | None:
        """Run one structured `generate_content` call and return its text, if any."""

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=dict(response_schema),
            temperature=(
                temperature if temperature is not None else self._config.temperature
            ),
            thinking_config=types.ThinkingConfig(
                thinking_budget=(
                    thinking_budget
                    if thinking_budget is not None
                    else self._config.thinking_budget
                )
            ),
        )
        contents = [
            types.Content(
                role="user",
                parts=[audio_part, types.Part.from_text(text=instructions)],
            )
        ]

        def _generate() -> str | None:
            response = self._sdk().models.generate_content(
                model=model or self._config.model,
                contents=contents,
                config=config,
            )
            return response.text

        result = await self._call(_generate)
        return result or None


_DEFAULT_CLIENT: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Return a lazily-instantiated Gemini client singleton."""

    global _DEFAULT_CLIENT
    if _DEFAULT_CLIENT is None:
        _DEFAULT_CLIENT = GeminiClient()
    return _DEFAULT_CLIENT


__all__ = [
    "GeminiClient",
    "GeminiInvocationError",
    "get_gemini_client",
    "inline_part",
    "uri_part",
]
