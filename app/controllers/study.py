"""Study-material generation endpoint.

For a stage-by-stage map see `app.pipelines.audio.flow.StudyMaterialPipeline`.
The POST `/study/generate` request performs:

1. Content-type resolution and in-memory read of the uploaded recording.
2. Transport selection: inline base64 or Files API upload with polling.
3. One structured Gemini call for the requested sections, then validation.
4. Library bookkeeping so the result can be fetched or exported later.
"""

import logging

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from app.controllers.dependencies import LibraryDep, PipelineDep
from app.pipelines.audio import (
    ErrorKind,
    PipelineError,
    StudyMaterialPipeline,
    read_audio_payload,
    resolve_content_type,
)
from app.services.prompt_builder import ProcessingOptions
from app.views import ErrorResponse, StudyMaterialResponse

router = APIRouter(prefix="/study", tags=["study"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(StudyMaterialPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.PAYLOAD_TOO_LARGE: 400,
    ErrorKind.AUTH_FAILURE: 502,
    ErrorKind.NETWORK_FAILURE: 503,
    ErrorKind.UPLOAD_STRUCTURE_FAILURE: 422,
    ErrorKind.REMOTE_PROCESSING_FAILURE: 422,
    ErrorKind.EMPTY_OR_INVALID_RESPONSE: 422,
    ErrorKind.REQUEST_ENTITY_TOO_LARGE: 413,
    ErrorKind.UNCLASSIFIED: 500,
}

_AUDIO_FILE_UPLOAD = File(...)
_SUMMARY_FORM = Form(True)
_THESES_FORM = Form(True)
_EXAMPLES_FORM = Form(True)
_RUNNING_NOTES_FORM = Form(True)
_QUIZ_FORM = Form(True)


def error_response(exc: PipelineError) -> JSONResponse:
    """Render a classified pipeline error with its mapped HTTP status."""

    body = ErrorResponse(detail=str(exc), code=exc.kind.value)
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.kind, 500),
        content=body.model_dump(),
    )


@router.post(
    "/generate",
    response_model=StudyMaterialResponse,
    responses={
        code: {"model": ErrorResponse} for code in sorted(set(ERROR_STATUS.values()))
    },
)
async def generate_study_material(
    pipeline: PipelineDep,
    library: LibraryDep,
    audio_file: UploadFile = _AUDIO_FILE_UPLOAD,
    summary: bool = _SUMMARY_FORM,
    theses: bool = _THESES_FORM,
    examples: bool = _EXAMPLES_FORM,
    running_notes: bool = _RUNNING_NOTES_FORM,
    quiz: bool = _QUIZ_FORM,
):
    """Turn an uploaded recording into structured study notes and a quiz."""

    content_type = resolve_content_type(audio_file)
    try:
        payload = await read_audio_payload(audio_file, content_type)
    except PipelineError as exc:
        return error_response(exc)
    options = ProcessingOptions(
        summary=summary,
        theses=theses,
        examples=examples,
        running_notes=running_notes,
        quiz=quiz,
    )
    logger.info(
        "Study generation requested file=%s type=%s bytes=%s sections=%s",
        audio_file.filename,
        content_type,
        payload.byte_length,
        ",".join(options.enabled_sections()) or "-",
    )

    try:
        content = await pipeline.run(payload, options)
    except PipelineError as exc:
        return error_response(exc)

    entry = library.save(content)
    logger.info("Study material stored id=%s title=%r", entry.id, content.title)
    return StudyMaterialResponse.from_entry(entry)
