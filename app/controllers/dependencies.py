"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.pipelines.audio import StudyMaterialPipeline
from app.services.gemini_client import GeminiClient, get_gemini_client
from app.services.library_store import LibraryStore, get_library_store

GeminiClientDep = Annotated[GeminiClient, Depends(get_gemini_client)]
LibraryDep = Annotated[LibraryStore, Depends(get_library_store)]


def get_study_pipeline(client: GeminiClientDep) -> StudyMaterialPipeline:
    """Build a pipeline bound to the shared Gemini client."""

    return StudyMaterialPipeline(client)


PipelineDep = Annotated[StudyMaterialPipeline, Depends(get_study_pipeline)]


__all__ = [
    "GeminiClientDep",
    "LibraryDep",
    "PipelineDep",
    "get_study_pipeline",
]
