"""Library endpoints for previously generated study material."""

import json

from fastapi import APIRouter, HTTPException, Response, status

from app.controllers.dependencies import LibraryDep
from app.services.library_store import LibraryEntry, LibraryStore, export_filename
from app.views import LibraryItemSummary, StudyMaterialResponse

router = APIRouter(prefix="/library", tags=["library"])


def _require_entry(library: LibraryStore, entry_id: str) -> LibraryEntry:
    entry = library.get(entry_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Study material not found",
        )
    return entry


@router.get("", response_model=list[LibraryItemSummary])
async def list_library(library: LibraryDep) -> list[LibraryItemSummary]:
    """List saved study material, newest first."""

    return [LibraryItemSummary.from_entry(entry) for entry in library.list()]


@router.get("/{entry_id}", response_model=StudyMaterialResponse)
async def get_library_entry(entry_id: str, library: LibraryDep) -> StudyMaterialResponse:
    return StudyMaterialResponse.from_entry(_require_entry(library, entry_id))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_library_entry(entry_id: str, library: LibraryDep) -> Response:
    if not library.delete(entry_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Study material not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{entry_id}/export")
async def export_library_entry(entry_id: str, library: LibraryDep) -> Response:
    """Download one entry as a pretty-printed JSON attachment."""

    entry = _require_entry(library, entry_id)
    document = StudyMaterialResponse.from_entry(entry).model_dump(by_alias=True)
    filename = export_filename(entry.content.title)
    return Response(
        content=json.dumps(document, indent=2, ensure_ascii=False),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
