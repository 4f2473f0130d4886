"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .study import LibraryItemSummary, QuizItemView, StudyMaterialResponse

__all__ = [
    "ErrorResponse",
    "LibraryItemSummary",
    "QuizItemView",
    "StudyMaterialResponse",
]
