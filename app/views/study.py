from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.services.library_store import LibraryEntry


class QuizItemView(BaseModel):
    """One multiple-choice question."""

    question: str
    options: List[str]
    correctAnswer: int = Field(
        ..., description="Zero-based index into options", alias="correctAnswer"
    )
    explanation: str

    model_config = ConfigDict(populate_by_name=True)


class StudyMaterialResponse(BaseModel):
    """Generated study material as stored in the library."""

    id: str = Field(..., description="Library identifier")
    date: str = Field(..., description="Display date, e.g. 'Oct 19, 2026'")
    title: str
    confidenceScore: float = Field(
        ..., description="Model self-assessed accuracy, 0-100", alias="confidenceScore"
    )
    accuracyNote: str = Field(..., alias="accuracyNote")
    summary: List[str]
    theses: List[str] = Field(default_factory=list)
    examples: List[str]
    runningNotes: str = Field(..., alias="runningNotes")
    quiz: List[QuizItemView]

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entry(cls, entry: LibraryEntry) -> "StudyMaterialResponse":
        return cls(id=entry.id, date=entry.date, **entry.content.to_wire())


class LibraryItemSummary(BaseModel):
    """Lightweight listing row for the library."""

    id: str
    date: str
    title: str
    confidenceScore: float = Field(..., alias="confidenceScore")
    quizCount: int = Field(..., description="Number of quiz questions", alias="quizCount")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entry(cls, entry: LibraryEntry) -> "LibraryItemSummary":
        return cls(
            id=entry.id,
            date=entry.date,
            title=entry.content.title,
            confidenceScore=entry.content.confidence_score,
            quizCount=len(entry.content.quiz),
        )
