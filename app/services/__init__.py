"""Service layer helpers for external integrations."""

from .gemini_client import GeminiClient, GeminiInvocationError, get_gemini_client
from .library_store import LibraryEntry, LibraryStore, export_filename, get_library_store
from .prompt_builder import ProcessingOptions, PromptBundle, build_prompt
from .response_contract import (
    GeneratedContent,
    QuizItem,
    ResponseContractError,
    UNVERIFIED_ACCURACY_NOTE,
)

__all__ = [
    "GeminiClient",
    "GeminiInvocationError",
    "get_gemini_client",
    "LibraryEntry",
    "LibraryStore",
    "export_filename",
    "get_library_store",
    "ProcessingOptions",
    "PromptBundle",
    "build_prompt",
    "GeneratedContent",
    "QuizItem",
    "ResponseContractError",
    "UNVERIFIED_ACCURACY_NOTE",
]
