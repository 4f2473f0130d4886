"""FastAPI routers acting as controllers in the MVC architecture."""

from . import library, study

__all__ = ["library", "study"]
