from flashcard_app.models.base import Base
from flashcard_app.models.flashcard import Flashcard

__all__ = ["Base", "Flashcard"]
