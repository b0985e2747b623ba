from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from flashcard_app.models.base import Base, TimestampMixin, generate_uuid


class Flashcard(Base, TimestampMixin):
    __tablename__ = "flashcards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    front: Mapped[str] = mapped_column(String(500), index=True)  # English term
    back: Mapped[str] = mapped_column(Text)  # "<kanji> (<hiragana>)"
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
