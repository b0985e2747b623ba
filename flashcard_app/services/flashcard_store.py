from fastapi import Depends
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from flashcard_app.database import get_db
from flashcard_app.models.flashcard import Flashcard
from flashcard_app.schemas.vocabulary import FormattedFlashcard
from flashcard_app.services.identity import english_key


class FlashcardStore:
    """Create/read/update/delete access to persisted flashcards.

    Every write commits on its own; callers writing several cards get no
    rollback of earlier writes when a later one fails.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[Flashcard]:
        result = await self.db.execute(
            select(Flashcard).order_by(Flashcard.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, flashcard_id: str) -> Flashcard | None:
        result = await self.db.execute(select(Flashcard).where(Flashcard.id == flashcard_id))
        return result.scalar_one_or_none()

    async def find_by_front(self, front: str) -> Flashcard | None:
        """Newest card whose front matches case-insensitively.

        Folding happens in Python with ``english_key``; SQLite's ``lower()``
        only folds ASCII.
        """
        key = english_key(front)
        for flashcard in await self.list_all():
            if english_key(flashcard.front) == key:
                return flashcard
        return None

    async def create(self, card: FormattedFlashcard) -> Flashcard:
        flashcard = Flashcard(front=card.front, back=card.back, category=card.category)
        self.db.add(flashcard)
        await self.db.commit()
        await self.db.refresh(flashcard)
        return flashcard

    async def create_many(
        self, cards: list[FormattedFlashcard], skip_duplicates: bool = False
    ) -> int:
        """Insert cards in one commit and return how many were written.

        With ``skip_duplicates`` a card whose front already exists (in the
        store or earlier in ``cards``) is left out.
        """
        if skip_duplicates:
            result = await self.db.execute(select(Flashcard.front))
            seen = {english_key(front) for front in result.scalars().all()}
            unique = []
            for card in cards:
                key = english_key(card.front)
                if key in seen:
                    continue
                seen.add(key)
                unique.append(card)
            cards = unique
        self.db.add_all(
            Flashcard(front=c.front, back=c.back, category=c.category) for c in cards
        )
        await self.db.commit()
        return len(cards)

    async def update(
        self,
        flashcard_id: str,
        front: str | None = None,
        back: str | None = None,
        category: str | None = None,
    ) -> Flashcard | None:
        flashcard = await self.get(flashcard_id)
        if flashcard is None:
            return None
        if front is not None:
            flashcard.front = front
        if back is not None:
            flashcard.back = back
        if category is not None:
            flashcard.category = category
        self.db.add(flashcard)
        await self.db.commit()
        await self.db.refresh(flashcard)
        return flashcard

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Flashcard))
        return result.scalar_one()

    async def delete_all(self) -> int:
        result = await self.db.execute(delete(Flashcard))
        await self.db.commit()
        return result.rowcount


def get_flashcard_store(db: AsyncSession = Depends(get_db)) -> FlashcardStore:
    return FlashcardStore(db)
