"""CLI script to seed the flashcard store. Run with: python import_vocab.py [vocabulary.json]"""

import asyncio
import logging
import sys

from flashcard_app.config import settings
from flashcard_app.database import async_session, engine
from flashcard_app.models import Base
from flashcard_app.services.errors import SeedImportError
from flashcard_app.services.flashcard_store import FlashcardStore
from flashcard_app.services.import_service import import_seed_vocabulary, load_vocabulary_file


async def import_vocab(path: str):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    entries = load_vocabulary_file(path)
    print(f"Loaded {len(entries)} vocabulary entries")

    async with async_session() as db:
        try:
            result = await import_seed_vocabulary(entries, FlashcardStore(db))
        except SeedImportError as e:
            print(f"{e} (existing flashcards: {e.existing_count})")
            sys.exit(1)

    print(f"Imported {result['imported']} flashcards")
    print(f"Duplicates removed: {result['duplicates_removed']}")
    print(f"Total in database: {result['total_in_database']}")


if __name__ == "__main__":
    if len(sys.argv) > 2:
        print("Usage: python import_vocab.py [vocabulary.json]")
        sys.exit(1)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    asyncio.run(import_vocab(sys.argv[1] if len(sys.argv) == 2 else settings.seed_vocabulary_path))
