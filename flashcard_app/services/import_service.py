import json
import logging
from pathlib import Path

from flashcard_app.config import settings
from flashcard_app.schemas.vocabulary import DEFAULT_CATEGORY, FormattedFlashcard
from flashcard_app.services.errors import SeedImportError
from flashcard_app.services.flashcard_store import FlashcardStore
from flashcard_app.services.formatter import compose_back
from flashcard_app.services.identity import english_key

logger = logging.getLogger(__name__)


def load_vocabulary_file(path: str | Path) -> list[dict]:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SeedImportError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, list):
        raise SeedImportError(f"{path}: expected a JSON array of vocabulary entries")
    return data


def flashcards_from_items(items: list[dict]) -> list[FormattedFlashcard]:
    """Map loosely shaped card objects to flashcards, dropping incomplete ones.

    ``front`` falls back to ``english``; a missing ``back`` is composed from
    ``japaneseKanji`` and ``hiragana``.
    """
    flashcards = []
    for item in items:
        front = item.get("front") or item.get("english")
        back = item.get("back")
        if not back:
            kanji = item.get("japaneseKanji")
            hiragana = item.get("hiragana")
            back = compose_back(kanji, hiragana) if kanji and hiragana else kanji or hiragana
        if front and back:
            flashcards.append(
                FormattedFlashcard(
                    front=front, back=back, category=item.get("category") or DEFAULT_CATEGORY
                )
            )
    return flashcards


def _seed_key(entry: dict) -> str:
    return "|".join(
        [
            english_key(entry.get("english")),
            entry.get("japaneseKanji") or "",
            entry.get("hiragana") or "",
        ]
    )


def dedupe_seed_entries(entries: list[dict]) -> tuple[list[dict], list[dict]]:
    """Keep the first occurrence of each english|kanji|hiragana triple."""
    seen: set[str] = set()
    unique = []
    removed = []
    for entry in entries:
        key = _seed_key(entry)
        if key in seen:
            removed.append(entry)
            continue
        seen.add(key)
        unique.append(entry)
    return unique, removed


def find_seed_duplicates(entries: list[dict]) -> tuple[dict[str, list[int]], dict[str, list[int]]]:
    """Indices of entries sharing an English term, and sharing kanji+reading.

    Only keys that occur more than once are returned.
    """
    by_english: dict[str, list[int]] = {}
    by_japanese: dict[str, list[int]] = {}
    for index, entry in enumerate(entries):
        english = english_key(entry.get("english"))
        if english:
            by_english.setdefault(english, []).append(index)
        kanji = entry.get("japaneseKanji") or ""
        hiragana = entry.get("hiragana") or ""
        if kanji or hiragana:
            by_japanese.setdefault(f"{kanji}|{hiragana}", []).append(index)
    return (
        {k: v for k, v in by_english.items() if len(v) > 1},
        {k: v for k, v in by_japanese.items() if len(v) > 1},
    )


async def import_seed_vocabulary(
    entries: list[dict],
    store: FlashcardStore,
    batch_size: int | None = None,
) -> dict:
    """Bulk-load a vocabulary list into an empty store in fixed-size batches."""
    batch_size = batch_size or settings.import_batch_size
    unique, removed = dedupe_seed_entries(entries)
    for entry in removed:
        logger.info("Dropping repeated seed entry %r", entry.get("english"))

    existing_count = await store.count()
    if existing_count > 0:
        raise SeedImportError(
            "Database already contains flashcards. Clear them first if you want to re-import.",
            existing_count=existing_count,
        )

    flashcards = flashcards_from_items(unique)
    imported = 0
    for start in range(0, len(flashcards), batch_size):
        batch = flashcards[start : start + batch_size]
        imported += await store.create_many(batch, skip_duplicates=True)
        logger.info("Imported %d/%d", min(start + batch_size, len(flashcards)), len(flashcards))

    return {
        "message": "Successfully imported vocabulary",
        "imported": imported,
        "total_in_database": await store.count(),
        "duplicates_removed": len(removed),
    }
