import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status

from flashcard_app.config import settings
from flashcard_app.schemas.flashcards import ImportResponse
from flashcard_app.services.errors import SeedImportError
from flashcard_app.services.flashcard_store import FlashcardStore, get_flashcard_store
from flashcard_app.services.import_service import import_seed_vocabulary, load_vocabulary_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import-vocab", tags=["import"])


@router.post("", response_model=ImportResponse)
async def import_vocab(store: FlashcardStore = Depends(get_flashcard_store)):
    """Load the configured seed vocabulary file into an empty store."""
    path = Path(settings.seed_vocabulary_path)
    if not path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Seed vocabulary file not found: {path}",
        )
    try:
        entries = load_vocabulary_file(path)
        result = await import_seed_vocabulary(entries, store)
    except SeedImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ImportResponse(**result)
