import logging

from fastapi import APIRouter, Depends, HTTPException, status

from flashcard_app.schemas.flashcards import (
    CountResponse,
    FlashcardImportItem,
    FlashcardResponse,
    ImportResponse,
)
from flashcard_app.services.flashcard_store import FlashcardStore, get_flashcard_store
from flashcard_app.services.import_service import flashcards_from_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flashcards", tags=["flashcards"])


@router.get("", response_model=list[FlashcardResponse])
async def list_flashcards(store: FlashcardStore = Depends(get_flashcard_store)):
    return await store.list_all()


@router.get("/count", response_model=CountResponse)
async def count_flashcards(store: FlashcardStore = Depends(get_flashcard_store)):
    return CountResponse(count=await store.count())


@router.delete("")
async def clear_flashcards(store: FlashcardStore = Depends(get_flashcard_store)):
    deleted = await store.delete_all()
    logger.info("Cleared %d flashcards", deleted)
    return {"message": "All flashcards cleared successfully", "deleted": deleted}


@router.post("/import", response_model=ImportResponse)
async def import_flashcards(
    body: list[FlashcardImportItem],
    store: FlashcardStore = Depends(get_flashcard_store),
):
    """Store ready-made cards as-is, without translation or duplicate review."""
    flashcards = flashcards_from_items([item.model_dump() for item in body])
    if not flashcards:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='No valid flashcards found. Ensure each object has "front" and "back" fields.',
        )
    imported = await store.create_many(flashcards)
    return ImportResponse(
        message=f"Successfully uploaded {imported} flashcards!",
        imported=imported,
    )
