import json
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from flashcard_app.config import settings
from flashcard_app.schemas.vocabulary import (
    ConfirmRequest,
    ConfirmResponse,
    FileType,
    ProcessingResult,
    UploadOptions,
)
from flashcard_app.services.commit_service import confirm_vocabulary
from flashcard_app.services.errors import CommitError
from flashcard_app.services.extractor import detect_file_type
from flashcard_app.services.flashcard_store import FlashcardStore, get_flashcard_store
from flashcard_app.services.llm_service import LanguageService, get_language_service
from flashcard_app.services.processor import error_result, process_vocabulary_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


def _parse_options(options: str | None) -> UploadOptions:
    if not options:
        return UploadOptions()
    try:
        return UploadOptions.model_validate(json.loads(options))
    except (json.JSONDecodeError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid options: {e}")


def _looks_like_json(text: str) -> bool:
    try:
        json.loads(text)
    except json.JSONDecodeError:
        return False
    return True


@router.post("/process", response_model=ProcessingResult)
async def process_upload(
    file: UploadFile | None = File(None),
    text: str | None = Form(None),
    options: str | None = Form(None),
    llm: LanguageService = Depends(get_language_service),
    store: FlashcardStore = Depends(get_flashcard_store),
):
    """Extract, translate and reconcile vocabulary. Nothing is saved."""
    upload_options = _parse_options(options)
    media_type = None

    if file is not None:
        media_type = file.content_type
        file_type = detect_file_type(media_type, file.filename)
        raw = await file.read()
        size = len(raw)
        content = raw if file_type == FileType.IMAGE else raw.decode("utf-8", errors="replace")
    elif text:
        content = text
        size = len(text.encode("utf-8"))
        file_type = FileType.JSON if _looks_like_json(text) else FileType.TEXT
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file or text content provided",
        )

    if size > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        result = error_result(f"File too large. Maximum size is {limit_mb}MB.")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=result.model_dump(mode="json", by_alias=True),
        )

    return await process_vocabulary_upload(
        content,
        file_type,
        llm,
        store,
        media_type=media_type,
        options=upload_options,
    )


@router.post("/confirm", response_model=ConfirmResponse)
async def confirm_upload(
    body: ConfirmRequest,
    store: FlashcardStore = Depends(get_flashcard_store),
):
    """Apply the reviewer's decisions and write the accepted flashcards."""
    try:
        summary = await confirm_vocabulary(
            body.vocabulary,
            store,
            clarification_resolutions=body.clarification_resolutions,
            duplicate_actions=body.duplicate_actions,
        )
    except CommitError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        logger.exception("Saving confirmed vocabulary failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save vocabulary: {e}",
        )

    return ConfirmResponse(
        message="Vocabulary saved successfully",
        saved=summary.saved,
        replaced=summary.replaced,
        skipped=summary.skipped,
        unresolved=summary.unresolved,
        total=summary.saved + summary.replaced,
    )
