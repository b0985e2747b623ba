import base64
import csv
import io
import logging
import re

from pydantic import BaseModel, Field

from flashcard_app.config import settings
from flashcard_app.schemas.vocabulary import (
    DEFAULT_CATEGORY,
    ExtractedTerm,
    FileType,
    Language,
    TranslatedVocabulary,
)
from flashcard_app.services.errors import ExtractionError, VocabularyError
from flashcard_app.services.formatter import split_back
from flashcard_app.services.language import detect_language, detect_language_fast
from flashcard_app.services.llm_service import (
    LanguageService,
    parse_json_response,
    validate_payload,
)
from flashcard_app.services.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    EXTRACTION_USER_PROMPT,
    IMAGE_SYSTEM_PROMPT,
    IMAGE_USER_PROMPT,
)

logger = logging.getLogger(__name__)

MAX_TERM_LENGTH = 100
_HEADER_CELL = re.compile(r"^(english|japanese|term|word|kanji|hiragana)", re.IGNORECASE)
_KANA_ONLY = re.compile(r"^[\u3040-\u309F\u30A0-\u30FF\s]+$")

_EXTENSION_TYPES = {
    "json": FileType.JSON,
    "csv": FileType.CSV,
    "pdf": FileType.PDF,
    "doc": FileType.DOCX,
    "docx": FileType.DOCX,
    "png": FileType.IMAGE,
    "jpg": FileType.IMAGE,
    "jpeg": FileType.IMAGE,
    "gif": FileType.IMAGE,
    "webp": FileType.IMAGE,
}


class _ExtractedItem(BaseModel):
    term: str | None = None
    language: Language | None = None
    context: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class _ExtractionPayload(BaseModel):
    terms: list[_ExtractedItem]


class _ImagePayload(BaseModel):
    text: str | None = None
    language: Language | None = None
    terms: list[str] | None = None


def detect_file_type(media_type: str | None = None, filename: str | None = None) -> FileType:
    if media_type:
        if media_type.startswith("image/"):
            return FileType.IMAGE
        if media_type == "application/json":
            return FileType.JSON
        if media_type == "text/csv":
            return FileType.CSV
        if media_type == "application/pdf":
            return FileType.PDF
        if "word" in media_type or "document" in media_type:
            return FileType.DOCX
        if media_type.startswith("text/"):
            return FileType.TEXT
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[1].lower()
        return _EXTENSION_TYPES.get(extension, FileType.TEXT)
    return FileType.TEXT


def _clean_term(term: str | None) -> str:
    term = (term or "").strip()
    if len(term) > MAX_TERM_LENGTH:
        return ""
    return term


async def extract_from_text(
    content: str,
    file_type: FileType,
    llm: LanguageService,
    detected_language: Language | None = None,
) -> list[ExtractedTerm]:
    """Ask the language service to pull flashcard-worthy terms out of free text."""
    language = detected_language or detect_language(content)
    prompt = EXTRACTION_USER_PROMPT.format(
        language=language.value,
        file_type=file_type.value,
        content=content[: settings.extraction_char_limit],
    )
    try:
        response = await llm.complete(
            prompt,
            system=EXTRACTION_SYSTEM_PROMPT,
            model=settings.llm_model_fast,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            json_mode=True,
        )
        data = parse_json_response(response)
        # Accept a bare array as well as {"terms": [...]}
        if isinstance(data, list):
            data = {"terms": data}
        payload = validate_payload(data, _ExtractionPayload)
    except VocabularyError as e:
        raise ExtractionError(f"Failed to extract vocabulary: {e}") from e

    terms = []
    for item in payload.terms:
        term = _clean_term(item.term)
        if not term:
            continue
        terms.append(
            ExtractedTerm(
                term=term,
                language=item.language or language,
                context=item.context,
                confidence=item.confidence if item.confidence is not None else 0.8,
            )
        )
    return terms


async def extract_from_image(
    image_bytes: bytes, media_type: str, llm: LanguageService
) -> list[ExtractedTerm]:
    image_b64 = base64.b64encode(image_bytes).decode("utf-8")
    try:
        response = await llm.complete_vision(
            IMAGE_USER_PROMPT,
            image_b64,
            media_type,
            system=IMAGE_SYSTEM_PROMPT,
            max_tokens=settings.llm_max_tokens,
        )
        payload = validate_payload(parse_json_response(response), _ImagePayload)
    except VocabularyError as e:
        raise ExtractionError(f"Failed to extract text from image: {e}") from e

    text = "\n".join(payload.terms) if payload.terms else (payload.text or "")
    language = payload.language or Language.UNKNOWN
    terms = []
    for line in text.split("\n"):
        term = _clean_term(line)
        if term:
            terms.append(ExtractedTerm(term=term, language=language, confidence=0.8))
    return terms


def parse_csv_content(content: str) -> list[list[str]]:
    rows = []
    for row in csv.reader(io.StringIO(content), skipinitialspace=True):
        cells = [cell.strip().strip("'\"") for cell in row]
        if any(cells):
            rows.append(cells)
    return rows


def terms_from_csv_rows(rows: list[list[str]], language: Language) -> list[ExtractedTerm]:
    """Turn parsed CSV rows into terms without calling the language service.

    A header row is recognised by its first-row keywords and skipped. In a
    multi-column row only the first two cells are looked at and each English
    or Japanese cell becomes a term, except a kana-only second cell after a
    kanji first cell (``猫,ねこ``), which is the reading of the first.
    """
    if rows and any(_HEADER_CELL.match(cell) for cell in rows[0]):
        rows = rows[1:]

    terms = []
    for row in rows:
        if len(row) == 1:
            term = _clean_term(row[0])
            if term:
                terms.append(ExtractedTerm(term=term, language=language, confidence=0.9))
            continue
        first, second = (_clean_term(cell) for cell in row[:2])
        for index, term in enumerate((first, second)):
            cell_language = detect_language_fast(term)
            if cell_language not in (Language.EN, Language.JA):
                continue
            if index == 1 and _is_reading_of(second, first):
                continue
            terms.append(ExtractedTerm(term=term, language=cell_language, confidence=0.95))
    return terms


def _is_reading_of(reading: str, word: str) -> bool:
    return bool(
        _KANA_ONLY.match(reading)
        and detect_language_fast(word) == Language.JA
        and not _KANA_ONLY.match(word)
    )


def _orient_pair(front: str, back: str) -> tuple[str, str]:
    """Return (english, japanese) for a front/back pair of unknown orientation."""
    front_language = detect_language_fast(front)
    if front_language == Language.JA:
        return back, front
    if front_language != Language.EN and detect_language_fast(back) == Language.EN:
        return back, front
    return front, back


def vocabulary_from_json(data) -> tuple[list[TranslatedVocabulary], list[ExtractedTerm]]:
    """Split uploaded JSON into ready vocabulary and bare terms to translate.

    Accepts a single object or a list. Complete vocabulary records and
    front/back flashcard pairs bypass translation; objects carrying only a
    ``term`` or ``word`` are returned as extracted terms.
    """
    items = data if isinstance(data, list) else [data]
    vocabulary = []
    pending = []
    for item in items:
        if not isinstance(item, dict):
            continue
        japanese = item.get("japaneseKanji") or item.get("japanese")
        if item.get("english") and japanese:
            vocabulary.append(
                TranslatedVocabulary(
                    english=item["english"],
                    japanese_kanji=japanese,
                    hiragana=item.get("hiragana") or item.get("reading") or "",
                    category=item.get("category") or DEFAULT_CATEGORY,
                    confidence=1.0,
                )
            )
        elif item.get("front") and item.get("back"):
            english, japanese = _orient_pair(str(item["front"]), str(item["back"]))
            kanji, reading = split_back(japanese)
            vocabulary.append(
                TranslatedVocabulary(
                    english=english,
                    japanese_kanji=kanji,
                    hiragana=reading,
                    category=item.get("category") or DEFAULT_CATEGORY,
                    confidence=0.9,
                )
            )
        elif item.get("term") or item.get("word"):
            term = _clean_term(str(item.get("term") or item.get("word")))
            if term:
                pending.append(
                    ExtractedTerm(
                        term=term,
                        language=detect_language_fast(term),
                        context=item.get("context"),
                        confidence=0.9,
                    )
                )
        else:
            logger.debug("Skipping unrecognised JSON vocabulary item: %r", item)
    return vocabulary, pending
