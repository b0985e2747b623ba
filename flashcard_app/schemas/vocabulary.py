import enum

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

VOCABULARY_CATEGORIES = (
    "programming_fundamentals",
    "oop",
    "data_structures_algorithms",
    "web_development",
    "database",
    "devops",
    "cloud",
    "security",
    "ai_ml",
    "ui_ux",
    "general",
)

DEFAULT_CATEGORY = "general"


class Language(str, enum.Enum):
    EN = "en"
    JA = "ja"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class ProcessingStatus(str, enum.Enum):
    SUCCESS = "success"
    NEEDS_CLARIFICATION = "needs_clarification"
    ERROR = "error"


class DuplicateAction(str, enum.Enum):
    KEEP_BOTH = "keep_both"
    SKIP = "skip"
    REPLACE = "replace"


class FileType(str, enum.Enum):
    TEXT = "text"
    CSV = "csv"
    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"
    JSON = "json"


class CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ExtractedTerm(CamelModel):
    term: str = Field(min_length=1)
    language: Language
    context: str | None = None
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)

    model_config = {**CamelModel.model_config, "frozen": True}


class TranslationOption(CamelModel):
    japanese_kanji: str
    hiragana: str = ""
    meaning: str = ""

    model_config = {**CamelModel.model_config, "frozen": True}


class TranslatedVocabulary(CamelModel):
    english: str = ""
    japanese_kanji: str = ""
    hiragana: str = ""
    category: str = DEFAULT_CATEGORY
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    needs_clarification: bool = False
    clarification_options: list[TranslationOption] | None = None
    original_term: str | None = None
    original_language: Language | None = None


class ExistingFlashcard(CamelModel):
    id: str
    front: str
    back: str
    category: str | None = None


class DuplicateInfo(CamelModel):
    new_term: TranslatedVocabulary
    existing_term: ExistingFlashcard


class ClarificationRequest(CamelModel):
    id: str
    term: str
    original_language: Language
    options: list[TranslationOption]
    context: str | None = None


class ProcessingStats(CamelModel):
    total_extracted: int = 0
    translated: int = 0
    duplicates_found: int = 0
    clarifications_needed: int = 0
    errors: int = 0


class ProcessingResult(CamelModel):
    status: ProcessingStatus
    vocabulary: list[TranslatedVocabulary] = []
    clarifications_needed: list[ClarificationRequest] = []
    duplicates: list[DuplicateInfo] = []
    errors: list[str] = []
    stats: ProcessingStats = Field(default_factory=ProcessingStats)


class FormattedFlashcard(CamelModel):
    front: str
    back: str
    category: str = DEFAULT_CATEGORY


class UploadOptions(CamelModel):
    auto_translate: bool = True
    auto_categorize: bool = True
    generate_hiragana: bool = True
    detect_duplicates: bool = True


class ConfirmRequest(CamelModel):
    vocabulary: list[TranslatedVocabulary]
    clarification_resolutions: dict[str, TranslationOption] | None = None
    duplicate_actions: dict[str, str] | None = None


class CommitSummary(CamelModel):
    saved: int = 0
    replaced: int = 0
    skipped: int = 0
    unresolved: int = 0


class ConfirmResponse(CamelModel):
    message: str
    saved: int
    replaced: int
    skipped: int
    unresolved: int
    total: int
