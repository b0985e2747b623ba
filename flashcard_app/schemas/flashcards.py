from datetime import datetime

from pydantic import BaseModel


class FlashcardResponse(BaseModel):
    id: str
    front: str
    back: str
    category: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FlashcardImportItem(BaseModel):
    front: str | None = None
    back: str | None = None
    english: str | None = None
    japaneseKanji: str | None = None
    hiragana: str | None = None
    category: str | None = None


class ImportResponse(BaseModel):
    message: str
    imported: int
    total_in_database: int | None = None
    duplicates_removed: int | None = None


class CountResponse(BaseModel):
    count: int
