import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from flashcard_app.database import get_db
from flashcard_app.main import app
from flashcard_app.models import Base
from flashcard_app.schemas.vocabulary import FormattedFlashcard
from flashcard_app.services.flashcard_store import FlashcardStore
from flashcard_app.services.llm_service import LanguageService, get_language_service

TEST_DB_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DB_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
test_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with test_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
async def db():
    async with test_session() as session:
        yield session


@pytest.fixture
def store(db: AsyncSession):
    return FlashcardStore(db)


# --- HTTP client ---


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# --- Scripted language service (injected double) ---


class ScriptedLanguageService(LanguageService):
    """Answers each call with the next queued response.

    A queued exception is raised instead of returned. Once the queue runs out
    the last response is repeated.
    """

    def __init__(self):
        super().__init__(provider="scripted")
        self.responses: list = []
        self.calls: list[dict] = []

    def set_response(self, response):
        self.responses = [response]
        self.calls.clear()

    def set_responses(self, responses):
        self.responses = list(responses)
        self.calls.clear()

    def _next(self):
        idx = len(self.calls) - 1
        response = self.responses[idx] if idx < len(self.responses) else self.responses[-1]
        if isinstance(response, Exception):
            raise response
        if not isinstance(response, str):
            response = json.dumps(response, ensure_ascii=False)
        return response

    async def complete(self, prompt, **kwargs):
        self.calls.append({"prompt": prompt, "vision": False, **kwargs})
        return self._next()

    async def complete_vision(self, prompt, image_b64, media_type="image/png", **kwargs):
        self.calls.append(
            {"prompt": prompt, "vision": True, "image_b64": image_b64, "media_type": media_type, **kwargs}
        )
        return self._next()


@pytest.fixture
def fake_llm():
    service = ScriptedLanguageService()
    app.dependency_overrides[get_language_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_language_service, None)


# --- Boundary mocks: provider SDKs ---


@pytest.fixture
def mock_openai():
    """Mock openai.AsyncOpenAI at the SDK boundary.

    Usage:
        set_response("json string")          single response
        set_responses(["r1", "r2"])          sequential responses
    """
    responses = []
    call_index = {"i": 0}

    def set_response(text):
        responses.clear()
        responses.append(text)
        call_index["i"] = 0

    def set_responses(texts):
        responses.clear()
        responses.extend(texts)
        call_index["i"] = 0

    mock_completion_create = AsyncMock()

    async def _create_side_effect(**kwargs):
        idx = call_index["i"]
        call_index["i"] += 1
        text = responses[idx] if idx < len(responses) else responses[-1]
        message = MagicMock()
        message.content = text
        choice = MagicMock()
        choice.message = message
        response = MagicMock()
        response.choices = [choice]
        return response

    mock_completion_create.side_effect = _create_side_effect

    mock_client_instance = MagicMock()
    mock_client_instance.chat.completions.create = mock_completion_create

    with patch("openai.AsyncOpenAI", return_value=mock_client_instance):
        yield {
            "set_response": set_response,
            "set_responses": set_responses,
            "create_mock": mock_completion_create,
        }


@pytest.fixture
def mock_anthropic():
    """Mock anthropic.AsyncAnthropic at the SDK boundary."""
    responses = []

    def set_response(text):
        responses.clear()
        responses.append(text)

    mock_message_create = AsyncMock()

    async def _create_side_effect(**kwargs):
        content_block = MagicMock()
        content_block.text = responses[-1]
        message = MagicMock()
        message.content = [content_block]
        return message

    mock_message_create.side_effect = _create_side_effect

    mock_client_instance = MagicMock()
    mock_client_instance.messages = MagicMock()
    mock_client_instance.messages.create = mock_message_create

    with patch("anthropic.AsyncAnthropic", return_value=mock_client_instance):
        yield {"set_response": set_response, "create_mock": mock_message_create}


# --- Helpers ---


async def create_flashcard(store: FlashcardStore, front: str, back: str, category: str = "general"):
    """Persist one flashcard through the store and return the ORM row."""
    return await store.create(FormattedFlashcard(front=front, back=back, category=category))


def translation(english, kanji, hiragana, category="general", confidence=0.95, **extra):
    """Build one item of a translator response payload."""
    item = {
        "english": english,
        "japaneseKanji": kanji,
        "hiragana": hiragana,
        "category": category,
        "confidence": confidence,
        "needsClarification": False,
        "clarificationOptions": None,
        "originalTerm": english,
        "originalLanguage": "en",
    }
    item.update(extra)
    return item


def ambiguous(english, options, category="general", confidence=0.5):
    return {
        "english": english,
        "japaneseKanji": "",
        "hiragana": "",
        "category": category,
        "confidence": confidence,
        "needsClarification": True,
        "clarificationOptions": [
            {"japaneseKanji": k, "hiragana": h, "meaning": m} for k, h, m in options
        ],
        "originalTerm": english,
        "originalLanguage": "en",
    }


BANK_OPTIONS = [("銀行", "ぎんこう", "financial institution"), ("土手", "どて", "riverbank")]
