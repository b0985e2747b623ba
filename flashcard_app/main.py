import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from flashcard_app.api import flashcards, import_vocab, upload
from flashcard_app.database import engine
from flashcard_app.models import Base

logger = logging.getLogger(__name__)

_LOGGED_PREFIXES = ("/upload", "/flashcards", "/import-vocab")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(title="Vocabulary Flashcards", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    if request.url.path.startswith(_LOGGED_PREFIXES):
        logger.info("%s %s", request.method, request.url)
    return await call_next(request)


app.include_router(upload.router)
app.include_router(flashcards.router)
app.include_router(import_vocab.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
