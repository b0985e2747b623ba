from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///flashcards.db"

    openai_api_key: str = ""
    anthropic_api_key: str = ""
    llm_provider: str = "openai"  # "openai" or "anthropic"
    llm_model_fast: str = "gpt-4o-mini"  # extraction, categorization, readings
    llm_model_advanced: str = "gpt-4o"  # translation and disambiguation
    llm_model_vision: str = "gpt-4o"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 4096

    extraction_char_limit: int = 8000
    translation_batch_size: int = 30
    import_batch_size: int = 50
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB

    seed_vocabulary_path: str = "data/vocabulary.json"

    model_config = {"env_prefix": "VOCAB_", "env_file": ".env"}


settings = Settings()
