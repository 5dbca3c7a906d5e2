"""Runtime configuration helpers.

Classes:
    Settings: Pydantic settings model capturing environment-driven defaults.

Functions:
    get_settings(): Return a cached Settings instance for dependency injection.
"""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Note Search API"
    database_url: str = "sqlite+aiosqlite:///./data/notesearch.db"
    log_level: str = "INFO"
    openai_api_key: SecretStr | None = None
    openai_embedding_model: str = "text-embedding-3-small"
    openai_embedding_fallback_model: str | None = None
    embedding_max_chars: int = 30000
    embedding_retry_attempts: int = 3
    bulk_embedding_delay: float = 0.1
    similarity_threshold: float = 0.3
    keyword_score_scale: float = 10.0
    keyword_title_weight: int = 2
    keyword_body_match_cap: int = 5
    min_token_length: int = 3
    excerpt_max_length: int = 200
    default_top_k: int = 5
    topic_top_k: int = 10
    similar_query_fallback_chars: int = 500


@lru_cache()
def get_settings() -> Settings:
    return Settings()
