# storefront/settings.py
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env', env_file_encoding='utf-8', extra='ignore'
    )

    PROJECT_NAME: str = 'Storefront API'
    VERSION: str = '1.0.0'

    # Persistence
    DATABASE_URL: str = 'sqlite:///./storefront.db'
    DB_CONNECT_TIMEOUT: int = 5

    # Sessions
    SECRET_KEY: str = 'change-me'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    SESSION_BACKEND: str = 'stateless'
    PASSWORD_MIN_LENGTH: int = 6

    # Catalog
    OWNER_ONLY_MUTATIONS: bool = False

    # Comma separated, e.g. "http://localhost:8081,http://localhost:5173"
    CORS_ORIGINS: str = '*'

    LOG_LEVEL: str = 'INFO'
    LOG_FORMAT: str = 'default'

    @field_validator('SESSION_BACKEND')
    @classmethod
    def known_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ('stateless', 'revocable'):
            raise ValueError("SESSION_BACKEND must be 'stateless' or 'revocable'")
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [i.strip() for i in self.CORS_ORIGINS.split(',') if i.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
