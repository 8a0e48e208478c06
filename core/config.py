from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"
    APP_NAME: str = "Nusa API"

    DATABASE_URL: str = "sqlite:///./nusa.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 40
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    MAX_SESSIONS_PER_USER: int = 3
    COOKIE_SECURE: bool = True
    DEFAULT_PHOTO_URL: str = "https://htnqkjejgcovkehhtqjw.supabase.co/storage/v1/object/public/hackfest-uhuy//photo_profile.jpg"

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
