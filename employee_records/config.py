# config.py
import os
import urllib.parse
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Environment-driven settings. Every value has a default that matches docker-compose."""

    def __init__(self):
        self.DB_HOST: str = os.getenv("DB_HOST", "db")
        self.DB_USER: str = os.getenv("DB_USER", "user")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")
        self.DB_NAME: str = os.getenv("DB_NAME", "cruddb")
        self.DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
        self.DB_INIT_RETRY_SECONDS: float = float(os.getenv("DB_INIT_RETRY_SECONDS", "5"))

        self.PORT: int = int(os.getenv("PORT", "5000"))
        self.UI_PORT: int = int(os.getenv("UI_PORT", "3000"))

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")

    @property
    def DATABASE_URL(self) -> str:
        explicit = os.getenv("DATABASE_URL")
        if explicit:
            return explicit

        password = urllib.parse.quote_plus(self.DB_PASSWORD)
        return (
            f"mysql+aiomysql://{self.DB_USER}:{password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
