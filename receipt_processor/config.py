import logging
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    """
    Service settings, read from RECEIPT_PROCESSOR_* environment variables.

    lenient_scoring switches the scorer to the legacy behaviour where an
    unparseable date or time yields 0 points instead of an error.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECEIPT_PROCESSOR_",
        extra="ignore",
        frozen=True,
    )

    host: str = "localhost"
    port: int = Field(default=8080, gt=0, lt=65536)
    log_level: LogLevel = "INFO"
    lenient_scoring: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


def load_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
