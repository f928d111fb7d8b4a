from typing import Annotated
import logging
import os
import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


logger = logging.getLogger(__name__)

_LANG_RE = re.compile(r"^([A-Za-z]{2}(?:_[A-Za-z]{2})?)\b")


def default_languages() -> list[str]:
    """Preferred languages taken from $LANG ('fr_CA.UTF-8' -> ['fr_CA']), else ['en']."""
    match = _LANG_RE.match(os.environ.get("LANG", ""))
    if match:
        return [match.group(1)]
    return ["en"]


class GridSettings(BaseSettings):
    """Package settings loaded from environment variables.

    Every setting can be overridden with an XMLTV_GRID_ prefixed variable.
    """

    lines_per_channel: int = 2
    languages: Annotated[list[str], NoDecode] = Field(default_factory=default_languages)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="XMLTV_GRID_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("languages", mode="before")
    @classmethod
    def parse_languages(cls, value):
        """Parse comma-separated language codes or list."""
        if value is None:
            return default_languages()
        if isinstance(value, str):
            codes = [code.strip() for code in value.split(",") if code.strip()]
            return codes or default_languages()
        if isinstance(value, list):
            return value or default_languages()
        return value

    @field_validator("lines_per_channel")
    @classmethod
    def validate_lines(cls, value: int) -> int:
        """Validate the number of listing lines per channel."""
        if value < 1:
            raise ValueError("lines_per_channel must be >= 1")
        if value > 20:
            raise ValueError("lines_per_channel must be <= 20")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.debug("Configuration loaded:")
        logger.debug("  Lines per channel: %s", self.lines_per_channel)
        logger.debug("  Languages: %s", ", ".join(self.languages))
        logger.debug("  Log level: %s", self.log_level)


settings = GridSettings()


def setup_logging(level: str | None = None) -> None:
    """Configure package logging."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
