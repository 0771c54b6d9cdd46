# wkpdf/config.py
import logging
import os
import tempfile
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


class Settings(BaseModel):
    # explicit renderer path, accepts both names
    WKHTMLTOPDF_BIN: Optional[str] = Field(default_factory=lambda: _env("WKHTMLTOPDF_BIN", "WKHTMLTOPDF_PATH"))
    # bundled Windows binary copied into WORKDIR on first use
    WKHTMLTOPDF_BUNDLE: str = Field(
        default_factory=lambda: os.getenv(
            "WKHTMLTOPDF_BUNDLE",
            os.path.join(os.path.dirname(os.path.abspath(__file__)), "bin", "wkhtmltopdf.exe"),
        )
    )
    WORKDIR: str = Field(default_factory=lambda: os.getenv("WKPDF_WORKDIR", tempfile.gettempdir()))
    TIMEOUT: float = Field(default_factory=lambda: float(os.getenv("WKPDF_TIMEOUT", "120")))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("WKPDF_LOG_LEVEL", "INFO"), validate_default=True)

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        # unknown names fall back to INFO
        value = value.upper()
        return value if isinstance(logging.getLevelName(value), int) else "INFO"


def get_settings() -> Settings:
    """Read the environment again; cheap enough to call per conversion."""
    return Settings()
