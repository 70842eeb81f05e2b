"""
DocBundle — Configuration
Loads .env automatically, then reads all settings from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from docbundle.errors import ConfigError

_env_path = Path(__file__).resolve().parent.parent.parent.parent / ".env"
load_dotenv(_env_path)

MM_TO_PT = 72 / 25.4


@dataclass(frozen=True)
class PageSpec:
    """Page geometry in millimetres."""
    width: float
    height: float
    margin: float

    @property
    def printable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def printable_height(self) -> float:
        return self.height - 2 * self.margin

    @property
    def width_pt(self) -> float:
        return self.width * MM_TO_PT

    @property
    def height_pt(self) -> float:
        return self.height * MM_TO_PT


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""
    page: PageSpec
    message_ttl: float
    output_dir: str
    log_level: str


def _load_config() -> AppConfig:
    return AppConfig(
        page=PageSpec(
            width=float(os.getenv("DOCBUNDLE_PAGE_WIDTH_MM", "210")),
            height=float(os.getenv("DOCBUNDLE_PAGE_HEIGHT_MM", "297")),
            margin=float(os.getenv("DOCBUNDLE_PAGE_MARGIN_MM", "10")),
        ),
        message_ttl=float(os.getenv("DOCBUNDLE_MESSAGE_TTL_SECONDS", "5.0")),
        output_dir=os.getenv("DOCBUNDLE_OUTPUT_DIR", "output"),
        log_level=os.getenv("DOCBUNDLE_LOG_LEVEL", "INFO").upper(),
    )


def _validate_config(cfg: AppConfig) -> None:
    """Fail fast on geometry that leaves nothing to print on."""
    problems: list[str] = []
    if cfg.page.width <= 0 or cfg.page.height <= 0:
        problems.append("page width and height must be positive")
    if cfg.page.margin < 0:
        problems.append("page margin must not be negative")
    elif cfg.page.printable_width <= 0 or cfg.page.printable_height <= 0:
        problems.append("page margin leaves no printable area")
    if cfg.message_ttl <= 0:
        problems.append("DOCBUNDLE_MESSAGE_TTL_SECONDS must be positive")
    if problems:
        raise ConfigError(problems)


settings = _load_config()
_validate_config(settings)
