"""
rasterpdf — Configuration
Loads .env automatically, then reads all settings from environment variables.
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from rasterpdf.errors import ConfigError

_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ConversionConfig:
    """How images are mapped onto the PDF page."""
    dpi: float
    use_image_dpi: bool
    jpeg_passthrough: bool
    compression_level: int


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""
    conversion: ConversionConfig
    max_upload_mb: float
    log_level: str


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: str, cast, errors: list[str]):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        errors.append(f"{name} must be a number, got {raw!r}")
        return cast(default)


def _load_config() -> AppConfig:
    errors: list[str] = []
    cfg = AppConfig(
        conversion=ConversionConfig(
            dpi=_env_number("RASTERPDF_DPI", "72", float, errors),
            use_image_dpi=_env_bool("RASTERPDF_USE_IMAGE_DPI", "false"),
            jpeg_passthrough=_env_bool("RASTERPDF_JPEG_PASSTHROUGH", "true"),
            compression_level=_env_number("RASTERPDF_COMPRESSION_LEVEL", "9", int, errors),
        ),
        max_upload_mb=_env_number("RASTERPDF_MAX_UPLOAD_MB", "50", float, errors),
        log_level=os.getenv("RASTERPDF_LOG_LEVEL", "INFO").strip().upper(),
    )
    _validate_config(cfg, errors)
    return cfg


def _validate_config(cfg: AppConfig, errors: list[str] | None = None) -> None:
    """Fail fast on values the converter cannot work with."""
    errors = list(errors or [])
    if not math.isfinite(cfg.conversion.dpi) or cfg.conversion.dpi <= 0:
        errors.append("RASTERPDF_DPI must be finite and positive")
    if not 0 <= cfg.conversion.compression_level <= 9:
        errors.append("RASTERPDF_COMPRESSION_LEVEL must be between 0 and 9")
    if not math.isfinite(cfg.max_upload_mb) or cfg.max_upload_mb <= 0:
        errors.append("RASTERPDF_MAX_UPLOAD_MB must be finite and positive")
    if cfg.log_level not in _LOG_LEVELS:
        errors.append(f"RASTERPDF_LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}")
    if errors:
        raise ConfigError(errors)


settings = _load_config()
logging.getLogger("rasterpdf").setLevel(settings.log_level)
