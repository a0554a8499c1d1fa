from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()

DEFAULT_LLM_BASE = "https://api.openai.com/v1"
DEFAULT_LLM_MODEL = "gpt-4"
DEFAULT_DATABASE_URL = "sqlite:///./sop_studio.db"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass
class LLMConfig:
    model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL))
    base_url: str = field(default_factory=lambda: os.getenv("LLM_BASE_URL", DEFAULT_LLM_BASE))
    api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    timeout: int = field(default_factory=lambda: _coerce_int(os.getenv("LLM_TIMEOUT"), 60))
    verify_connection: bool = field(
        default_factory=lambda: _coerce_bool(os.getenv("LLM_VERIFY_CONNECTION"), False)
    )

    def to_dict(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {
            "model": self.model,
            "base_url": self.base_url,
            "api_key": self.api_key,
            "verify_connection": self.verify_connection,
            "extra_headers": {"Content-Type": "application/json"},
        }
        if self.timeout > 0:
            cfg["request_timeout"] = self.timeout
        return cfg


@dataclass
class Settings:
    llm: LLMConfig = field(default_factory=LLMConfig)
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


# Generation parameters per feature
SOP_TEMPERATURE = 0.7
SOP_MAX_TOKENS = 3500
PERSONA_TEMPERATURE = 0.9
PERSONA_MAX_TOKENS = 2000


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


def configure_logging(level: str | None = None) -> None:
    resolved = (level or get_settings().log_level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format=LOG_FORMAT,
    )


__all__ = [
    "LLMConfig",
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "DEFAULT_LLM_BASE",
    "DEFAULT_LLM_MODEL",
    "DEFAULT_DATABASE_URL",
    "SOP_TEMPERATURE",
    "SOP_MAX_TOKENS",
    "PERSONA_TEMPERATURE",
    "PERSONA_MAX_TOKENS",
]
