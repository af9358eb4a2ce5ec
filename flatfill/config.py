"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .log import get_logger
from .parser import MAX_FIELDS

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MODEL = "gemini-2.5-flash-lite"
_TRUTHY = {"1", "true", "yes", "on", "y"}


def _env_number(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %r", name, raw, default)
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    temperature: float = 0.0
    top_p: float = 0.8
    top_k: int = 40
    max_output_tokens: int = 8192
    max_fields: int = MAX_FIELDS
    allow_native_forms: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``os.environ``; a ``.env`` file is loaded by the UI."""

        return cls(
            api_key=os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
            model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            temperature=_env_number("TEMPERATURE", 0.0, float),
            top_p=_env_number("TOP_P", 0.8, float),
            top_k=_env_number("TOP_K", 40, int),
            max_output_tokens=_env_number("MAX_OUTPUT_TOKENS", 8192, int),
            max_fields=_env_number("FLATFILL_MAX_FIELDS", MAX_FIELDS, int),
            allow_native_forms=_env_flag("FLATFILL_ALLOW_NATIVE_FORMS"),
        )


__all__ = ["DEFAULT_MODEL", "Settings"]
