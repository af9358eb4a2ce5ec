"""Gemini-backed recognizer that proposes fields for a flat PDF.

The recognizer only returns raw text; turning it into proposals is the job of
:mod:`flatfill.parser`, which tolerates whatever the model produces.
"""

from __future__ import annotations

import os
from typing import Optional

import google.generativeai as genai

from .config import Settings
from .log import get_logger
from .parser import MAX_FIELDS

logger = get_logger(__name__)

DETECTION_PROMPT = f"""
You are mapping form fields in a PDF (including flat/image-only PDFs) for HTML rendering.
Respond with JSON only, no prose or markdown fencing.
Return an object with keys:
- title: short form title inferred from the document (string)
- fields: array of objects with keys:
  - name: unique id matching the PDF field name when possible (use readable slugs otherwise)
  - label: short user-facing label
  - type: one of text,email,number,date,checkbox,radio,select
  - placeholder: optional short hint
  - options: only for radio/select (array of strings)
  - bbox: optional object {{ page, x, y, width, height }} with normalized coordinates (0-1, origin top-left)

Prefer existing AcroForm names if present, keep array short (max {MAX_FIELDS} items).
If you are unsure about a field, omit it.
""".strip()


def configure_gemini(api_key: Optional[str] = None) -> None:
    """Configure Google Gemini with the provided or environment API key.

    Raises:
        ValueError: If no API key is found.
    """
    key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
    if not key:
        raise ValueError(
            "Google API key not found. Set GOOGLE_API_KEY (or GEMINI_API_KEY) environment variable "
            "or pass api_key parameter."
        )
    genai.configure(api_key=key)


def _normalise_model_name(raw_name: str) -> str:
    """Normalise user-provided model identifiers to the API format."""

    if not raw_name:
        return "models/gemini-2.5-flash-lite"

    slug = raw_name.strip().lower().replace(" ", "-")
    if not slug.startswith("models/"):
        slug = f"models/{slug}"
    return slug


class GeminiRecognizer:
    """Callable recognizer: ``recognizer(pdf_bytes, prompt) -> str``."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings.from_env()

    def _model(self) -> "genai.GenerativeModel":
        configure_gemini(self.settings.api_key)
        return genai.GenerativeModel(
            _normalise_model_name(self.settings.model_name),
            generation_config={
                "temperature": self.settings.temperature,
                "top_p": self.settings.top_p,
                "top_k": self.settings.top_k,
                "max_output_tokens": self.settings.max_output_tokens,
            },
        )

    def __call__(self, pdf_bytes: bytes, prompt: str = DETECTION_PROMPT) -> str:
        model = self._model()
        logger.info("[Gemini] Requesting field detection (%d bytes)", len(pdf_bytes))
        response = model.generate_content(
            [
                {"mime_type": "application/pdf", "data": pdf_bytes},
                prompt,
            ]
        )

        candidate = next((c for c in response.candidates if c.content.parts), None)
        if not candidate:
            logger.warning(
                "[Gemini] No candidate parts returned (finish_reason=%s)",
                getattr(response.candidates[0], "finish_reason", "unknown") if response.candidates else "none",
            )
            return ""

        raw_text = "".join(part.text for part in candidate.content.parts if getattr(part, "text", ""))
        logger.debug("[Gemini] Raw detection response: %s", raw_text)
        return raw_text.strip()


__all__ = ["DETECTION_PROMPT", "GeminiRecognizer", "configure_gemini"]
