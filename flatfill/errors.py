"""Request-level errors surfaced to callers with a human-readable message."""

from __future__ import annotations


class FormFillerError(Exception):
    """Base class for errors that abort a detect or fill request."""


class InvalidRequestError(FormFillerError):
    pass


class NativeFormError(FormFillerError):
    def __init__(self, message: str = (
        "This PDF already has fillable fields. Please fill it directly in your PDF reader. "
        "This app focuses on flat/image PDFs."
    )) -> None:
        super().__init__(message)


class RecognizerError(FormFillerError):
    pass


class DocumentLoadError(FormFillerError):
    """Raised when the supplied bytes cannot be opened as a PDF."""


__all__ = ["DocumentLoadError", "FormFillerError", "InvalidRequestError", "NativeFormError", "RecognizerError"]
