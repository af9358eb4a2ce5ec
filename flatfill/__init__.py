"""flatfill package."""

from .config import Settings
from .document import PdfDocument
from .errors import (
	DocumentLoadError,
	FormFillerError,
	InvalidRequestError,
	NativeFormError,
	RecognizerError,
)
from .filler import apply_value
from .geometry import draw_overlay, resolve_placement
from .kinds import classify_field, classify_inventory
from .llm import GeminiRecognizer, configure_gemini
from .models import BoundingBox, DetectionResult, FieldKind, FieldProposal, FieldType, OverlayPlacement
from .parser import parse_detection_response
from .pipeline import FillRequest, FillResult, detect_fields, fill_form
from .resolver import FieldAllocator, resolve_field_name
from .utils import normalize_name

__all__ = [
	"BoundingBox",
	"DetectionResult",
	"DocumentLoadError",
	"FieldAllocator",
	"FieldKind",
	"FieldProposal",
	"FieldType",
	"FillRequest",
	"FillResult",
	"FormFillerError",
	"GeminiRecognizer",
	"InvalidRequestError",
	"NativeFormError",
	"OverlayPlacement",
	"PdfDocument",
	"RecognizerError",
	"Settings",
	"apply_value",
	"classify_field",
	"classify_inventory",
	"configure_gemini",
	"detect_fields",
	"draw_overlay",
	"fill_form",
	"normalize_name",
	"parse_detection_response",
	"resolve_field_name",
	"resolve_placement",
]
