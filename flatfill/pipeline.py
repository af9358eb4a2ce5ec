"""High level orchestration for detect and fill requests."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import Settings
from .document import PdfDocument, PdfForm
from .errors import InvalidRequestError, NativeFormError, RecognizerError
from .filler import apply_value
from .geometry import draw_overlay
from .kinds import classify_inventory
from .llm import DETECTION_PROMPT, GeminiRecognizer
from .log import get_logger
from .models import DetectionResult, FieldKind, FieldProposal, FieldType, FieldValue
from .parser import coerce_proposals, parse_detection_response
from .resolver import FieldAllocator, preferred_kinds_for, resolve_field_name, suggest_field_name

logger = get_logger(__name__)

Recognizer = Callable[[bytes, str], str]

_KIND_TO_TYPE = {
    FieldKind.CHECKBOX: FieldType.CHECKBOX,
    FieldKind.RADIO: FieldType.RADIO,
    FieldKind.DROPDOWN: FieldType.SELECT,
    FieldKind.OPTION_LIST: FieldType.SELECT,
}
_OPTION_ACCESSORS = {
    FieldKind.RADIO: "get_radio_group",
    FieldKind.DROPDOWN: "get_dropdown",
    FieldKind.OPTION_LIST: "get_option_list",
}


@dataclass(frozen=True)
class FillRequest:
    """Document bytes, the user's answers keyed by proposal name, and the proposals."""

    pdf_bytes: bytes
    values: Mapping[str, Optional[FieldValue]]
    fields: Tuple[FieldProposal, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "FillRequest":
        """Build a request from the wire shape ``{pdfBase64, values, fields?}``."""

        if not isinstance(payload, Mapping):
            raise InvalidRequestError("Invalid JSON")
        encoded = payload.get("pdfBase64")
        values = payload.get("values")
        if not encoded or not isinstance(encoded, str) or not isinstance(values, Mapping):
            raise InvalidRequestError("Missing pdfBase64 or values")
        try:
            pdf_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidRequestError("pdfBase64 is not valid base64") from exc

        raw_fields = payload.get("fields")
        fields = coerce_proposals(raw_fields) if isinstance(raw_fields, list) else []
        return cls(
            pdf_bytes=pdf_bytes,
            values={str(key): _coerce_value(value) for key, value in values.items()},
            fields=tuple(fields),
        )

    def proposals(self) -> Tuple[FieldProposal, ...]:
        """Proposals to fill; bare text proposals from the value keys when none were sent."""

        if self.fields:
            return self.fields
        return tuple(FieldProposal(name=name) for name in self.values if name)


@dataclass
class FillResult:
    pdf_bytes: bytes
    filled: Dict[str, str] = field(default_factory=dict)
    overlaid: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)
    unresolved: Dict[str, Optional[str]] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, str]:
        return {"pdfBase64": base64.b64encode(self.pdf_bytes).decode("ascii")}


def _coerce_value(value: Any) -> Optional[FieldValue]:
    if value is None or isinstance(value, (bool, str)):
        return value
    return str(value)


def _ensure_flat(form: PdfForm, settings: Settings) -> List[str]:
    names = form.field_names()
    if names and not settings.allow_native_forms:
        logger.info("Rejecting PDF with %d existing form fields", len(names))
        raise NativeFormError()
    return names


def enrich_proposals(form: Any, proposals: Sequence[FieldProposal]) -> Tuple[FieldProposal, ...]:
    """Align proposal types and options with the structured fields they name."""

    names = form.field_names()
    if not names:
        return tuple(proposals)
    kinds = classify_inventory(form)
    enriched: List[FieldProposal] = []
    for proposal in proposals:
        resolved = resolve_field_name(proposal.name, names, kinds, preferred_kinds_for(proposal.field_type))
        if resolved is None:
            enriched.append(proposal)
            continue
        kind = kinds.get(resolved, FieldKind.UNKNOWN)
        updated = proposal
        if kind in _KIND_TO_TYPE:
            updated = replace(updated, field_type=_KIND_TO_TYPE[kind])
        accessor = _OPTION_ACCESSORS.get(kind)
        if accessor is not None:
            options = getattr(form, accessor)(resolved).get_options()
            if options and (not updated.options or len(options) > len(updated.options)):
                updated = replace(updated, options=tuple(options))
        enriched.append(updated)
    return tuple(enriched)


def detect_fields(
    pdf_bytes: bytes,
    recognizer: Optional[Recognizer] = None,
    settings: Optional[Settings] = None,
) -> DetectionResult:
    """Ask the recognizer for field proposals on a flat PDF."""

    settings = settings or Settings.from_env()
    if not pdf_bytes:
        raise InvalidRequestError("PDF file is required")

    with PdfDocument.load(pdf_bytes) as document:
        _ensure_flat(document.form, settings)
        recognizer = recognizer or GeminiRecognizer(settings)
        try:
            raw = recognizer(pdf_bytes, DETECTION_PROMPT)
        except Exception as exc:
            logger.exception("Field detection failed: %s", exc)
            raise RecognizerError("Failed to detect fields from PDF") from exc

        result = parse_detection_response(raw, max_fields=settings.max_fields)
        if result.fields:
            result = replace(result, fields=enrich_proposals(document.form, result.fields))
            logger.info("Detected fields: %s", [proposal.to_dict() for proposal in result.fields])
        return result


def fill_form(request: FillRequest, settings: Optional[Settings] = None) -> FillResult:
    """Fill structured fields where they match and stamp the rest onto the page."""

    settings = settings or Settings.from_env()
    if not request.pdf_bytes or request.values is None:
        raise InvalidRequestError("Missing pdfBase64 or values")

    with PdfDocument.load(request.pdf_bytes) as document:
        form = document.form
        names = _ensure_flat(form, settings)
        allocator = FieldAllocator(names, classify_inventory(form) if names else {})
        result = FillResult(pdf_bytes=b"")

        for proposal in request.proposals():
            if not proposal.name:
                continue
            value = request.values.get(proposal.name)
            if value is None:
                logger.debug("No value for '%s'; skipping", proposal.name)
                continue

            target = allocator.claim(proposal)
            if target is None:
                if proposal.bbox is not None:
                    if draw_overlay(document, proposal.bbox, value) is not None:
                        result.overlaid.append(proposal.name)
                    continue
                available = allocator.available()
                suggestion = suggest_field_name(proposal.name, available)
                result.unresolved[proposal.name] = suggestion
                logger.warning(
                    "No matching PDF field for '%s'%s. Available: %s",
                    proposal.name,
                    f" (closest: '{suggestion}')" if suggestion else "",
                    ", ".join(available),
                )
                continue

            if apply_value(form, target, value):
                result.filled[proposal.name] = target
                logger.info("Filled field '%s' for '%s'", target, proposal.name)
            else:
                result.rejected.append(proposal.name)

        result.pdf_bytes = document.to_bytes()
    logger.info(
        "Fill complete: %d filled, %d overlaid, %d rejected, %d unresolved",
        len(result.filled),
        len(result.overlaid),
        len(result.rejected),
        len(result.unresolved),
    )
    return result


__all__ = ["FillRequest", "FillResult", "Recognizer", "detect_fields", "enrich_proposals", "fill_form"]
