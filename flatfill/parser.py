"""Sanitise recognizer output into a bounded list of field proposals."""

from __future__ import annotations

import json
import math
import re
from numbers import Real
from typing import Any, List, Mapping, Optional, Sequence

from .log import get_logger
from .models import BoundingBox, DetectionResult, FieldProposal, FieldType

logger = get_logger(__name__)

MAX_FIELDS = 30

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def _is_number(value: object) -> bool:
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers beyond float range.
        return False


def _text(value: object) -> str:
    return "" if value is None else str(value).strip()


def coerce_bbox(raw: object) -> Optional[BoundingBox]:
    """Accept a box only when page, x and y are all numeric."""

    if not isinstance(raw, Mapping):
        return None
    if not all(_is_number(raw.get(key)) for key in ("page", "x", "y")):
        return None
    width = raw.get("width")
    height = raw.get("height")
    return BoundingBox(
        page=raw["page"],
        x=raw["x"],
        y=raw["y"],
        width=width if _is_number(width) else None,
        height=height if _is_number(height) else None,
    )


def coerce_proposal(raw: object) -> Optional[FieldProposal]:
    """Turn one raw field entry into a proposal, or None when it has no name or label."""

    if not isinstance(raw, Mapping):
        return None
    name = _text(raw.get("name"))
    raw_label = raw.get("label")
    label = _text(raw_label if raw_label is not None else raw.get("name"))
    if not name or not label:
        return None

    raw_options = raw.get("options")
    options = None
    if isinstance(raw_options, (list, tuple)):
        options = tuple(str(option) for option in raw_options)

    placeholder = raw.get("placeholder")
    raw_bbox = raw.get("bbox", raw.get("boundingBox"))
    return FieldProposal(
        name=name,
        label=label,
        field_type=FieldType.coerce(raw.get("type", raw.get("kind"))),
        options=options,
        placeholder=str(placeholder) if placeholder else None,
        bbox=coerce_bbox(raw_bbox),
    )


def coerce_proposals(raw_fields: Sequence[Any], limit: Optional[int] = None) -> List[FieldProposal]:
    proposals: List[FieldProposal] = []
    for item in raw_fields:
        proposal = coerce_proposal(item)
        if proposal is None:
            continue
        proposals.append(proposal)
    if limit is not None and len(proposals) > limit:
        logger.warning("Recognizer returned %d fields; keeping the first %d", len(proposals), limit)
        proposals = proposals[:limit]
    return proposals


def _extract_json_block(raw: str) -> str:
    match = _FENCED_BLOCK.search(raw)
    if match:
        return match.group(1)
    return raw


def parse_detection_response(raw: str, max_fields: int = MAX_FIELDS) -> DetectionResult:
    """Parse the recognizer's free text into a :class:`DetectionResult`.

    Malformed output degrades to an empty result and is never raised.
    """

    try:
        parsed = json.loads(_extract_json_block(raw or "").strip())
    except (ValueError, RecursionError, TypeError) as exc:
        logger.warning("Failed to parse recognizer response: %s; raw=%r", exc, (raw or "")[:200])
        return DetectionResult()

    payload: Mapping[str, Any]
    if isinstance(parsed, list):
        payload = {"fields": parsed}
    elif isinstance(parsed, Mapping):
        payload = parsed
    else:
        logger.warning("Recognizer response is neither an object nor an array: %r", parsed)
        return DetectionResult()

    raw_fields = payload.get("fields")
    fields = coerce_proposals(raw_fields if isinstance(raw_fields, list) else [], limit=max_fields)

    raw_title = payload.get("title")
    title = raw_title.strip() if isinstance(raw_title, str) and raw_title.strip() else None

    logger.debug("Parsed %d proposals (title=%r)", len(fields), title)
    return DetectionResult(fields=tuple(fields), title=title)


__all__ = ["MAX_FIELDS", "coerce_bbox", "coerce_proposal", "coerce_proposals", "parse_detection_response"]
