"""Compute where to stamp an answer on a page that has no structured field."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Tuple

from .log import get_logger
from .models import BoundingBox, FieldValue, OverlayPlacement

logger = get_logger(__name__)

PageSize = Tuple[float, float]

DEFAULT_NORMALIZED_WIDTH = 0.4
DEFAULT_NORMALIZED_HEIGHT = 0.04
DEFAULT_ABSOLUTE_WIDTH_RATIO = 0.4
DEFAULT_ABSOLUTE_HEIGHT = 24.0
MIN_FONT_SIZE = 9.0
MAX_FONT_SIZE = 16.0
MAX_PADDING = 6.0
TEXT_INSET = 2.0


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_page_index(page: float, page_count: int) -> int:
    """Pick the target page, accepting one-based numbers when zero-based overflows."""

    index = _round_half_up(page)
    if index >= page_count and 0 <= index - 1 < page_count:
        index -= 1
    return int(_clamp(index, 0, page_count - 1))


def is_normalized(bbox: BoundingBox) -> bool:
    """True when every supplied coordinate of ``bbox`` is a page fraction."""

    return (
        bbox.x <= 1
        and bbox.y <= 1
        and (bbox.width is None or bbox.width <= 1)
        and (bbox.height is None or bbox.height <= 1)
    )


def caption_text(value: FieldValue) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def resolve_placement(bbox: BoundingBox, value: FieldValue, page_sizes: Sequence[PageSize]) -> Optional[OverlayPlacement]:
    """Translate a detection box into a page rectangle and text baseline.

    The box uses a top-left origin; the returned baseline uses a bottom-left
    origin. Text is not measured, so long answers may run past the box.
    Returns None only for a document without pages.
    """

    if not page_sizes:
        return None
    page_index = resolve_page_index(bbox.page, len(page_sizes))
    page_width, page_height = page_sizes[page_index]
    normalized = is_normalized(bbox)

    if normalized:
        raw_width = bbox.width if bbox.width is not None else DEFAULT_NORMALIZED_WIDTH
        raw_height = bbox.height if bbox.height is not None else DEFAULT_NORMALIZED_HEIGHT
        width = raw_width * page_width
        height = raw_height * page_height
        x = _clamp(bbox.x, 0, 1) * page_width
        y_from_top = _clamp(bbox.y, 0, 1) * page_height
    else:
        width = bbox.width if bbox.width is not None else page_width * DEFAULT_ABSOLUTE_WIDTH_RATIO
        height = bbox.height if bbox.height is not None else DEFAULT_ABSOLUTE_HEIGHT
        x = max(0.0, min(page_width - width, bbox.x))
        y_from_top = _clamp(bbox.y, 0, page_height)

    padding = min(MAX_PADDING, height * 0.25)
    baseline_y = _clamp(page_height - y_from_top - height + padding, padding, page_height - padding)
    font_size = _clamp(height * 0.6, MIN_FONT_SIZE, MAX_FONT_SIZE)

    return OverlayPlacement(
        page_index=page_index,
        rect=(x, y_from_top, width, height),
        x=_clamp(x + TEXT_INSET, TEXT_INSET, page_width - 4),
        y=max(TEXT_INSET, baseline_y),
        font_size=font_size,
        text=caption_text(value),
        normalized=normalized,
    )


def draw_overlay(document: Any, bbox: BoundingBox, value: FieldValue) -> Optional[OverlayPlacement]:
    """Resolve the placement for ``bbox`` and draw ``value`` onto the document."""

    pages = document.pages
    placement = resolve_placement(bbox, value, [(page.width, page.height) for page in pages])
    if placement is None:
        logger.warning("Cannot draw %r: document has no pages", value)
        return None
    pages[placement.page_index].draw_text(placement.text, placement.x, placement.y, placement.font_size)
    logger.info(
        "Drew text on page %d at (%.1f, %.1f) size=%.1f",
        placement.page_index,
        placement.x,
        placement.y,
        placement.font_size,
    )
    return placement


__all__ = [
    "caption_text",
    "draw_overlay",
    "is_normalized",
    "resolve_page_index",
    "resolve_placement",
]
