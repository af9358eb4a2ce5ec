"""Data models for flatfill."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class FieldType(str, Enum):
    """Field types a recognizer may declare for a proposal."""

    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    DATE = "date"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"

    @classmethod
    def coerce(cls, raw: object) -> "FieldType":
        """Map free-form input onto a known type, defaulting to TEXT."""

        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.TEXT


class FieldKind(str, Enum):
    """Widget kinds of structured fields that already exist in a document."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"
    OPTION_LIST = "option_list"
    UNKNOWN = "unknown"


FieldValue = Union[str, bool]
KindMap = Dict[str, FieldKind]


@dataclass(frozen=True)
class BoundingBox:
    """Approximate position of a proposal, top-left origin.

    Values are either all fractions of the page size or all page units;
    ``page`` is nominally zero-based.
    """

    page: float
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        payload: Dict[str, float] = {"page": self.page, "x": self.x, "y": self.y}
        if self.width is not None:
            payload["width"] = self.width
        if self.height is not None:
            payload["height"] = self.height
        return payload


@dataclass(frozen=True)
class FieldProposal:
    """A recognizer-suggested field, not yet verified against the document."""

    name: str
    label: str = ""
    field_type: FieldType = FieldType.TEXT
    options: Optional[Tuple[str, ...]] = None
    placeholder: Optional[str] = None
    bbox: Optional[BoundingBox] = None

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.name)

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "name": self.name,
            "label": self.label,
            "type": self.field_type.value,
        }
        if self.options is not None:
            payload["options"] = list(self.options)
        if self.placeholder is not None:
            payload["placeholder"] = self.placeholder
        if self.bbox is not None:
            payload["bbox"] = self.bbox.to_dict()
        return payload


@dataclass(frozen=True)
class DetectionResult:
    fields: Tuple[FieldProposal, ...] = ()
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"fields": [proposal.to_dict() for proposal in self.fields]}
        if self.title is not None:
            payload["title"] = self.title
        return payload


@dataclass(frozen=True)
class OverlayPlacement:
    """Where and how to stamp an answer onto a page.

    ``rect`` is ``(x, y_from_top, width, height)`` in page units. The
    baseline ``(x, y)`` uses a bottom-left origin.
    """

    page_index: int
    rect: Tuple[float, float, float, float]
    x: float
    y: float
    font_size: float
    text: str
    normalized: bool = field(default=False, compare=False)


__all__ = [
    "BoundingBox",
    "DetectionResult",
    "FieldKind",
    "FieldProposal",
    "FieldType",
    "FieldValue",
    "KindMap",
    "OverlayPlacement",
]
