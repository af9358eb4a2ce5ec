"""Classify structured fields by widget kind."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Optional, Tuple

from .document import FieldLookupError
from .log import get_logger
from .models import FieldKind, KindMap
from .utils import first_success

logger = get_logger(__name__)

# Probe order matters: the first accessor that accepts the name wins.
PROBE_ORDER: Tuple[Tuple[FieldKind, str], ...] = (
    (FieldKind.TEXT, "get_text_field"),
    (FieldKind.CHECKBOX, "get_check_box"),
    (FieldKind.RADIO, "get_radio_group"),
    (FieldKind.DROPDOWN, "get_dropdown"),
    (FieldKind.OPTION_LIST, "get_option_list"),
)


def _intrinsic_kind(form: Any, name: str) -> Optional[FieldKind]:
    reader: Optional[Callable[[str], object]] = getattr(form, "field_kind", None)
    if reader is None:
        return None
    try:
        kind = reader(name)
    except FieldLookupError:
        return None
    return kind if isinstance(kind, FieldKind) else None


def _probe(form: Any, name: str, kind: FieldKind, accessor_name: str) -> Optional[FieldKind]:
    accessor = getattr(form, accessor_name, None)
    if accessor is None:
        return None
    try:
        accessor(name)
    except FieldLookupError:
        return None
    return kind


def probe_field_kind(form: Any, name: str) -> FieldKind:
    """Interpret ``name`` with each typed accessor in turn."""

    attempts = (partial(_probe, form, name, kind, accessor) for kind, accessor in PROBE_ORDER)
    return first_success(attempts) or FieldKind.UNKNOWN


def classify_field(form: Any, name: str) -> FieldKind:
    """Return the widget kind of ``name``, preferring the form's own kind tag.

    Never raises for unclassifiable fields; they come back as UNKNOWN and
    remain matchable by name.
    """

    kind = _intrinsic_kind(form, name)
    if kind is not None:
        return kind
    return probe_field_kind(form, name)


def classify_inventory(form: Any) -> KindMap:
    """Build the kind map for one request's snapshot of the form."""

    kinds: KindMap = {}
    for name in form.field_names():
        kinds[name] = classify_field(form, name)
    logger.debug("Classified %d structured fields: %s", len(kinds), kinds)
    return kinds


__all__ = ["PROBE_ORDER", "classify_field", "classify_inventory", "probe_field_kind"]
