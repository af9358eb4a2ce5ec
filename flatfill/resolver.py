"""Map recognizer-issued field names onto the document's structured fields."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process

from .log import get_logger
from .models import FieldKind, FieldProposal, FieldType
from .utils import normalize_name

logger = get_logger(__name__)

# Fuzzy suggestion threshold (0-100)
FUZZY_THRESHOLD = 70

_PREFERRED_KINDS: Dict[FieldType, Tuple[FieldKind, ...]] = {
    FieldType.CHECKBOX: (FieldKind.CHECKBOX,),
    FieldType.RADIO: (FieldKind.RADIO,),
    FieldType.SELECT: (FieldKind.DROPDOWN, FieldKind.OPTION_LIST),
}
_WORD_SPLIT = re.compile(r"[^a-z0-9]+")


def preferred_kinds_for(field_type: FieldType) -> Tuple[FieldKind, ...]:
    """Structured kinds that a proposal of ``field_type`` should land on."""

    return _PREFERRED_KINDS.get(field_type, ())


def resolve_field_name(
    requested: str,
    available: Sequence[str],
    kinds: Mapping[str, FieldKind],
    preferred_kinds: Sequence[FieldKind] = (),
) -> Optional[str]:
    """Resolve ``requested`` to one of ``available`` or return None.

    Tiers run in order and the first hit wins: exact, case-insensitive,
    normalized equality, then normalized containment. Containment with more
    than one candidate is accepted only when a preferred kind breaks the tie.
    """

    for name in available:
        if name == requested:
            return name

    lowered = requested.lower()
    for name in available:
        if name.lower() == lowered:
            return name

    key = normalize_name(requested)
    for name in available:
        if normalize_name(name) == key:
            return name

    if not key:
        return None

    containing = [name for name in available if key in normalize_name(name)]
    if len(containing) == 1:
        return containing[0]
    if len(containing) > 1:
        if preferred_kinds:
            for name in containing:
                if kinds.get(name, FieldKind.UNKNOWN) in preferred_kinds:
                    return name
        logger.debug("Ambiguous match for '%s' among %s", requested, containing)
    return None


def fallback_by_kind(
    available: Iterable[str],
    kinds: Mapping[str, FieldKind],
    preferred_kinds: Sequence[FieldKind],
) -> Optional[str]:
    """First available field of a preferred kind, ignoring its name."""

    if not preferred_kinds:
        return None
    for name in available:
        if kinds.get(name, FieldKind.UNKNOWN) in preferred_kinds:
            return name
    return None


def _words(name: str) -> str:
    return _WORD_SPLIT.sub(" ", name.lower()).strip()


def suggest_field_name(requested: str, available: Sequence[str]) -> Optional[str]:
    """Closest structured field name for diagnostics; never used for matching."""

    if not requested or not available:
        return None
    match = process.extractOne(
        requested,
        list(available),
        scorer=fuzz.token_set_ratio,
        processor=_words,
        score_cutoff=FUZZY_THRESHOLD,
    )
    if match is None:
        return None
    choice, score, _ = match
    logger.debug("Fuzzy suggestion for '%s': '%s' (score: %.1f)", requested, choice, score)
    return choice


class FieldAllocator:
    """Hands out structured fields to proposals, each field at most once.

    One allocator belongs to one fill request and is consulted in proposal
    order.
    """

    def __init__(self, names: Sequence[str], kinds: Mapping[str, FieldKind]) -> None:
        self._names: List[str] = list(names)
        self._kinds: Dict[str, FieldKind] = dict(kinds)
        self._used: set[str] = set()

    @property
    def used(self) -> frozenset:
        return frozenset(self._used)

    def available(self) -> List[str]:
        return [name for name in self._names if name not in self._used]

    def claim(self, proposal: FieldProposal) -> Optional[str]:
        preferred = preferred_kinds_for(proposal.field_type)
        candidates = self.available()
        target = resolve_field_name(proposal.name, candidates, self._kinds, preferred)
        if target is None and preferred:
            target = fallback_by_kind(candidates, self._kinds, preferred)
            if target is not None:
                logger.info("Matched '%s' to '%s' by kind only", proposal.name, target)
        if target is not None:
            self._used.add(target)
        return target


__all__ = [
    "FUZZY_THRESHOLD",
    "FieldAllocator",
    "fallback_by_kind",
    "preferred_kinds_for",
    "resolve_field_name",
    "suggest_field_name",
]
