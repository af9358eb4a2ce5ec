"""Write user-provided values into structured form fields."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Optional, Tuple

from .document import FieldLookupError, InvalidOptionError
from .log import get_logger
from .models import FieldValue
from .utils import first_success, stringify_value

logger = get_logger(__name__)


def _set_text(field: Any, value: FieldValue) -> None:
    field.set_text(stringify_value(value))


def _set_checked(field: Any, value: FieldValue) -> None:
    if isinstance(value, bool):
        checked = value
    else:
        checked = str(value).lower() == "true"
    if checked:
        field.check()
    else:
        field.uncheck()


def _select_option(field: Any, value: FieldValue) -> None:
    field.select(str(value))


# Tried in order against the field's actual kind.
_APPLIERS: Tuple[Tuple[str, Callable[[Any, FieldValue], None]], ...] = (
    ("get_text_field", _set_text),
    ("get_check_box", _set_checked),
    ("get_radio_group", _select_option),
    ("get_dropdown", _select_option),
    ("get_option_list", _select_option),
)


def _try_apply(
    form: Any,
    name: str,
    value: FieldValue,
    accessor_name: str,
    setter: Callable[[Any, FieldValue], None],
) -> Optional[bool]:
    """Apply through one accessor.

    Returns None when the field is not of this accessor's kind, otherwise
    whether the value was accepted.
    """

    try:
        field = getattr(form, accessor_name)(name)
    except FieldLookupError:
        return None
    try:
        setter(field, value)
    except InvalidOptionError as exc:
        logger.warning("Unable to fill field '%s': %s", name, exc)
        return False
    logger.debug("Applied %r to '%s' via %s", value, name, accessor_name)
    return True


def apply_value(form: Any, name: str, value: FieldValue) -> bool:
    """Set ``value`` on the structured field ``name`` in a kind-correct way.

    Failures stay local to the field: an unsupported option or an
    unclassifiable field is logged and reported as False.
    """

    attempts = (partial(_try_apply, form, name, value, accessor, setter) for accessor, setter in _APPLIERS)
    applied = first_success(attempts)
    if applied is None:
        logger.warning("Unable to fill field '%s': unsupported field kind", name)
        return False
    return applied


__all__ = ["apply_value"]
