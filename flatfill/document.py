"""PyMuPDF-backed document model: pages for overlay drawing and the AcroForm inventory."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Sequence

import fitz

from .errors import DocumentLoadError
from .log import get_logger
from .models import FieldKind

logger = get_logger(__name__)

_OFF_STATE = "Off"

_WIDGET_KIND_PAIRS = {
    "PDF_WIDGET_TYPE_TEXT": FieldKind.TEXT,
    "PDF_WIDGET_TYPE_CHECKBOX": FieldKind.CHECKBOX,
    "PDF_WIDGET_TYPE_RADIOBUTTON": FieldKind.RADIO,
    "PDF_WIDGET_TYPE_COMBOBOX": FieldKind.DROPDOWN,
    "PDF_WIDGET_TYPE_LISTBOX": FieldKind.OPTION_LIST,
}
_WIDGET_KIND_MAP: Dict[int, FieldKind] = {}
for attr_name, kind in _WIDGET_KIND_PAIRS.items():
    value = getattr(fitz, attr_name, None)
    if isinstance(value, int):
        _WIDGET_KIND_MAP[value] = kind


class FieldLookupError(LookupError):
    """Base error for typed accessors on :class:`PdfForm`."""


class FieldNotFoundError(FieldLookupError):
    pass


class FieldTypeError(FieldLookupError):
    """The named field exists but is of a different kind than requested."""

    def __init__(self, name: str, expected: FieldKind, actual: FieldKind) -> None:
        super().__init__(f"Field '{name}' is {actual.value}, not {expected.value}")
        self.name = name
        self.expected = expected
        self.actual = actual


class InvalidOptionError(ValueError):
    def __init__(self, name: str, option: str, options: Sequence[str]) -> None:
        super().__init__(f"'{option}' is not an option of field '{name}' (options: {', '.join(options)})")
        self.name = name
        self.option = option
        self.options = list(options)


def _widget_name(widget: fitz.Widget) -> Optional[str]:
    name = getattr(widget, "field_name", None)
    if isinstance(name, str):
        cleaned = name.strip()
        return cleaned or None
    return None


def _widget_kind(widget: fitz.Widget) -> FieldKind:
    widget_type = getattr(widget, "field_type", None)
    if isinstance(widget_type, int):
        return _WIDGET_KIND_MAP.get(widget_type, FieldKind.UNKNOWN)
    return FieldKind.UNKNOWN


def _widget_on_state(widget: fitz.Widget) -> Optional[str]:
    state = widget.on_state()
    if isinstance(state, str) and state and state != _OFF_STATE:
        return state
    return None


def _choice_option(choice: object) -> str:
    # PyMuPDF reports either plain strings or (export, display) pairs.
    if isinstance(choice, (list, tuple)) and choice:
        return str(choice[0])
    return str(choice)


class PdfPage:
    """A page exposing its size and a bottom-left-origin text primitive."""

    def __init__(self, page: fitz.Page) -> None:
        self._page = page

    @property
    def width(self) -> float:
        return float(self._page.rect.width)

    @property
    def height(self) -> float:
        return float(self._page.rect.height)

    def draw_text(self, text: str, x: float, y: float, size: float) -> None:
        """Draw ``text`` with its baseline at ``(x, y)``, origin bottom-left."""

        point = fitz.Point(x, self.height - y)
        self._page.insert_text(point, text, fontsize=size, fontname="helv", color=(0, 0, 0))
        logger.debug("Drew %r at (%.1f, %.1f) size=%.1f", text, x, y, size)


class _WidgetField:
    kind = FieldKind.UNKNOWN

    def __init__(self, form: "PdfForm", name: str) -> None:
        self._form = form
        self.name = name

    def _widgets(self) -> Iterator[fitz.Widget]:
        # Widgets hold a weak reference to their page; consume them lazily so
        # the page stays alive while a widget is updated.
        return self._form.iter_widgets(self.name)


class TextField(_WidgetField):
    kind = FieldKind.TEXT

    def get_text(self) -> str:
        for widget in self._widgets():
            value = widget.field_value
            return "" if value is None else str(value)
        return ""

    def set_text(self, text: str) -> None:
        for widget in self._widgets():
            widget.field_value = text
            widget.update()


class CheckBox(_WidgetField):
    kind = FieldKind.CHECKBOX

    def is_checked(self) -> bool:
        for widget in self._widgets():
            value = widget.field_value
            if isinstance(value, bool):
                return value
            return bool(value) and str(value) != _OFF_STATE
        return False

    def check(self) -> None:
        self._set(True)

    def uncheck(self) -> None:
        self._set(False)

    def _set(self, checked: bool) -> None:
        for widget in self._widgets():
            widget.field_value = checked
            widget.update()


class RadioGroup(_WidgetField):
    kind = FieldKind.RADIO

    def get_options(self) -> List[str]:
        options: List[str] = []
        for widget in self._widgets():
            state = _widget_on_state(widget)
            if state and state not in options:
                options.append(state)
        return options

    def get_selected(self) -> Optional[str]:
        for widget in self._widgets():
            value = widget.field_value
            if value is True:
                return _widget_on_state(widget)
            if isinstance(value, str) and value and value != _OFF_STATE:
                return value
        return None

    def select(self, option: str) -> None:
        options = self.get_options()
        if option not in options:
            raise InvalidOptionError(self.name, option, options)
        # Clear the other buttons first; kids of one field share its value.
        for widget in self._widgets():
            if _widget_on_state(widget) != option:
                widget.field_value = False
                widget.update()
        for widget in self._widgets():
            if _widget_on_state(widget) == option:
                widget.field_value = True
                widget.update()


class _ChoiceField(_WidgetField):
    def get_options(self) -> List[str]:
        for widget in self._widgets():
            return [_choice_option(choice) for choice in (widget.choice_values or [])]
        return []

    def get_selected(self) -> Optional[str]:
        for widget in self._widgets():
            value = widget.field_value
            if isinstance(value, (list, tuple)):
                return str(value[0]) if value else None
            return str(value) if value else None
        return None

    def select(self, option: str) -> None:
        options = self.get_options()
        if option not in options:
            raise InvalidOptionError(self.name, option, options)
        for widget in self._widgets():
            widget.field_value = option
            widget.update()


class Dropdown(_ChoiceField):
    kind = FieldKind.DROPDOWN


class OptionList(_ChoiceField):
    kind = FieldKind.OPTION_LIST


class PdfForm:
    """The document's structured-field inventory.

    Typed accessors fail with :class:`FieldTypeError` for the wrong kind so
    callers can probe, while :meth:`field_kind` exposes the widget type
    directly.
    """

    def __init__(self, doc: fitz.Document) -> None:
        self._doc = doc

    def iter_widgets(self, name: Optional[str] = None) -> Iterator[fitz.Widget]:
        for page in self._doc:
            for widget in page.widgets() or []:
                widget_name = _widget_name(widget)
                if widget_name is None:
                    continue
                if name is None or widget_name == name:
                    yield widget

    def field_names(self) -> List[str]:
        names: List[str] = []
        seen: set[str] = set()
        for widget in self.iter_widgets():
            name = _widget_name(widget)
            if name and name not in seen:
                seen.add(name)
                names.append(name)
        return names

    def field_kind(self, name: str) -> FieldKind:
        for widget in self.iter_widgets(name):
            return _widget_kind(widget)
        raise FieldNotFoundError(f"No field named '{name}'")

    def _typed(self, name: str, field_cls: type) -> _WidgetField:
        actual = self.field_kind(name)
        if actual != field_cls.kind:
            raise FieldTypeError(name, field_cls.kind, actual)
        return field_cls(self, name)

    def get_text_field(self, name: str) -> TextField:
        return self._typed(name, TextField)  # type: ignore[return-value]

    def get_check_box(self, name: str) -> CheckBox:
        return self._typed(name, CheckBox)  # type: ignore[return-value]

    def get_radio_group(self, name: str) -> RadioGroup:
        return self._typed(name, RadioGroup)  # type: ignore[return-value]

    def get_dropdown(self, name: str) -> Dropdown:
        return self._typed(name, Dropdown)  # type: ignore[return-value]

    def get_option_list(self, name: str) -> OptionList:
        return self._typed(name, OptionList)  # type: ignore[return-value]


class PdfDocument:
    """One request's view of a PDF, loaded from bytes and discarded afterwards."""

    def __init__(self, doc: fitz.Document) -> None:
        self._doc = doc
        self.form = PdfForm(doc)

    @classmethod
    def load(cls, data: bytes) -> "PdfDocument":
        if not data:
            raise DocumentLoadError("The PDF is empty.")
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise DocumentLoadError(f"Could not open PDF: {exc}") from exc
        logger.debug("Loaded PDF with %d pages", doc.page_count)
        return cls(doc)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def pages(self) -> List[PdfPage]:
        return [PdfPage(self._doc[index]) for index in range(self._doc.page_count)]

    def page(self, index: int) -> PdfPage:
        return PdfPage(self._doc[index])

    def to_bytes(self) -> bytes:
        return self._doc.tobytes(garbage=4, deflate=True)

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "CheckBox",
    "DocumentLoadError",
    "Dropdown",
    "FieldLookupError",
    "FieldNotFoundError",
    "FieldTypeError",
    "InvalidOptionError",
    "OptionList",
    "PdfDocument",
    "PdfForm",
    "PdfPage",
    "RadioGroup",
    "TextField",
]
