"""Pytest configuration and fixtures."""

from typing import Callable, Dict, Iterable, Optional

import fitz
import pytest

from flatfill.config import Settings
from flatfill.document import FieldNotFoundError, FieldTypeError, InvalidOptionError
from flatfill.models import FieldKind


LETTER = (612, 792)


class FakeField:
    """In-memory field honouring the same methods as the PyMuPDF wrappers."""

    def __init__(self, kind: FieldKind, options: Iterable[str] = ()) -> None:
        self.kind = kind
        self.options = list(options)
        self.text = ""
        self.checked = False
        self.selected: Optional[str] = None

    def set_text(self, text: str) -> None:
        self.text = text

    def get_text(self) -> str:
        return self.text

    def check(self) -> None:
        self.checked = True

    def uncheck(self) -> None:
        self.checked = False

    def is_checked(self) -> bool:
        return self.checked

    def get_options(self):
        return list(self.options)

    def select(self, option: str) -> None:
        if option not in self.options:
            raise InvalidOptionError("fake", option, self.options)
        self.selected = option


class FakeForm:
    """A form without an intrinsic kind tag, so callers must probe accessors."""

    def __init__(self, fields: Dict[str, FakeField]) -> None:
        self.fields = fields
        self.probes = []

    def field_names(self):
        return list(self.fields)

    def _typed(self, name: str, kind: FieldKind) -> FakeField:
        self.probes.append((name, kind))
        if name not in self.fields:
            raise FieldNotFoundError(name)
        field = self.fields[name]
        if field.kind != kind:
            raise FieldTypeError(name, kind, field.kind)
        return field

    def get_text_field(self, name):
        return self._typed(name, FieldKind.TEXT)

    def get_check_box(self, name):
        return self._typed(name, FieldKind.CHECKBOX)

    def get_radio_group(self, name):
        return self._typed(name, FieldKind.RADIO)

    def get_dropdown(self, name):
        return self._typed(name, FieldKind.DROPDOWN)

    def get_option_list(self, name):
        return self._typed(name, FieldKind.OPTION_LIST)


class TaggedFakeForm(FakeForm):
    """A form that reports each field's kind directly."""

    def field_kind(self, name):
        if name not in self.fields:
            raise FieldNotFoundError(name)
        return self.fields[name].kind


@pytest.fixture
def fake_form() -> Callable[..., FakeForm]:
    def factory(fields: Dict[str, FakeField], tagged: bool = False) -> FakeForm:
        return (TaggedFakeForm if tagged else FakeForm)(fields)

    return factory


@pytest.fixture
def sample_form(fake_form) -> FakeForm:
    return fake_form(
        {
            "Full_Name": FakeField(FieldKind.TEXT),
            "Email": FakeField(FieldKind.TEXT),
            "agree_terms": FakeField(FieldKind.CHECKBOX),
            "gender": FakeField(FieldKind.RADIO, ["Male", "Female"]),
            "country": FakeField(FieldKind.DROPDOWN, ["Canada", "Mexico", "USA"]),
            "colors": FakeField(FieldKind.OPTION_LIST, ["Red", "Green"]),
            "submit": FakeField(FieldKind.UNKNOWN),
        }
    )


def _new_document(pages: int = 1) -> fitz.Document:
    doc = fitz.open()
    for _ in range(pages):
        doc.new_page(width=LETTER[0], height=LETTER[1])
    return doc


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    doc = _new_document()
    try:
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def two_page_pdf_bytes() -> bytes:
    doc = _new_document(pages=2)
    try:
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def form_pdf_bytes() -> bytes:
    """A one-page PDF carrying text, checkbox and combo-box widgets."""

    doc = _new_document()
    page = doc[0]

    for index, name in enumerate(("Full_Name", "Email")):
        widget = fitz.Widget()
        widget.field_name = name
        widget.field_type = fitz.PDF_WIDGET_TYPE_TEXT
        widget.rect = fitz.Rect(72, 72 + index * 40, 300, 92 + index * 40)
        widget.field_value = ""
        page.add_widget(widget)

    checkbox = fitz.Widget()
    checkbox.field_name = "agree_terms"
    checkbox.field_type = fitz.PDF_WIDGET_TYPE_CHECKBOX
    checkbox.rect = fitz.Rect(72, 160, 86, 174)
    checkbox.field_value = False
    page.add_widget(checkbox)

    combo = fitz.Widget()
    combo.field_name = "country"
    combo.field_type = fitz.PDF_WIDGET_TYPE_COMBOBOX
    combo.rect = fitz.Rect(72, 200, 200, 220)
    combo.choice_values = ["Canada", "Mexico", "USA"]
    combo.field_value = "Canada"
    page.add_widget(combo)

    try:
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def native_settings() -> Settings:
    return Settings(api_key="test-key", allow_native_forms=True)


def _rename_on_state(doc: fitz.Document, xref: int, state: str) -> None:
    for key in ("AP/N", "AP/D"):
        kind, value = doc.xref_get_key(xref, key)
        if kind == "dict":
            doc.xref_set_key(xref, key, value.replace("/Yes", f"/{state}"))


@pytest.fixture
def choice_pdf_bytes() -> bytes:
    """A one-page PDF carrying a two-button radio group and a list box."""

    doc = _new_document()
    page = doc[0]

    for index, state in enumerate(("Male", "Female")):
        radio = fitz.Widget()
        radio.field_name = "gender"
        radio.field_type = fitz.PDF_WIDGET_TYPE_RADIOBUTTON
        radio.rect = fitz.Rect(72 + index * 60, 72, 86 + index * 60, 86)
        radio.field_value = False
        added = page.add_widget(radio)
        _rename_on_state(doc, added.xref, state)

    listbox = fitz.Widget()
    listbox.field_name = "colors"
    listbox.field_type = fitz.PDF_WIDGET_TYPE_LISTBOX
    listbox.rect = fitz.Rect(72, 120, 200, 180)
    listbox.choice_values = ["Red", "Green", "Blue"]
    listbox.field_value = "Red"
    page.add_widget(listbox)

    try:
        return doc.tobytes()
    finally:
        doc.close()
