"""Streamlit UI for filling flat PDFs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# Configure the root handler before flatfill modules create their loggers.
logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

from flatfill import (  # noqa: E402
    DetectionResult,
    FieldProposal,
    FieldType,
    FillRequest,
    FormFillerError,
    Settings,
    detect_fields,
    fill_form,
)
from flatfill.models import FieldValue  # noqa: E402

_NO_SELECTION = "— No selection —"


def _init_session_state() -> None:
    defaults = {
        "uploaded_filename": None,
        "pdf_bytes": None,
        "detection": None,
        "filled_pdf_bytes": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _reset_state_on_new_upload(filename: str, data: bytes) -> None:
    if st.session_state.uploaded_filename != filename:
        st.session_state.uploaded_filename = filename
        st.session_state.pdf_bytes = data
        st.session_state.detection = None
        st.session_state.filled_pdf_bytes = None


def _render_field_input(proposal: FieldProposal) -> Optional[FieldValue]:
    key = f"field_{proposal.name}"
    help_text = proposal.placeholder or None

    if proposal.field_type == FieldType.CHECKBOX:
        return st.checkbox(proposal.label, key=key, help=help_text)

    if proposal.field_type in {FieldType.RADIO, FieldType.SELECT} and proposal.options:
        choices = [_NO_SELECTION, *proposal.options]
        if proposal.field_type == FieldType.RADIO:
            selection = st.radio(proposal.label, choices, key=key, help=help_text)
        else:
            selection = st.selectbox(proposal.label, choices, key=key, help=help_text)
        return None if selection == _NO_SELECTION else selection

    value = st.text_input(proposal.label, key=key, placeholder=proposal.placeholder or "", help=help_text)
    return value or None


def _render_form(detection: DetectionResult) -> Dict[str, FieldValue]:
    values: Dict[str, FieldValue] = {}
    for proposal in detection.fields:
        value = _render_field_input(proposal)
        if value is not None:
            values[proposal.name] = value
    return values


def _output_name(upload_name: Optional[str]) -> str:
    stem = Path(upload_name or "form").stem
    return f"{stem}_filled.pdf"


def main() -> None:
    st.set_page_config(page_title="Flat PDF Filler", page_icon="📝", layout="wide")
    _init_session_state()
    settings = Settings.from_env()

    st.title("Flat PDF Filler")
    st.caption("Upload a flat or scanned PDF, answer the detected questions, and download the filled copy.")

    uploaded = st.file_uploader("PDF document", type=["pdf"])
    if uploaded is None:
        return
    _reset_state_on_new_upload(uploaded.name, uploaded.getvalue())

    if st.session_state.detection is None:
        if st.button("Detect fields", type="primary"):
            with st.spinner("Detecting fields..."):
                try:
                    st.session_state.detection = detect_fields(st.session_state.pdf_bytes, settings=settings)
                except (FormFillerError, ValueError) as exc:
                    st.error(str(exc))
                    return
        else:
            return

    detection: DetectionResult = st.session_state.detection
    if not detection.fields:
        st.warning("No fields were detected in this PDF.")
        return

    if detection.title:
        st.subheader(detection.title)

    with st.form("answers"):
        values = _render_form(detection)
        submitted = st.form_submit_button("Fill PDF")

    if submitted:
        request = FillRequest(pdf_bytes=st.session_state.pdf_bytes, values=values, fields=detection.fields)
        try:
            result = fill_form(request, settings=settings)
        except FormFillerError as exc:
            st.error(str(exc))
            return
        st.session_state.filled_pdf_bytes = result.pdf_bytes
        if result.unresolved:
            st.info("Some answers could not be placed: " + ", ".join(sorted(result.unresolved)))

    if st.session_state.filled_pdf_bytes:
        st.download_button(
            "Download filled PDF",
            data=st.session_state.filled_pdf_bytes,
            file_name=_output_name(st.session_state.uploaded_filename),
            mime="application/pdf",
        )


if __name__ == "__main__":
    main()
