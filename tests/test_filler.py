"""Value applier tests."""

import pytest

from flatfill.filler import apply_value


class TestApplyValue:
    def test_text_round_trip(self, sample_form):
        assert apply_value(sample_form, "Full_Name", "Jane Doe") is True
        assert sample_form.fields["Full_Name"].get_text() == "Jane Doe"

    def test_boolean_written_to_text_field_as_lowercase(self, sample_form):
        apply_value(sample_form, "Email", True)
        assert sample_form.fields["Email"].get_text() == "true"

    @pytest.mark.parametrize(
        "value, checked",
        [(True, True), (False, False), ("true", True), ("TRUE", True), ("yes", False), ("", False)],
    )
    def test_checkbox_values(self, sample_form, value, checked):
        sample_form.fields["agree_terms"].checked = not checked
        assert apply_value(sample_form, "agree_terms", value) is True
        assert sample_form.fields["agree_terms"].is_checked() is checked

    def test_radio_selects_exact_option(self, sample_form):
        assert apply_value(sample_form, "gender", "Female") is True
        assert sample_form.fields["gender"].selected == "Female"

    @pytest.mark.parametrize("name", ["gender", "country", "colors"])
    def test_unknown_option_is_recoverable(self, sample_form, name, caplog):
        assert apply_value(sample_form, name, "female-ish") is False
        assert sample_form.fields[name].selected is None
        assert "Unable to fill field" in caplog.text

    def test_dropdown_and_option_list(self, sample_form):
        assert apply_value(sample_form, "country", "Mexico") is True
        assert apply_value(sample_form, "colors", "Green") is True
        assert sample_form.fields["country"].selected == "Mexico"
        assert sample_form.fields["colors"].selected == "Green"

    def test_choice_selection_is_case_sensitive(self, sample_form):
        assert apply_value(sample_form, "country", "mexico") is False

    def test_unsupported_kind_is_a_noop(self, sample_form, caplog):
        assert apply_value(sample_form, "submit", "x") is False
        assert "unsupported field kind" in caplog.text

    def test_missing_field_is_a_noop(self, sample_form):
        assert apply_value(sample_form, "does_not_exist", "x") is False
