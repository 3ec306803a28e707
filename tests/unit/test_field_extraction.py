"""Field extraction tests.

Run from project root:
    python -m pytest tests/unit/test_field_extraction.py -v
"""

import pytest

from uigen.services.generation.field_extraction import (
    extract_fields,
    extract_form_title,
    find_field_text,
    infer_field,
    split_field_names,
)


@pytest.mark.unit
class TestFieldListDetection:
    """Locating the field list inside a prompt."""

    def test_english_field_list(self) -> None:
        assert find_field_text("signup form with fields: email, password.") == "email, password"

    def test_polish_field_list(self) -> None:
        assert find_field_text("formularz z polami: imię, email i telefon") == "imię, email i telefon"

    def test_no_field_list(self) -> None:
        assert find_field_text("login form") is None
        assert extract_fields("login form") is None

    def test_split_on_separators(self) -> None:
        assert split_field_names("name, email or phone and message") == ["name", "email", "phone", "message"]
        assert split_field_names("imię, email i telefon") == ["imię", "email", "telefon"]


@pytest.mark.unit
class TestFieldInference:
    """Type, placeholder and validation inferred from a field phrase."""

    def test_email(self) -> None:
        field = infer_field("email")
        assert field.type == "email"
        assert field.validation == {"pattern": "email"}
        assert field.required is True

    def test_password(self) -> None:
        field = infer_field("password")
        assert field.type == "password"
        assert field.validation == {"minLength": 8, "pattern": "password"}

    def test_phone(self) -> None:
        field = infer_field("phone number")
        assert field.type == "tel"
        assert field.name == "phone_number"
        assert field.label == "Phone Number"

    def test_message_is_textarea(self) -> None:
        assert infer_field("message").type == "textarea"

    def test_unknown_phrase_is_text(self) -> None:
        field = infer_field("Favourite color")
        assert field.type == "text"
        assert field.name == "favourite_color"
        assert field.placeholder == "Enter favourite color"
        assert field.validation == {}

    def test_validation_is_not_shared(self) -> None:
        first = infer_field("email")
        first.validation["pattern"] = "changed"
        assert infer_field("email").validation == {"pattern": "email"}

    def test_digit_leading_name_is_prefixed(self) -> None:
        assert infer_field("2fa code").name == "field_2fa_code"


@pytest.mark.unit
class TestExtractFields:
    """Whole-prompt extraction."""

    def test_registration_fields(self) -> None:
        fields = extract_fields("registration form with fields: email, password")
        assert [f.name for f in fields] == ["email", "password"]
        assert [f.type for f in fields] == ["email", "password"]

    def test_polish_fields(self) -> None:
        fields = extract_fields("formularz z polami: imię, email i telefon")
        assert [f.type for f in fields] == ["text", "email", "tel"]
        assert [f.label for f in fields] == ["Imię", "Email", "Telefon"]

    def test_duplicate_names_are_suffixed(self) -> None:
        fields = extract_fields("form with fields: email, email")
        assert [f.name for f in fields] == ["email", "email_2"]


@pytest.mark.unit
class TestFormTitle:
    """Title phrase after "form"/"formularz"."""

    def test_polish_title(self) -> None:
        assert extract_form_title("formularz rejestracji z polami: email") == "Rejestracji"

    def test_title_stops_at_connector(self) -> None:
        assert extract_form_title("form feedback survey that collects ratings") == "Feedback survey"

    def test_connector_only_gives_none(self) -> None:
        assert extract_form_title("contact form with fields: name") is None

    def test_no_form_word(self) -> None:
        assert extract_form_title("a page with fields") is None
