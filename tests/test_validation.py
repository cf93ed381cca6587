"""
Tests for form validation.

Covers:
  - User form required fields and e-mail shape
  - Password form strength and confirmation rules
  - Only failing fields appear in the result
"""
import pytest

from validation import (
    ACCESS_LEVEL_REQUIRED,
    CONFIRMATION_MISMATCH,
    CONFIRMATION_REQUIRED,
    EMAIL_INVALID,
    EMAIL_REQUIRED,
    NAME_REQUIRED,
    PASSWORD_REQUIRED,
    PASSWORD_WEAK,
    PasswordDraft,
    PasswordField,
    UserDraft,
    UserField,
    validate_password_draft,
    validate_user_draft,
)


def _valid_user(**overrides):
    fields = dict(name="Ana Souza", email="ana@example.com", access_level_id="1")
    fields.update(overrides)
    return UserDraft(**fields)


def test_blank_user_draft_has_exactly_three_errors():
    errors = validate_user_draft(UserDraft())
    assert errors == {
        UserField.NAME: NAME_REQUIRED,
        UserField.EMAIL: EMAIL_REQUIRED,
        UserField.ACCESS_LEVEL: ACCESS_LEVEL_REQUIRED,
    }


def test_valid_user_draft_has_no_errors():
    assert validate_user_draft(_valid_user()) == {}


def test_phone_password_and_access_are_optional():
    draft = _valid_user(phone="", password="", access_ids=frozenset())
    assert validate_user_draft(draft) == {}


@pytest.mark.parametrize("email", ["a@b", "a b@c.d", "@b.c", "a@.c", "a@b.", "plain", "a@b.c\n", " a@b.c"])
def test_malformed_email(email):
    assert validate_user_draft(_valid_user(email=email))[UserField.EMAIL] == EMAIL_INVALID


@pytest.mark.parametrize("email", ["a@b.c", "first.last@sub.domain.org"])
def test_well_formed_email(email):
    assert UserField.EMAIL not in validate_user_draft(_valid_user(email=email))


def test_rules_are_not_short_circuited():
    errors = validate_user_draft(_valid_user(name="", email="nope"))
    assert set(errors) == {UserField.NAME, UserField.EMAIL}


def test_draft_accessors_use_field_enum():
    draft = UserDraft()
    draft.set(UserField.NAME, "Ana")
    draft.set(UserField.ACCESS_IDS, [1, "2"])
    assert draft.get(UserField.NAME) == "Ana"
    assert draft.access_ids == frozenset({"1", "2"})


def test_field_values_are_wire_keys():
    assert UserField.ACCESS_LEVEL.value == "nivelAcesso"
    assert PasswordField.CONFIRMATION.value == "confirmacao"


# -- password form ---------------------------------------------------------------

def test_blank_password_draft():
    errors = validate_password_draft(PasswordDraft())
    assert errors == {
        PasswordField.PASSWORD: PASSWORD_REQUIRED,
        PasswordField.CONFIRMATION: CONFIRMATION_REQUIRED,
    }


def test_weak_password():
    errors = validate_password_draft(PasswordDraft("abcdefgh", "abcdefgh"))
    assert errors == {PasswordField.PASSWORD: PASSWORD_WEAK}


def test_mismatched_confirmation():
    errors = validate_password_draft(PasswordDraft("Abcdefg1", "Abcdefg2"))
    assert errors == {PasswordField.CONFIRMATION: CONFIRMATION_MISMATCH}


def test_confirmation_compared_exactly():
    errors = validate_password_draft(PasswordDraft("Abcdefg1", "Abcdefg1 "))
    assert errors[PasswordField.CONFIRMATION] == CONFIRMATION_MISMATCH


def test_matching_strong_password_passes():
    assert validate_password_draft(PasswordDraft("Abcdefg1", "Abcdefg1")) == {}
