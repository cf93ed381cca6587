"""
Tests for the password policy evaluator.

Covers:
  - Each check in isolation
  - Strength as the conjunction of all checks
  - Checklist labels and order
"""
import pytest

from password_policy import evaluate_password, is_strong_password, requirement_checklist


def test_empty_password_fails_every_check():
    req = evaluate_password("")
    assert not req.min_length
    assert not req.has_upper
    assert not req.has_lower
    assert not req.has_digit
    assert not req.strong


def test_short_password_fails_length_only():
    req = evaluate_password("Ab1")
    assert not req.min_length
    assert req.has_upper and req.has_lower and req.has_digit
    assert not req.strong


def test_digits_only_fails_letter_checks():
    req = evaluate_password("12345678")
    assert req.min_length
    assert req.has_digit
    assert not req.has_upper
    assert not req.has_lower


def test_exactly_eight_characters_is_long_enough():
    assert evaluate_password("Abcdefg1").min_length
    assert not evaluate_password("Abcdef1").min_length


@pytest.mark.parametrize("password,strong", [
    ("Abcdefg1", True),
    ("abcdefg1", False),
    ("ABCDEFG1", False),
    ("Abcdefgh", False),
    ("Sup3r Secret", True),
])
def test_strength_is_conjunction(password, strong):
    assert evaluate_password(password).strong is strong
    assert is_strong_password(password) is strong


def test_checks_are_ascii_classes():
    req = evaluate_password("ÁÉÍÓÚ123")
    assert not req.has_upper
    assert not req.has_lower


def test_checklist_tracks_requirements():
    checklist = requirement_checklist(evaluate_password("abc"))
    labels = [label for label, _ in checklist]
    assert labels == [
        "At least 8 characters",
        "At least 1 uppercase letter (A-Z)",
        "At least 1 lowercase letter (a-z)",
        "At least 1 number (0-9)",
    ]
    assert [ok for _, ok in checklist] == [False, False, True, False]
