"""
Password Policy
===============

Evaluates a candidate password against the console password policy:

- At least 8 characters
- At least one uppercase letter (A-Z)
- At least one lowercase letter (a-z)
- At least one digit (0-9)

The evaluation is pure and cheap, so pages recompute it on every change
of the password field to drive the live requirement checklist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple


MIN_PASSWORD_LENGTH = 8

_UPPER_RE = re.compile(r"[A-Z]")
_LOWER_RE = re.compile(r"[a-z]")
_DIGIT_RE = re.compile(r"[0-9]")


@dataclass(frozen=True)
class PasswordRequirements:
    """
    Result of evaluating a password against the policy.

    Attributes:
        min_length: Password has at least MIN_PASSWORD_LENGTH characters
        has_upper: Password contains an uppercase ASCII letter
        has_lower: Password contains a lowercase ASCII letter
        has_digit: Password contains an ASCII digit
    """
    min_length: bool
    has_upper: bool
    has_lower: bool
    has_digit: bool

    @property
    def strong(self) -> bool:
        """True only when every check passes."""
        return self.min_length and self.has_upper and self.has_lower and self.has_digit


def evaluate_password(password: str) -> PasswordRequirements:
    """Evaluate ``password``. An empty string fails every check."""
    return PasswordRequirements(
        min_length=len(password) >= MIN_PASSWORD_LENGTH,
        has_upper=bool(_UPPER_RE.search(password)),
        has_lower=bool(_LOWER_RE.search(password)),
        has_digit=bool(_DIGIT_RE.search(password)),
    )


def is_strong_password(password: str) -> bool:
    return evaluate_password(password).strong


def requirement_checklist(requirements: PasswordRequirements) -> List[Tuple[str, bool]]:
    """
    Build the ordered checklist shown under the password field.

    Returns:
        List of (label, satisfied) pairs in display order
    """
    return [
        (f"At least {MIN_PASSWORD_LENGTH} characters", requirements.min_length),
        ("At least 1 uppercase letter (A-Z)", requirements.has_upper),
        ("At least 1 lowercase letter (a-z)", requirements.has_lower),
        ("At least 1 number (0-9)", requirements.has_digit),
    ]
