"""
Form Validation
===============

Drafts and validation rules for the two console forms:

1. User form (create/edit a platform user):
   - name is required
   - e-mail is required and must look like ``local@domain.tld``
   - an access level must be selected

2. Password form (user sets their own credential from a tokenized link):
   - password is required and must satisfy the password policy
   - confirmation is required and must equal the password

Every rule is evaluated; the result maps each failing field to a message.
Passing fields are absent from the mapping. Validation never raises.

Field identifiers are closed enums whose values are the backend wire keys,
so a typo in a field name fails at import time rather than silently
creating a new key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Union

from password_policy import is_strong_password


# =============================================================================
# FIELD IDENTIFIERS
# =============================================================================

class UserField(str, Enum):
    """Fields of the user form, valued with their payload keys."""
    NAME = "nome"
    EMAIL = "email"
    PASSWORD = "senha"
    PHONE = "telefone"
    ACTIVE = "ativo"
    ACCESS_IDS = "acessos"
    ACCESS_LEVEL = "nivelAcesso"


class PasswordField(str, Enum):
    """Fields of the password form."""
    PASSWORD = "senha"
    CONFIRMATION = "confirmacao"


FormField = Union[UserField, PasswordField]
FieldErrors = Dict[FormField, str]


# =============================================================================
# MESSAGES
# =============================================================================

NAME_REQUIRED = "Name is required"
EMAIL_REQUIRED = "E-mail is required"
EMAIL_INVALID = "Invalid e-mail"
ACCESS_LEVEL_REQUIRED = "Access level is required"
PASSWORD_REQUIRED = "Enter the new password"
PASSWORD_WEAK = "Password does not meet all requirements"
CONFIRMATION_REQUIRED = "Confirm the password"
CONFIRMATION_MISMATCH = "Passwords do not match"

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


# =============================================================================
# DRAFTS
# =============================================================================

_USER_ATTRS = {
    UserField.NAME: "name",
    UserField.EMAIL: "email",
    UserField.PASSWORD: "password",
    UserField.PHONE: "phone",
    UserField.ACTIVE: "active",
    UserField.ACCESS_IDS: "access_ids",
    UserField.ACCESS_LEVEL: "access_level_id",
}

_PASSWORD_ATTRS = {
    PasswordField.PASSWORD: "password",
    PasswordField.CONFIRMATION: "confirmation",
}


@dataclass
class UserDraft:
    """
    In-progress user being created or edited.

    Attributes:
        name: Full name
        email: E-mail address
        password: Initial password (optional on this form)
        phone: Phone number; empty string means not informed
        active: "1" for active accounts, "0" otherwise
        access_ids: Screen access identifiers granted to the user
        access_level_id: Selected access level identifier, empty if none
        user_id: Backend id when editing an existing user
    """
    name: str = ""
    email: str = ""
    password: str = ""
    phone: Optional[str] = ""
    active: str = "1"
    access_ids: FrozenSet[str] = field(default_factory=frozenset)
    access_level_id: str = ""
    user_id: Optional[int] = None

    def get(self, name: UserField) -> Any:
        return getattr(self, _USER_ATTRS[name])

    def set(self, name: UserField, value: Any) -> None:
        if name == UserField.ACCESS_IDS:
            value = frozenset(str(v) for v in value)
        setattr(self, _USER_ATTRS[name], value)


@dataclass
class PasswordDraft:
    password: str = ""
    confirmation: str = ""

    def get(self, name: PasswordField) -> str:
        return getattr(self, _PASSWORD_ATTRS[name])

    def set(self, name: PasswordField, value: str) -> None:
        setattr(self, _PASSWORD_ATTRS[name], value)


# =============================================================================
# RULES
# =============================================================================

def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email))


def validate_user_draft(draft: UserDraft) -> FieldErrors:
    """
    Validate the user form.

    Args:
        draft: Current user form snapshot

    Returns:
        Mapping of failing fields to messages (empty when the draft is valid)
    """
    errors: FieldErrors = {}

    if not draft.name:
        errors[UserField.NAME] = NAME_REQUIRED

    if not draft.email:
        errors[UserField.EMAIL] = EMAIL_REQUIRED
    elif not is_valid_email(draft.email):
        errors[UserField.EMAIL] = EMAIL_INVALID

    if not draft.access_level_id:
        errors[UserField.ACCESS_LEVEL] = ACCESS_LEVEL_REQUIRED

    return errors


def validate_password_draft(draft: PasswordDraft) -> FieldErrors:
    """Validate the password form. Confirmation is compared as a plain string."""
    errors: FieldErrors = {}

    if not draft.password:
        errors[PasswordField.PASSWORD] = PASSWORD_REQUIRED
    elif not is_strong_password(draft.password):
        errors[PasswordField.PASSWORD] = PASSWORD_WEAK

    if not draft.confirmation:
        errors[PasswordField.CONFIRMATION] = CONFIRMATION_REQUIRED
    elif draft.password and draft.password != draft.confirmation:
        errors[PasswordField.CONFIRMATION] = CONFIRMATION_MISMATCH

    return errors
