"""
Form Controllers
================

State machines behind the console forms. They hold the draft, the current
field errors and the submission state, and expose the commands the pages
call on user input. Nothing here renders; pages read the derived state
back after each command.

States:
- EDITING: initial state, and the state after any edit or finished submit
- SUBMITTING: validation passed and the submitter is running
- ERRORED: the last submit was blocked by validation errors; the next edit
  returns the form to EDITING

A submit always validates the full draft first. A draft that fails
validation never reaches the submitter, and a submit issued while another
is still running is rejected.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from access import AccessCatalog, AccessSelectionSet
from api import ApiError
from password_policy import PasswordRequirements, evaluate_password, requirement_checklist
from validation import (
    FieldErrors,
    FormField,
    PasswordDraft,
    PasswordField,
    UserDraft,
    UserField,
    validate_password_draft,
    validate_user_draft,
)

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]
Navigator = Callable[[str], None]
UserSubmitter = Callable[[Dict[str, Any]], Any]
PasswordSetter = Callable[[str, str], int]

USER_SAVE_FAILED = "Could not save the user."
TOKEN_MISSING = "Invalid or missing token."
PASSWORD_SET_OK = "Password set successfully! Please sign in."
PASSWORD_SET_FAILED = "Could not set the password."
PASSWORD_SET_ERROR = "Error setting the password."


class FormState(Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    ERRORED = "errored"


def _ignore_notice(level: str, message: str) -> None:
    pass


def _ignore_navigation(route: str) -> None:
    pass


class FormController:
    """
    Validation/submission state machine shared by the console forms.

    Subclasses provide the draft accessors, the validation rules and the
    submit action.
    """

    def __init__(self, notify: Optional[Notifier] = None):
        self.state = FormState.EDITING
        self._errors: FieldErrors = {}
        self._notify = notify or _ignore_notice

    # -- hooks ----------------------------------------------------------------

    def _write_field(self, name: FormField, value: Any) -> None:
        raise NotImplementedError

    def _run_validation(self) -> FieldErrors:
        raise NotImplementedError

    def _perform_submit(self) -> bool:
        raise NotImplementedError

    # -- derived state ----------------------------------------------------------

    @property
    def errors(self) -> FieldErrors:
        return dict(self._errors)

    def error_for(self, name: FormField) -> Optional[str]:
        return self._errors.get(name)

    @property
    def is_submitting(self) -> bool:
        return self.state == FormState.SUBMITTING

    # -- commands ---------------------------------------------------------------

    def _touch(self) -> None:
        if self.state == FormState.ERRORED:
            self.state = FormState.EDITING

    def set_field(self, name: FormField, value: Any) -> None:
        """
        Update one field of the draft.

        An existing error on that field is cleared right away; other errors
        stay until the next full validation.
        """
        self._write_field(name, value)
        self._errors.pop(name, None)
        self._touch()

    def validate(self) -> FieldErrors:
        """Re-run every rule and replace the current errors wholesale."""
        self._errors = self._run_validation()
        return dict(self._errors)

    def submit(self) -> bool:
        """
        Validate and, when the draft is valid, hand it to the submitter.

        Returns:
            True if the submitter ran and reported success, False otherwise
        """
        if self.state == FormState.SUBMITTING:
            logger.warning("Ignoring submit on %s: a submission is already running", type(self).__name__)
            return False

        if self.validate():
            self.state = FormState.ERRORED
            return False

        self.state = FormState.SUBMITTING
        try:
            return self._perform_submit()
        finally:
            self.state = FormState.EDITING


# =============================================================================
# USER FORM
# =============================================================================

def redact_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    redacted = dict(payload)
    if redacted.get(UserField.PASSWORD.value):
        redacted[UserField.PASSWORD.value] = "***"
    return redacted


def stage_user_payload(payload: Dict[str, Any]) -> None:
    """Submitter used while user persistence is disabled: log and keep nothing."""
    logger.info("User payload validated but not persisted: %s", redact_payload(payload))


class UserFormController(FormController):
    """
    Create/edit form for a platform user.

    Args:
        catalog: Access levels and screens offered by the form
        submit_user: Receives the submission payload; may raise ApiError
        notify: Receives (level, message) for user-facing notifications
        draft: Prefilled draft (edit mode); a blank one is created otherwise
    """

    def __init__(
        self,
        catalog: AccessCatalog,
        submit_user: UserSubmitter,
        notify: Optional[Notifier] = None,
        draft: Optional[UserDraft] = None,
    ):
        super().__init__(notify)
        self.catalog = catalog
        self.draft = draft or UserDraft()
        self.selection = AccessSelectionSet(self.draft.access_ids)
        self._submit_user = submit_user

    @classmethod
    def for_record(cls, record, catalog: AccessCatalog, submit_user: UserSubmitter,
                   notify: Optional[Notifier] = None) -> "UserFormController":
        """Open the form prefilled from a listed user."""
        draft = UserDraft(
            name=record.name,
            email=record.email,
            phone=record.phone or "",
            active=record.active or "1",
            user_id=record.id,
        )
        return cls(catalog, submit_user, notify=notify, draft=draft)

    @property
    def is_editing_existing(self) -> bool:
        return self.draft.user_id is not None

    def _write_field(self, name: UserField, value: Any) -> None:
        self.draft.set(name, value)
        if name == UserField.ACCESS_IDS:
            self.selection = AccessSelectionSet(self.draft.access_ids)

    def _run_validation(self) -> FieldErrors:
        return validate_user_draft(self.draft)

    # -- screen access ------------------------------------------------------------

    def _sync_access(self) -> None:
        self.draft.access_ids = self.selection.ids
        self._touch()

    def toggle_access(self, access_id: str) -> None:
        self.selection.toggle(access_id)
        self._sync_access()

    def toggle_all_access(self) -> None:
        self.selection.toggle_all(self.catalog.screen_ids)
        self._sync_access()

    def is_granted(self, access_id: str) -> bool:
        return access_id in self.selection

    @property
    def all_selected(self) -> bool:
        return self.selection.all_selected(self.catalog.screen_ids)

    # -- submission ---------------------------------------------------------------

    def build_payload(self) -> Dict[str, Any]:
        draft = self.draft
        payload: Dict[str, Any] = {
            UserField.NAME.value: draft.name,
            UserField.EMAIL.value: draft.email,
            UserField.PASSWORD.value: draft.password,
            UserField.PHONE.value: draft.phone or None,
            UserField.ACTIVE.value: draft.active,
            UserField.ACCESS_IDS.value: sorted(draft.access_ids),
            UserField.ACCESS_LEVEL.value: draft.access_level_id,
        }
        if draft.user_id is not None:
            payload["id"] = draft.user_id
        return payload

    def _perform_submit(self) -> bool:
        try:
            self._submit_user(self.build_payload())
        except ApiError as exc:
            logger.warning("Saving user %r failed: %s", self.draft.email, exc)
            self._notify("error", exc.server_message or USER_SAVE_FAILED)
            return False
        return True


# =============================================================================
# PASSWORD FORM
# =============================================================================

class PasswordResetController(FormController):
    """
    Form where a user sets their own password from a tokenized link.

    The token is a precondition: without it the form is never usable and
    ``check_token`` sends the user back home.
    """

    def __init__(
        self,
        token: Optional[str],
        set_password: PasswordSetter,
        notify: Optional[Notifier] = None,
        navigate: Optional[Navigator] = None,
    ):
        super().__init__(notify)
        self.token = token or ""
        self.draft = PasswordDraft()
        self._set_password = set_password
        self._navigate = navigate or _ignore_navigation

    def check_token(self) -> bool:
        if self.token:
            return True
        self._notify("error", TOKEN_MISSING)
        self._navigate("home")
        return False

    @property
    def requirements(self) -> PasswordRequirements:
        return evaluate_password(self.draft.password)

    @property
    def strong(self) -> bool:
        return self.requirements.strong

    @property
    def checklist(self) -> List[Tuple[str, bool]]:
        return requirement_checklist(self.requirements)

    def _write_field(self, name: PasswordField, value: Any) -> None:
        self.draft.set(name, value)

    def _run_validation(self) -> FieldErrors:
        return validate_password_draft(self.draft)

    def _perform_submit(self) -> bool:
        if not self.check_token():
            return False
        try:
            status = self._set_password(self.token, self.draft.password)
        except ApiError as exc:
            logger.warning("Setting password failed: %s", exc)
            self._notify("error", exc.server_message or PASSWORD_SET_ERROR)
            return False

        if status != 200:
            logger.warning("Setting password returned status %s", status)
            self._notify("error", PASSWORD_SET_FAILED)
            return False

        self._notify("success", PASSWORD_SET_OK)
        self._navigate("home")
        return True
