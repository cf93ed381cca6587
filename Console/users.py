"""
User List
=========

Loads the platform users shown on the Users page and deletes them.

The list is replaced wholesale on every load; a delete is followed by a
full reload instead of removing the row locally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from api import ApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    active: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.active == "1"

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserRecord":
        active = row.get("ativo")
        return cls(
            id=row["id"],
            name=str(row.get("nome") or ""),
            email=str(row.get("email") or ""),
            phone=row.get("telefone") or None,
            active=None if active is None else str(active),
        )


# =============================================================================
# RESPONSE SHAPE NEGOTIATION
# =============================================================================

RowExtractor = Callable[[Any], Optional[List[Dict[str, Any]]]]


def _from_key(key: str) -> RowExtractor:
    def extract(payload: Any) -> Optional[List[Dict[str, Any]]]:
        if isinstance(payload, dict) and isinstance(payload.get(key), list):
            return payload[key]
        return None
    return extract


def _bare_list(payload: Any) -> Optional[List[Dict[str, Any]]]:
    return payload if isinstance(payload, list) else None


# Tried in order; the first extractor that recognizes the payload wins.
USER_LIST_EXTRACTORS: Sequence[RowExtractor] = (
    _from_key("usuarios"),
    _from_key("clientes"),
    _bare_list,
)


def extract_user_rows(payload: Any) -> List[Dict[str, Any]]:
    """Pull the user rows out of a ``/usuarios`` response, whatever its shape."""
    for extractor in USER_LIST_EXTRACTORS:
        rows = extractor(payload)
        if rows is not None:
            return rows
    return []


# =============================================================================
# CONTROLLER
# =============================================================================

def _is_user_row(row: Any) -> bool:
    if isinstance(row, dict) and row.get("id") is not None:
        return True
    logger.warning("Skipping malformed user row: %r", row)
    return False


class UserListController:
    """
    Backs the Users page.

    A failed load is logged and leaves an empty list with loading cleared;
    there is no separate error state.
    """

    def __init__(self, api):
        self.api = api
        self.users: List[UserRecord] = []
        self.is_loading = False

    def load(self) -> List[UserRecord]:
        self.is_loading = True
        try:
            rows = extract_user_rows(self.api.list_users())
            self.users = [UserRecord.from_row(row) for row in rows if _is_user_row(row)]
        except ApiError as exc:
            logger.warning("Could not load users: %s", exc)
            self.users = []
        finally:
            self.is_loading = False
        return self.users

    def find(self, user_id: int) -> Optional[UserRecord]:
        return next((u for u in self.users if u.id == user_id), None)

    def delete(self, user_id: int) -> bool:
        """
        Delete a user and reload the full list.

        Returns:
            True if the backend accepted the removal, False if it failed
            (in which case the list is left unchanged)
        """
        try:
            self.api.delete_user(user_id)
        except ApiError as exc:
            logger.error("Failed to delete user %s: %s", user_id, exc)
            return False
        self.load()
        return True


def users_to_frame(users: List[UserRecord]) -> pd.DataFrame:
    """Table projection used by the Users page."""
    return pd.DataFrame(
        [
            {
                "Name": u.name,
                "E-mail": u.email,
                "Phone": u.phone or "-",
                "Active": "Yes" if u.is_active else "No",
            }
            for u in users
        ],
        columns=["Name", "E-mail", "Phone", "Active"],
    )
