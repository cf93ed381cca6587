"""
Screen Access Selection
=======================

Access catalog types and the selection set used by the user form.

Two kinds of access are assigned to a user:

- Access level: a single coarse role (``GET /niveis-acesso``)
- Screen access: any subset of the screen catalog (``GET /modulos``)

The screen catalog is the permission universe the form's selection set is
checked against. The "select all" switch pivots on whether the selection
already equals the whole universe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional

from api import ApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessOption:
    """A screen that can be individually granted."""
    id: str
    label: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AccessOption":
        return cls(id=str(row["id"]), label=str(row.get("descricao", "")))


@dataclass(frozen=True)
class AccessLevel:
    """A coarse role; each user has exactly one."""
    id: str
    label: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AccessLevel":
        return cls(id=str(row["id"]), label=str(row.get("descricao", "")))


class AccessSelectionSet:
    """
    Set of screen access identifiers granted to a draft user.

    Unknown identifiers are accepted; the universe is trusted as supplied by
    the backend and is only consulted by ``toggle_all`` and ``all_selected``.
    """

    def __init__(self, ids: Optional[Iterable[str]] = None):
        self._members = set(ids or ())

    def __contains__(self, access_id: object) -> bool:
        return access_id in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return f"AccessSelectionSet({sorted(self._members)!r})"

    @property
    def ids(self) -> FrozenSet[str]:
        return frozenset(self._members)

    def toggle(self, access_id: str) -> None:
        """Remove ``access_id`` if present, add it otherwise."""
        if access_id in self._members:
            self._members.discard(access_id)
        else:
            self._members.add(access_id)

    def all_selected(self, universe_ids: Iterable[str]) -> bool:
        """True when every universe id is selected (vacuously true for an empty universe)."""
        return all(access_id in self._members for access_id in universe_ids)

    def toggle_all(self, universe_ids: Iterable[str]) -> None:
        """
        Drive the "select all" switch.

        If the whole universe is already selected the selection is cleared,
        otherwise it becomes exactly the universe, discarding any partial
        state.
        """
        universe = list(universe_ids)
        if self.all_selected(universe):
            self._members = set()
        else:
            self._members = set(universe)


# =============================================================================
# CATALOG
# =============================================================================

@dataclass
class AccessCatalog:
    """
    Access levels and screens fetched once per form session.

    A failed fetch leaves the affected list empty; the failure is logged.
    """
    levels: List[AccessLevel] = field(default_factory=list)
    screens: List[AccessOption] = field(default_factory=list)

    @property
    def screen_ids(self) -> List[str]:
        return [screen.id for screen in self.screens]

    @classmethod
    def load(cls, api) -> "AccessCatalog":
        levels: List[AccessLevel] = []
        screens: List[AccessOption] = []

        try:
            levels = _map_rows(AccessLevel, api.list_access_levels(), "access level")
        except ApiError as exc:
            logger.warning("Could not load access levels: %s", exc)

        try:
            screens = _map_rows(AccessOption, api.list_modules(), "screen")
        except ApiError as exc:
            logger.warning("Could not load screen catalog: %s", exc)

        return cls(levels=levels, screens=screens)


def _map_rows(cls, rows, what: str) -> list:
    """Map backend rows, skipping any that lack an id."""
    mapped = []
    for row in rows:
        if not isinstance(row, dict) or row.get("id") is None:
            logger.warning("Skipping malformed %s row: %r", what, row)
            continue
        mapped.append(cls.from_row(row))
    return mapped
