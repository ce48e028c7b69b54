"""Append-only log of membership changes."""

from __future__ import annotations

from .models import ChangeAction, ChangeRecord


class ChangeTracker:
    """Records every membership mutation made through a collaborator.

    ``data`` is the tracker's own list, so a handle obtained early in a run
    keeps seeing changes made afterwards.
    """

    def __init__(self) -> None:
        self._data: list[ChangeRecord] = []

    @property
    def data(self) -> list[ChangeRecord]:
        return self._data

    def record(self, action: ChangeAction, user: str, team: str) -> ChangeRecord:
        change = ChangeRecord(action=action, user=user, team=team)
        self._data.append(change)
        return change

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["ChangeTracker"]
