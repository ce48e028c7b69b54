"""Contract between the retirement engine and GitHub."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..tracking import ChangeTracker


class GitHubError(RuntimeError):
    """Base class for errors raised while talking to GitHub."""


class UnableToGetMembersError(GitHubError):
    """Raised when the members of a team cannot be listed."""

    def __init__(self, org: str, team: str, reason: str) -> None:
        super().__init__(f"Unable to get members of team '{team}' in org '{org}': {reason}")
        self.org = org
        self.team = team


class GitHubApiError(GitHubError):
    """Raised when GitHub answers a request with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHub(Protocol):
    """Operations the retirement engine needs from GitHub."""

    async def get_members_of(self, team: str) -> list[str]:
        ...

    async def add_user_to_team(self, user: str, team: str) -> None:
        ...

    async def remove_user_from_team(self, user: str, team: str) -> None:
        ...

    async def has_committed_since(self, user: str, instant: datetime) -> bool:
        ...

    def track_changes(self) -> ChangeTracker:
        ...


__all__ = ["GitHub", "GitHubApiError", "GitHubError", "UnableToGetMembersError"]
