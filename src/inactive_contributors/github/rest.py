"""GitHub REST API adapter."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence
from urllib.parse import quote, unquote

import httpx

from .. import __version__
from ..tracking import ChangeTracker
from .base import GitHubApiError, UnableToGetMembersError

DEFAULT_API_URL = "https://api.github.com"
_PAGE_SIZE = 100

logger = logging.getLogger(__name__)


class RestGitHub:
    """Team membership and commit activity for one GitHub organisation."""

    def __init__(self, client: httpx.AsyncClient, org: str) -> None:
        self._client = client
        self._org = org
        self._changes = ChangeTracker()

    @classmethod
    def connect(
        cls,
        token: str,
        org: str,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ) -> "RestGitHub":
        """Build an adapter talking to the real GitHub API."""

        client = httpx.AsyncClient(
            base_url=base_url,
            headers=_default_headers(token),
            timeout=timeout,
        )
        return cls(client, org)

    @classmethod
    def create_null(
        cls,
        *,
        has_committed: Iterable[bool] | None = None,
        team_members: Iterable[Sequence[str]] | None = None,
        org: str = "null-org",
    ) -> "RestGitHub":
        """Build an adapter that never leaves the process.

        ``has_committed`` and ``team_members`` script the answers to successive
        ``has_committed_since`` and ``get_members_of`` calls. Once a script runs
        out, or when none is given, the answers are ``False`` and ``[]``.
        Membership changes are accepted and tracked but change nothing. The
        mock transport holds no connections, so closing the adapter is optional.
        """

        responses = _ScriptedResponses(has_committed=has_committed, team_members=team_members)
        client = httpx.AsyncClient(
            base_url=DEFAULT_API_URL,
            headers=_default_headers("null-token"),
            transport=httpx.MockTransport(responses.handle),
        )
        return cls(client, org)

    @property
    def org(self) -> str:
        return self._org

    async def get_members_of(self, team: str) -> list[str]:
        url: str | None = _path("orgs", self._org, "teams", team, "members")
        params: dict[str, Any] | None = {"per_page": _PAGE_SIZE}
        members: list[str] = []
        try:
            while url is not None:
                response = await self._client.get(url, params=params)
                response.raise_for_status()
                members.extend(item["login"] for item in response.json())
                next_page = response.links.get("next")
                url = next_page["url"] if next_page else None
                params = None
        except httpx.HTTPStatusError as exc:
            raise UnableToGetMembersError(
                self._org, team, f"GitHub responded with status {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise UnableToGetMembersError(self._org, team, str(exc)) from exc

        logger.debug("Team %s/%s has %d members", self._org, team, len(members))
        return members

    async def add_user_to_team(self, user: str, team: str) -> None:
        response = await self._request(
            "PUT",
            _path("orgs", self._org, "teams", team, "memberships", user),
            json={"role": "member"},
        )
        self._raise_for_status(response, f"add {user} to team {team}")
        self._changes.record("add", user, team)

    async def remove_user_from_team(self, user: str, team: str) -> None:
        response = await self._request("DELETE", _path("orgs", self._org, "teams", team, "memberships", user))
        # GitHub answers 404 both for non-members and for unknown teams.
        if response.status_code == 404 and not await self._team_exists(team):
            raise GitHubApiError(
                f"Unable to remove {user} from team {team}: team not found in org {self._org}",
                status_code=404,
            )
        if response.status_code != 404:
            self._raise_for_status(response, f"remove {user} from team {team}")
        self._changes.record("remove", user, team)

    async def has_committed_since(self, user: str, instant: datetime) -> bool:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        since = instant.astimezone(timezone.utc).isoformat(timespec="seconds")
        query = f"author:{user} org:{self._org} committer-date:>={since}"
        response = await self._request("GET", "/search/commits", params={"q": query, "per_page": 1})
        self._raise_for_status(response, f"search commits by {user}")
        return response.json().get("total_count", 0) > 0

    def track_changes(self) -> ChangeTracker:
        return self._changes

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RestGitHub":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _team_exists(self, team: str) -> bool:
        response = await self._request("GET", _path("orgs", self._org, "teams", team))
        if response.status_code == 404:
            return False
        self._raise_for_status(response, f"look up team {team}")
        return True

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise GitHubApiError(f"Failed to contact GitHub: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.status_code < 400:
            return
        message = f"Unable to {action}: GitHub responded with status {response.status_code}"
        try:
            detail = response.json().get("message")
        except ValueError:
            detail = None
        if detail:
            message = f"{message} ({detail})"
        raise GitHubApiError(message, status_code=response.status_code)


class _ScriptedResponses:
    """Canned GitHub answers for null adapters, one cursor per operation."""

    def __init__(
        self,
        *,
        has_committed: Iterable[bool] | None,
        team_members: Iterable[Sequence[str]] | None,
    ) -> None:
        self._has_committed = list(has_committed or [])
        self._team_members = [list(roster) for roster in (team_members or [])]
        self._has_committed_cursor = 0
        self._team_members_cursor = 0

    def handle(self, request: httpx.Request) -> httpx.Response:
        segments = _path_segments(request)
        is_team = len(segments) >= 4 and segments[0] == "orgs" and segments[2] == "teams"
        is_membership = is_team and len(segments) == 6 and segments[4] == "memberships"
        if request.method == "GET" and is_team and segments[4:] == ["members"]:
            return httpx.Response(200, json=[{"login": login} for login in self._next_roster()])
        if request.method == "GET" and segments == ["search", "commits"]:
            total = 1 if self._next_has_committed() else 0
            return httpx.Response(200, json={"total_count": total, "items": []})
        if request.method == "PUT" and is_membership:
            return httpx.Response(200, json={"state": "active", "role": "member"})
        if request.method == "DELETE" and is_membership:
            return httpx.Response(204)
        return httpx.Response(404, json={"message": "Not Found"})

    def _next_roster(self) -> list[str]:
        if self._team_members_cursor >= len(self._team_members):
            return []
        roster = self._team_members[self._team_members_cursor]
        self._team_members_cursor += 1
        return roster

    def _next_has_committed(self) -> bool:
        if self._has_committed_cursor >= len(self._has_committed):
            return False
        answer = self._has_committed[self._has_committed_cursor]
        self._has_committed_cursor += 1
        return answer


def _path(*segments: str) -> str:
    return "/" + "/".join(quote(segment, safe="") for segment in segments)


def _path_segments(request: httpx.Request) -> list[str]:
    raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]
    return [unquote(segment) for segment in raw_path.strip("/").split("/")]


def _default_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": f"inactive-contributors/{__version__}",
    }


__all__ = ["DEFAULT_API_URL", "RestGitHub"]
