"""Move members who have stopped committing into the alumni team."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from .github import GitHub
from .models import Configuration


async def retire_inactive_contributors(
    github: GitHub,
    configuration: Configuration,
    logger: logging.Logger | logging.LoggerAdapter,
    *,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Retire every member of the source team with no commits since the cutoff.

    Members are handled one at a time in roster order. A retired member is
    added to the alumni team before being removed from the source team, so a
    failure between the two calls leaves them in both teams rather than
    neither. Errors from ``github`` are not caught.
    """

    now = (clock or (lambda: datetime.now(timezone.utc)))()
    cutoff = configuration.maximum_absence_before_retirement.subtract_from(now)
    source_team = configuration.source_team

    for user in await github.get_members_of(source_team):
        if await github.has_committed_since(user, cutoff):
            logger.info("Keeping %s: committed since %s", user, cutoff.isoformat())
            continue

        logger.info(
            "Retiring %s: no commits since %s, moving from %s to %s",
            user,
            cutoff.isoformat(),
            source_team,
            configuration.alumni_team,
        )
        await github.add_user_to_team(user, configuration.alumni_team)
        await github.remove_user_from_team(user, source_team)


__all__ = ["retire_inactive_contributors"]
