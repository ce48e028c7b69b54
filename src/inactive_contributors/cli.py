"""Command line entry point for the retirement job."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from . import __version__
from .config import get_settings
from .duration import Duration, DurationParseError
from .github import DEFAULT_API_URL, GitHubError, RestGitHub
from .models import Configuration
from .retire import retire_inactive_contributors

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def configure_logging(level: str) -> None:
    """Configure root logging for the retirement job."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


async def run(
    maximum_absence_before_retirement: str,
    github_org: str,
    alumni_team: str,
    token: str,
    *,
    source_team: str = "committers",
    api_url: str = DEFAULT_API_URL,
    logger: logging.Logger | None = None,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Retire inactive members of ``source_team`` in ``github_org``."""

    logger = logger or logging.getLogger("inactive_contributors")
    configuration = Configuration(
        maximum_absence_before_retirement=Duration.parse(maximum_absence_before_retirement),
        alumni_team=alumni_team,
        source_team=source_team,
    )
    logger.info(json.dumps({"configuration": configuration.model_dump(mode="json")}))

    async with RestGitHub.connect(token, github_org, base_url=api_url) as github:
        await retire_inactive_contributors(github, configuration, logger, clock=clock)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retire-inactive-contributors",
        description=(
            "Move members of a GitHub team who have not committed recently into an alumni team. "
            "The token is read from GITHUB_TOKEN."
        ),
    )
    parser.add_argument("--org", help="GitHub organisation (default: GITHUB_ORG)")
    parser.add_argument("--alumni-team", help="Team to move inactive members to (default: ALUMNI_TEAM)")
    parser.add_argument("--source-team", help="Team whose members are checked (default: SOURCE_TEAM)")
    parser.add_argument(
        "--maximum-absence",
        help="How long a member may go without committing, e.g. 90d or 12w "
        "(default: MAXIMUM_ABSENCE_BEFORE_RETIREMENT)",
    )
    parser.add_argument("--log-level", choices=_LOG_LEVELS, help="Logging level (default: RETIREMENT_LOG_LEVEL)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        parser.error(f"invalid environment configuration: {exc}")

    if not settings.github_token:
        parser.error("GITHUB_TOKEN must be set to a personal access token with org admin rights")
    org = args.org or settings.github_org
    if not org:
        parser.error("an organisation is required: pass --org or set GITHUB_ORG")
    alumni_team = args.alumni_team or settings.alumni_team
    if not alumni_team:
        parser.error("an alumni team is required: pass --alumni-team or set ALUMNI_TEAM")

    maximum_absence = args.maximum_absence or settings.maximum_absence_before_retirement
    try:
        Duration.parse(maximum_absence)
    except DurationParseError as exc:
        parser.error(str(exc))

    configure_logging(args.log_level or settings.log_level)
    logger = logging.getLogger("inactive_contributors")

    try:
        asyncio.run(
            run(
                maximum_absence,
                org,
                alumni_team,
                settings.github_token,
                source_team=args.source_team or settings.source_team,
                api_url=settings.github_api_url,
                logger=logger,
            )
        )
    except ValidationError as exc:
        parser.error(f"invalid configuration: {exc}")
    except GitHubError as exc:
        logger.error("Retirement run failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
