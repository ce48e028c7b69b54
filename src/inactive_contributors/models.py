"""Run configuration and change records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .duration import Duration

ChangeAction = Literal["add", "remove"]


class Configuration(BaseModel):
    """Parameters for a single retirement run."""

    model_config = ConfigDict(frozen=True)

    maximum_absence_before_retirement: Duration = Field(
        ..., description="How long a member may go without committing before retirement."
    )
    alumni_team: str = Field(..., description="Slug of the team inactive members are moved to.")
    source_team: str = Field(
        default="committers",
        description="Slug of the team whose members are checked for activity.",
    )

    @field_validator("maximum_absence_before_retirement", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        if isinstance(value, str):
            return Duration.parse(value)
        if isinstance(value, Duration):
            return value
        raise ValueError(
            f"Maximum absence must be a Duration or duration text such as '90d', got {type(value).__name__}"
        )

    @field_validator("alumni_team", "source_team")
    @classmethod
    def _normalize_team(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Team name must not be empty")
        return normalized

    @field_serializer("maximum_absence_before_retirement")
    def _serialize_duration(self, value: Duration) -> str:
        return str(value)


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """A single membership mutation requested of GitHub."""

    action: ChangeAction
    user: str
    team: str


__all__ = ["ChangeAction", "ChangeRecord", "Configuration"]
