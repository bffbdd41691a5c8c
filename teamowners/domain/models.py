"""
Pydantic models for the team ownership registry.

This module defines the data shared between the registry, the query
evaluator and the HTTP layer:
- Teams and their owned package prefixes
- Immutable registry snapshots
- Lookup, query and refresh results

Models that live inside a snapshot are frozen: a published snapshot is never
mutated, a refresh always builds a new one.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Registry Models
# ---------------------------------------------------------------------------


class Team(BaseModel):
    """
    A team and the package prefixes it owns.

    `prefixes` keeps the order of the lines in the manifest file. Duplicates
    are kept, and an empty-string prefix owns every package.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Team name, taken verbatim from the manifest file name.")
    prefixes: Tuple[str, ...] = Field(default=(), description="Owned package prefixes, in manifest order.")

    def owns(self, package: str) -> bool:
        """Return True if any prefix is a literal leading substring of `package`."""
        for prefix in self.prefixes:
            if package.startswith(prefix):
                return True
        return False


class TeamMatch(BaseModel):
    """One owning team for a looked-up package, with its link (may be empty)."""

    model_config = ConfigDict(frozen=True)

    team: str
    link: str = ""


class RegistrySnapshot(BaseModel):
    """
    One complete generation of the registry: the team list and the link map.

    Links are keyed by the lowercased team name and stored read-only.
    """

    model_config = ConfigDict(frozen=True)

    teams: Tuple[Team, ...] = ()
    links: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    generation: int = 0
    built_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("links", mode="after")
    @classmethod
    def freeze_links(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def link_for(self, team_name: str) -> str:
        return self.links.get(team_name.lower(), "")

    def lookup(self, package: str) -> List[TeamMatch]:
        """
        Return every team owning `package`, in snapshot order.
        """
        return [
            TeamMatch(team=team.name, link=self.link_for(team.name))
            for team in self.teams
            if team.owns(package)
        ]


RefreshStatus = Literal["refreshed", "skipped", "failed"]


class RefreshResult(BaseModel):
    """
    Outcome of a registry refresh.

    `generation` and `team_count` describe the snapshot that is active after
    the call, whether or not this call published it.
    """

    status: RefreshStatus
    generation: int
    team_count: int
    detail: Optional[str] = None


# ---------------------------------------------------------------------------
# Query Models
# ---------------------------------------------------------------------------


class QueryElement(BaseModel):
    """Result for one query line: the resolved package and its owners."""

    package: str
    matches: List[TeamMatch] = Field(default_factory=list)


class QueryResult(BaseModel):
    """
    Result of evaluating a full multi-line query.

    `query` is None when the request carried no query at all, and "" when it
    carried an empty one. Both produce no elements.
    """

    query: Optional[str] = None
    elements: List[QueryElement] = Field(default_factory=list)

    @property
    def present(self) -> bool:
        return self.query is not None
