from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from teamowners.core.errors import SourceUnavailableError
from teamowners.domain.models import RefreshResult, RegistrySnapshot, Team, TeamMatch
from teamowners.storage.source import OwnershipSource

logger = logging.getLogger(__name__)


class TeamRegistry:
    """
    Shared, thread-safe index of team ownership.

    The registry holds exactly one published `RegistrySnapshot`. Readers take
    the current snapshot with a single attribute read and work on that object
    for the whole lookup; they never lock. `refresh()` builds a complete new
    snapshot off to the side and publishes it with a single attribute
    assignment, so a reader sees either the old or the new generation, never
    a mix of both.

    A superseded snapshot is freed by reference counting once the last reader
    still holding it returns.

    Only one refresh runs at a time. A refresh requested while another is in
    progress is skipped, not queued.
    """

    def __init__(self, source: OwnershipSource):
        self._source = source
        self._snapshot = RegistrySnapshot()
        self._refresh_guard = threading.Lock()

    @property
    def snapshot(self) -> RegistrySnapshot:
        """The currently published snapshot."""
        return self._snapshot

    def lookup(self, package: str) -> List[TeamMatch]:
        """
        Return (team, link) for every team owning `package`.

        A team owns a package when one of its prefixes is a literal leading
        substring of it ("com.foo" owns "com.foobar"). Order follows the team
        order of the snapshot, which is the directory order seen by the last
        refresh and may change between refreshes.
        """
        snapshot = self._snapshot
        return snapshot.lookup(package)

    def refresh(self) -> RefreshResult:
        """
        Rebuild the snapshot from the ownership source and publish it.

        Returns immediately with status "skipped" if another refresh holds
        the guard. If the manifests cannot be listed, or the build runs out of
        memory, the current snapshot stays active and the status is "failed".
        """
        if not self._refresh_guard.acquire(blocking=False):
            logger.info("Refresh already in progress, skipping")
            return self._result("skipped", "Refresh already in progress")

        try:
            current = self._snapshot
            try:
                snapshot = self._build_snapshot(current.generation + 1)
            except SourceUnavailableError as e:
                logger.error(f"Refresh aborted, keeping generation {current.generation}: {e}")
                return self._result("failed", str(e))
            except MemoryError:
                logger.error(f"Refresh ran out of memory, keeping generation {current.generation}")
                return self._result("failed", "Out of memory while building the registry")

            self._snapshot = snapshot
            logger.info(
                f"Published registry generation {snapshot.generation}: "
                f"{len(snapshot.teams)} teams, {len(snapshot.links)} links"
            )
            return self._result("refreshed")
        finally:
            self._refresh_guard.release()

    def _build_snapshot(self, generation: int) -> RegistrySnapshot:
        # Teams first: an unreadable manifest directory aborts before the
        # link file is touched.
        teams: List[Team] = []
        for name, prefixes in self._source.read_teams():
            try:
                teams.append(Team(name=name, prefixes=tuple(prefixes)))
            except ValidationError as e:
                logger.warning(f"Skipping invalid team {name!r}: {e}")
        links = self._source.read_links()
        return RegistrySnapshot(
            teams=tuple(teams),
            links=links,
            generation=generation,
            built_at=datetime.now(timezone.utc),
        )

    def _result(self, status: str, detail: Optional[str] = None) -> RefreshResult:
        snapshot = self._snapshot
        return RefreshResult(
            status=status,
            generation=snapshot.generation,
            team_count=len(snapshot.teams),
            detail=detail,
        )
