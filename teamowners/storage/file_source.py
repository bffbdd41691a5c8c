from pathlib import Path
from typing import Dict, List, Tuple
import logging

from teamowners.core.errors import SourceUnavailableError
from teamowners.storage.source import OwnershipSource

logger = logging.getLogger(__name__)


def parse_manifest(content: str) -> List[str]:
    """
    Split manifest content into prefixes, one per line.

    Lines are taken literally: no whitespace trimming, no de-duplication.
    A blank line becomes an empty prefix, which owns every package. A single
    trailing line feed only terminates the last line.
    """
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return lines


def parse_links(content: str) -> Dict[str, str]:
    """
    Parse `key=value` lines into a map keyed by the lowercased key.

    Only the first "=" splits; the value is kept verbatim. Lines without "="
    are skipped and later duplicates win.
    """
    links: Dict[str, str] = {}
    for line in content.split("\n"):
        key, sep, value = line.partition("=")
        if not sep:
            continue
        links[key.lower()] = value
    return links


def _is_valid_name(name: str) -> bool:
    # Non-UTF-8 file names come back from the OS with lone surrogates.
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class FileOwnershipSource(OwnershipSource):
    """
    Ownership data stored as flat files:

    * `<manifest_dir>/<team-name>`: one owned package prefix per line.
    * `<link_file>`: `team=link` lines, team name lowercased.

    File contents are read as UTF-8; invalid bytes become U+FFFD so the rest
    of the file still counts. Manifests whose file name is not valid UTF-8
    are skipped.
    """

    def __init__(self, manifest_dir: Path, link_file: Path):
        self._manifest_dir = Path(manifest_dir)
        self._link_file = Path(link_file)

    def read_teams(self) -> List[Tuple[str, List[str]]]:
        try:
            entries = list(self._manifest_dir.iterdir())
        except OSError as e:
            raise SourceUnavailableError(
                f"Cannot read manifest directory {self._manifest_dir}: {e}",
                path=self._manifest_dir,
            ) from e

        teams: List[Tuple[str, List[str]]] = []
        for entry in entries:
            if not _is_valid_name(entry.name):
                logger.warning(f"Skipping manifest with undecodable file name {entry.name!r}")
                continue
            if not entry.is_file():
                continue
            try:
                content = entry.read_bytes().decode("utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Skipping unreadable manifest {entry}: {e}")
                continue
            teams.append((entry.name, parse_manifest(content)))
        return teams

    def read_links(self) -> Dict[str, str]:
        try:
            content = self._link_file.read_bytes().decode("utf-8", errors="replace")
        except FileNotFoundError:
            logger.warning(f"Link file {self._link_file} not found; teams will have no links")
            return {}
        except OSError as e:
            logger.error(f"Cannot read link file {self._link_file}: {e}; teams will have no links")
            return {}
        return parse_links(content)
