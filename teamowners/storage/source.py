from abc import ABC, abstractmethod
from typing import Dict, List, Tuple


class OwnershipSource(ABC):
    """
    Abstract base class for the external storage holding ownership data.
    """

    @abstractmethod
    def read_teams(self) -> List[Tuple[str, List[str]]]:
        """
        Read every team manifest as (team name, prefixes), in storage order.

        Raises SourceUnavailableError when the manifests cannot be listed at
        all. Individual unreadable manifests are skipped.
        """
        pass

    @abstractmethod
    def read_links(self) -> Dict[str, str]:
        """
        Read the link map, keyed by lowercased team name.

        Returns an empty map when the link data is missing or unreadable.
        """
        pass
