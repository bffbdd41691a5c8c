from __future__ import annotations

from pathlib import Path
from typing import Optional


class OwnershipError(Exception):
    """Base class for errors raised by the ownership registry."""


class SourceUnavailableError(OwnershipError):
    """
    Raised when the ownership source cannot be read at all
    (e.g. the manifest directory is missing or not listable).
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path
