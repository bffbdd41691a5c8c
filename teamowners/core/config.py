from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "TEAMOWNERS_"

DATA_DIR_ENV_VAR = ENV_PREFIX + "DATA_DIR"
PACKAGES_DIR_ENV_VAR = ENV_PREFIX + "PACKAGES_DIR"
LINKS_FILE_ENV_VAR = ENV_PREFIX + "LINKS_FILE"
REFRESH_INTERVAL_ENV_VAR = ENV_PREFIX + "REFRESH_INTERVAL_SECONDS"
HOST_ENV_VAR = ENV_PREFIX + "HOST"
PORT_ENV_VAR = ENV_PREFIX + "PORT"
LOG_LEVEL_ENV_VAR = ENV_PREFIX + "LOG_LEVEL"

PACKAGES_DIR_NAME = "packages"
LINKS_FILE_NAME = "teams.properties"


class Settings(BaseModel):
    """
    Runtime configuration for the ownership service.

    The manifest directory and link file default to `packages/` and
    `teams.properties` inside the data directory, which itself defaults to the
    current working directory.
    """

    data_dir: Path = Field(
        default_factory=Path.cwd,
        description="Base directory holding the ownership files.",
    )
    packages_dir: Optional[Path] = Field(
        default=None,
        description="Directory with one manifest file per team. Defaults to <data_dir>/packages.",
    )
    links_file: Optional[Path] = Field(
        default=None,
        description="key=value file mapping lowercased team names to links. Defaults to <data_dir>/teams.properties.",
    )
    refresh_interval_seconds: float = Field(
        default=0,
        ge=0,
        description="Rebuild the registry periodically when > 0. 0 disables the background refresh.",
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=9000, ge=1, le=65535)
    log_level: str = Field(default="INFO")

    @property
    def manifest_dir(self) -> Path:
        return self.packages_dir or self.data_dir / PACKAGES_DIR_NAME

    @property
    def link_file(self) -> Path:
        return self.links_file or self.data_dir / LINKS_FILE_NAME

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from `TEAMOWNERS_*` environment variables.

        Unset variables keep their defaults; invalid values raise a pydantic
        ValidationError.
        """
        env = os.environ if environ is None else environ
        mapping = {
            DATA_DIR_ENV_VAR: "data_dir",
            PACKAGES_DIR_ENV_VAR: "packages_dir",
            LINKS_FILE_ENV_VAR: "links_file",
            REFRESH_INTERVAL_ENV_VAR: "refresh_interval_seconds",
            HOST_ENV_VAR: "host",
            PORT_ENV_VAR: "port",
            LOG_LEVEL_ENV_VAR: "log_level",
        }
        raw: Dict[str, str] = {}
        for var, field_name in mapping.items():
            value = env.get(var)
            if value:
                raw[field_name] = value

        for path_field in ("data_dir", "packages_dir", "links_file"):
            if path_field in raw:
                raw[path_field] = Path(raw[path_field]).expanduser()

        return cls(**raw)
