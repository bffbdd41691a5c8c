"""Pytest configuration and fixtures."""

import os
from pathlib import Path
from typing import Dict, Iterable

import pytest


def write_manifest(packages_dir: Path, team: str, prefixes: Iterable[str]) -> Path:
    path = packages_dir / team
    path.write_text("".join(f"{p}\n" for p in prefixes), encoding="utf-8")
    return path


def write_links(links_file: Path, links: Dict[str, str]) -> Path:
    links_file.write_text("".join(f"{k}={v}\n" for k, v in links.items()), encoding="utf-8")
    return links_file


@pytest.fixture
def data_dir(tmp_path):
    """Data directory with an empty `packages/` folder and no link file."""
    (tmp_path / "packages").mkdir()
    return tmp_path


@pytest.fixture
def packages_dir(data_dir):
    return data_dir / "packages"


@pytest.fixture
def links_file(data_dir):
    return data_dir / "teams.properties"


@pytest.fixture
def sample_ownership(packages_dir, links_file):
    """Two teams with links, one of them keyed with a different case."""
    write_manifest(packages_dir, "payments", ["com.acme.billing", "com.acme.invoice"])
    write_manifest(packages_dir, "Platform", ["com.acme.core"])
    write_links(links_file, {"payments": "https://wiki/payments", "platform": "https://wiki/platform"})
    return packages_dir


@pytest.fixture
def undecodable_name_manifest(packages_dir):
    """Manifest whose file name is the Latin-1 byte string b"caf\\xe9"."""
    path = packages_dir / os.fsdecode(b"caf\xe9")
    try:
        path.write_bytes(b"com.acme.cafe\n")
    except (OSError, UnicodeEncodeError):
        pytest.skip("file system does not accept non-UTF-8 file names")
    return path
