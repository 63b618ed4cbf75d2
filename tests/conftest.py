"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from appshelf.adapters.mock import MockBackend
from appshelf.core.config.session import SessionConfig
from appshelf.core.session import Session, open_session

CATALOG_YML = textwrap.dedent("""\
    apps:
      - {id: 1, package_id: Mozilla.Firefox, name: Firefox, category: Browsers}
      - {id: 2, package_id: Google.Chrome, name: Google Chrome, category: Browsers}
      - {id: 3, package_id: Git.Git, name: Git, category: Development}
      - {id: 4, package_id: VideoLAN.VLC, name: VLC, category: Media}
      - {id: 5, package_id: 7zip.7zip, name: 7-Zip, category: Utilities}
    bundles:
      essentials:
        description: Basics
        apps: [Mozilla.Firefox, 7zip.7zip, VideoLAN.VLC]
      dev: [Git.Git]
""")


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Write a small catalog.yml and return its path."""
    path = tmp_path / "catalog.yml"
    path.write_text(CATALOG_YML, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path: Path, catalog_file: Path) -> SessionConfig:
    """Session config rooted in a temp directory."""
    return SessionConfig(
        root=tmp_path,
        state_dir=tmp_path / ".appshelf",
        catalog_path=catalog_file,
        version="9.9.9-test",
    )


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def session(config: SessionConfig, backend: MockBackend) -> Session:
    """A freshly opened session backed by the mock backend."""
    return open_session(config, backend)
