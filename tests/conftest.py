import os
import tempfile
from pathlib import Path

import pytest

# Importing the app loads config; keep it away from the project tree.
os.environ.setdefault("NOTES_ROOT", tempfile.mkdtemp(prefix="notegraph-tests-"))

from notegraph.services.config import AppConfig
from notegraph.services.vault import NoteRepository


@pytest.fixture
def notes_config(tmp_path: Path) -> AppConfig:
    return AppConfig(notes_root=tmp_path / "notes")


@pytest.fixture
def repository(notes_config: AppConfig) -> NoteRepository:
    return NoteRepository(config=notes_config)


@pytest.fixture
def notes_root(repository: NoteRepository) -> Path:
    return repository.root
