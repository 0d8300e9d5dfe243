from pathlib import Path

import pytest

from notegraph.services import config as config_module


@pytest.fixture(autouse=True)
def restore_config_cache(monkeypatch, tmp_path: Path):
    """
    Ensure configuration cache is cleared between tests.
    """
    monkeypatch.setenv("NOTES_ROOT", str(tmp_path / "default"))
    config_module.reload_config()
    yield
    config_module.get_config.cache_clear()


def test_get_config_reads_notes_root(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NOTES_ROOT", str(tmp_path / "notes"))

    cfg = config_module.reload_config()

    assert cfg.notes_root == (tmp_path / "notes").resolve()
    assert cfg.notes_root.is_dir()
    assert cfg.note_extension == ".md"
    assert cfg.ordering_file == ".metadata.json"


def test_get_config_parses_lists_and_extension(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("NOTE_EXTENSION", "markdown")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = config_module.reload_config()

    assert cfg.cors_origins == ["http://a.test", "http://b.test"]
    assert cfg.note_extension == ".markdown"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("key", "value"),
    [("GRAPH_EDGE_PROBABILITY", "1.5"), ("LOG_LEVEL", "chatty"), ("NOTE_EXTENSION", " ")],
)
def test_get_config_rejects_bad_values(monkeypatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(ValueError):
        config_module.reload_config()
