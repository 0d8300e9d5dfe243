import json
import os
from pathlib import Path

import pytest

from notegraph.services.errors import (
    AlreadyExists,
    InvalidInput,
    InvalidPath,
    NotFound,
    ProtectedResource,
)
from notegraph.services.vault import NoteEvent, NoteRepository, iter_files


def _paths(repository: NoteRepository) -> list:
    return [node["path"] for node in iter_files(repository.list())]


def test_repository_creates_missing_root(tmp_path: Path) -> None:
    from notegraph.services.config import AppConfig

    repository = NoteRepository(config=AppConfig(notes_root=tmp_path / "fresh"))

    assert repository.root.is_dir()


def test_create_makes_empty_note_with_extension(repository: NoteRepository, notes_root: Path) -> None:
    name = repository.create("draft")

    assert name == "draft.md"
    assert (notes_root / "draft.md").read_text(encoding="utf-8") == ""


def test_create_existing_note_keeps_content(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "draft.md").write_text("keep me", encoding="utf-8")

    with pytest.raises(AlreadyExists):
        repository.create("draft")

    assert (notes_root / "draft.md").read_text(encoding="utf-8") == "keep me"


def test_get_rejects_non_note_extension(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "secret.txt").write_text("x", encoding="utf-8")

    with pytest.raises(InvalidPath):
        repository.get("secret.txt")


def test_get_missing_note_raises_not_found(repository: NoteRepository) -> None:
    with pytest.raises(NotFound):
        repository.get("nope.md")


@pytest.mark.parametrize("path", ["../escape.md", "a/../../escape.md", "/tmp/escape.md"])
def test_every_operation_rejects_traversal(repository: NoteRepository, path: str) -> None:
    repository.create("inside")
    operations = [
        lambda: repository.get(path),
        lambda: repository.put(path, "x"),
        lambda: repository.append(path, "x"),
        lambda: repository.rename("inside.md", path),
        lambda: repository.rename(path, "other.md"),
        lambda: repository.move(path, ""),
        lambda: repository.move("inside.md", path),
        lambda: repository.delete(path),
    ]
    for operation in operations:
        with pytest.raises(InvalidPath):
            operation()


def test_put_overwrites_and_creates_in_existing_folder(
    repository: NoteRepository, notes_root: Path
) -> None:
    (notes_root / "folder").mkdir()

    repository.put("folder/new.md", "first")
    repository.put("folder/new.md", "second")

    assert repository.get("folder/new.md") == "second"


def test_put_does_not_create_parent_folders(repository: NoteRepository, notes_root: Path) -> None:
    with pytest.raises(NotFound):
        repository.put("missing/new.md", "content")

    assert not (notes_root / "missing").exists()


def test_append_adds_newline_and_content(repository: NoteRepository) -> None:
    repository.create("log")
    repository.put("log.md", "X")

    repository.append("log.md", "C")

    assert repository.get("log.md") == "X\nC"


def test_append_to_missing_note_raises_not_found(repository: NoteRepository, notes_root: Path) -> None:
    with pytest.raises(NotFound):
        repository.append("ghost.md", "C")

    assert not (notes_root / "ghost.md").exists()


def test_append_to_folder_raises_not_found(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "folder.md").mkdir()

    with pytest.raises(NotFound):
        repository.append("folder.md", "C")


def test_rename_moves_file(repository: NoteRepository, notes_root: Path) -> None:
    repository.put("a.md", "alpha")

    new_path = repository.rename("a.md", "b.md")

    assert new_path == "b.md"
    assert not (notes_root / "a.md").exists()
    assert repository.get("b.md") == "alpha"


def test_rename_to_occupied_path_leaves_both(repository: NoteRepository) -> None:
    repository.put("a.md", "alpha")
    repository.put("b.md", "beta")

    with pytest.raises(AlreadyExists):
        repository.rename("a.md", "b.md")

    assert repository.get("a.md") == "alpha"
    assert repository.get("b.md") == "beta"


def test_rename_missing_source_raises_not_found(repository: NoteRepository) -> None:
    with pytest.raises(NotFound):
        repository.rename("ghost.md", "b.md")


def test_rename_folder_into_itself_is_rejected(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "folder").mkdir()

    with pytest.raises(InvalidInput):
        repository.rename("folder", "folder/inner")


def test_move_relocates_file_keeping_name(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "archive").mkdir()
    repository.put("note.md", "body")

    new_path = repository.move("note.md", "archive")

    assert new_path == "archive/note.md"
    assert repository.get("archive/note.md") == "body"
    assert _paths(repository) == ["archive/note.md"]


def test_move_back_to_root(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "archive").mkdir()
    repository.put("archive/note.md", "body")

    assert repository.move("archive/note.md", "") == "note.md"


def test_move_into_current_parent_is_rejected(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "archive").mkdir()
    repository.put("archive/note.md", "body")
    before = sorted(p.relative_to(notes_root) for p in notes_root.rglob("*"))

    with pytest.raises(InvalidInput):
        repository.move("archive/note.md", "archive")

    assert sorted(p.relative_to(notes_root) for p in notes_root.rglob("*")) == before


def test_move_requires_file_source_and_folder_target(
    repository: NoteRepository, notes_root: Path
) -> None:
    (notes_root / "archive").mkdir()
    repository.put("note.md", "body")

    with pytest.raises(InvalidPath):
        repository.move("archive", "")
    with pytest.raises(NotFound):
        repository.move("note.md", "missing")
    with pytest.raises(NotFound):
        repository.move("note.md", "note.md")


def test_move_onto_existing_name_raises_already_exists(
    repository: NoteRepository, notes_root: Path
) -> None:
    (notes_root / "archive").mkdir()
    repository.put("note.md", "new")
    repository.put("archive/note.md", "old")

    with pytest.raises(AlreadyExists):
        repository.move("note.md", "archive")

    assert repository.get("archive/note.md") == "old"


def test_delete_folder_removes_descendants(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "projects" / "deep").mkdir(parents=True)
    repository.put("projects/a.md", "a")
    repository.put("projects/deep/b.md", "b")
    repository.put("keep.md", "k")

    kind = repository.delete("projects")

    assert kind == "directory"
    assert not (notes_root / "projects").exists()
    assert _paths(repository) == ["keep.md"]
    assert [node["name"] for node in repository.list()] == ["keep.md"]


def test_delete_file(repository: NoteRepository) -> None:
    repository.create("gone")

    assert repository.delete("gone.md") == "file"
    with pytest.raises(NotFound):
        repository.get("gone.md")


def test_delete_missing_path_raises_not_found(repository: NoteRepository) -> None:
    with pytest.raises(NotFound):
        repository.delete("ghost.md")


@pytest.mark.parametrize("path", [".", "./"])
def test_delete_root_is_protected(repository: NoteRepository, notes_root: Path, path: str) -> None:
    repository.create("survivor")

    with pytest.raises(ProtectedResource):
        repository.delete(path)

    assert (notes_root / "survivor.md").exists()


def test_list_uses_sidecar_ordering(repository: NoteRepository, notes_root: Path) -> None:
    for name in ("a.md", "b.md", "c.md"):
        repository.put(name, "")
    (notes_root / ".metadata.json").write_text(
        json.dumps({"order": ["c.md", "a.md"]}), encoding="utf-8"
    )

    assert _paths(repository) == ["c.md", "a.md", "b.md"]


def test_mutations_emit_events(repository: NoteRepository, notes_root: Path) -> None:
    events = []
    unsubscribe = repository.subscribe(events.append)
    (notes_root / "folder").mkdir()

    repository.create("one")
    repository.put("one.md", "x")
    repository.append("one.md", "y")
    repository.rename("one.md", "two.md")
    repository.move("two.md", "folder")
    repository.delete("folder")
    unsubscribe()
    repository.create("silent")

    assert events == [
        NoteEvent("created", "one.md"),
        NoteEvent("updated", "one.md"),
        NoteEvent("updated", "one.md"),
        NoteEvent("renamed", "one.md", "two.md"),
        NoteEvent("moved", "two.md", "folder/two.md"),
        NoteEvent("deleted", "folder"),
    ]


def test_failed_listener_does_not_fail_mutation(repository: NoteRepository) -> None:
    def broken(event: NoteEvent) -> None:
        raise RuntimeError("listener bug")

    repository.subscribe(broken)

    assert repository.create("still-created") == "still-created.md"


@pytest.fixture
def linked_folder(repository: NoteRepository, notes_root: Path) -> Path:
    (notes_root / "real").mkdir()
    repository.put("real/keep.md", "kept")
    (notes_root / "link").symlink_to(notes_root / "real", target_is_directory=True)
    return notes_root / "real"


def test_delete_symlinked_folder_removes_only_the_link(
    repository: NoteRepository, notes_root: Path, linked_folder: Path
) -> None:
    kind = repository.delete("link")

    assert kind == "file"
    assert not os.path.lexists(notes_root / "link")
    assert (linked_folder / "keep.md").read_text(encoding="utf-8") == "kept"


def test_rename_symlinked_folder_renames_the_link(
    repository: NoteRepository, notes_root: Path, linked_folder: Path
) -> None:
    repository.rename("link", "renamed")

    assert (notes_root / "renamed").is_symlink()
    assert not os.path.lexists(notes_root / "link")
    assert (linked_folder / "keep.md").exists()


def test_note_symlink_pointing_outside_root_is_rejected(
    repository: NoteRepository, notes_root: Path, tmp_path: Path
) -> None:
    outside = tmp_path / "outside.md"
    outside.write_text("secret", encoding="utf-8")
    (notes_root / "leak.md").symlink_to(outside)

    with pytest.raises(InvalidPath):
        repository.get("leak.md")
    with pytest.raises(InvalidPath):
        repository.put("leak.md", "overwritten")
    assert outside.read_text(encoding="utf-8") == "secret"


def test_rename_keeps_note_extension(repository: NoteRepository) -> None:
    repository.put("a.md", "alpha")

    with pytest.raises(InvalidPath):
        repository.rename("a.md", "a.txt")

    assert repository.get("a.md") == "alpha"
    assert _paths(repository) == ["a.md"]


def test_sidecar_cannot_be_renamed_or_moved(repository: NoteRepository, notes_root: Path) -> None:
    (notes_root / "folder").mkdir()
    sidecar = notes_root / ".metadata.json"
    sidecar.write_text(json.dumps({"order": []}), encoding="utf-8")

    with pytest.raises(InvalidPath):
        repository.rename(".metadata.json", "order.md")
    with pytest.raises(InvalidPath):
        repository.move(".metadata.json", "folder")

    assert sidecar.exists()
    assert not (notes_root / "folder" / ".metadata.json").exists()
