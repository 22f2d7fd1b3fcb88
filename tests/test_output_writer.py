from __future__ import annotations

import json
from pathlib import Path

import pytest

from adviser.contracts.errors import OutputWriteError
from adviser.contracts.output_manifest import OutputAsset, OutputMode
from adviser.core.output.manifest import manifest_path_for, write_manifest
from adviser.core.output.writer import MAX_NAME_ATTEMPTS, handle_output, write_artifact

from conftest import fixed_clock


def fixed_names(*names):
    """
    name_factory that hands out the given names in order.
    """
    queue = list(names)

    def factory(extension: str) -> str:
        return f"{queue.pop(0)}.{extension}"

    return factory


# -----------------------------
# Manifest
# -----------------------------
def test_manifest_shape(tmp_path: Path):
    primary = tmp_path / "review-1-abcd.aisp"
    asset = OutputAsset(type="aisp", format="aisp", path=str(primary))

    manifest_path = write_manifest(primary, OutputMode.SYMBOLIC, [asset], clock=fixed_clock)

    assert manifest_path == tmp_path / "review-1-abcd.aisp.manifest.json"
    data = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert data == {
        "status": "success",
        "mode": "symbolic",
        "assets": [{"type": "aisp", "format": "aisp", "path": str(primary)}],
        "timestamp": "2026-01-14T09:30:00.123Z",
    }


def test_manifest_path_keeps_primary_extension():
    assert manifest_path_for(Path("/x/r.md")) == Path("/x/r.md.manifest.json")


# -----------------------------
# handle_output
# -----------------------------
@pytest.mark.parametrize(
    "mode, extension, asset_type, asset_format",
    [
        (OutputMode.STRUCTURED, "json", "workflow", "json"),
        (OutputMode.HUMAN, "md", "review", "md"),
        (OutputMode.SYMBOLIC, "aisp", "aisp", "aisp"),
    ],
)
def test_handle_output_writes_artifact_and_manifest(tmp_path, mode, extension, asset_type, asset_format):
    base = tmp_path / "docs" / "reviews"

    written = handle_output("content", mode, base)

    assert written.path.parent == base
    assert written.path.name.startswith("review-")
    assert written.path.suffix == f".{extension}"
    assert written.path.read_text(encoding="utf-8") == "content"
    assert written.manifest_path == manifest_path_for(written.path)

    manifest = json.loads(written.manifest_path.read_text(encoding="utf-8"))
    assert manifest["mode"] == mode.value
    assert manifest["assets"] == [{"type": asset_type, "format": asset_format, "path": str(written.path)}]
    assert sorted(p.name for p in base.iterdir()) == sorted([written.path.name, written.manifest_path.name])


def test_two_writes_in_same_millisecond_do_not_collide(tmp_path: Path, monkeypatch):
    monkeypatch.setattr("adviser.core.output.paths.time.time_ns", lambda: 1_768_383_000_123_000_000)

    first = handle_output("one", OutputMode.HUMAN, tmp_path)
    second = handle_output("two", OutputMode.HUMAN, tmp_path)

    assert first.path != second.path
    assert first.path.read_text(encoding="utf-8") == "one"
    assert second.path.read_text(encoding="utf-8") == "two"


def test_taken_generated_name_is_redrawn(tmp_path: Path):
    (tmp_path / "taken.md").write_text("existing", encoding="utf-8")

    path = write_artifact("new", OutputMode.HUMAN, tmp_path, name_factory=fixed_names("taken", "free"))

    assert path == tmp_path / "free.md"
    assert (tmp_path / "taken.md").read_text(encoding="utf-8") == "existing"


def test_gives_up_after_max_attempts(tmp_path: Path):
    (tmp_path / "taken.md").write_text("existing", encoding="utf-8")

    with pytest.raises(OutputWriteError):
        write_artifact(
            "new",
            OutputMode.HUMAN,
            tmp_path,
            name_factory=fixed_names(*["taken"] * MAX_NAME_ATTEMPTS),
        )


def test_explicit_file_is_overwritten(tmp_path: Path):
    target = tmp_path / "mine.md"
    target.write_text("old", encoding="utf-8")

    written = handle_output("new", OutputMode.HUMAN, tmp_path / "unused", explicit_file=target)

    assert written.path == target
    assert target.read_text(encoding="utf-8") == "new"
    assert written.manifest_path == tmp_path / "mine.md.manifest.json"


def test_relative_explicit_file_lands_under_base_dir(tmp_path: Path):
    written = handle_output("x", OutputMode.STRUCTURED, tmp_path, explicit_file="nested/out.json")

    assert written.path == tmp_path / "nested" / "out.json"
    assert written.path.exists()


def test_missing_directories_are_created(tmp_path: Path):
    base = tmp_path / "a" / "b" / "c"

    written = handle_output("x", OutputMode.SYMBOLIC, base)

    assert written.path.exists()


def test_unwritable_directory_raises_write_error(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")

    with pytest.raises(OutputWriteError) as exc:
        handle_output("x", OutputMode.HUMAN, blocker / "reviews")

    assert exc.value.stage == "write"
