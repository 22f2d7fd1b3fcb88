import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from adviser.contracts.errors import OutputWriteError
from adviser.contracts.output_manifest import OUTPUT_FORMATS, OutputAsset, OutputMode
from adviser.core.output.manifest import ensure_directory, write_manifest
from adviser.core.output.paths import PathLike, generate_filename, resolve_output_path

logger = logging.getLogger(__name__)

# attempts at a fresh generated name before giving up
MAX_NAME_ATTEMPTS = 5


@dataclass(frozen=True)
class WrittenOutput:
    path: Path
    manifest_path: Path
    asset: OutputAsset


def _write_text(path: Path, content: str, exclusive: bool) -> None:
    mode = "x" if exclusive else "w"
    with open(path, mode, encoding="utf-8") as f:
        f.write(content)


def write_artifact(
    content: str,
    mode: OutputMode,
    base_dir: Path,
    explicit_file: Optional[PathLike] = None,
    name_factory: Callable[[str], str] = generate_filename,
) -> Path:
    """
    Write the rendered content and return its path.

    Generated names are created exclusively, so a concurrent writer that
    drew the same name makes us draw again instead of overwriting.
    Explicit paths are overwritten.
    """
    extension = OUTPUT_FORMATS[mode].extension

    attempts = 1 if explicit_file else MAX_NAME_ATTEMPTS
    path = None
    for _ in range(attempts):
        path = resolve_output_path(explicit_file, base_dir, name_factory(extension))
        ensure_directory(path.parent)
        try:
            _write_text(path, content, exclusive=not explicit_file)
            logger.info("Artifact written: %s", path)
            return path
        except FileExistsError:
            logger.debug("Generated name already taken: %s", path)
            continue
        except OSError as e:
            raise OutputWriteError(path, e) from e

    raise OutputWriteError(path, FileExistsError("no free output name after retries"))


def handle_output(
    content: str,
    mode: OutputMode,
    base_dir: Path,
    explicit_file: Optional[PathLike] = None,
    name_factory: Callable[[str], str] = generate_filename,
) -> WrittenOutput:
    """
    Write the artifact, then its manifest. Exactly two files per call.
    """
    path = write_artifact(content, mode, base_dir, explicit_file, name_factory)

    output_format = OUTPUT_FORMATS[mode]
    asset = OutputAsset(
        type=output_format.asset_type,
        format=output_format.asset_format,
        path=str(path),
    )

    manifest_path = write_manifest(path, mode, [asset])
    return WrittenOutput(path=path, manifest_path=manifest_path, asset=asset)
