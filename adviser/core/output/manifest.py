import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from adviser.contracts.analysis_result import format_instant
from adviser.contracts.errors import OutputWriteError
from adviser.contracts.output_manifest import OutputAsset, OutputManifest, OutputMode

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".manifest.json"


def manifest_path_for(primary_path: Path) -> Path:
    return Path(str(primary_path) + MANIFEST_SUFFIX)


def ensure_directory(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(directory, e) from e


def write_manifest(
    primary_path: Path,
    mode: OutputMode,
    assets: List[OutputAsset],
    clock: Optional[Callable[[], datetime]] = None,
) -> Path:
    """
    Last step of an invocation. A primary artifact without its manifest
    must be treated as incomplete.
    """
    now = clock() if clock else datetime.now(timezone.utc)
    manifest = OutputManifest(mode=mode, assets=list(assets), timestamp=format_instant(now))

    manifest_path = manifest_path_for(primary_path)
    ensure_directory(manifest_path.parent)

    try:
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest.to_dict(), f, ensure_ascii=False, indent=2)
    except OSError as e:
        raise OutputWriteError(manifest_path, e) from e

    logger.info("Manifest written: %s", manifest_path)
    return manifest_path
