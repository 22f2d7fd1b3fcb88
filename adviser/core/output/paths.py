"""
Output location resolution.

Only existence checks happen here; directories are created by the writer.
"""
import logging
import os
import secrets
import string
import time
from pathlib import Path
from typing import Optional, Sequence, Union

from adviser.contracts.errors import PathResolutionError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_ROOT_MARKERS = ("pyproject.toml", "package.json")
REVIEWS_SUBDIR = Path("docs") / "reviews"

# bounds the upward walk even on odd layouts (e.g. symlink loops)
MAX_DIR_SEARCH_DEPTH = 10

FILENAME_PREFIX = "review"
SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 4


def _absolute(raw: PathLike, cwd: Path) -> Path:
    path = Path(os.path.expanduser(str(raw)))
    if not path.is_absolute():
        path = cwd / path
    return Path(os.path.normpath(path))


def _current_dir(cwd: Optional[PathLike]) -> Path:
    """
    Absolute working directory; a relative `cwd` is anchored at the
    process working directory.
    """
    if cwd is not None and Path(os.path.expanduser(str(cwd))).is_absolute():
        return _absolute(cwd, Path("/"))
    try:
        here = Path.cwd()
    except OSError as e:
        raise PathResolutionError(Path("."), e) from e
    if cwd is None:
        return here
    return _absolute(cwd, here)


def _has_marker(directory: Path, markers: Sequence[str]) -> bool:
    # Only "does not exist" counts as absent; any other stat failure
    # (e.g. permission denied) stops the search.
    for marker in markers:
        candidate = directory / marker
        try:
            os.stat(candidate)
        except (FileNotFoundError, NotADirectoryError):
            continue
        except OSError as e:
            raise PathResolutionError(candidate, e) from e
        return True
    return False


def find_project_root(
    start: Path,
    markers: Sequence[str] = DEFAULT_ROOT_MARKERS,
    max_depth: int = MAX_DIR_SEARCH_DEPTH,
) -> Optional[Path]:
    """
    Nearest ancestor of `start` (inclusive) holding one of `markers`,
    looking at most `max_depth` levels.
    """
    search_dir = start
    for _ in range(max_depth):
        if _has_marker(search_dir, markers):
            return search_dir
        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent
    return None


def resolve_output_dir(
    explicit_dir: Optional[PathLike] = None,
    env_dir: Optional[PathLike] = None,
    cwd: Optional[PathLike] = None,
    markers: Sequence[str] = DEFAULT_ROOT_MARKERS,
) -> Path:
    """
    Priority:
    1. explicit directory argument
    2. environment override (read by the caller, passed in here)
    3. <project root>/docs/reviews, project root found by marker search
    4. <cwd>/docs/reviews
    """
    base = _current_dir(cwd)

    if explicit_dir:
        resolved = _absolute(explicit_dir, base)
        logger.debug("Output dir from explicit argument: %s", resolved)
        return resolved

    if env_dir:
        resolved = _absolute(env_dir, base)
        logger.debug("Output dir from environment override: %s", resolved)
        return resolved

    root = find_project_root(base, markers)
    if root is not None:
        logger.debug("Output dir under project root: %s", root)
        return root / REVIEWS_SUBDIR

    logger.debug("No project root marker found, using cwd: %s", base)
    return base / REVIEWS_SUBDIR


def generate_filename(extension: str, now_ms: Optional[int] = None) -> str:
    """
    review-<epoch millis>-<4 random chars>.<ext>

    The random suffix keeps two processes writing in the same
    millisecond apart.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{FILENAME_PREFIX}-{now_ms}-{suffix}.{extension}"


def resolve_output_path(
    explicit_file: Optional[PathLike],
    base_dir: Path,
    generated_name: str,
) -> Path:
    """
    Absolute explicit file -> used verbatim.
    Relative explicit file -> joined to base_dir.
    No explicit file       -> base_dir / generated_name.
    """
    if explicit_file:
        explicit = Path(os.path.expanduser(str(explicit_file)))
        if explicit.is_absolute():
            return explicit
        return base_dir / explicit
    return base_dir / generated_name
