"""
YAML file helpers shared by every ptsd store.

Reads treat a missing file as "no data"; a present file that cannot be read
or parsed is an error. Writes are deterministic (sorted keys, block style)
and atomic (temp file in the same directory + os.replace), so saving an
unchanged document twice produces byte-identical files.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from ptsd.core.errors import StoreIOError

logger = logging.getLogger(__name__)


def read_yaml(path: Path) -> dict[str, Any] | None:
    """
    Read a YAML mapping from disk.

    Args:
        path: File to read

    Returns:
        Parsed mapping, an empty dict for an empty file, or None if the
        file does not exist

    Raises:
        StoreIOError: If the file exists but cannot be read, is not valid
            YAML, or does not contain a mapping
    """
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StoreIOError(f"failed to read {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise StoreIOError(f"failed to parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StoreIOError(f"{path} must contain a YAML mapping")
    return data


def dump_yaml(data: dict[str, Any], header: str = "") -> str:
    """Render a mapping as deterministic YAML text."""
    body = yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )
    return header + body


def write_yaml(path: Path, data: dict[str, Any], header: str = "") -> None:
    """
    Write a mapping to disk atomically.

    Uses a temporary file and atomic rename to prevent corruption
    on write failures.

    Args:
        path: Destination file (parent directories are created)
        data: Mapping to serialize
        header: Optional comment block written before the YAML body

    Raises:
        StoreIOError: If the file cannot be written
    """
    content = dump_yaml(data, header)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}_", suffix=".yaml.tmp"
        )
    except OSError as e:
        raise StoreIOError(f"failed to write {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)

        # Atomic rename (replaces existing file)
        os.replace(temp_path, path)
    except OSError as e:
        # Clean up temp file on error
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise StoreIOError(f"failed to write {path}: {e}") from e

    logger.debug("Wrote %s (%d bytes)", path, len(content))
