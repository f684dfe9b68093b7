# recipe_profile/common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system helpers: atomic writes, directory fingerprints and YAML reads.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml

module_logger = logging.getLogger(__name__)


def atomic_write_text(
    path: Union[str, Path],
    content: str,
    encoding: str = "utf-8",
) -> None:
    """
    Write `content` to `path` so that readers never observe a partial file.

    The data is written to a temporary file in the destination directory and
    then moved into place with os.replace, which is atomic on POSIX and
    Windows as long as both paths are on the same filesystem.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding) as tmp_f:
            tmp_f.write(content)
            tmp_f.flush()
            os.fsync(tmp_f.fileno())
        os.replace(tmp_path, str(target))
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def fingerprint_directory(
    directory: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Calculate a SHA256 hash of every file within a directory.

    The hash includes both file content and relative file paths (normalized to
    POSIX style) to detect additions, deletions, renames, and content changes.

    Args:
        directory: The directory to hash.
        current_logger: Optional logger instance.

    Returns:
        The hex digest of the SHA256 hash.

    Raises:
        OSError: If the directory or one of its files cannot be read.
    """
    logger_to_use = current_logger if current_logger else module_logger
    root = Path(directory)
    hasher = hashlib.sha256()

    files: List[Path] = [p for p in root.rglob("*") if p.is_file()]
    sorted_files = sorted(files, key=lambda p: p.relative_to(root).as_posix())

    for file_path in sorted_files:
        relative_path_str = file_path.relative_to(root).as_posix()
        hasher.update(relative_path_str.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(file_path.read_bytes())
        hasher.update(b"\0")

    final_hash = hasher.hexdigest()
    logger_to_use.debug(
        f"Calculated fingerprint {final_hash} from {len(sorted_files)} files in {root}."
    )
    return final_hash


def read_yaml_file(path: Union[str, Path]) -> Any:
    """
    Read and parse a YAML file with yaml.safe_load.

    Returns:
        The parsed document, or None for an empty file.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def dump_yaml(data: Any) -> str:
    """Serialize `data` to block-style YAML, preserving key order."""
    return yaml.safe_dump(
        data, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
