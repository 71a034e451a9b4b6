from __future__ import annotations

"""Path utilities.

CONTRACT
- Inputs: strings or paths
- Outputs:
  - normalize_dir() returns an absolute path without a trailing separator
  - same_path() compares two paths after resolving symlinks and case rules
  - ensure_dir() creates a directory tree
- Invariants:
  - normalize_dir never touches the filesystem
- Failure:
  - ensure_dir raises OSError (FileExistsError when a file is in the way)
"""

import os
from pathlib import Path


def normalize_dir(path: str | os.PathLike[str]) -> Path:
    raw = os.fspath(path)
    stripped = raw.rstrip("/\\") or raw[:1]
    return Path(os.path.abspath(os.path.expanduser(stripped)))


def same_path(a: str | os.PathLike[str], b: str | os.PathLike[str]) -> bool:
    ra = os.path.normcase(os.path.realpath(os.fspath(a)))
    rb = os.path.normcase(os.path.realpath(os.fspath(b)))
    return ra == rb


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
