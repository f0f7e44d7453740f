from __future__ import annotations

from pathlib import Path
from typing import Iterable

DEFAULT_IGNORES = {
    ".git",
    ".svn",
    ".hg",
    ".idea",
    ".vscode",
    ".gradle",
    ".mvn",
    "node_modules",
    "target",
    "build",
    "out",
    "bin",
    "dist",
}


def should_ignore_dir(dir_path: Path, extra: Iterable[str] = ()) -> bool:
    return dir_path.name in DEFAULT_IGNORES or dir_path.name in set(extra)
