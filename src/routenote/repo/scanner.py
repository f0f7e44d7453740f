from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Sequence

from routenote.repo.ignore import should_ignore_dir

CONTROLLER_MARKERS = ("@Controller", "@RestController")


def _matches(rel_posix: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatch(rel_posix, pattern):
            return True
        # "**/*.java" should also match files at the root
        if pattern.startswith("**/") and fnmatch.fnmatch(rel_posix, pattern[3:]):
            return True
    return False


def scan_source_files(
    repo_path: Path,
    patterns: Sequence[str] = ("**/*.java",),
    extra_ignores: Iterable[str] = (),
) -> list[str]:
    """
    Absolute paths (as strings) of files under repo_path matching any glob
    in ``patterns``, in sorted walk order.
    """
    extra = tuple(extra_ignores)
    out: list[str] = []
    for root, dirs, files in os.walk(repo_path):
        root_p = Path(root)

        # prune ignored dirs; sorting keeps the walk deterministic
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(root_p / d, extra))

        for f in sorted(files):
            rel = (root_p / f).relative_to(repo_path).as_posix()
            if _matches(rel, patterns):
                out.append(str((root_p / f).resolve()))
    return out


def find_named_files(repo_path: Path, names: Sequence[str], extra_ignores: Iterable[str] = ()) -> list[Path]:
    """Files whose base name is in ``names``, ordered by ``names`` then path."""
    found: dict[str, list[Path]] = {n: [] for n in names}
    extra = tuple(extra_ignores)
    for root, dirs, files in os.walk(repo_path):
        root_p = Path(root)
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(root_p / d, extra))
        for f in files:
            if f in found:
                found[f].append(root_p / f)
    return [p for n in names for p in sorted(found[n])]


def _file_contains_any(path: str, needles: Sequence[str], max_bytes: int = 1_000_000) -> bool:
    try:
        with open(path, "rb") as f:
            data = f.read(max_bytes)
    except OSError:
        return False
    text = data.decode("utf-8", errors="ignore")
    return any(n in text for n in needles)


def select_controller_files(files: list[str]) -> list[str]:
    """Keep files that declare a Spring controller."""
    return [p for p in files if _file_contains_any(p, CONTROLLER_MARKERS)]
