from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

from routenote.config import RoutenoteConfig
from routenote.host.document import TextDocument
from routenote.repo.scanner import scan_source_files


class DocumentIOError(OSError):
    """A document could not be read or written."""


class Workspace(Protocol):
    def find_files(self, pattern: str) -> list[str]: ...

    def open(self, path: str) -> TextDocument: ...

    def save(self, path: str, document: TextDocument) -> None: ...

    def get_config_value(self, key: str) -> Optional[str]: ...

    def relative(self, path: str) -> str: ...


class FileWorkspace:
    """Workspace backed by a directory on disk."""

    def __init__(self, root: Path, config: RoutenoteConfig):
        self.root = root.resolve()
        self.config = config

    def find_files(self, pattern: str) -> list[str]:
        return scan_source_files(self.root, (pattern,), extra_ignores=self.config.exclude_dirs)

    def open(self, path: str) -> TextDocument:
        try:
            # bytes keep "\r\n" intact; read_text would translate it
            data = Path(path).read_bytes()
            return TextDocument(data.decode("utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentIOError(f"cannot read {path}: {exc}") from exc

    def save(self, path: str, document: TextDocument) -> None:
        try:
            Path(path).write_bytes(document.render().encode("utf-8"))
        except OSError as exc:
            raise DocumentIOError(f"cannot write {path}: {exc}") from exc

    def get_config_value(self, key: str) -> Optional[str]:
        if key == "baseUrl":
            return self.config.base_url
        return None

    def relative(self, path: str) -> str:
        try:
            return Path(path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return Path(path).as_posix()
