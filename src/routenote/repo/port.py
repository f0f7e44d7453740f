from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from routenote.repo.scanner import find_named_files

logger = logging.getLogger(__name__)

DEFAULT_PORT = "8080"

PROPERTIES_FILES = ("application.properties",)
YAML_FILES = ("application.yml", "application.yaml")

_PROPERTIES_PORT = re.compile(r"^[ \t]*server\.port[ \t]*=[ \t]*(\d+)[ \t]*$", re.MULTILINE)
_YAML_PORT = re.compile(r"^server:[ \t]*\r?\n[ \t]+port:[ \t]*(\d+)", re.MULTILINE)


@dataclass(frozen=True)
class PortResolution:
    port: str
    source: Optional[str]  # file the port came from, None for the default


def port_from_properties(text: str) -> Optional[str]:
    m = _PROPERTIES_PORT.search(text)
    return m.group(1) if m else None


def port_from_yaml(text: str) -> Optional[str]:
    m = _YAML_PORT.search(text)
    return m.group(1) if m else None


def _first_port(paths: Iterable[Path], parse) -> Optional[tuple[str, Path]]:
    for p in paths:
        try:
            text = p.read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            logger.debug("cannot read %s: %s", p, exc)
            continue
        port = parse(text)
        if port is not None:
            return port, p
    return None


def resolve_port(repo_path: Path, extra_ignores: Iterable[str] = ()) -> PortResolution:
    """
    Runtime port of a Spring Boot project: application.properties first,
    then application.yml / application.yaml, then 8080.
    """
    extra = tuple(extra_ignores)
    for names, parse in ((PROPERTIES_FILES, port_from_properties), (YAML_FILES, port_from_yaml)):
        hit = _first_port(find_named_files(repo_path, names, extra), parse)
        if hit is not None:
            port, path = hit
            logger.debug("port %s from %s", port, path)
            return PortResolution(port=port, source=str(path))

    logger.debug("no server.port configured, using %s", DEFAULT_PORT)
    return PortResolution(port=DEFAULT_PORT, source=None)
