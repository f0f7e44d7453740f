from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from routenote.compose.edits import plan_document
from routenote.config import DEFAULT_BASE_URL, CliOverrides, load_effective_config, render_base_url
from routenote.host.document import application_order
from routenote.host.workspace import DocumentIOError, FileWorkspace, Workspace
from routenote.repo.port import PortResolution, resolve_port
from routenote.repo.scanner import select_controller_files

logger = logging.getLogger(__name__)

_PROJECT_MARKERS = ("routenote.toml", "pom.xml", "build.gradle", "build.gradle.kts")


@dataclass(frozen=True)
class DocumentReport:
    rel_path: str
    endpoints: int = 0
    deleted: int = 0
    inserted: int = 0
    changed: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class AnnotateResult:
    root: str
    base_url: str
    port: PortResolution
    files_scanned: int
    documents: tuple[DocumentReport, ...]
    dry_run: bool

    @property
    def touched(self) -> list[DocumentReport]:
        return [d for d in self.documents if d.changed and d.error is None]

    @property
    def failures(self) -> list[DocumentReport]:
        return [d for d in self.documents if d.error is not None]

    @property
    def endpoint_count(self) -> int:
        return sum(d.endpoints for d in self.documents)

    def summary(self) -> str:
        if self.endpoint_count == 0 and not self.failures:
            return "No endpoints found."
        verb = "would be updated" if self.dry_run else "updated"
        return f"{len(self.touched)} document(s) {verb}"


@dataclass(frozen=True)
class EndpointRow:
    rel_path: str
    line: int  # 1-based
    method: str
    url: str


@dataclass(frozen=True)
class _Session:
    root: Path
    workspace: Workspace
    port: PortResolution
    base_url: str
    files: list[str]


def _workspace_root(target: Path) -> Path:
    # single file: climb to the enclosing project so config and port resolve
    for parent in target.parents:
        if any((parent / m).exists() for m in _PROJECT_MARKERS):
            return parent
    return target.parent


def _open_session(
    target: Path,
    overrides: CliOverrides | None,
    environ: Mapping[str, str] | None,
) -> _Session:
    target = target.resolve()
    single_file = target.is_file()
    root = _workspace_root(target) if single_file else target

    config = load_effective_config(root, overrides, environ)
    workspace = FileWorkspace(root, config)
    port = resolve_port(root, config.exclude_dirs)
    template = workspace.get_config_value("baseUrl") or DEFAULT_BASE_URL
    base_url = render_base_url(template, port.port)

    if single_file:
        files = [str(target)]
    else:
        found: list[str] = []
        for pattern in config.include:
            found.extend(p for p in workspace.find_files(pattern) if p not in found)
        files = select_controller_files(found)
        logger.debug("%d source file(s), %d controller(s)", len(found), len(files))

    return _Session(root=root, workspace=workspace, port=port, base_url=base_url, files=files)


def annotate_document(
    workspace: Workspace,
    path: str,
    base_url: str,
    dry_run: bool = False,
) -> DocumentReport:
    """Read one document, plan its edits, apply them and save it if it changed."""
    rel_path = workspace.relative(path)
    try:
        document = workspace.open(path)
    except DocumentIOError as exc:
        logger.warning("%s", exc)
        return DocumentReport(rel_path=rel_path, error=str(exc))

    plan = plan_document(document, base_url)
    if not plan.operations:
        return DocumentReport(rel_path=rel_path, endpoints=plan.endpoint_count)

    if not document.apply_edits(application_order(plan.operations)):
        logger.warning("edits rejected for %s", rel_path)
        return DocumentReport(rel_path=rel_path, endpoints=plan.endpoint_count, error="edit batch rejected")

    changed = document.render() != document.text()
    if changed and not dry_run:
        try:
            workspace.save(path, document)
        except DocumentIOError as exc:
            logger.warning("%s", exc)
            return DocumentReport(rel_path=rel_path, endpoints=plan.endpoint_count, error=str(exc))

    return DocumentReport(
        rel_path=rel_path,
        endpoints=plan.endpoint_count,
        deleted=plan.deleted_lines,
        inserted=plan.inserted_lines,
        changed=changed,
    )


def run_annotate(
    target: Path,
    overrides: CliOverrides | None = None,
    dry_run: bool = False,
    environ: Mapping[str, str] | None = None,
) -> AnnotateResult:
    """
    Regenerate endpoint comments for a workspace directory or a single file.

    Each document is planned from one snapshot of its text and written back
    in one piece; a failing document is reported and the rest continue.
    """
    session = _open_session(target, overrides, environ)

    reports = [
        annotate_document(session.workspace, p, session.base_url, dry_run=dry_run)
        for p in session.files
    ]

    return AnnotateResult(
        root=str(session.root),
        base_url=session.base_url,
        port=session.port,
        files_scanned=len(session.files),
        documents=tuple(reports),
        dry_run=dry_run,
    )


def list_endpoints(
    target: Path,
    overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[EndpointRow]:
    session = _open_session(target, overrides, environ)

    rows: list[EndpointRow] = []
    for p in session.files:
        rel_path = session.workspace.relative(p)
        try:
            document = session.workspace.open(p)
        except DocumentIOError as exc:
            logger.warning("%s", exc)
            continue
        plan = plan_document(document, session.base_url)
        for ann in plan.annotations:
            for e in ann.endpoints:
                rows.append(EndpointRow(rel_path=rel_path, line=ann.line + 1, method=e.http_verb, url=e.full_url))
    return rows


def resolve_workspace_port(target: Path, environ: Mapping[str, str] | None = None) -> PortResolution:
    target = target.resolve()
    root = _workspace_root(target) if target.is_file() else target
    config = load_effective_config(root, environ=environ)
    return resolve_port(root, config.exclude_dirs)
