# File: scaffoldgen/exporters.py
"""
scaffoldgen - Idempotent Emitter (File-System Manager)
========================================================

The single place where generated text reaches the disk.  Write policy:

    1. Target directories are created on demand (parents included).
    2. Single-file artifacts are first-writer-wins: an existing file is never
       overwritten or merged, the write is reported as ``skipped``.
    3. Route blocks are append-only: only declarations whose exact text does
       not already occur in the route file are appended, under the block's
       header.  Nothing in the file is ever rewritten or removed.

Single-file writes use exclusive creation (``open(..., "x")``), so two runs
racing for the same path cannot both write it.  Route merging is a
read-then-append on a shared file and is not locked: concurrent runs against
the same route file may both append the same declarations.

Failures are per artifact.  ``ArtifactEmitter`` turns an ``OSError`` into a
``failed`` outcome; artifacts already written in the same batch stay on disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from scaffoldgen.models import (
    Artifact,
    ArtifactType,
    EmitOutcome,
    EmitStatus,
    GenerationConfig,
    RouteBlock,
    RouteDeclaration,
)
from scaffoldgen.templates import ROUTES_FILE_PREAMBLE, render_route_block
from scaffoldgen.utils import read_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.exporters")


# ---------------------------------------------------------------------------
# Primitive operations
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_if_absent(path: Path, content: str) -> EmitStatus:
    """
    Write *content* to *path* unless the path already exists.

    Returns ``CREATED`` or ``SKIPPED``.  Any other ``OSError`` propagates.
    """
    ensure_directory(path.parent)
    try:
        fh = open(path, "x", encoding="utf-8", newline="")
    except FileExistsError:
        logger.debug("Exists, skipped: %s", path)
        return EmitStatus.SKIPPED

    try:
        with fh:
            fh.write(content)
    except OSError:
        # Remove the partial file so a re-run can create it.
        path.unlink(missing_ok=True)
        raise

    logger.debug("Wrote %d bytes to %s", len(content.encode("utf-8")), path)
    return EmitStatus.CREATED


def _read_route_file(route_file: Path) -> str:
    # Bytes that are not UTF-8 survive as surrogates and never match a
    # rendered declaration.
    return read_file(route_file, errors="surrogateescape")


def plan_route_merge(
    existing_content: str,
    candidates: Sequence[RouteDeclaration],
) -> List[RouteDeclaration]:
    """
    Return the candidates whose text is not already in *existing_content*.

    Pure function: the containment check is textual, on the exact rendered
    declaration, and preserves candidate order.
    """
    return [d for d in candidates if d.text not in existing_content]


def merge_route_block(route_file: Path, block: RouteBlock) -> int:
    """
    Append the missing declarations of *block* to *route_file*.

    A missing route file is created with the PHP preamble first.  Returns
    the number of declarations appended (0 means the file was left alone).
    """
    if route_file.exists():
        existing: str = _read_route_file(route_file)
    else:
        ensure_directory(route_file.parent)
        existing = ""

    surviving: List[RouteDeclaration] = plan_route_merge(existing, block.declarations)
    if not surviving:
        return 0

    rendered: str = render_route_block(block, [d.text for d in surviving])
    with open(route_file, "a", encoding="utf-8", newline="") as fh:
        if not existing:
            fh.write(ROUTES_FILE_PREAMBLE)
        fh.write(rendered)

    logger.debug(
        "Appended %d declaration(s) for %s to %s",
        len(surviving),
        block.entity,
        route_file,
    )
    return len(surviving)


# ---------------------------------------------------------------------------
# ArtifactEmitter class
# ---------------------------------------------------------------------------


class ArtifactEmitter:
    """
    Applies the write policy for one project root and reports structured
    outcomes instead of raising.

    Usage::

        emitter = ArtifactEmitter(config)
        outcome = emitter.emit(artifact)
        outcome = emitter.merge_routes(route_block)

    Thread-safety: NOT thread-safe.  Use one emitter per control flow.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        self._base_path: Path = Path(config.base_path)
        self._app_path: Path = self._base_path / config.app_dir
        self._route_file: Path = self._base_path / config.routes_file
        self._dry_run: bool = config.dry_run

    @property
    def app_path(self) -> Path:
        return self._app_path

    @property
    def route_file(self) -> Path:
        return self._route_file

    # -----------------------------------------------------------------
    # Single-file artifacts
    # -----------------------------------------------------------------

    def emit(self, artifact: Artifact) -> EmitOutcome:
        """Write one artifact unless its target already exists."""
        target: Path = self._app_path / artifact.relative_path

        try:
            if self._dry_run:
                status: EmitStatus = (
                    EmitStatus.SKIPPED if target.exists() else EmitStatus.CREATED
                )
            else:
                status = write_if_absent(target, artifact.content)
        except OSError as exc:
            return self._failed(
                target, artifact.entity, artifact.artifact_type, exc
            )

        if status is EmitStatus.CREATED and not self._dry_run:
            logger.debug(
                "Created %s (sha256 %s)", artifact.relative_path, artifact.checksum
            )

        return EmitOutcome(
            status=status,
            path=str(target),
            entity=artifact.entity,
            artifact_type=artifact.artifact_type,
            dry_run=self._dry_run,
        )

    def emit_all(self, artifacts: Sequence[Artifact]) -> List[EmitOutcome]:
        """Emit each artifact independently; a failure never stops the rest."""
        return [self.emit(artifact) for artifact in artifacts]

    # -----------------------------------------------------------------
    # Route file
    # -----------------------------------------------------------------

    def merge_routes(self, block: RouteBlock) -> EmitOutcome:
        """Merge *block* into the shared route file."""
        target: Path = self._route_file

        try:
            if self._dry_run:
                existing: str = (
                    _read_route_file(target) if target.exists() else ""
                )
                appended: int = len(plan_route_merge(existing, block.declarations))
            else:
                appended = merge_route_block(target, block)
        except OSError as exc:
            return self._failed(target, block.entity, ArtifactType.ROUTES, exc)

        return EmitOutcome(
            status=EmitStatus.APPENDED if appended else EmitStatus.UNCHANGED,
            path=str(target),
            entity=block.entity,
            artifact_type=ArtifactType.ROUTES,
            appended=appended,
            dry_run=self._dry_run,
        )

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    @staticmethod
    def _failed(
        target: Path,
        entity: str,
        artifact_type: ArtifactType,
        exc: OSError,
    ) -> EmitOutcome:
        reason: str = f"{type(exc).__name__}: {exc}"
        logger.error(
            "Failed to emit %s for %s at %s: %s",
            artifact_type.value,
            entity,
            target,
            reason,
        )
        return EmitOutcome(
            status=EmitStatus.FAILED,
            path=str(target),
            entity=entity,
            artifact_type=artifact_type,
            reason=reason,
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ensure_directory",
    "write_if_absent",
    "plan_route_merge",
    "merge_route_block",
    "ArtifactEmitter",
]
