# File: scaffoldgen/generator.py
"""
scaffoldgen - Generation Pipeline (Orchestrator)
==================================================

Connects every phase for each entity:

    Input → Validation → Synthesis/Rendering → Emission → Report

The ``ScaffoldGenerator`` class is both the programmatic API and the
backend for the CLI.

Workflow per entity::

    1. Validate the entity name and column names (validators.py).
    2. Render the enabled file artifacts (templates.py).
    3. Emit each artifact with the first-writer-wins policy (exporters.py).
    4. Build the route block and merge it into the shared route file.
    5. Log every outcome and collect it in the ``GenerationReport``.

Error handling strategy:
    - Invalid input aborts that entity only; other entities still run.
    - Filesystem failures abort that artifact only; siblings still run.
    - Skipped / unchanged outcomes are normal, not errors.
    - Re-running is always safe, so every failure is reported with enough
      context (entity, artifact, path) to fix and re-run.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from scaffoldgen.exporters import ArtifactEmitter
from scaffoldgen.models import (
    Artifact,
    EmitOutcome,
    EmitStatus,
    EntityDefinition,
    GenerationConfig,
)
from scaffoldgen.templates import TemplateGenerator
from scaffoldgen.utils import Timer
from scaffoldgen.validators import (
    InvalidInputError,
    ValidationResult,
    ensure_valid_entity,
    validate_config,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class EntityReport:
    """Everything that happened for one entity."""

    entity: str
    outcomes: List[EmitOutcome] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    invalid_input: bool = False
    elapsed_seconds: float = 0.0

    @property
    def failures(self) -> List[EmitOutcome]:
        return [o for o in self.outcomes if o.status is EmitStatus.FAILED]

    @property
    def success(self) -> bool:
        return not self.invalid_input and not self.errors and not self.failures

    def count(self, status: EmitStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)


@dataclass(slots=True)
class GenerationReport:
    """
    Report produced by ``ScaffoldGenerator.generate()``.

    Aggregates per-entity reports plus run-level errors (bad config or an
    unreadable definition file).
    """

    entities: List[EntityReport] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    dry_run: bool = False
    total_elapsed_seconds: float = 0.0

    @property
    def outcomes(self) -> List[EmitOutcome]:
        return [o for report in self.entities for o in report.outcomes]

    @property
    def invalid_entities(self) -> List[str]:
        return [r.entity for r in self.entities if r.invalid_input]

    @property
    def failures(self) -> List[EmitOutcome]:
        return [o for o in self.outcomes if o.status is EmitStatus.FAILED]

    @property
    def success(self) -> bool:
        return not self.errors and all(r.success for r in self.entities)

    def count(self, status: EmitStatus) -> int:
        return sum(r.count(status) for r in self.entities)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        if self.dry_run:
            status += " (dry run)"
        lines.append("=" * 60)
        lines.append("  scaffoldgen — Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:     {status}")
        lines.append(f"  Entities:   {len(self.entities)}")
        lines.append(f"  Created:    {self.count(EmitStatus.CREATED)}")
        lines.append(f"  Skipped:    {self.count(EmitStatus.SKIPPED)}")
        lines.append(f"  Routes:     {self.count(EmitStatus.APPENDED)} block(s) appended")
        lines.append(f"  Failed:     {len(self.failures)}")
        lines.append(f"  Total time: {self.total_elapsed_seconds:.3f}s")

        for report in self.entities:
            lines.append("-" * 60)
            mark: str = "✓" if report.success else "✗"
            lines.append(f"  {mark} {report.entity}")
            for err in report.errors:
                lines.append(f"      ✗ {err}")
            for warn in report.warnings:
                lines.append(f"      ⚠ {warn}")
            for outcome in report.outcomes:
                lines.append(f"      • {outcome.describe()}")

        if self.errors:
            lines.append("-" * 60)
            lines.append(f"  Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"    ✗ {err}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Definition loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_definition_file(path: Path) -> Dict[str, Any]:
    """
    Load an entity definition file (JSON or YAML), dispatching on extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Definition file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Definition path is not a file: {path}")

    if path.suffix.lower() == ".json":
        return _load_json_file(path)
    # Anything that is not .json is parsed as YAML.
    return _load_yaml_file(path)


def parse_raw_definition(
    raw: Dict[str, Any],
) -> Tuple[List[EntityDefinition], GenerationConfig]:
    """
    Parse a raw dictionary (from JSON/YAML) into validated Pydantic models.

    Expected top-level keys:
        - "entities": list of ``{name, columns, soft_delete_routes}``
          (a single "entity" mapping is accepted too)
        - "config": generation settings (optional)

    Raises:
        ValueError: If required keys are missing or model validation fails.
    """
    entities_data: Any = raw.get("entities")
    if entities_data is None and "entity" in raw:
        entities_data = [raw["entity"]]
    if not isinstance(entities_data, list) or not entities_data:
        raise ValueError(
            "Cannot find entity definitions in input. "
            "Expected a non-empty top-level 'entities' list."
        )

    config_data: Any = raw.get("config") or {}
    if not isinstance(config_data, dict):
        raise ValueError("'config' must be a mapping.")

    try:
        entities: List[EntityDefinition] = [
            EntityDefinition.model_validate(item) for item in entities_data
        ]
    except PydanticValidationError as exc:
        raise ValueError(f"Entity definition invalid: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return entities, config


# ---------------------------------------------------------------------------
# ScaffoldGenerator: orchestrator
# ---------------------------------------------------------------------------


class ScaffoldGenerator:
    """
    Pipeline orchestrator.

    Usage::

        generator = ScaffoldGenerator(GenerationConfig(base_path="./shop"))
        report = generator.generate([
            EntityDefinition(name="Product", columns=["id", "name", "cover_img"]),
        ])
        print(report.summary())

    The generator is reusable: create once, call generate() many times.
    """

    def __init__(self, config: Optional[GenerationConfig] = None) -> None:
        self._config: GenerationConfig = config or GenerationConfig()
        self._templates: TemplateGenerator = TemplateGenerator(self._config)
        self._emitter: ArtifactEmitter = ArtifactEmitter(self._config)
        logger.debug(
            "ScaffoldGenerator initialised (base_path=%s, dry_run=%s).",
            self._config.base_path,
            self._config.dry_run,
        )

    @property
    def config(self) -> GenerationConfig:
        return self._config

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    @classmethod
    def generate_from_file(
        cls,
        definition_path: Path,
        *,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """
        Full pipeline: load file → parse → generate.

        *config_overrides* are merged over the file's ``config`` section.
        """
        try:
            raw: Dict[str, Any] = load_definition_file(definition_path)
            file_config: Any = raw.get("config") or {}
            if config_overrides and isinstance(file_config, dict):
                raw["config"] = {**file_config, **config_overrides}
            entities, config = parse_raw_definition(raw)
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Could not load %s: %s", definition_path, exc)
            report: GenerationReport = GenerationReport()
            report.errors.append(str(exc))
            return report

        logger.info(
            "Loaded %d entit%s from %s.",
            len(entities),
            "y" if len(entities) == 1 else "ies",
            definition_path,
        )
        return cls(config).generate(entities)

    # -----------------------------------------------------------------
    # Public: generate from in-memory objects
    # -----------------------------------------------------------------

    def generate(self, entities: Sequence[EntityDefinition]) -> GenerationReport:
        """Scaffold every entity in order and return the aggregated report."""
        report: GenerationReport = GenerationReport(dry_run=self._config.dry_run)

        with Timer("generate") as t:
            config_result: ValidationResult = validate_config(self._config)
            for warning in config_result.warnings:
                logger.warning("%s", warning.message)
            if not config_result.is_valid:
                for err in config_result.errors:
                    logger.error("%s", err.message)
                    report.errors.append(err.message)
            else:
                for entity in entities:
                    report.entities.append(self.generate_entity(entity))

        report.total_elapsed_seconds = t.elapsed
        return report

    def generate_entity(self, entity: EntityDefinition) -> EntityReport:
        """Run the whole pipeline for one entity."""
        report: EntityReport = EntityReport(entity=entity.name)

        with Timer(f"entity {entity.name}") as t:
            try:
                result: ValidationResult = ensure_valid_entity(entity)
            except InvalidInputError as exc:
                logger.error("%s", exc)
                report.invalid_input = True
                report.errors.extend(e.message for e in exc.result.errors)
                report.warnings.extend(w.message for w in exc.result.warnings)
                return report

            report.warnings.extend(w.message for w in result.warnings)

            artifacts: List[Artifact] = self._templates.generate_all(entity)
            report.outcomes.extend(self._emitter.emit_all(artifacts))

            if self._config.generate_routes:
                block = self._templates.build_route_block(entity)
                report.outcomes.append(self._emitter.merge_routes(block))

        report.elapsed_seconds = t.elapsed
        for outcome in report.outcomes:
            self._log_outcome(outcome)
        return report

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    @staticmethod
    def _log_outcome(outcome: EmitOutcome) -> None:
        if outcome.status is EmitStatus.FAILED:
            # Already logged with full context by the emitter.
            return
        if outcome.status in (EmitStatus.CREATED, EmitStatus.APPENDED):
            logger.info("%s: %s", outcome.entity, outcome.describe())
        else:
            logger.info("%s: %s, skipping.", outcome.entity, outcome.describe())


# ---------------------------------------------------------------------------
# Convenience entry point
# ---------------------------------------------------------------------------


def scaffold(
    entity: str,
    columns: Sequence[str],
    *,
    soft_delete_routes: bool = False,
    config: Optional[GenerationConfig] = None,
) -> EntityReport:
    """Scaffold a single entity with one call."""
    definition: EntityDefinition = EntityDefinition(
        name=entity, columns=list(columns), soft_delete_routes=soft_delete_routes
    )
    return ScaffoldGenerator(config).generate_entity(definition)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ScaffoldGenerator",
    "GenerationReport",
    "EntityReport",
    "load_definition_file",
    "parse_raw_definition",
    "scaffold",
]
