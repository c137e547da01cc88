# File: scaffoldgen/__init__.py
"""
scaffoldgen — CRUD Boilerplate Generator
==========================================

Given an entity name and its column names, scaffoldgen writes the
boilerplate a Laravel API needs for that entity: store/update form requests
with validation rules and attribute labels, a JSON resource, and route
declarations merged into the shared route file.  Generation is idempotent:
existing files are never overwritten and route declarations are appended
only when missing.

Architecture overview::

    ┌──────────────┐     ┌────────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ ScaffoldGenerator  │────▶│ TemplateGenerator│
    │   (cli.py)   │     │   (generator.py)   │     │  (templates.py)  │
    └──────────────┘     └─────────┬──────────┘     └────────┬─────────┘
                                   │                         │
                    ┌──────────────┼──────────┐      ┌───────┴──────┐
                    ▼              ▼          ▼      ▼              ▼
             ┌──────────┐   ┌───────────┐ ┌──────┐ ┌────────┐ ┌─────────┐
             │validators│   │ exporters │ │models│ │columns │ │  rules  │
             └──────────┘   └───────────┘ └──────┘ └────────┘ └─────────┘

Usage::

    # As a library
    from scaffoldgen import scaffold, GenerationConfig
    scaffold("Product", ["id", "name", "cover_img"],
             config=GenerationConfig(base_path="./shop"))

    # From the command line
    python -m scaffoldgen --entity Product --columns id,name,cover_img -v
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from scaffoldgen.models import (
    Artifact,
    ArtifactType,
    ColumnKind,
    EmitOutcome,
    EmitStatus,
    EntityDefinition,
    GenerationConfig,
    GenerationScope,
    OperationMode,
    RouteBlock,
)
from scaffoldgen.columns import classify_column, filter_columns
from scaffoldgen.rules import synthesize_label, synthesize_rule
from scaffoldgen.validators import InvalidInputError, ValidationResult
from scaffoldgen.templates import TemplateGenerator, build_route_block
from scaffoldgen.exporters import ArtifactEmitter
from scaffoldgen.generator import (
    EntityReport,
    GenerationReport,
    ScaffoldGenerator,
    scaffold,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "ScaffoldGenerator",
    "GenerationReport",
    "EntityReport",
    "scaffold",
    # Models
    "Artifact",
    "ArtifactType",
    "ColumnKind",
    "EmitOutcome",
    "EmitStatus",
    "EntityDefinition",
    "GenerationConfig",
    "GenerationScope",
    "OperationMode",
    "RouteBlock",
    # Synthesis
    "classify_column",
    "filter_columns",
    "synthesize_rule",
    "synthesize_label",
    # Validation
    "InvalidInputError",
    "ValidationResult",
    # Rendering & emission
    "TemplateGenerator",
    "build_route_block",
    "ArtifactEmitter",
]
