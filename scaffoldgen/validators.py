# File: scaffoldgen/validators.py
"""
scaffoldgen - Input Validators
================================
Pure-function checks run on an ``EntityDefinition`` before anything is
synthesized.  Pydantic already guarantees the input's shape; this module adds
the naming rules the generated artifacts depend on:

* the entity name is a non-empty identifier (PascalCase recommended),
* every column name is a snake_case-compatible identifier,
* column names are unique.

Errors make the entity invalid and abort its generation only; warnings are
reported but never block.

Usage by downstream modules:
    from scaffoldgen.validators import ensure_valid_entity
    ensure_valid_entity(entity)   # raises InvalidInputError
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Set

from scaffoldgen.models import EntityDefinition, GenerationConfig
from scaffoldgen.utils import to_pascal_case, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationIssue:
    """Lightweight issue descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationIssue`` instances produced by the checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationIssue] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_warning]

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def is_valid(self) -> bool:
        return not any(e.is_error for e in self._items)

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)


class InvalidInputError(ValueError):
    """Raised when an entity definition cannot be scaffolded."""

    def __init__(self, entity: str, result: ValidationResult) -> None:
        self.entity: str = entity
        self.result: ValidationResult = result
        details: str = "; ".join(e.message for e in result.errors)
        super().__init__(f"Invalid input for entity '{entity}': {details}")


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_PASCAL_CASE_RE: re.Pattern[str] = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_SNAKE_CASE_RE: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")
_NAMESPACE_RE: re.Pattern[str] = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\\[A-Za-z_][A-Za-z0-9_]*)*$"
)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_entity_name(name: str) -> ValidationResult:
    """
    Validate the entity name.

    The name becomes part of class names, namespaces and file names, so it
    must be a plain identifier.
    """
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"entity": name}

    if not name or not name.strip():
        result.add_error("EMPTY_ENTITY_NAME", "Entity name must not be empty.", ctx)
        return result

    if not _IDENTIFIER_RE.match(name):
        result.add_error(
            "INVALID_ENTITY_NAME",
            f"Entity name '{name}' is not a valid identifier.",
            ctx,
        )
        return result

    if not _PASCAL_CASE_RE.match(name):
        result.add_warning(
            "ENTITY_NAME_NOT_PASCAL_CASE",
            f"Entity name '{name}' is not PascalCase "
            f"(did you mean '{to_pascal_case(name)}'?).",
            ctx,
        )

    return result


def validate_column_names(entity: str, columns: List[str]) -> ValidationResult:
    """
    Validate every column name of one entity.

    Malformed and duplicate names are errors; identifiers that are valid but
    not snake_case only warn.
    """
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()

    for column in columns:
        ctx: Dict[str, Any] = {"entity": entity, "column": column}

        if column in seen:
            result.add_error(
                "DUPLICATE_COLUMN_NAME",
                f"Column '{column}' is listed more than once.",
                ctx,
            )
            continue
        seen.add(column)

        if not column or not _IDENTIFIER_RE.match(column):
            result.add_error(
                "INVALID_COLUMN_NAME",
                f"Column name '{column}' is not a valid identifier.",
                ctx,
            )
            continue

        if not _SNAKE_CASE_RE.match(column):
            result.add_warning(
                "COLUMN_NAME_NOT_SNAKE_CASE",
                f"Column name '{column}' is not snake_case "
                f"(did you mean '{to_snake_case(column)}'?).",
                ctx,
            )

    logger.debug(
        "validate_column_names(%s): checked %d column(s), %d issue(s).",
        entity,
        len(columns),
        len(result),
    )
    return result


def validate_entity(entity: EntityDefinition) -> ValidationResult:
    """Run every entity-level check and merge the results."""
    result: ValidationResult = validate_entity_name(entity.name)
    result.merge(validate_column_names(entity.name, entity.columns))
    return result


def validate_config(config: GenerationConfig) -> ValidationResult:
    """Sanity checks on the generation settings."""
    result: ValidationResult = ValidationResult()

    for field_name in ("app_namespace", "response_trait"):
        value: str = getattr(config, field_name)
        if not _NAMESPACE_RE.match(value):
            result.add_error(
                "INVALID_NAMESPACE",
                f"{field_name} '{value}' is not a valid namespace.",
                {"field": field_name},
            )

    if not _IDENTIFIER_RE.match(config.auth_entity):
        result.add_error(
            "INVALID_AUTH_ENTITY",
            f"auth_entity '{config.auth_entity}' is not a valid identifier.",
            {"field": "auth_entity"},
        )

    if not any(
        (
            config.generate_store_request,
            config.generate_update_request,
            config.generate_resource,
            config.generate_routes,
        )
    ):
        result.add_warning(
            "NOTHING_TO_GENERATE",
            "Every artifact toggle is disabled; nothing will be generated.",
        )

    return result


def ensure_valid_entity(entity: EntityDefinition) -> ValidationResult:
    """
    Validate *entity* and raise ``InvalidInputError`` on any error.

    Returns the result (possibly carrying warnings) when the entity is valid.
    """
    result: ValidationResult = validate_entity(entity)
    for warning in result.warnings:
        logger.warning("%s: %s", entity.name, warning.message)
    if not result.is_valid:
        raise InvalidInputError(entity.name, result)
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationIssue",
    "ValidationResult",
    "InvalidInputError",
    "validate_entity_name",
    "validate_column_names",
    "validate_entity",
    "validate_config",
    "ensure_valid_entity",
]
