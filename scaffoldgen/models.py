# File: scaffoldgen/models.py
"""
scaffoldgen - Core Data Models
================================
Pydantic V2 models describing what gets scaffolded (entities and their
columns), how (``GenerationConfig``) and what comes out (artifacts, route
blocks, emission outcomes).  These models are the single source of truth for
the whole pipeline: Input → Validation → Synthesis → Rendering → Emission.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
)

from scaffoldgen.utils import sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.models")

# ---------------------------------------------------------------------------
# Enums: fixed sets used across the entire project
# ---------------------------------------------------------------------------


class ColumnKind(str, Enum):
    """Semantic category of a column, inferred from its name suffix."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    PLAIN = "plain"

    @property
    def is_media(self) -> bool:
        return self is not ColumnKind.PLAIN


class OperationMode(str, Enum):
    """Whether a validation artifact guards creation or modification."""

    CREATE = "create"
    UPDATE = "update"


class GenerationScope(str, Enum):
    """Context selecting the exclusion policy and rule defaults."""

    CREATE_VALIDATION = "create_validation"
    UPDATE_VALIDATION = "update_validation"
    SERIALIZATION = "serialization"

    @property
    def mode(self) -> Optional[OperationMode]:
        """Operation mode for validation scopes, ``None`` for serialization."""
        return _SCOPE_MODES.get(self)


_SCOPE_MODES: Dict[GenerationScope, OperationMode] = {
    GenerationScope.CREATE_VALIDATION: OperationMode.CREATE,
    GenerationScope.UPDATE_VALIDATION: OperationMode.UPDATE,
}


class ArtifactType(str, Enum):
    """Kinds of single-file artifacts the generator produces."""

    STORE_REQUEST = "store_request"
    UPDATE_REQUEST = "update_request"
    RESOURCE = "resource"
    ROUTES = "routes"

    @property
    def scope(self) -> Optional[GenerationScope]:
        """Generation scope of a file artifact, ``None`` for the route block."""
        return _ARTIFACT_SCOPES.get(self)


_ARTIFACT_SCOPES: Dict[ArtifactType, GenerationScope] = {
    ArtifactType.STORE_REQUEST: GenerationScope.CREATE_VALIDATION,
    ArtifactType.UPDATE_REQUEST: GenerationScope.UPDATE_VALIDATION,
    ArtifactType.RESOURCE: GenerationScope.SERIALIZATION,
}


class EmitStatus(str, Enum):
    """Outcome of one emission step."""

    CREATED = "created"
    SKIPPED = "skipped"
    APPENDED = "appended"
    UNCHANGED = "unchanged"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Mixin: shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------


class ColumnInfo(BaseModel):
    """
    One column of an entity.

    Only the name is supplied; ``kind`` is always derived from the name's
    suffix, so reclassifying the same name yields the same kind.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., description="Column name (snake_case).")

    @computed_field  # type: ignore[misc]
    @property
    def kind(self) -> ColumnKind:
        from scaffoldgen.columns import classify_column

        return classify_column(self.name)

    @computed_field  # type: ignore[misc]
    @property
    def is_media(self) -> bool:
        return self.kind.is_media

    def __repr__(self) -> str:
        return f"<Column {self.name} {self.kind.value}>"


class EntityDefinition(BaseModel):
    """
    A single entity to scaffold: its name, ordered column names and the
    route options that apply to it.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., description="Singular, capitalised entity name.")
    columns: List[str] = Field(
        default_factory=list, description="Ordered column names."
    )
    soft_delete_routes: bool = Field(
        default=False,
        description="Also emit trashed / restore / forceDelete routes.",
    )

    def __repr__(self) -> str:
        return f"<Entity {self.name} ({len(self.columns)} columns)>"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings that control where artifacts land and which ones are produced.

    A single instance (combined with one or more ``EntityDefinition``) is all
    the generator needs.
    """

    model_config = _SHARED_CONFIG

    # -- Locations ----------------------------------------------------------
    base_path: str = Field(
        default=".", description="Root of the host project."
    )
    app_dir: str = Field(
        default="app", description="Application directory, relative to base_path."
    )
    routes_file: str = Field(
        default="routes/api.php",
        description="Shared route file, relative to base_path.",
    )

    # -- Host conventions ---------------------------------------------------
    app_namespace: str = Field(
        default="App", min_length=1, description="Root namespace of the app."
    )
    response_trait: str = Field(
        default="App\\Traits\\ApiResponseTrait",
        min_length=1,
        description="Trait providing errorResponse() to form requests.",
    )
    stop_on_first_failure: bool = Field(
        default=False, description="Emit $stopOnFirstFailure = true."
    )
    max_upload_size: int = Field(
        default=10000, ge=1, description="Upper size bound for media rules."
    )
    auth_entity: str = Field(
        default="User",
        min_length=1,
        description="Name of the authentication-principal entity.",
    )

    # -- Artifact toggles ---------------------------------------------------
    generate_store_request: bool = Field(default=True)
    generate_update_request: bool = Field(default=True)
    generate_resource: bool = Field(default=True)
    generate_routes: bool = Field(default=True)

    # -- Behaviour ----------------------------------------------------------
    dry_run: bool = Field(
        default=False, description="Compute outcomes without touching disk."
    )

    def artifact_enabled(self, artifact_type: ArtifactType) -> bool:
        return {
            ArtifactType.STORE_REQUEST: self.generate_store_request,
            ArtifactType.UPDATE_REQUEST: self.generate_update_request,
            ArtifactType.RESOURCE: self.generate_resource,
            ArtifactType.ROUTES: self.generate_routes,
        }[artifact_type]


# ---------------------------------------------------------------------------
# Output models
# ---------------------------------------------------------------------------


class Artifact(BaseModel):
    """A unit of generated text with its target path (relative to app_dir)."""

    model_config = _SHARED_CONFIG

    artifact_type: ArtifactType
    entity: str = Field(..., min_length=1)
    relative_path: str = Field(..., min_length=1)
    content: str

    @computed_field  # type: ignore[misc]
    @property
    def checksum(self) -> str:
        return sha256_hex(self.content)

    def __repr__(self) -> str:
        return f"<Artifact {self.artifact_type.value} {self.relative_path}>"


class RouteDeclaration(BaseModel):
    """One route statement binding an HTTP verb + path to a controller action."""

    model_config = _FROZEN_CONFIG

    action: str = Field(..., min_length=1, description="Handler action name.")
    method: str = Field(..., min_length=1, description="HTTP verb or 'apiResource'.")
    path: str = Field(..., min_length=1, description="URL path segment.")
    text: str = Field(..., min_length=1, description="Rendered declaration.")


class RouteBlock(BaseModel):
    """Candidate route declarations for one entity, plus the block header."""

    model_config = _FROZEN_CONFIG

    entity: str
    controller: str = Field(..., description="Fully-qualified controller class.")
    header: str
    declarations: List[RouteDeclaration] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def texts(self) -> List[str]:
        return [d.text for d in self.declarations]


class EmitOutcome(BaseModel):
    """Structured result of writing one artifact or merging one route block."""

    model_config = _FROZEN_CONFIG

    status: EmitStatus
    path: str
    entity: str = ""
    artifact_type: Optional[ArtifactType] = None
    appended: int = Field(default=0, ge=0)
    reason: str = ""
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.status is not EmitStatus.FAILED

    def describe(self) -> str:
        prefix: str = "would be " if self.dry_run else ""
        if self.status is EmitStatus.APPENDED:
            return f"{prefix}appended {self.appended} declaration(s) to {self.path}"
        if self.status is EmitStatus.UNCHANGED:
            return f"no changes to {self.path}"
        if self.status is EmitStatus.FAILED:
            return f"failed {self.path}: {self.reason}"
        return f"{prefix}{self.status.value} {self.path}"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ColumnKind",
    "OperationMode",
    "GenerationScope",
    "ArtifactType",
    "EmitStatus",
    "ColumnInfo",
    "EntityDefinition",
    "GenerationConfig",
    "Artifact",
    "RouteDeclaration",
    "RouteBlock",
    "EmitOutcome",
]
