# File: scaffoldgen/templates.py
"""
scaffoldgen - Artifact Templates & Route Table Builder
========================================================
The only module that knows the host framework's syntax.

Classification, exclusion and rule/label synthesis produce plain Python
values; this module binds them to named placeholders of Jinja2 templates and
returns complete artifact text.  Every ``generate_*`` method is pure: it
returns an ``Artifact`` and never touches the filesystem.

Artifacts (paths relative to the application directory)::

    Http/Requests/{Entity}Requests/Store{Entity}Request.php   create validation
    Http/Requests/{Entity}Requests/Update{Entity}Request.php  update validation
    Http/Resources/{Entity}Resource.php                       serialization

Route blocks are built as ordered ``RouteDeclaration`` candidates so the
emitter can merge them declaration by declaration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from jinja2 import Environment, StrictUndefined, Template

from scaffoldgen.columns import classify_columns, filter_columns
from scaffoldgen.models import (
    Artifact,
    ArtifactType,
    EntityDefinition,
    GenerationConfig,
    GenerationScope,
    OperationMode,
    RouteBlock,
    RouteDeclaration,
)
from scaffoldgen.rules import build_labels, build_rules, default_messages
from scaffoldgen.utils import to_resource_segment

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.templates")


# ---------------------------------------------------------------------------
# Template model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleLine:
    column: str
    rule: str


@dataclass(frozen=True, slots=True)
class LabelLine:
    column: str
    label: str


@dataclass(frozen=True, slots=True)
class MessageLine:
    key: str
    message: str


@dataclass(frozen=True, slots=True)
class ValueLine:
    column: str
    is_media: bool


def php_string(value: str) -> str:
    """Escape *value* for use inside a single-quoted PHP string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


_JINJA: Environment = Environment(
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    autoescape=False,
)
_JINJA.filters["php"] = php_string


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_FORM_REQUEST_TEMPLATE: str = r"""<?php

namespace {{ namespace }};

use Illuminate\Foundation\Http\FormRequest;
use Illuminate\Contracts\Validation\Validator;
use Illuminate\Http\Exceptions\HttpResponseException;
use {{ response_trait }};

class {{ class_name }} extends FormRequest
{
    use {{ response_trait_name }};

    // stop validation in the first failure
    protected $stopOnFirstFailure = {{ 'true' if stop_on_first_failure else 'false' }};

    /**
     * Determine if the user is authorized to make this request.
     *
     * @return bool
     */
    public function authorize()
    {
        return true;
    }

    /**
     * Prepare the data for validation.
     * This method is called before validation starts to clean or normalize inputs.
     *
     * @return void
     */
    protected function prepareForValidation()
    {
        $this->merge([
            //
        ]);
    }

    /**
     * Get the validation rules that apply to the request.
     *
     * @return array
     */
    public function rules()
    {
        return [
{% for line in rules %}
            '{{ line.column | php }}' => '{{ line.rule | php }}',
{% endfor %}
        ];
    }

    /**
     * Handle failed validation and return a JSON response with errors.
     *
     * @param \Illuminate\Contracts\Validation\Validator $Validator
     * @throws \Illuminate\Http\Exceptions\HttpResponseException
     * @return never
     */
    protected function failedValidation(Validator $Validator)
    {
        $errors = $Validator->errors()->all();
        throw new HttpResponseException($this->errorResponse($errors, 'Validation error', 422));
    }

    /**
     * Define human-readable attribute names for validation errors.
     *
     * @return array<string, string>
     */
    public function attributes(): array
    {
        return [
{% for line in labels %}
            '{{ line.column | php }}' => '{{ line.label | php }}',
{% endfor %}
        ];
    }

    /**
     * Get custom messages for validator errors.
     *
     * @return array
     */
    public function messages()
    {
        return [
{% for line in messages %}
            '{{ line.key | php }}' => '{{ line.message | php }}',
{% else %}
            //
{% endfor %}
        ];
    }
}
"""

_RESOURCE_TEMPLATE: str = r"""<?php

namespace {{ namespace }};

use Illuminate\Http\Resources\Json\JsonResource;

class {{ class_name }} extends JsonResource
{
    /**
     * Transform the resource into an array.
     *
     * @param  \Illuminate\Http\Request  $request
     * @return array|\Illuminate\Contracts\Support\Arrayable|\JsonSerializable
     */
    public function toArray($request)
    {
        return [
{% for line in values %}
{% if line.is_media %}
            '{{ line.column }}' => asset($this->{{ line.column }}),
{% else %}
            '{{ line.column }}' => $this->{{ line.column }},
{% endif %}
{% endfor %}
        ];
    }
}
"""

_ROUTE_HEADER_TEMPLATE: str = r"""

/**
* {{ entity }} Management Routes
*
* These routes handle {{ entity }} management operations.
*/
Route::controller({{ controller }}::class)->group(function () {"""

_ROUTE_BLOCK_TEMPLATE: str = """{{ header }}
{% for text in declarations %}
\t{{ text }}
{% endfor %}
});"""

ROUTES_FILE_PREAMBLE: str = "<?php\n\nuse Illuminate\\Support\\Facades\\Route;\n"

_TEMPLATES: Dict[str, Template] = {
    "form_request": _JINJA.from_string(_FORM_REQUEST_TEMPLATE),
    "resource": _JINJA.from_string(_RESOURCE_TEMPLATE),
    "route_header": _JINJA.from_string(_ROUTE_HEADER_TEMPLATE),
    "route_block": _JINJA.from_string(_ROUTE_BLOCK_TEMPLATE),
}


# ---------------------------------------------------------------------------
# Route table builder
# ---------------------------------------------------------------------------

# action -> (verb, path suffix appended to the resource segment)
SOFT_DELETE_ROUTES: Dict[str, Tuple[str, str]] = {
    "trashed": ("get", "/trashed"),
    "restore": ("post", "/{id}/restore"),
    "forceDelete": ("delete", "/{id}/forceDelete"),
}


def controller_class(entity: str, app_namespace: str = "App") -> str:
    """Fully-qualified controller class for *entity*."""
    return f"{app_namespace}\\Http\\Controllers\\{entity}Controller"


def build_route_block(
    entity: str,
    soft_delete_routes: bool = False,
    app_namespace: str = "App",
) -> RouteBlock:
    """
    Build the candidate route declarations for *entity*.

    Soft-delete routes come first so ``{segment}/trashed`` is registered
    before the resource's ``{segment}/{id}`` show route.
    """
    segment: str = to_resource_segment(entity)
    controller: str = controller_class(entity, app_namespace)
    declarations: List[RouteDeclaration] = []

    if soft_delete_routes:
        for action, (verb, suffix) in SOFT_DELETE_ROUTES.items():
            path: str = f"{segment}{suffix}"
            declarations.append(
                RouteDeclaration(
                    action=action,
                    method=verb,
                    path=path,
                    text=f"Route::{verb}('{path}', '{action}');",
                )
            )

    declarations.append(
        RouteDeclaration(
            action="resource",
            method="apiResource",
            path=segment,
            text=f"Route::apiResource('{segment}', {controller}::class);",
        )
    )

    header: str = _TEMPLATES["route_header"].render(
        entity=entity, controller=controller
    )
    return RouteBlock(
        entity=entity,
        controller=controller,
        header=header,
        declarations=declarations,
    )


def render_route_block(block: RouteBlock, declarations: Sequence[str]) -> str:
    """Render the block header followed by *declarations* and the closer."""
    return _TEMPLATES["route_block"].render(
        header=block.header, declarations=list(declarations)
    )


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless artifact assembler.

    Accepts ``EntityDefinition`` instances and produces ``Artifact`` objects
    whose text is ready to hand to the emitter.

    Thread-safe: no mutable instance state.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        self._trait_name: str = config.response_trait.rsplit("\\", 1)[-1]

    # -- Paths & names ------------------------------------------------------

    @staticmethod
    def artifact_path(entity: str, artifact_type: ArtifactType) -> str:
        """Target path of a file artifact, relative to the app directory."""
        if artifact_type is ArtifactType.STORE_REQUEST:
            return f"Http/Requests/{entity}Requests/Store{entity}Request.php"
        if artifact_type is ArtifactType.UPDATE_REQUEST:
            return f"Http/Requests/{entity}Requests/Update{entity}Request.php"
        if artifact_type is ArtifactType.RESOURCE:
            return f"Http/Resources/{entity}Resource.php"
        raise ValueError(f"{artifact_type.value} is not a file artifact.")

    def _columns_for(self, entity: EntityDefinition, scope: GenerationScope) -> List[str]:
        return filter_columns(
            entity.name, entity.columns, scope, self._config.auth_entity
        )

    # -- Validation artifacts -----------------------------------------------

    def generate_validation(
        self, entity: EntityDefinition, mode: OperationMode
    ) -> Artifact:
        """Render a store (CREATE) or update (UPDATE) form request."""
        if mode is OperationMode.CREATE:
            artifact_type = ArtifactType.STORE_REQUEST
            prefix = "Store"
        else:
            artifact_type = ArtifactType.UPDATE_REQUEST
            prefix = "Update"

        columns: List[str] = self._columns_for(entity, artifact_type.scope)
        rules: Dict[str, str] = build_rules(
            columns, mode, self._config.max_upload_size
        )
        labels: Dict[str, str] = build_labels(columns)
        messages: Dict[str, str] = default_messages(mode)

        content: str = _TEMPLATES["form_request"].render(
            namespace=(
                f"{self._config.app_namespace}\\Http\\Requests\\"
                f"{entity.name}Requests"
            ),
            class_name=f"{prefix}{entity.name}Request",
            response_trait=self._config.response_trait,
            response_trait_name=self._trait_name,
            stop_on_first_failure=self._config.stop_on_first_failure,
            rules=[RuleLine(c, r) for c, r in rules.items()],
            labels=[LabelLine(c, lbl) for c, lbl in labels.items()],
            messages=[MessageLine(k, m) for k, m in messages.items()],
        )
        return Artifact(
            artifact_type=artifact_type,
            entity=entity.name,
            relative_path=self.artifact_path(entity.name, artifact_type),
            content=content,
        )

    def generate_store_request(self, entity: EntityDefinition) -> Artifact:
        return self.generate_validation(entity, OperationMode.CREATE)

    def generate_update_request(self, entity: EntityDefinition) -> Artifact:
        return self.generate_validation(entity, OperationMode.UPDATE)

    # -- Serialization artifact ---------------------------------------------

    def generate_resource(self, entity: EntityDefinition) -> Artifact:
        """Render the JSON resource; media columns go through asset()."""
        columns: List[str] = self._columns_for(entity, GenerationScope.SERIALIZATION)
        content: str = _TEMPLATES["resource"].render(
            namespace=f"{self._config.app_namespace}\\Http\\Resources",
            class_name=f"{entity.name}Resource",
            values=[
                ValueLine(info.name, info.is_media)
                for info in classify_columns(columns)
            ],
        )
        return Artifact(
            artifact_type=ArtifactType.RESOURCE,
            entity=entity.name,
            relative_path=self.artifact_path(entity.name, ArtifactType.RESOURCE),
            content=content,
        )

    # -- Routes -------------------------------------------------------------

    def build_route_block(self, entity: EntityDefinition) -> RouteBlock:
        return build_route_block(
            entity.name, entity.soft_delete_routes, self._config.app_namespace
        )

    # -- Aggregate ----------------------------------------------------------

    def generate_all(self, entity: EntityDefinition) -> List[Artifact]:
        """Render every enabled file artifact for *entity*, in a fixed order."""
        builders = (
            (ArtifactType.STORE_REQUEST, self.generate_store_request),
            (ArtifactType.UPDATE_REQUEST, self.generate_update_request),
            (ArtifactType.RESOURCE, self.generate_resource),
        )
        artifacts: List[Artifact] = [
            build(entity)
            for artifact_type, build in builders
            if self._config.artifact_enabled(artifact_type)
        ]
        logger.debug(
            "Rendered %d artifact(s) for %s.", len(artifacts), entity.name
        )
        return artifacts


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RuleLine",
    "LabelLine",
    "MessageLine",
    "ValueLine",
    "php_string",
    "ROUTES_FILE_PREAMBLE",
    "SOFT_DELETE_ROUTES",
    "controller_class",
    "build_route_block",
    "render_route_block",
    "TemplateGenerator",
]
