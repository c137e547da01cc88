"""
tests/conftest.py
Shared fixtures for the scaffoldgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import pathlib
from typing import Any, Dict

import pytest
import yaml

from scaffoldgen.generator import ScaffoldGenerator
from scaffoldgen.models import EntityDefinition, GenerationConfig


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
DEFINITION_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "entities_example.yaml"


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config(tmp_path: pathlib.Path) -> GenerationConfig:
    """Default configuration rooted in a fresh temporary project."""
    return GenerationConfig(base_path=str(tmp_path))


@pytest.fixture()
def app_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Where generated artifacts land for the ``config`` fixture."""
    return tmp_path / "app"


@pytest.fixture()
def routes_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Route file used by the ``config`` fixture."""
    return tmp_path / "routes" / "api.php"


@pytest.fixture()
def generator(config: GenerationConfig) -> ScaffoldGenerator:
    return ScaffoldGenerator(config)


# ---------------------------------------------------------------------------
# Entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_entity() -> EntityDefinition:
    """The canonical example: one image column plus bookkeeping columns."""
    return EntityDefinition(
        name="Product",
        columns=["id", "name", "cover_img", "price", "created_at"],
    )


@pytest.fixture()
def user_entity() -> EntityDefinition:
    """The authentication principal, with credential columns."""
    return EntityDefinition(
        name="User",
        columns=[
            "id",
            "name",
            "email",
            "password",
            "avatar_img",
            "email_verified_at",
            "remember_token",
            "created_at",
            "updated_at",
        ],
    )


@pytest.fixture()
def soft_delete_entity() -> EntityDefinition:
    return EntityDefinition(
        name="ProductCategory",
        columns=["id", "title", "icon_img", "deleted_at"],
        soft_delete_routes=True,
    )


# ---------------------------------------------------------------------------
# Definition file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_definition_dict() -> Dict[str, Any]:
    """Load the reference entities_example.yaml once per session."""
    assert DEFINITION_EXAMPLE_PATH.exists(), (
        f"Reference definition not found at {DEFINITION_EXAMPLE_PATH}."
    )
    with open(DEFINITION_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def definition_dict(raw_definition_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_definition_dict)


@pytest.fixture()
def definition_yaml_path(
    definition_dict: Dict[str, Any], tmp_path: pathlib.Path
) -> pathlib.Path:
    """Write the definition to a temporary YAML file and return its path.

    The file's config is pointed at ``tmp_path`` so generation stays inside
    the test's sandbox.
    """
    definition_dict["config"]["base_path"] = str(tmp_path)
    path = tmp_path / "entities.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(definition_dict, fh, default_flow_style=False, allow_unicode=True)
    return path
