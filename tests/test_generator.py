"""
tests/test_generator.py
End-to-end tests for scaffoldgen.generator: the full pipeline against a
real temporary project, plus definition-file loading and parsing.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from scaffoldgen.generator import (
    GenerationReport,
    ScaffoldGenerator,
    load_definition_file,
    parse_raw_definition,
    scaffold,
)
from scaffoldgen.models import (
    ArtifactType,
    EmitStatus,
    EntityDefinition,
    GenerationConfig,
)

STORE_PATH = "Http/Requests/ProductRequests/StoreProductRequest.php"
UPDATE_PATH = "Http/Requests/ProductRequests/UpdateProductRequest.php"
RESOURCE_PATH = "Http/Resources/ProductResource.php"


def _snapshot(root: pathlib.Path) -> Dict[str, bytes]:
    """Map every file under *root* to its bytes."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# ===========================================================================
# Single entity pipeline
# ===========================================================================


class TestGenerateEntity:
    """Full pipeline for one entity."""

    def test_first_run_creates_everything(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        app_path: pathlib.Path,
        routes_path: pathlib.Path,
    ) -> None:
        report = generator.generate_entity(product_entity)

        assert report.success
        assert [o.status for o in report.outcomes] == [
            EmitStatus.CREATED,
            EmitStatus.CREATED,
            EmitStatus.CREATED,
            EmitStatus.APPENDED,
        ]
        for rel in (STORE_PATH, UPDATE_PATH, RESOURCE_PATH):
            assert (app_path / rel).is_file()
        assert "Route::apiResource('products'" in routes_path.read_text(
            encoding="utf-8"
        )

    def test_second_run_changes_nothing(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        tmp_path: pathlib.Path,
    ) -> None:
        generator.generate_entity(product_entity)
        before = _snapshot(tmp_path)

        report = generator.generate_entity(product_entity)

        assert report.success
        assert [o.status for o in report.outcomes] == [
            EmitStatus.SKIPPED,
            EmitStatus.SKIPPED,
            EmitStatus.SKIPPED,
            EmitStatus.UNCHANGED,
        ]
        assert _snapshot(tmp_path) == before

    def test_hand_edits_survive(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        app_path: pathlib.Path,
    ) -> None:
        generator.generate_entity(product_entity)
        store = app_path / STORE_PATH
        store.write_text("<?php // customised\n", encoding="utf-8")

        generator.generate_entity(product_entity)
        assert store.read_text(encoding="utf-8") == "<?php // customised\n"

    def test_product_example_content(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        app_path: pathlib.Path,
    ) -> None:
        generator.generate_entity(product_entity)
        store = (app_path / STORE_PATH).read_text(encoding="utf-8")

        assert "'name' => 'required'," in store
        assert "'price' => 'required'," in store
        assert "'cover_img' => 'required|file|image|" in store
        assert "'cover_img' => 'Cover'," in store
        assert "'id' =>" not in store
        assert "'created_at' =>" not in store

    def test_invalid_entity_is_aborted(
        self, generator: ScaffoldGenerator, tmp_path: pathlib.Path
    ) -> None:
        entity = EntityDefinition(name="Product", columns=["name", "name"])
        report = generator.generate_entity(entity)

        assert report.invalid_input
        assert not report.success
        assert report.outcomes == []
        assert any("more than once" in e for e in report.errors)
        assert list(tmp_path.iterdir()) == []

    def test_warnings_are_reported(self, generator: ScaffoldGenerator) -> None:
        report = generator.generate_entity(
            EntityDefinition(name="Widget", columns=["displayName"])
        )
        assert report.success
        assert len(report.warnings) == 1

    def test_toggles(
        self, tmp_path: pathlib.Path, product_entity: EntityDefinition
    ) -> None:
        config = GenerationConfig(
            base_path=str(tmp_path),
            generate_update_request=False,
            generate_routes=False,
        )
        report = ScaffoldGenerator(config).generate_entity(product_entity)

        assert [o.artifact_type for o in report.outcomes] == [
            ArtifactType.STORE_REQUEST,
            ArtifactType.RESOURCE,
        ]
        assert not (tmp_path / "routes").exists()

    def test_dry_run_writes_nothing(
        self, tmp_path: pathlib.Path, product_entity: EntityDefinition
    ) -> None:
        config = GenerationConfig(base_path=str(tmp_path), dry_run=True)
        report = ScaffoldGenerator(config).generate_entity(product_entity)

        assert report.success
        assert report.count(EmitStatus.CREATED) == 3
        assert all(o.dry_run for o in report.outcomes)
        assert list(tmp_path.iterdir()) == []

    def test_emission_failure_is_isolated(
        self, tmp_path: pathlib.Path, product_entity: EntityDefinition
    ) -> None:
        (tmp_path / "app").mkdir()
        # Blocks Http/Resources only; the request directory is still writable.
        (tmp_path / "app" / "Http").mkdir()
        (tmp_path / "app" / "Http" / "Resources").write_text("x", encoding="utf-8")

        report = ScaffoldGenerator(
            GenerationConfig(base_path=str(tmp_path))
        ).generate_entity(product_entity)

        statuses = {o.artifact_type: o.status for o in report.outcomes}
        assert statuses[ArtifactType.STORE_REQUEST] is EmitStatus.CREATED
        assert statuses[ArtifactType.UPDATE_REQUEST] is EmitStatus.CREATED
        assert statuses[ArtifactType.RESOURCE] is EmitStatus.FAILED
        assert statuses[ArtifactType.ROUTES] is EmitStatus.APPENDED
        assert not report.success
        assert len(report.failures) == 1


# ===========================================================================
# Many entities
# ===========================================================================


class TestGenerate:
    def test_one_bad_entity_does_not_stop_others(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        app_path: pathlib.Path,
    ) -> None:
        bad = EntityDefinition(name="", columns=["name"])
        report = generator.generate([bad, product_entity])

        assert isinstance(report, GenerationReport)
        assert not report.success
        assert report.invalid_entities == [""]
        assert (app_path / STORE_PATH).is_file()

    def test_shared_route_file_gets_both_blocks(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        soft_delete_entity: EntityDefinition,
        routes_path: pathlib.Path,
    ) -> None:
        report = generator.generate([product_entity, soft_delete_entity])
        content = routes_path.read_text(encoding="utf-8")

        assert report.success
        assert content.count("<?php") == 1
        assert "Route::apiResource('products'" in content
        assert "Route::get('product-categories/trashed', 'trashed');" in content

    def test_non_utf8_route_file_does_not_stop_batch(
        self,
        generator: ScaffoldGenerator,
        product_entity: EntityDefinition,
        routes_path: pathlib.Path,
        app_path: pathlib.Path,
    ) -> None:
        routes_path.parent.mkdir(parents=True)
        routes_path.write_bytes(b"<?php\n// caf\xe9\n")
        order = EntityDefinition(name="Order", columns=["id", "total"])

        report = generator.generate([product_entity, order])

        assert report.success, report.summary()
        assert [r.entity for r in report.entities] == ["Product", "Order"]
        assert report.count(EmitStatus.APPENDED) == 2
        content = routes_path.read_bytes()
        assert content.startswith(b"<?php\n// caf\xe9\n")
        assert b"Route::apiResource('orders'" in content
        assert (app_path / "Http/Resources/OrderResource.php").is_file()

    def test_invalid_config_aborts_run(
        self, tmp_path: pathlib.Path, product_entity: EntityDefinition
    ) -> None:
        config = GenerationConfig(base_path=str(tmp_path), app_namespace="1App")
        report = ScaffoldGenerator(config).generate([product_entity])

        assert not report.success
        assert report.entities == []
        assert report.errors
        assert list(tmp_path.iterdir()) == []

    def test_summary(
        self, generator: ScaffoldGenerator, product_entity: EntityDefinition
    ) -> None:
        summary = generator.generate([product_entity]).summary()
        assert "SUCCESS" in summary
        assert "Created:    3" in summary
        assert "✓ Product" in summary

    def test_scaffold_helper(self, tmp_path: pathlib.Path) -> None:
        report = scaffold(
            "Post",
            ["id", "title", "deleted_at"],
            soft_delete_routes=True,
            config=GenerationConfig(base_path=str(tmp_path)),
        )
        assert report.success
        assert report.outcomes[-1].appended == 4


# ===========================================================================
# Definition files
# ===========================================================================


class TestDefinitionLoading:
    def test_load_yaml(self, definition_yaml_path: pathlib.Path) -> None:
        raw = load_definition_file(definition_yaml_path)
        assert "entities" in raw

    def test_load_json(self, tmp_path: pathlib.Path, definition_dict: Dict[str, Any]) -> None:
        path = tmp_path / "entities.json"
        path.write_text(json.dumps(definition_dict), encoding="utf-8")
        assert load_definition_file(path)["entities"][0]["name"] == "Product"

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_definition_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("entities: [unclosed", encoding="utf-8")
        with pytest.raises(ValueError):
            load_definition_file(path)

    def test_top_level_must_be_mapping(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text(yaml.dump(["Product"]), encoding="utf-8")
        with pytest.raises(ValueError):
            load_definition_file(path)

    def test_parse(self, definition_dict: Dict[str, Any]) -> None:
        entities, config = parse_raw_definition(definition_dict)
        names: List[str] = [e.name for e in entities]
        assert names == ["Product", "ProductCategory", "Lesson", "User"]
        assert entities[1].soft_delete_routes is True
        assert config.max_upload_size == 10000

    def test_parse_single_entity_key(self) -> None:
        entities, config = parse_raw_definition(
            {"entity": {"name": "Post", "columns": ["title"]}}
        )
        assert [e.name for e in entities] == ["Post"]
        assert config == GenerationConfig()

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            {"entities": []},
            {"entities": [{"columns": ["a"]}]},
            {"entities": [{"name": "A"}], "config": {"unknown_key": 1}},
            {"entities": [{"name": "A"}], "config": ["nope"]},
        ],
    )
    def test_parse_rejects(self, raw: Dict[str, Any]) -> None:
        with pytest.raises(ValueError):
            parse_raw_definition(raw)

    def test_generate_from_file(
        self, definition_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        report = ScaffoldGenerator.generate_from_file(definition_yaml_path)

        assert report.success, report.summary()
        assert len(report.entities) == 4
        assert (
            tmp_path / "app" / "Http" / "Resources" / "LessonResource.php"
        ).is_file()
        user_resource = (
            tmp_path / "app" / "Http" / "Resources" / "UserResource.php"
        ).read_text(encoding="utf-8")
        assert "password" not in user_resource

    def test_generate_from_file_overrides(
        self, definition_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        report = ScaffoldGenerator.generate_from_file(
            definition_yaml_path, config_overrides={"generate_routes": False}
        )
        assert report.success
        assert not (tmp_path / "routes").exists()

    def test_generate_from_missing_file(self, tmp_path: pathlib.Path) -> None:
        report = ScaffoldGenerator.generate_from_file(tmp_path / "nope.yaml")
        assert not report.success
        assert report.errors
