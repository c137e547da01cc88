"""
tests/test_cli.py
Tests for the scaffoldgen command-line interface.

``cli_main`` always ends with ``sys.exit``; each test asserts on the exit
code and on the files left in a temporary project.
"""

from __future__ import annotations

import pathlib
from typing import List

import pytest

from scaffoldgen.cli import (
    EXIT_EMIT_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


# ===========================================================================
# Single entity mode
# ===========================================================================


class TestSingleEntity:
    def test_generates_artifacts(
        self, tmp_path: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(
            [
                "--entity", "Product",
                "--columns", "id,name,cover_img,price,created_at",
                "--base-path", str(tmp_path),
                "-q",
            ]
        )

        assert code == EXIT_SUCCESS
        assert (
            tmp_path / "app/Http/Requests/ProductRequests/StoreProductRequest.php"
        ).is_file()
        assert (tmp_path / "routes/api.php").is_file()
        assert "SUCCESS" in capsys.readouterr().out

    def test_rerun_is_success(self, tmp_path: pathlib.Path) -> None:
        argv = ["-e", "Product", "-c", "name", "--base-path", str(tmp_path), "-q"]
        assert _run(argv) == EXIT_SUCCESS
        assert _run(argv) == EXIT_SUCCESS

    def test_soft_delete_routes_flag(self, tmp_path: pathlib.Path) -> None:
        code = _run(
            [
                "-e", "Post", "-c", "title",
                "--soft-delete-routes",
                "--base-path", str(tmp_path),
                "-q",
            ]
        )
        assert code == EXIT_SUCCESS
        routes = (tmp_path / "routes/api.php").read_text(encoding="utf-8")
        assert "Route::post('posts/{id}/restore', 'restore');" in routes

    def test_custom_locations_and_toggles(self, tmp_path: pathlib.Path) -> None:
        code = _run(
            [
                "-e", "Product", "-c", "name",
                "--base-path", str(tmp_path),
                "--app-dir", "src",
                "--routes-file", "routes/v1.php",
                "--no-update-request",
                "--no-resource",
                "-q",
            ]
        )
        assert code == EXIT_SUCCESS
        assert (
            tmp_path / "src/Http/Requests/ProductRequests/StoreProductRequest.php"
        ).is_file()
        assert not (
            tmp_path / "src/Http/Requests/ProductRequests/UpdateProductRequest.php"
        ).exists()
        assert not (tmp_path / "src/Http/Resources").exists()
        assert (tmp_path / "routes/v1.php").is_file()

    def test_dry_run(self, tmp_path: pathlib.Path) -> None:
        code = _run(
            ["-e", "Product", "-c", "name", "--base-path", str(tmp_path), "--dry-run", "-q"]
        )
        assert code == EXIT_SUCCESS
        assert list(tmp_path.iterdir()) == []

    def test_invalid_entity_exit_code(self, tmp_path: pathlib.Path) -> None:
        code = _run(
            ["-e", "Bad Name", "-c", "name", "--base-path", str(tmp_path), "-q"]
        )
        assert code == EXIT_VALIDATION_ERROR
        assert list(tmp_path.iterdir()) == []

    def test_emit_failure_exit_code(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "app").write_text("not a directory", encoding="utf-8")
        code = _run(
            ["-e", "Product", "-c", "name", "--base-path", str(tmp_path), "-q"]
        )
        assert code == EXIT_EMIT_ERROR

    def test_entity_requires_columns(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-e", "Product", "--base-path", str(tmp_path), "-q"]) == (
            EXIT_INPUT_ERROR
        )


# ===========================================================================
# Definition file mode
# ===========================================================================


class TestDefinitionFile:
    def test_generates_all_entities(
        self, definition_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        code = _run(["--definition", str(definition_yaml_path), "-q"])
        assert code == EXIT_SUCCESS
        for name in ("Product", "ProductCategory", "Lesson", "User"):
            assert (tmp_path / f"app/Http/Resources/{name}Resource.php").is_file()

    def test_cli_overrides_file_config(
        self, definition_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        code = _run(["-d", str(definition_yaml_path), "--no-routes", "-q"])
        assert code == EXIT_SUCCESS
        assert not (tmp_path / "routes").exists()

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-d", str(tmp_path / "nope.yaml"), "-q"]) == EXIT_INPUT_ERROR

    def test_unparseable_file(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("config: {}\n", encoding="utf-8")
        assert _run(["-d", str(path), "-q"]) == EXIT_INPUT_ERROR

    def test_columns_not_allowed_with_definition(
        self, definition_yaml_path: pathlib.Path
    ) -> None:
        code = _run(["-d", str(definition_yaml_path), "-c", "a,b", "-q"])
        assert code == EXIT_INPUT_ERROR


# ===========================================================================
# Argument parsing
# ===========================================================================


class TestArguments:
    def test_entity_and_definition_are_exclusive(self, tmp_path: pathlib.Path) -> None:
        # argparse reports usage errors with exit code 2.
        assert _run(["-e", "Product", "-d", str(tmp_path / "x.yaml")]) == 2

    def test_one_source_is_required(self) -> None:
        assert _run([]) == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "scaffoldgen v" in capsys.readouterr().out
