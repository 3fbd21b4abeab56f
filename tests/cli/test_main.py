"""Tests for the terraform-index CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from tfindex import __version__
from tfindex.cli.main import cli

runner = CliRunner()

VARIABLES_TF = 'variable "region" {}\n\noutput "where" {\n  value = "${var.region}"\n}\n'


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory without global config."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr("tfindex.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml")
    return workdir


@pytest.fixture
def variables_tf(isolated_config: Path) -> Path:
    path = isolated_config / "variables.tf"
    path.write_text(VARIABLES_TF)
    return path


class TestGroup:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_project_config(self, isolated_config: Path) -> None:
        (isolated_config / ".tfindex.yaml").write_text("index:\n  extensions: []\n")

        result = runner.invoke(cli, ["index", "x.tf"])

        assert result.exit_code == 1
        assert "index.extensions" in result.output


class TestIndexCommand:
    """terraform-index index."""

    def test_given_file_when_indexed_then_prints_index_json(self, variables_tf: Path) -> None:
        # When
        result = runner.invoke(cli, ["index", str(variables_tf)])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["version"] == "1.2.0"
        assert [v["name"] for v in data["variables"]] == ["region"]
        assert data["variables"][0]["location"]["filename"] == str(variables_tf)
        assert data["references"]["region"]["type"] == "variable"
        assert "rawAst" not in data

    def test_given_stdin_when_indexed_then_dash_is_the_filename(self) -> None:
        result = runner.invoke(cli, ["index", "-"], input='variable "x" {}\n')

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["variables"][0]["location"]["filename"] == "-"

    def test_given_stdin_when_read_then_no_deprecation_warning(
        self, recwarn: pytest.WarningsRecorder
    ) -> None:
        result = runner.invoke(cli, ["index", "-"], input='variable "x" {}\n')

        assert result.exit_code == 0, result.output
        deprecations = [str(w.message) for w in recwarn if issubclass(w.category, DeprecationWarning)]
        assert not [message for message in deprecations if "Click" in message]

    def test_given_directory_when_indexed_then_expands_matching_files(
        self, isolated_config: Path
    ) -> None:
        # Given
        project = isolated_config / "project"
        (project / ".terraform" / "modules").mkdir(parents=True)
        (project / "b.tf").write_text('variable "b" {}\n')
        (project / "a.tf").write_text('variable "a" {}\n')
        (project / "notes.txt").write_text('variable "ignored" {}\n')
        (project / ".terraform" / "modules" / "vendored.tf").write_text('variable "vendored" {}\n')

        # When
        result = runner.invoke(cli, ["index", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [v["name"] for v in data["variables"]] == ["a", "b"]

    def test_given_several_paths_when_indexed_then_one_shared_index(
        self, isolated_config: Path, variables_tf: Path
    ) -> None:
        other = isolated_config / "other.tf"
        other.write_text('x = "${var.region}"\n')

        result = runner.invoke(cli, ["index", str(variables_tf), str(other)])

        data = json.loads(result.stdout)
        files = [loc["filename"] for loc in data["references"]["region"]["locations"]]
        assert files == [str(variables_tf), str(other)]

    def test_given_no_paths_when_run_then_usage_and_exit_one(self) -> None:
        result = runner.invoke(cli, ["index"])

        assert result.exit_code == 1
        assert "Usage" in result.stderr
        assert result.stdout == ""

    def test_given_missing_path_when_run_then_exit_two(self, isolated_config: Path) -> None:
        missing = isolated_config / "missing.tf"

        result = runner.invoke(cli, ["index", str(missing)])

        assert result.exit_code == 2
        assert f"Cannot open path '{missing}'" in result.stderr
        assert result.stdout == ""

    def test_given_syntax_error_when_indexed_then_reported_and_exit_zero(
        self, isolated_config: Path, variables_tf: Path
    ) -> None:
        # Given
        broken = isolated_config / "broken.tf"
        broken.write_text('variable "x" {\n')

        # When
        result = runner.invoke(cli, ["index", str(broken), str(variables_tf)])

        # Then
        assert result.exit_code == 0
        assert f"Could not parse '{broken}'" in result.stderr
        data = json.loads(result.stdout)
        assert len(data["errors"]) == 1
        assert [v["name"] for v in data["variables"]] == ["region"]

    def test_raw_ast_flag(self, variables_tf: Path) -> None:
        result = runner.invoke(cli, ["index", "--raw-ast", str(variables_tf)])

        data = json.loads(result.stdout)
        assert data["rawAst"]["node"]["items"][0]["keys"][0]["token"]["text"] == "variable"

    def test_compact_flag(self, variables_tf: Path) -> None:
        result = runner.invoke(cli, ["index", "--compact", str(variables_tf)])

        assert result.stdout.count("\n") == 1
        assert json.loads(result.stdout)["variables"][0]["name"] == "region"

    def test_strict_references_from_project_config(self, isolated_config: Path) -> None:
        (isolated_config / ".tfindex.yaml").write_text("index:\n  strict_references: true\n")
        source = isolated_config / "main.tf"
        source.write_text('v = "${foo}"\n')

        result = runner.invoke(cli, ["index", str(source)])

        data = json.loads(result.stdout)
        assert [e["message"] for e in data["errors"]] == ["Cannot understand reference foo"]


class TestAstCommand:
    """terraform-index ast (single-file dump)."""

    def test_dump_contains_declarations_only(self, variables_tf: Path) -> None:
        result = runner.invoke(cli, ["ast", "--file", str(variables_tf)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert list(data) == ["variables", "resources", "outputs", "rawAst"]
        assert data["variables"] == [
            {
                "name": "region",
                "location": {
                    "filename": str(variables_tf),
                    "offset": 9,
                    "line": 1,
                    "column": 10,
                },
            }
        ]
        assert [o["name"] for o in data["outputs"]] == ["where"]
        assert data["rawAst"] is None

    def test_reads_stdin_by_default(self) -> None:
        source = 'resource "aws_instance" "web" {}\n'

        result = runner.invoke(cli, ["ast", "--raw-ast"], input=source)

        data = json.loads(result.stdout)
        assert data["resources"][0]["type"] == "aws_instance"
        assert data["resources"][0]["name"] == "web"
        assert data["rawAst"]["node"]["kind"] == "ObjectList"

    def test_unreadable_file_exits_one(self, isolated_config: Path) -> None:
        result = runner.invoke(cli, ["ast", "--file", str(isolated_config / "nope.tf")])

        assert result.exit_code == 1
        assert "Cannot open path" in result.stderr

    def test_syntax_error_exits_two(self, isolated_config: Path) -> None:
        broken = isolated_config / "broken.tf"
        broken.write_text("resource {{\n")

        result = runner.invoke(cli, ["ast", "--file", str(broken)])

        assert result.exit_code == 2
        assert "Could not parse" in result.stderr
