"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from conftest import write_file
from import_adjuster import __version__
from import_adjuster.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(build):
    return write_file(build.root / "adjust.json", json.dumps({"externalsDir": "externals"}))


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


# ── resolve ───────────────────────────────────────────────────

def test_resolve(runner, build, config_file):
    result = runner.invoke(cli, [
        "resolve", "auto-addon/utils/y",
        "--from", str(build.auto / "components" / "x.js"),
        "-c", str(config_file),
    ])
    assert result.exit_code == 0
    assert result.output.strip() == "../utils/y"


def test_resolve_dynamic_missing(runner, build, config_file):
    result = runner.invoke(cli, [
        "resolve", "nowhere", "--dynamic",
        "--from", str(build.native / "x.js"),
        "-c", str(config_file),
    ])
    assert result.exit_code == 0
    assert result.output.strip().endswith("externals/nowhere")
    assert (build.externals / "nowhere.js").exists()


def test_resolve_build_error(runner, build, config_file):
    result = runner.invoke(cli, [
        "resolve", "bar",
        "--from", str(build.native / "x.js"),
        "-c", str(config_file),
    ])
    assert result.exit_code == 1
    assert "not one of its explicit dependencies" in result.output


def test_bad_config(runner, build):
    path = write_file(build.root / "bad.json", json.dumps({"nope": 1}))
    result = runner.invoke(cli, ["resolve", "x", "--from", str(build.native / "x.js"), "-c", str(path)])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


# ── rewrite ───────────────────────────────────────────────────

def test_rewrite(runner, build, config_file):
    path = write_file(build.auto / "components" / "x.js", 'import y from "auto-addon/utils/y";\n')
    result = runner.invoke(cli, ["rewrite", str(path), "-c", str(config_file)])
    assert result.exit_code == 0
    assert "Processed 1 file(s)" in result.output
    assert "1 rewritten" in result.output
    assert path.read_text() == 'import y from "../utils/y";\n'


def test_rewrite_output_dir(runner, build, config_file, tmp_path):
    path = write_file(build.native / "x.js", 'import foo from "foo";\n')
    out = tmp_path / "out"
    result = runner.invoke(cli, ["rewrite", str(path), "-c", str(config_file), "-o", str(out)])
    assert result.exit_code == 0
    assert (out / "x.js").read_text() == 'import foo from "foo";\n'


# ── owner ─────────────────────────────────────────────────────

def test_owner(runner, build):
    result = runner.invoke(cli, ["owner", str(build.native / "components" / "x.js")])
    assert result.exit_code == 0
    assert "native-addon" in result.output
    assert "v2 format: yes" in result.output
    assert "auto-upgraded: no" in result.output
    assert "externals: ./vendor/legacy, ext-lib" in result.output


def test_owner_outside_packages(runner, workspace):
    result = runner.invoke(cli, ["owner", str(workspace / "loose.js")])
    assert result.exit_code == 0
    assert "No owning package." in result.output
