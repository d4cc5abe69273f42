"""Tests for loading the JSON rewrite configuration."""

import json

import pytest

from import_adjuster.config import load_config, parse_config
from import_adjuster.errors import ConfigError
from import_adjuster.models import DEFAULT_EXTENSIONS, EXTERNALS_DIR_ENV, MACROS_PACKAGE, RewriteConfig


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(EXTERNALS_DIR_ENV, raising=False)
    config = parse_config({}, tmp_path)
    assert config.rename_packages == {}
    assert config.extra_imports == []
    assert config.resolvable_extensions == list(DEFAULT_EXTENSIONS)
    assert config.passthrough_specifiers == [MACROS_PACKAGE]
    assert str(config.externals_dir) == "externals"


def test_camel_case_keys_and_anchoring(tmp_path):
    config = parse_config({
        "renamePackages": {"old": "new"},
        "renameModules": {"old-mod/index.js": "new-mod"},
        "externalsDir": "build/externals",
        "activeAddons": {"ghost": "addons/ghost"},
        "relocatedFiles": {"app/x.js": "node_modules/a/x.js"},
        "extraImports": [{"absPath": "app/app.js", "target": "mod", "runtimeName": "rt"}],
        "resolvableExtensions": [".js"],
    }, tmp_path)

    root = tmp_path.resolve()
    assert config.rename_packages == {"old": "new"}
    assert config.rename_modules == {"old-mod/index.js": "new-mod"}
    assert config.externals_dir == root / "build" / "externals"
    assert config.active_addons == {"ghost": root / "addons" / "ghost"}
    assert config.relocated_files == {root / "app" / "x.js": root / "node_modules" / "a" / "x.js"}
    extra = config.extra_imports[0]
    assert extra.target_file == root / "app" / "app.js"
    assert extra.module == "mod"
    assert extra.runtime_name == "rt"
    assert config.resolvable_extensions == [".js"]


def test_absolute_paths_kept(tmp_path):
    elsewhere = (tmp_path / "elsewhere").resolve()
    config = parse_config({"externalsDir": str(elsewhere)}, tmp_path / "base")
    assert config.externals_dir == elsewhere


def test_unknown_key_rejected(tmp_path):
    with pytest.raises(ConfigError):
        parse_config({"renamePackage": {}}, tmp_path)


def test_extra_import_requires_target(tmp_path):
    with pytest.raises(ConfigError):
        parse_config({"extraImports": [{"absPath": "a.js"}]}, tmp_path)


def test_env_supplies_externals_dir(tmp_path, monkeypatch):
    monkeypatch.setenv(EXTERNALS_DIR_ENV, str(tmp_path / "from-env"))
    assert parse_config({}, tmp_path).externals_dir == tmp_path / "from-env"
    assert RewriteConfig().externals_dir == tmp_path / "from-env"


def test_explicit_externals_dir_beats_env(tmp_path, monkeypatch):
    monkeypatch.setenv(EXTERNALS_DIR_ENV, str(tmp_path / "from-env"))
    config = parse_config({"externalsDir": "mine"}, tmp_path)
    assert config.externals_dir == tmp_path.resolve() / "mine"


# ── Files ─────────────────────────────────────────────────────

def test_load_config_anchors_at_file_directory(tmp_path):
    path = tmp_path / "conf" / "adjust.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"externalsDir": "ext"}), encoding="utf-8")
    config = load_config(path)
    assert config.externals_dir == tmp_path.resolve() / "conf" / "ext"


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "adjust.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_config(path)


def test_load_config_requires_object(tmp_path):
    path = tmp_path / "adjust.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError, match="must be a JSON object"):
        load_config(path)
