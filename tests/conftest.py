"""Shared fixtures: small on-disk package trees built under tmp_path."""

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from import_adjuster.models import RewriteConfig
from import_adjuster.packages.graph import PackageGraph
from import_adjuster.resolver.rewriter import SpecifierRewriter


def write_package(root: Path, name: str, *, v2=True, auto_upgraded=False, app=False,
                  externals=(), dependencies=(), dev_dependencies=(), ember=True) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    data = {
        "name": name,
        "dependencies": {d: "*" for d in dependencies},
        "devDependencies": {d: "*" for d in dev_dependencies},
    }
    if ember:
        data["ember-addon"] = {
            "version": 2 if v2 else 1,
            "type": "app" if app else "addon",
            "auto-upgraded": auto_upgraded,
            "externals": list(externals),
        }
    (root / "package.json").write_text(json.dumps(data), encoding="utf-8")
    return root


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def workspace(tmp_path):
    return tmp_path.resolve()


@pytest.fixture
def make_package():
    return write_package


@pytest.fixture
def build(workspace):
    """A host app with one native addon, one auto-upgraded addon and one classic addon.

    ws/app                              my-app (v2 app)
    ws/app/node_modules/native-addon    v2, declares foo, externals ext-lib + ./vendor/legacy
    ws/app/node_modules/native-addon/node_modules/{foo,bar}
    ws/app/node_modules/auto-addon      v2, auto-upgraded
    ws/app/node_modules/auto-addon/node_modules/baz
    ws/app/node_modules/classic-addon   v1
    ws/app/node_modules/app-dep         plain dependency of the app
    """
    app = write_package(workspace / "app", "my-app", app=True,
                        dependencies=["native-addon", "auto-addon", "classic-addon", "app-dep"])
    modules = app / "node_modules"
    native = write_package(modules / "native-addon", "native-addon", dependencies=["foo"],
                           externals=["ext-lib", "./vendor/legacy"])
    write_package(native / "node_modules" / "foo", "foo", ember=False)
    write_package(native / "node_modules" / "bar", "bar", ember=False)
    auto = write_package(modules / "auto-addon", "auto-addon", auto_upgraded=True)
    write_package(auto / "node_modules" / "baz", "baz", ember=False)
    classic = write_package(modules / "classic-addon", "classic-addon", v2=False)
    write_package(modules / "app-dep", "app-dep", ember=False)

    return SimpleNamespace(
        root=workspace, app=app, native=native, auto=auto, classic=classic,
        externals=workspace / "externals",
    )


@pytest.fixture
def make_rewriter(build):
    def factory(**overrides):
        overrides.setdefault("externals_dir", build.externals)
        return SpecifierRewriter(RewriteConfig(**overrides), PackageGraph())
    return factory
