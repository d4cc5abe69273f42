"""Ordered rule tables for the two rewriting stages.

Each rule looks at a ``RewriteContext`` and returns either the specifier to
use (a definite result) or ``None`` when it does not apply. Rules are tried
in table order and the first definite result wins. A ``Final`` result also
skips every later stage.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Sequence

from import_adjuster.errors import PackageNotFound, UndeclaredDependency, UnsafeAppTreeImport
from import_adjuster.models import Package, RewriteConfig
from import_adjuster.packages.graph import PackageGraph
from import_adjuster.resolver.file_identity import FileUnderTransform
from import_adjuster.specifiers import (
    explicit_relative,
    package_name,
    rename_candidates,
    replace_package_name,
)
from import_adjuster.stubs.emitter import StubEmitter


class Final(str):
    """A rewritten specifier that ends all further processing."""


@dataclass(frozen=True)
class RewriteContext:
    specifier: str
    file: FileUnderTransform
    config: RewriteConfig
    graph: PackageGraph
    emitter: StubEmitter
    is_dynamic: bool = False

    @property
    def package_name(self) -> str | None:
        return package_name(self.specifier)

    @property
    def owner(self) -> Package | None:
        return self.file.owning_package()

    def with_specifier(self, specifier: str) -> RewriteContext:
        return replace(self, specifier=specifier)

    def resolvable_from(self, pkg: Package) -> Package | None:
        try:
            return self.graph.resolve(self.package_name, pkg)
        except PackageNotFound:
            return None

    def relative_to(self, new_root: str | Path) -> str:
        """Point the specifier's package segment at ``new_root``, relative to this file."""
        target = replace_package_name(self.specifier, self.package_name, new_root)
        return explicit_relative(self.file.working_dir, target)

    def external(self, specifier: str | None = None) -> str:
        return self.emitter.emit_external(specifier or self.specifier, self.file.working_dir)

    def missing(self) -> str:
        return self.emitter.emit_missing(self.specifier, self.file.working_dir)


Rule = Callable[[RewriteContext], "str | None"]


def run_rules(rules: Sequence[tuple[str, Rule]], ctx: RewriteContext) -> tuple[str, str]:
    """Return ``(result, rule_name)`` from the first rule that applies."""
    for name, rule in rules:
        result = rule(ctx)
        if result is not None:
            return result, name
    return ctx.specifier, "fallthrough"


def _is_legacy_owner(ctx: RewriteContext) -> bool:
    pkg = ctx.owner
    return pkg is None or not pkg.is_v2_ember


# ── Stage A: renaming ─────────────────────────────────────────

def _relative_skips_renaming(ctx: RewriteContext) -> str | None:
    if ctx.package_name is None:
        return ctx.specifier
    return None


def _rename_module(ctx: RewriteContext) -> str | None:
    forms = set(rename_candidates(ctx.specifier, ctx.config.resolvable_extensions))
    for candidate, replacement in ctx.config.rename_modules.items():
        if candidate in forms:
            return Final(replacement)
    return None


def _rename_package(ctx: RewriteContext) -> str | None:
    name = ctx.package_name
    new_name = ctx.config.rename_packages.get(name)
    if new_name:
        return replace_package_name(ctx.specifier, name, new_name)
    return None


def _legacy_owner_unchanged(ctx: RewriteContext) -> str | None:
    if _is_legacy_owner(ctx):
        return ctx.specifier
    return None


def _self_import(ctx: RewriteContext) -> str | None:
    # Only auto-upgraded packages get this help; native packages must use
    # relative imports for their own modules.
    pkg = ctx.owner
    if pkg.auto_upgraded and pkg.name == ctx.package_name:
        return ctx.relative_to(pkg.root)
    return None


def _relocated_self_import(ctx: RewriteContext) -> str | None:
    # e.g. an addon emitting files into the app that import the app by name.
    pkg = ctx.owner
    host = ctx.file.relocated_into_package()
    if host is not None and pkg.auto_upgraded and host.name == ctx.package_name:
        return ctx.relative_to(host.root)
    return None


def _unchanged(ctx: RewriteContext) -> str | None:
    return ctx.specifier


RENAMING_RULES: tuple[tuple[str, Rule], ...] = (
    ("relative", _relative_skips_renaming),
    ("rename-module", _rename_module),
    ("rename-package", _rename_package),
    ("legacy-owner", _legacy_owner_unchanged),
    ("self-import", _self_import),
    ("relocated-self-import", _relocated_self_import),
    ("unchanged", _unchanged),
)


# ── Stage B: externalization ──────────────────────────────────

def _relative_external(ctx: RewriteContext) -> str | None:
    # Relative imports are never externalized automatically, but a package
    # may list them (in package-relative form) among its externals.
    if ctx.package_name is not None:
        return None
    pkg = ctx.owner
    absolute = os.path.normpath(os.path.join(ctx.file.working_dir, ctx.specifier))
    package_relative = explicit_relative(pkg.root, absolute)
    if package_relative.startswith("./") and pkg.is_explicitly_external(package_relative):
        return ctx.external(pkg.name + package_relative[1:])
    return ctx.specifier


def _explicit_external(ctx: RewriteContext) -> str | None:
    if ctx.owner.is_explicitly_external(ctx.specifier):
        return ctx.external()
    return None


def _relocated_into_package(ctx: RewriteContext) -> str | None:
    host = ctx.file.relocated_into_package()
    if host is None:
        return None
    pkg = ctx.owner
    # Self-imports are legal in the host tree, even for native packages.
    if ctx.package_name == pkg.name:
        return ctx.specifier
    if ctx.resolvable_from(host) is not None:
        _require_auto_upgraded_in_host(ctx)
        return ctx.specifier
    target = ctx.resolvable_from(pkg)
    if target is not None:
        _require_auto_upgraded_in_host(ctx)
        # Resolves from where the file came from, not from where it sits now.
        return ctx.relative_to(target.root)
    return None


def _require_auto_upgraded_in_host(ctx: RewriteContext) -> None:
    if not ctx.owner.auto_upgraded:
        raise UnsafeAppTreeImport(ctx.owner.name, ctx.package_name)


def _declared_dependency(ctx: RewriteContext) -> str | None:
    if ctx.file.relocated_into_package() is not None:
        return None
    pkg = ctx.owner
    if ctx.resolvable_from(pkg) is None:
        return None
    if not pkg.auto_upgraded and not pkg.has_dependency(ctx.package_name):
        raise UndeclaredDependency(pkg.name, ctx.package_name)
    return ctx.specifier


def _active_addon(ctx: RewriteContext) -> str | None:
    location = ctx.config.active_addons.get(ctx.package_name)
    if ctx.owner.auto_upgraded and location is not None:
        return ctx.relative_to(Path(location).resolve())
    return None


def _runtime_external(ctx: RewriteContext) -> str | None:
    # Native packages only get externals they ask for explicitly.
    if ctx.owner.auto_upgraded:
        return ctx.external()
    return None


def _dynamic_missing(ctx: RewriteContext) -> str | None:
    # Fail at the point of use instead of as an opaque bundler error.
    if ctx.is_dynamic:
        return ctx.missing()
    return None


EXTERNALIZATION_RULES: tuple[tuple[str, Rule], ...] = (
    ("legacy-owner", _legacy_owner_unchanged),
    ("relative-external", _relative_external),
    ("explicit-external", _explicit_external),
    ("relocated", _relocated_into_package),
    ("declared-dependency", _declared_dependency),
    ("active-addon", _active_addon),
    ("runtime-external", _runtime_external),
    ("dynamic-missing", _dynamic_missing),
    # Later build stages report the unresolvable static import themselves.
    ("unchanged", _unchanged),
)
