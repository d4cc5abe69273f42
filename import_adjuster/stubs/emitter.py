"""Write shim modules under the externals directory."""

from __future__ import annotations

import logging
from pathlib import Path

from import_adjuster.specifiers import explicit_relative
from import_adjuster.stubs.templates import render_external, render_missing

logger = logging.getLogger(__name__)


class StubEmitter:
    """Materialize "external" and "missing" shims.

    Every call rewrites the shim. Content depends only on the specifier, so
    concurrent or repeated writes of the same stub are harmless.
    """

    def __init__(self, externals_dir: Path):
        self.externals_dir = Path(externals_dir).resolve()
        self.writes = 0

    def stub_path(self, specifier: str) -> Path:
        return self.externals_dir / f"{specifier}.js"

    def emit_external(self, specifier: str, importer_dir: Path) -> str:
        """Write a runtime-lookup shim; return the specifier to use from ``importer_dir``."""
        return self._write(specifier, render_external(specifier), importer_dir)

    def emit_missing(self, specifier: str, importer_dir: Path) -> str:
        """Write a throw-on-evaluation shim; return the specifier to use from ``importer_dir``."""
        logger.warning("Module %s is not resolvable; it will throw when imported", specifier)
        return self._write(specifier, render_missing(specifier), importer_dir)

    def _write(self, specifier: str, content: str, importer_dir: Path) -> str:
        target = self.stub_path(specifier)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        self.writes += 1
        logger.debug("Wrote stub %s", target)
        return explicit_relative(importer_dir, str(target)[: -len(".js")])
