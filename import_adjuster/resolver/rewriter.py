"""Decide the final specifier for each module reference in a file."""

from __future__ import annotations

import logging
from pathlib import Path

from import_adjuster.models import RewriteConfig
from import_adjuster.packages.graph import PackageGraph
from import_adjuster.resolver.file_identity import FileUnderTransform
from import_adjuster.resolver.rules import (
    EXTERNALIZATION_RULES,
    RENAMING_RULES,
    Final,
    RewriteContext,
    run_rules,
)
from import_adjuster.stubs.emitter import StubEmitter

logger = logging.getLogger(__name__)


class SpecifierRewriter:
    """Rewrite module specifiers for one build.

    One instance is shared by every file in the build; per-file state lives
    in the ``FileUnderTransform`` returned by :meth:`open_file`.
    """

    def __init__(
        self,
        config: RewriteConfig,
        graph: PackageGraph | None = None,
        emitter: StubEmitter | None = None,
    ):
        self.config = config
        self.graph = graph or PackageGraph()
        self.emitter = emitter or StubEmitter(config.externals_dir)

    def open_file(self, working_path: Path) -> FileUnderTransform:
        return FileUnderTransform(working_path, self.config.relocated_files, self.graph)

    def rewrite(self, specifier: str, file: FileUnderTransform, is_dynamic: bool = False) -> str:
        """Return the specifier to substitute for one occurrence.

        Raises a ``BuildError`` subclass when the reference is illegal.
        """
        if specifier in self.config.passthrough_specifiers:
            return specifier

        ctx = RewriteContext(
            specifier=specifier,
            file=file,
            config=self.config,
            graph=self.graph,
            emitter=self.emitter,
            is_dynamic=is_dynamic,
        )
        for stage, rules in (("renaming", RENAMING_RULES), ("externals", EXTERNALIZATION_RULES)):
            result, rule = run_rules(rules, ctx)
            if result != ctx.specifier:
                logger.debug("%s: %s %r -> %r (%s)", file.working_path, stage, ctx.specifier, str(result), rule)
            if isinstance(result, Final):
                return str(result)
            ctx = ctx.with_specifier(str(result))
        return ctx.specifier
