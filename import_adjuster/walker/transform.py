"""Transform one file: inject extra imports and rewrite every module reference."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from import_adjuster.errors import ForbiddenLegacyDeclaration, MalformedSpecifierUsage
from import_adjuster.models import DefineCall, ExtraImport, Occurrence, RewriteRecord, TransformResult
from import_adjuster.resolver.file_identity import FileUnderTransform
from import_adjuster.resolver.rewriter import SpecifierRewriter
from import_adjuster.stubs.templates import js_string
from import_adjuster.walker.js_walker import BaseWalker, JsWalker

logger = logging.getLogger(__name__)

# Special AMD dependencies that are not modules.
_AMD_BUILTINS = frozenset({"exports", "require"})


@dataclass
class Injection:
    """Synthetic statements prepended to a file."""
    imports: list[str] = field(default_factory=list)
    registrations: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.imports)

    def render(self) -> str:
        lines = self.imports + self.registrations
        return "".join(line + "\n" for line in lines)


def plan_injection(extra_imports: list[ExtraImport], file: FileUnderTransform) -> Injection:
    """Collect the imports configured for ``file``, in configured order."""
    injection = Injection()
    paths = {file.working_path.resolve(), file.original_path.resolve()}
    counter = 0
    for entry in extra_imports:
        if Path(entry.target_file).resolve() not in paths:
            continue
        if entry.runtime_name:
            local = f"a{counter}"
            counter += 1
            injection.imports.append(f"import * as {local} from {js_string(entry.module)};")
            injection.registrations.append(
                f"window.define({js_string(entry.runtime_name)}, function () {{ return {local}; }});"
            )
        else:
            injection.imports.append(f"import {js_string(entry.module)};")
    return injection


class FileTransformer:
    """Apply a ``SpecifierRewriter`` to whole source files."""

    def __init__(self, rewriter: SpecifierRewriter, walker: BaseWalker | None = None):
        self.rewriter = rewriter
        self.walker = walker or JsWalker()

    def transform_source(self, source: str, working_path: Path) -> TransformResult:
        file = self.rewriter.open_file(working_path)
        injection = plan_injection(self.rewriter.config.extra_imports, file)
        scan = self.walker.scan_source(source, file.working_path)

        # Visit references in source order.
        sites: list[Occurrence | DefineCall] = [*scan.occurrences, *scan.defines]
        sites.sort(key=lambda s: s.name.start if isinstance(s, DefineCall) else s.start)

        records: list[RewriteRecord] = []
        for site in sites:
            if isinstance(site, DefineCall):
                records.extend(self._rewrite_define(site, file))
            else:
                replacement = self.rewriter.rewrite(site.specifier, file, site.is_dynamic)
                records.append(RewriteRecord(site, replacement))

        body = _apply(source, records)
        # Registrations are assembled last so they never see rewriting.
        output = _prepend(body, injection.render())

        result = TransformResult(
            working_path=file.working_path,
            source=output,
            rewrites=records,
            injected=len(injection),
        )
        logger.info(
            "%s: %d reference(s), %d rewritten, %d injected",
            file.working_path, len(records), result.changed_count, result.injected,
        )
        return result

    def transform_file(self, working_path: Path) -> TransformResult:
        source = Path(working_path).read_text(encoding="utf-8")
        return self.transform_source(source, Path(working_path))

    def _rewrite_define(self, call: DefineCall, file: FileUnderTransform) -> list[RewriteRecord]:
        pkg = file.owning_package()
        if pkg is not None and pkg.is_v2_ember and not pkg.auto_upgraded:
            raise ForbiddenLegacyDeclaration(pkg.name, str(file.original_path))
        if call.malformed:
            raise MalformedSpecifierUsage(str(file.working_path), call.line, call.malformed[0])

        records: list[RewriteRecord] = []
        for occurrence in (*call.dependencies, call.name):
            if occurrence.specifier in _AMD_BUILTINS:
                continue
            replacement = self.rewriter.rewrite(occurrence.specifier, file, False)
            records.append(RewriteRecord(occurrence, replacement))
        return records


def _apply(source: str, records: list[RewriteRecord]) -> str:
    # Back to front so earlier offsets stay valid.
    for record in sorted(records, key=lambda r: r.occurrence.start, reverse=True):
        if not record.changed:
            continue
        occ = record.occurrence
        source = source[:occ.start] + record.replacement + source[occ.end:]
    return source


def _prepend(body: str, header: str) -> str:
    if not header:
        return body
    if body.startswith("#!"):
        shebang, _, rest = body.partition("\n")
        return f"{shebang}\n{header}{rest}"
    return header + body
