"""Find module references in JavaScript/TypeScript source using regex patterns."""

from __future__ import annotations

import abc
import re
from dataclasses import dataclass, field
from pathlib import Path

from import_adjuster.models import DefineCall, Occurrence, OccurrenceKind

# import x from "a"; import { y } from 'a'; import "a"; import type { T } from "a"
_IMPORT_RE = re.compile(
    r"""(?<![\w$.])import\s+(?:type\s+)?(?:[\w$*{}\s,]+?\s*from\s*)?(?P<q>["'])(?P<spec>[^"'\n]+)(?P=q)""",
)
# export * from "a"; export * as ns from "a"; export { x } from "a"
_EXPORT_FROM_RE = re.compile(
    r"""(?<![\w$.])export\s+(?:type\s+)?(?:\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*(?P<q>["'])(?P<spec>[^"'\n]+)(?P=q)""",
)
# import("a"); importSync("a")
_DYNAMIC_RE = re.compile(
    r"""(?<![\w$.])(?:import|importSync)\s*\(\s*(?P<q>["'])(?P<spec>[^"'\n]+)(?P=q)\s*\)""",
)
# define("name", [deps], function () {...}) or an arrow factory
_DEFINE_RE = re.compile(
    r"""(?<![\w$.])define\s*\(\s*(?P<q>["'])(?P<name>[^"'\n]*)(?P=q)\s*,\s*\[(?P<deps>[^\]]*)\]\s*,\s*"""
    r"""(?=function\b|async\b|\(|[\w$]+\s*=>)""",
)
# One token of a define dependency list: a string literal, a separator, or anything else.
_DEP_TOKEN_RE = re.compile(
    r"""(?P<q>["'])(?P<value>(?:(?!(?P=q))[^\\\n])*)(?P=q)|(?P<comma>,)|(?P<other>[^,\s]+)""",
)


@dataclass
class ScanResult:
    occurrences: list[Occurrence] = field(default_factory=list)
    defines: list[DefineCall] = field(default_factory=list)


class BaseWalker(abc.ABC):
    """Base class for source walkers that report module references."""

    extensions: tuple[str, ...]

    @abc.abstractmethod
    def scan_source(self, source: str, file_path: Path) -> ScanResult:
        """Report every module reference in ``source``."""

    def scan_file(self, file_path: Path) -> ScanResult:
        source = file_path.read_text(encoding="utf-8")
        return self.scan_source(source, file_path)

    def handles(self, file_path: Path) -> bool:
        return file_path.suffix in self.extensions


class JsWalker(BaseWalker):
    extensions = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".gjs", ".gts")

    def scan_source(self, source: str, file_path: Path) -> ScanResult:
        result = ScanResult()
        seen: set[int] = set()

        for pattern in (_IMPORT_RE, _EXPORT_FROM_RE):
            for m in pattern.finditer(source):
                self._add(result, seen, source, m, OccurrenceKind.STATIC)

        for m in _DYNAMIC_RE.finditer(source):
            self._add(result, seen, source, m, OccurrenceKind.DYNAMIC)

        for m in _DEFINE_RE.finditer(source):
            result.defines.append(self._define_call(source, m))

        result.occurrences.sort(key=lambda o: o.start)
        return result

    @staticmethod
    def _add(result: ScanResult, seen: set[int], source: str, m: re.Match, kind: OccurrenceKind) -> None:
        start = m.start("spec")
        if start in seen:
            return
        seen.add(start)
        result.occurrences.append(Occurrence(
            specifier=m.group("spec"),
            kind=kind,
            start=start,
            end=m.end("spec"),
            line=_line_of(source, start),
            quote=m.group("q"),
        ))

    @staticmethod
    def _define_call(source: str, m: re.Match) -> DefineCall:
        line = _line_of(source, m.start())
        name = Occurrence(
            specifier=m.group("name"),
            kind=OccurrenceKind.DEFINE_NAME,
            start=m.start("name"),
            end=m.end("name"),
            line=line,
            quote=m.group("q"),
        )
        call = DefineCall(line=line, name=name)

        deps = m.group("deps")
        entry: list[re.Match] = []
        for token in [*_DEP_TOKEN_RE.finditer(deps), None]:
            if token is not None and token.group("comma") is None:
                entry.append(token)
                continue
            # A comma (or the end of the list) closes the current entry.
            if len(entry) == 1 and entry[0].group("value") is not None:
                literal = entry[0]
                start = m.start("deps") + literal.start("value")
                call.dependencies.append(Occurrence(
                    specifier=literal.group("value"),
                    kind=OccurrenceKind.DEFINE_DEPENDENCY,
                    start=start,
                    end=m.start("deps") + literal.end("value"),
                    line=_line_of(source, start),
                    quote=literal.group("q"),
                ))
            elif entry:
                call.malformed.append(deps[entry[0].start():entry[-1].end()])
            entry = []
        return call


def _line_of(source: str, offset: int) -> int:
    return source.count("\n", 0, offset) + 1
