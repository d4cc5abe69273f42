"""Data models shared by the resolver, stub emitter and source driver."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path

# Compiled away by a later build phase; never touched.
MACROS_PACKAGE = "@embroider/macros"

DEFAULT_EXTENSIONS = (".js", ".ts", ".mjs")

EXTERNALS_DIR_ENV = "IMPORT_ADJUSTER_EXTERNALS_DIR"


@dataclass(frozen=True)
class PackageMeta:
    """Format flags and directives read from a package descriptor."""
    is_v2_ember_format: bool = False
    auto_upgraded: bool = False
    is_app: bool = False
    externals: frozenset[str] = frozenset()
    dependencies: frozenset[str] = frozenset()


@dataclass(frozen=True, eq=False)
class Package:
    """A resolved, on-disk package. Compared by identity."""
    name: str
    root: Path
    meta: PackageMeta = field(default_factory=PackageMeta)

    @property
    def is_v2_ember(self) -> bool:
        return self.meta.is_v2_ember_format

    @property
    def auto_upgraded(self) -> bool:
        return self.meta.auto_upgraded

    @property
    def externals(self) -> frozenset[str]:
        return self.meta.externals

    @property
    def dependencies(self) -> frozenset[str]:
        return self.meta.dependencies

    def has_dependency(self, name: str) -> bool:
        return name in self.meta.dependencies

    def is_explicitly_external(self, specifier: str) -> bool:
        # Apps cannot ask for externals, only addons can.
        return not self.meta.is_app and specifier in self.meta.externals


@dataclass(frozen=True)
class ExtraImport:
    """A module to inject at the top of one specific file."""
    target_file: Path
    module: str
    runtime_name: str | None = None


@dataclass
class RewriteConfig:
    """Build-wide configuration, shared read-only across all files."""
    externals_dir: Path | None = None
    rename_packages: dict[str, str] = field(default_factory=dict)
    rename_modules: dict[str, str] = field(default_factory=dict)
    extra_imports: list[ExtraImport] = field(default_factory=list)
    active_addons: dict[str, Path] = field(default_factory=dict)
    relocated_files: dict[Path, Path] = field(default_factory=dict)
    resolvable_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    passthrough_specifiers: list[str] = field(default_factory=lambda: [MACROS_PACKAGE])

    def __post_init__(self):
        if self.externals_dir is None:
            self.externals_dir = Path(os.getenv(EXTERNALS_DIR_ENV, "externals"))
        self.externals_dir = Path(self.externals_dir)
        self.active_addons = {name: Path(loc) for name, loc in self.active_addons.items()}
        self.relocated_files = {
            Path(working): Path(original)
            for working, original in self.relocated_files.items()
        }


class OccurrenceKind(enum.Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    DEFINE_NAME = "define_name"
    DEFINE_DEPENDENCY = "define_dependency"


@dataclass
class Occurrence:
    """One module reference found in a file.

    ``start``/``end`` delimit the specifier text inside its quotes.
    """
    specifier: str
    kind: OccurrenceKind
    start: int
    end: int
    line: int
    quote: str = '"'

    @property
    def is_dynamic(self) -> bool:
        return self.kind is OccurrenceKind.DYNAMIC


@dataclass
class DefineCall:
    """A legacy ``define(name, [deps], factory)`` call site."""
    line: int
    name: Occurrence
    dependencies: list[Occurrence] = field(default_factory=list)
    # Entries that are not string literals, as written.
    malformed: list[str] = field(default_factory=list)


@dataclass
class RewriteRecord:
    occurrence: Occurrence
    replacement: str

    @property
    def changed(self) -> bool:
        return self.replacement != self.occurrence.specifier


@dataclass
class TransformResult:
    """Result of transforming one file."""
    working_path: Path
    source: str
    rewrites: list[RewriteRecord] = field(default_factory=list)
    injected: int = 0
    output_path: Path | None = None

    @property
    def changed_count(self) -> int:
        return sum(1 for r in self.rewrites if r.changed)
