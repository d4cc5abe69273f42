"""Load a ``RewriteConfig`` from a JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from import_adjuster.errors import ConfigError
from import_adjuster.models import DEFAULT_EXTENSIONS, MACROS_PACKAGE, ExtraImport, RewriteConfig


class ExtraImportModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    abs_path: str = Field(alias="absPath")
    target: str
    runtime_name: str | None = Field(default=None, alias="runtimeName")


class RewriteConfigModel(BaseModel):
    """On-disk form of the configuration; keys use the build's option names."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    rename_packages: dict[str, str] = Field(default_factory=dict, alias="renamePackages")
    rename_modules: dict[str, str] = Field(default_factory=dict, alias="renameModules")
    extra_imports: list[ExtraImportModel] = Field(default_factory=list, alias="extraImports")
    externals_dir: str | None = Field(default=None, alias="externalsDir")
    active_addons: dict[str, str] = Field(default_factory=dict, alias="activeAddons")
    relocated_files: dict[str, str] = Field(default_factory=dict, alias="relocatedFiles")
    resolvable_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS), alias="resolvableExtensions",
    )
    passthrough_specifiers: list[str] = Field(
        default_factory=lambda: [MACROS_PACKAGE], alias="passthroughSpecifiers",
    )

    def to_config(self, base_dir: Path) -> RewriteConfig:
        """Build the runtime config, anchoring relative paths at ``base_dir``."""
        def anchor(p: str) -> Path:
            return (base_dir / p).resolve()

        return RewriteConfig(
            externals_dir=anchor(self.externals_dir) if self.externals_dir else None,
            rename_packages=dict(self.rename_packages),
            rename_modules=dict(self.rename_modules),
            extra_imports=[
                ExtraImport(target_file=anchor(e.abs_path), module=e.target, runtime_name=e.runtime_name)
                for e in self.extra_imports
            ],
            active_addons={name: anchor(loc) for name, loc in self.active_addons.items()},
            relocated_files={anchor(w): anchor(o) for w, o in self.relocated_files.items()},
            resolvable_extensions=list(self.resolvable_extensions),
            passthrough_specifiers=list(self.passthrough_specifiers),
        )


def parse_config(data: dict, base_dir: Path) -> RewriteConfig:
    try:
        model = RewriteConfigModel.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    return model.to_config(base_dir)


def load_config(path: Path) -> RewriteConfig:
    """Read a JSON configuration file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: configuration must be a JSON object")
    return parse_config(data, path.parent.resolve())
