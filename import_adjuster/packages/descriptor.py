"""Parse package.json descriptors into package metadata."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from import_adjuster.errors import MalformedPackageDescriptor
from import_adjuster.models import PackageMeta

DESCRIPTOR_NAME = "package.json"


class EmberAddonBlock(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: int = 1
    type: str = "addon"
    auto_upgraded: bool = Field(default=False, alias="auto-upgraded")
    externals: list[str] = Field(default_factory=list)


class PackageDescriptor(BaseModel):
    """The subset of package.json the resolver cares about."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    peer_dependencies: dict[str, str] = Field(default_factory=dict, alias="peerDependencies")
    ember_addon: EmberAddonBlock | None = Field(default=None, alias="ember-addon")

    @property
    def is_app(self) -> bool:
        return self.ember_addon is not None and self.ember_addon.type == "app"

    def to_meta(self) -> PackageMeta:
        addon = self.ember_addon
        deps = set(self.dependencies) | set(self.peer_dependencies)
        if self.is_app:
            deps |= set(self.dev_dependencies)
        return PackageMeta(
            is_v2_ember_format=addon is not None and addon.version == 2,
            auto_upgraded=addon is not None and addon.auto_upgraded,
            is_app=self.is_app,
            externals=frozenset(addon.externals) if addon else frozenset(),
            dependencies=frozenset(deps),
        )


DescriptorLoader = Callable[[Path], PackageDescriptor | None]


def load_descriptor(root: Path) -> PackageDescriptor | None:
    """Read ``<root>/package.json``; None when the directory has none."""
    path = root / DESCRIPTOR_NAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedPackageDescriptor(str(path), f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedPackageDescriptor(str(path), "top level must be an object")
    try:
        return PackageDescriptor.model_validate(data)
    except ValidationError as e:
        raise MalformedPackageDescriptor(str(path), str(e)) from e
