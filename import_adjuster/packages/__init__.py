"""Package descriptors and the package graph."""

from import_adjuster.packages.descriptor import PackageDescriptor, load_descriptor
from import_adjuster.packages.graph import PackageGraph

__all__ = ["PackageDescriptor", "PackageGraph", "load_descriptor"]
