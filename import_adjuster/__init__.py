"""import-adjuster: decide the final form of every module reference in a multi-package build."""

__version__ = "0.1.0"
