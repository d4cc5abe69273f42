"""Specifier classification and rewriting."""

from import_adjuster.resolver.file_identity import FileUnderTransform
from import_adjuster.resolver.rewriter import SpecifierRewriter
from import_adjuster.specifiers import explicit_relative, package_name

__all__ = ["FileUnderTransform", "SpecifierRewriter", "explicit_relative", "package_name"]
