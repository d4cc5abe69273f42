"""Shim module generation."""

from import_adjuster.stubs.emitter import StubEmitter
from import_adjuster.stubs.templates import render_external, render_missing

__all__ = ["StubEmitter", "render_external", "render_missing"]
