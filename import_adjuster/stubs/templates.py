"""Bodies of the generated shim modules. Pure functions of their input."""

from __future__ import annotations

import json

# This runtime name maps to the loader registry itself, not a module in it.
LOADER_SENTINEL = "require"


def js_string(value: str) -> str:
    """Quote ``value`` as a JavaScript string literal."""
    return json.dumps(value)


def render_external(runtime_name: str) -> str:
    """Module that re-exports a value provided by the runtime loader."""
    if runtime_name == LOADER_SENTINEL:
        lookup = "const m = window.requirejs;"
    else:
        lookup = f"const m = window.require({js_string(runtime_name)});"
    lines = [
        lookup,
        # Hand-written AMD modules often lack the interop marker.
        "if (m.default && !m.__esModule) {",
        "  m.__esModule = true;",
        "}",
        "module.exports = m;",
        "",
    ]
    return "\n".join(lines)


def render_missing(module_name: str) -> str:
    """Module that fails only when evaluated."""
    message = f"Could not find module `{module_name}`"
    return f"throw new Error({js_string(message)});\n"
