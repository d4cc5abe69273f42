"""Source drivers that find module references and apply rewrites."""

from import_adjuster.walker.js_walker import BaseWalker, JsWalker, ScanResult
from import_adjuster.walker.transform import FileTransformer, plan_injection

__all__ = ["BaseWalker", "FileTransformer", "JsWalker", "ScanResult", "plan_injection"]
