"""例外隠蔽の検出エンジン。"""

from .classifier import classify
from .walker import HidingResult, iter_try_constructs, walk
from .reporter import EXCEPTION_HIDING, EXCEPTION_SWALLOWING, LINT_CODES, report
from .rule import DiagnosticSink, DiagnosticCollector, run, check

__all__ = [
    "classify",
    "HidingResult",
    "iter_try_constructs",
    "walk",
    "EXCEPTION_HIDING",
    "EXCEPTION_SWALLOWING",
    "LINT_CODES",
    "report",
    "DiagnosticSink",
    "DiagnosticCollector",
    "run",
    "check",
]
