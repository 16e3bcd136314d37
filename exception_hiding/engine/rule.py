"""例外隠蔽ルールの実行エントリーポイント。"""

from typing import List, Protocol

from ..models.diagnostic import Diagnostic, LintCode
from ..models.syntax import SyntaxTree
from .reporter import EXCEPTION_HIDING, report
from .walker import walk


class DiagnosticSink(Protocol):
    """診断情報の受け取り先。"""

    def accept(self, diagnostic: Diagnostic) -> None:
        ...


class DiagnosticCollector:
    """診断情報をリストに蓄積するシンク。"""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def accept(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)


def run(tree: SyntaxTree, sink: DiagnosticSink, code: LintCode = EXCEPTION_HIDING) -> None:
    """構文木にルールを適用し、診断情報をシンクへ渡す。

    状態を持たないため、異なる構文木に対して並行に呼び出してよい。

    Args:
        tree: 解析する構文木
        sink: 診断情報の受け取り先
        code: 診断に付けるルールコード
    """
    for result in walk(tree):
        sink.accept(report(result.clause, code))


def check(tree: SyntaxTree, code: LintCode = EXCEPTION_HIDING) -> List[Diagnostic]:
    """構文木の診断情報をリストで返す。"""
    collector = DiagnosticCollector()
    run(tree, collector, code)
    return collector.diagnostics
