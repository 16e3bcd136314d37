"""例外隠蔽検出のデータモデル。"""

from .syntax import (
    SourceSpan,
    StatementKind,
    ExpressionKind,
    Expression,
    Statement,
    HandlerClause,
    TryConstruct,
    SyntaxTree,
    SyntaxNode,
    iter_child_nodes,
)
from .diagnostic import Verdict, LintCode, Diagnostic

__all__ = [
    "SourceSpan",
    "StatementKind",
    "ExpressionKind",
    "Expression",
    "Statement",
    "HandlerClause",
    "TryConstruct",
    "SyntaxTree",
    "SyntaxNode",
    "iter_child_nodes",
    "Verdict",
    "LintCode",
    "Diagnostic",
]
