"""Pythonソースコードのフロントエンド（標準ライブラリのastを使用）。"""

from typing import List, Tuple
import ast
import logging

from ..errors import FrontendError
from ..models.syntax import (
    Expression,
    ExpressionKind,
    HandlerClause,
    SourceSpan,
    Statement,
    StatementKind,
    SyntaxTree,
    TryConstruct,
)
from .base import Frontend

logger = logging.getLogger(__name__)

_TRY_NODES: Tuple[type, ...] = (ast.Try,)
if hasattr(ast, "TryStar"):
    _TRY_NODES += (ast.TryStar,)


class PythonFrontend(Frontend):
    """Pythonのast.Moduleを中立な構文木に変換する。

    - try / try* → TryConstruct
    - except節 → HandlerClause
    - 引数なしのraise → RETHROW
    - raise X / raise X from Y → THROW
    - 式文 → EXPRESSION（Pythonにthrow式はないため式は常にOTHER）
    - その他の文 → OTHER（入れ子の文はchildrenとして保持）
    """

    language = "python"
    file_extensions = (".py", ".pyi")

    def parse_string(self, source: str, filename: str) -> SyntaxTree:
        try:
            module = ast.parse(source, filename=filename)
        except SyntaxError as e:
            raise FrontendError(
                f"Failed to parse {filename}: {e.msg} (line {e.lineno})",
                file_path=filename,
            ) from e

        converter = _Converter(filename)
        body = converter.statements(module.body)
        logger.debug(f"Parsed {filename}: {len(body)} top-level statements")
        return SyntaxTree(file_path=filename, language=self.language, body=body)


class _Converter:
    """1ファイル分のast→中立モデル変換。"""

    def __init__(self, filename: str):
        self.filename = filename

    def span(self, node: ast.AST) -> SourceSpan:
        # astの列は0始まりのため+1する
        end_line = getattr(node, "end_lineno", None) or node.lineno
        end_col = getattr(node, "end_col_offset", None)
        return SourceSpan(
            file_path=self.filename,
            start_line=node.lineno,
            start_column=node.col_offset + 1,
            end_line=end_line,
            end_column=(end_col if end_col is not None else node.col_offset) + 1,
        )

    def statements(self, nodes: List[ast.stmt]) -> Tuple[Statement, ...]:
        return tuple(self.statement(node) for node in nodes)

    def statement(self, node: ast.stmt) -> Statement:
        span = self.span(node)

        if isinstance(node, ast.Raise):
            kind = StatementKind.RETHROW if node.exc is None else StatementKind.THROW
            return Statement(kind=kind, span=span)

        if isinstance(node, _TRY_NODES):
            return Statement(
                kind=StatementKind.OTHER,
                span=span,
                children=(self.try_construct(node),),
            )

        if isinstance(node, ast.Expr):
            expression = Expression(kind=ExpressionKind.OTHER, span=self.span(node.value))
            return Statement(kind=StatementKind.EXPRESSION, span=span, expression=expression)

        return Statement(
            kind=StatementKind.OTHER,
            span=span,
            children=self.nested_statements(node),
        )

    def try_construct(self, node: ast.Try) -> TryConstruct:
        return TryConstruct(
            span=self.span(node),
            body=self.statements(node.body),
            handlers=tuple(self.handler(h) for h in node.handlers),
            else_body=self.statements(node.orelse),
            finally_body=self.statements(node.finalbody),
        )

    def handler(self, node: ast.ExceptHandler) -> HandlerClause:
        return HandlerClause(
            span=self.span(node),
            exception_types=self.exception_types(node.type),
            body=self.statements(node.body),
        )

    def exception_types(self, node) -> Tuple[str, ...]:
        if node is None:
            return ()
        if isinstance(node, ast.Tuple):
            return tuple(ast.unparse(elt) for elt in node.elts)
        return (ast.unparse(node),)

    def nested_statements(self, node: ast.AST) -> Tuple[Statement, ...]:
        """ノード配下で最も外側にある文を集める。

        if/for/while/with/matchの各ブロックと関数・クラス定義の本体が対象。
        """
        found: List[Statement] = []
        stack = list(reversed(list(ast.iter_child_nodes(node))))
        while stack:
            child = stack.pop()
            if isinstance(child, ast.stmt):
                found.append(self.statement(child))
                continue
            stack.extend(reversed(list(ast.iter_child_nodes(child))))
        return tuple(found)
