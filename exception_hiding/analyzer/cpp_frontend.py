"""C++ source frontend built on libclang."""

from typing import Any, List, Optional, Tuple
import os
import logging

from ..models.syntax import (
    Expression,
    ExpressionKind,
    HandlerClause,
    SourceSpan,
    Statement,
    StatementKind,
    SyntaxNode,
    SyntaxTree,
    TryConstruct,
)
from .base import Frontend
from .clang_analyzer import ClangAnalyzer

logger = logging.getLogger(__name__)


class CppFrontend(Frontend):
    """Convert a libclang translation unit into the neutral syntax tree.

    - ``CXX_TRY_STMT`` becomes a TryConstruct
    - ``CXX_CATCH_STMT`` becomes a HandlerClause (``...`` is a catch-all)
    - ``throw;`` becomes an expression statement wrapping RETHROW
    - ``throw expr;`` becomes an expression statement wrapping THROW

    Cursors coming from included headers are ignored.
    """

    language = "cpp"
    file_extensions = (".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hh", ".hxx", ".h")

    def __init__(self, clang_analyzer: ClangAnalyzer):
        """Initialize the frontend.

        Args:
            clang_analyzer: ClangAnalyzer instance used for parsing
        """
        self.analyzer = clang_analyzer
        self._ci = clang_analyzer.ci

    def parse_string(self, source: str, filename: str) -> SyntaxTree:
        tu = self.analyzer.parse_string(source, filename)
        converter = _CursorConverter(self._ci, filename)

        body = tuple(
            converter.convert(child)
            for child in tu.cursor.get_children()
            if converter.in_main_file(child)
        )
        return SyntaxTree(file_path=filename, language=self.language, body=body)


class _Frame:
    """A cursor whose children are still being converted."""

    __slots__ = ("cursor", "pending", "converted")

    def __init__(self, cursor):
        self.cursor = cursor
        # Reversed so that pop() returns children in source order
        self.pending = list(cursor.get_children())[::-1]
        self.converted: List[Tuple[Any, SyntaxNode]] = []


class _CursorConverter:
    """Convert cursors of a single translation unit."""

    def __init__(self, ci, filename: str):
        self._kinds = ci.CursorKind
        self.filename = filename
        self._normalized = os.path.normpath(filename)

        # Implicit wrappers around an expression statement
        self._transparent = {
            self._kinds.UNEXPOSED_EXPR,
            self._kinds.PAREN_EXPR,
        }

    def in_main_file(self, cursor) -> bool:
        location_file = cursor.location.file
        if location_file is None:
            return True
        return os.path.normpath(location_file.name) == self._normalized

    def span(self, cursor) -> SourceSpan:
        extent = cursor.extent
        return SourceSpan(
            file_path=self.filename,
            start_line=extent.start.line,
            start_column=extent.start.column,
            end_line=extent.end.line,
            end_column=extent.end.column,
        )

    def convert(self, root) -> Statement:
        """Convert a cursor and everything below it into a statement node.

        Children are converted before their parent with an explicit stack,
        so long operator chains do not reach the interpreter recursion limit.
        """
        stack = [_Frame(root)]
        while True:
            frame = stack[-1]
            if frame.pending:
                stack.append(_Frame(frame.pending.pop()))
                continue

            stack.pop()
            node = self.build(frame.cursor, frame.converted)
            if not stack:
                return node
            stack[-1].converted.append((frame.cursor, node))

    def build(self, cursor, converted: List[Tuple[Any, SyntaxNode]]) -> SyntaxNode:
        """Build one node from its cursor and its already converted children."""
        kind = cursor.kind
        span = self.span(cursor)

        if kind == self._kinds.CXX_TRY_STMT:
            return Statement(
                kind=StatementKind.OTHER,
                span=span,
                children=(self.try_construct(cursor, converted),),
            )

        if kind == self._kinds.CXX_CATCH_STMT:
            return self.handler(cursor, converted)

        children = tuple(node for _, node in converted)

        if kind.is_expression():
            expression = Expression(
                kind=self.expression_kind(cursor),
                span=span,
                children=children,
            )
            return Statement(kind=StatementKind.EXPRESSION, span=span, expression=expression)

        return Statement(kind=StatementKind.OTHER, span=span, children=children)

    def expression_kind(self, cursor) -> ExpressionKind:
        cursor = self._unwrap(cursor)
        if cursor.kind != self._kinds.CXX_THROW_EXPR:
            return ExpressionKind.OTHER

        # A throw without operand rethrows the exception being handled
        if list(cursor.get_children()):
            return ExpressionKind.THROW
        return ExpressionKind.RETHROW

    def _unwrap(self, cursor):
        while cursor.kind in self._transparent:
            inner: List = list(cursor.get_children())
            if len(inner) != 1:
                break
            cursor = inner[0]
        return cursor

    def try_construct(self, cursor, converted) -> TryConstruct:
        body: Tuple[Statement, ...] = ()
        handlers: List[HandlerClause] = []

        for child, node in converted:
            if child.kind == self._kinds.CXX_CATCH_STMT:
                handlers.append(node)
            elif child.kind == self._kinds.COMPOUND_STMT:
                body = node.children

        return TryConstruct(span=self.span(cursor), body=body, handlers=tuple(handlers))

    def handler(self, cursor, converted) -> HandlerClause:
        exception_types: Tuple[str, ...] = ()
        body: Optional[Tuple[Statement, ...]] = None

        for child, node in converted:
            if child.kind == self._kinds.VAR_DECL:
                exception_types = (child.type.spelling,)
            elif child.kind == self._kinds.COMPOUND_STMT:
                body = node.children

        if body is None:
            logger.debug(f"Catch clause without body at {self.span(cursor)}")

        return HandlerClause(
            span=self.span(cursor),
            exception_types=exception_types,
            body=body,
        )
