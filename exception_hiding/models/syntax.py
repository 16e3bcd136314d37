"""フロントエンド非依存の構文ノードモデル。

検出エンジンが必要とする構造（try構文、ハンドラ節、文、throw式）だけを
表現する。各フロントエンドはネイティブの構文木をこのモデルに変換する。
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union
from enum import Enum
import os


@dataclass(frozen=True)
class SourceSpan:
    """ソースコード上の範囲（行・列とも1始まり）。"""
    file_path: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def __post_init__(self):
        # パス区切りを正規化（frozenのためobject.__setattr__を使用）
        object.__setattr__(self, "file_path", os.path.normpath(self.file_path))

    def __str__(self) -> str:
        return f"{self.file_path}:{self.start_line}:{self.start_column}"


class StatementKind(Enum):
    """分類器が区別する文の形。"""
    EXPRESSION = "expression"  # 式文（式をラップする）
    RETHROW = "rethrow"        # 捕捉した例外をそのまま再送出
    THROW = "throw"            # 新しい（変換した）例外を送出
    OTHER = "other"            # 上記以外（ブロック、条件分岐、ループ、代入など）


class ExpressionKind(Enum):
    """式文がラップする式の形。"""
    RETHROW = "rethrow"
    THROW = "throw"
    OTHER = "other"


@dataclass(frozen=True)
class Expression:
    """式ノード。

    childrenにはラムダ本体など、式の内側に現れる文を保持する。
    """
    kind: ExpressionKind
    span: SourceSpan
    children: Tuple["SyntaxNode", ...] = ()


@dataclass(frozen=True)
class Statement:
    """文ノード。

    kindがEXPRESSIONの場合のみexpressionを持つ。
    childrenは入れ子の文やtry構文で、分類器は参照せず走査器だけが使う。
    """
    kind: StatementKind
    span: SourceSpan
    expression: Optional[Expression] = None
    children: Tuple["SyntaxNode", ...] = ()


@dataclass(frozen=True)
class HandlerClause:
    """try構文の1つのcatch節。

    Attributes:
        span: catch節全体の範囲（診断の位置になる）
        exception_types: 捕捉する例外型の表記（catch-allは空タプル）
        body: 節本体の直下の文。フロントエンドが本体を解決できなかった場合はNone
    """
    span: SourceSpan
    exception_types: Tuple[str, ...] = ()
    body: Optional[Tuple[Statement, ...]] = ()

    @property
    def is_catch_all(self) -> bool:
        """型指定のない（すべてを捕捉する）節かどうか。"""
        return not self.exception_types


@dataclass(frozen=True)
class TryConstruct:
    """try構文。ハンドラ節はソース順に並ぶ。"""
    span: SourceSpan
    body: Tuple[Statement, ...] = ()
    handlers: Tuple[HandlerClause, ...] = ()
    else_body: Tuple[Statement, ...] = ()
    finally_body: Tuple[Statement, ...] = ()


SyntaxNode = Union[Statement, Expression, TryConstruct, HandlerClause]


@dataclass(frozen=True)
class SyntaxTree:
    """1つのソース単位の構文木。"""
    file_path: str
    language: str
    body: Tuple[Statement, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "file_path", os.path.normpath(self.file_path))


def iter_child_nodes(node) -> Iterator[SyntaxNode]:
    """ノードの直接の子をソース順に返す。

    Args:
        node: SyntaxTreeまたはSyntaxNode

    Returns:
        子ノードのイテレータ
    """
    if isinstance(node, SyntaxTree):
        yield from node.body
    elif isinstance(node, TryConstruct):
        yield from node.body
        yield from node.handlers
        yield from node.else_body
        yield from node.finally_body
    elif isinstance(node, HandlerClause):
        if node.body is not None:
            yield from node.body
    elif isinstance(node, Statement):
        if node.expression is not None:
            yield node.expression
        yield from node.children
    elif isinstance(node, Expression):
        yield from node.children
