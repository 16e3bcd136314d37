"""ハンドラ節の伝播判定。

ハンドラ本体の直下の文だけを走査し、無条件の再送出（rethrow）または
送出（throw）があれば伝播、なければ隠蔽と判定する。
条件分岐やループの内側は見ないため、条件付きの伝播は隠蔽として扱う。
"""

from ..errors import InconsistentNodeError
from ..models.diagnostic import Verdict
from ..models.syntax import (
    ExpressionKind,
    HandlerClause,
    Statement,
    StatementKind,
)

_PROPAGATING_EXPRESSIONS = frozenset({ExpressionKind.RETHROW, ExpressionKind.THROW})


def classify(handler: HandlerClause) -> Verdict:
    """ハンドラ節を伝播／隠蔽に分類する。

    Args:
        handler: 分類するハンドラ節（bodyはNoneでないこと）

    Returns:
        判定結果

    Raises:
        InconsistentNodeError: 本体が解決されていない、または文の型タグが不正な場合
    """
    if handler.body is None:
        raise InconsistentNodeError(f"Handler at {handler.span} has no body")

    # 空のハンドラは伝播し得ない
    if not handler.body:
        return Verdict.HIDING

    for statement in handler.body:
        if _propagates(statement):
            return Verdict.PROPAGATING

    return Verdict.HIDING


def _propagates(statement: Statement) -> bool:
    """直下の文が無条件に例外を送出するかどうか。"""
    kind = statement.kind

    if kind in (StatementKind.RETHROW, StatementKind.THROW):
        return True

    if kind is StatementKind.EXPRESSION:
        expression = statement.expression
        if expression is None:
            raise InconsistentNodeError(
                f"Expression statement at {statement.span} has no expression"
            )
        if not isinstance(expression.kind, ExpressionKind):
            raise InconsistentNodeError(
                f"Unknown expression kind at {expression.span}: {expression.kind!r}"
            )
        return expression.kind in _PROPAGATING_EXPRESSIONS

    if kind is StatementKind.OTHER:
        return False

    raise InconsistentNodeError(f"Unknown statement kind at {statement.span}: {kind!r}")
