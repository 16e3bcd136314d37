"""構文木からtry構文を列挙し、隠蔽しているハンドラ節を返す。"""

from dataclasses import dataclass
from typing import Iterator
import logging

from ..models.diagnostic import Verdict
from ..models.syntax import (
    HandlerClause,
    SyntaxTree,
    TryConstruct,
    iter_child_nodes,
)
from .classifier import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HidingResult:
    """隠蔽と判定されたハンドラ節と、それを含むtry構文。"""
    try_construct: TryConstruct
    clause: HandlerClause
    verdict: Verdict


def iter_try_constructs(tree: SyntaxTree) -> Iterator[TryConstruct]:
    """構文木中のすべてのtry構文をソース順（前順）に返す。

    入れ子の深さに制限はない。スタックを使った反復走査のため、
    深い入れ子でも再帰上限に達しない。

    Args:
        tree: 走査する構文木

    Returns:
        TryConstructのイテレータ
    """
    stack = list(reversed(tuple(iter_child_nodes(tree))))
    while stack:
        node = stack.pop()
        if isinstance(node, TryConstruct):
            yield node
        stack.extend(reversed(tuple(iter_child_nodes(node))))


def walk(tree: SyntaxTree) -> Iterator[HidingResult]:
    """隠蔽しているハンドラ節を宣言順に返す。

    ハンドラ節のないtry構文や、本体が解決されていないハンドラ節は
    読み飛ばして走査を続ける。

    Args:
        tree: 走査する構文木

    Returns:
        HidingResultのイテレータ（遅延評価）
    """
    for try_construct in iter_try_constructs(tree):
        if not try_construct.handlers:
            logger.debug(f"Skipping try construct without handlers at {try_construct.span}")
            continue

        for clause in try_construct.handlers:
            if clause.body is None:
                logger.debug(f"Skipping handler without body at {clause.span}")
                continue

            verdict = classify(clause)
            if verdict is Verdict.HIDING:
                yield HidingResult(try_construct, clause, verdict)
