"""隠蔽判定を診断情報に変換する。"""

from typing import Dict

from ..models.diagnostic import Diagnostic, LintCode
from ..models.syntax import HandlerClause

EXCEPTION_HIDING = LintCode(
    name="exception_hiding",
    problem_message=(
        "Exception hiding detected: Caught exception is not rethrown. "
        "Let exceptions bubble up to reveal problems."
    ),
    correction_message=(
        "Remove the try/catch or add rethrow/throw to the handler. "
        "Only catch exceptions when you can meaningfully fix the problem."
    ),
)

# 判定は同じで、ログ出力だけして握りつぶすケースを強調する名前とメッセージ
EXCEPTION_SWALLOWING = LintCode(
    name="exception_swallowing",
    problem_message=(
        "Exception swallowing detected: Caught exception is logged but not rethrown. "
        "This violates Exception Transparency - let exceptions bubble up to reveal problems."
    ),
    correction_message=(
        "Remove the try-catch block or rethrow the exception after logging. "
        "Only catch exceptions when you can meaningfully fix the problem."
    ),
)

LINT_CODES: Dict[str, LintCode] = {
    code.name: code for code in (EXCEPTION_HIDING, EXCEPTION_SWALLOWING)
}


def report(clause: HandlerClause, code: LintCode = EXCEPTION_HIDING) -> Diagnostic:
    """ハンドラ節の範囲を位置とする診断情報を生成する。

    空のハンドラと伝播しないハンドラでメッセージは区別しない。

    Args:
        clause: 隠蔽と判定されたハンドラ節
        code: ルールコード

    Returns:
        Diagnostic
    """
    return Diagnostic(
        rule_id=code.name,
        message=code.problem_message,
        correction_message=code.correction_message,
        location=clause.span,
    )
