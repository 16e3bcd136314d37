"""判定結果と診断情報のモデル。"""

from dataclasses import dataclass
from enum import Enum

from .syntax import SourceSpan


class Verdict(Enum):
    """1つのハンドラ節に対する分類結果。"""
    PROPAGATING = "propagating"  # 例外を伝播させる
    HIDING = "hiding"            # 例外を握りつぶす


@dataclass(frozen=True)
class LintCode:
    """ルールの識別子と固定メッセージ。"""
    name: str
    problem_message: str
    correction_message: str


@dataclass(frozen=True)
class Diagnostic:
    """例外隠蔽の診断情報。生成後は変更しない。"""
    rule_id: str
    message: str
    correction_message: str
    location: SourceSpan

    def to_dict(self) -> dict:
        """JSON出力用の辞書に変換する。

        Returns:
            診断情報の辞書
        """
        return {
            "rule_id": self.rule_id,
            "message": self.message,
            "correction_message": self.correction_message,
            "file": self.location.file_path,
            "start_line": self.location.start_line,
            "start_column": self.location.start_column,
            "end_line": self.location.end_line,
            "end_column": self.location.end_column,
        }

    def __str__(self) -> str:
        return f"{self.location}: {self.rule_id}: {self.message}"
