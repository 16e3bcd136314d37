"""診断情報の出力先（テキスト、JSON）。"""

from typing import List, TextIO
import json
import logging

from ..models.diagnostic import Diagnostic

logger = logging.getLogger(__name__)


class ReportSink:
    """CLIが使う出力シンクの基底クラス。closeで出力を確定する。"""

    def accept(self, diagnostic: Diagnostic) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """出力を確定する。"""
        pass


class TextSink(ReportSink):
    """1件ごとに `path:line:col: rule_id: message` 形式で書き出す。"""

    def __init__(self, stream: TextIO, show_correction: bool = True):
        """テキストシンクを初期化する。

        Args:
            stream: 出力先ストリーム
            show_correction: 修正案を次の行に出力するかどうか
        """
        self.stream = stream
        self.show_correction = show_correction

    def accept(self, diagnostic: Diagnostic) -> None:
        self.stream.write(f"{diagnostic}\n")
        if self.show_correction:
            self.stream.write(f"    {diagnostic.correction_message}\n")

    def close(self) -> None:
        self.stream.flush()


class JsonSink(ReportSink):
    """診断情報を蓄積し、closeでJSON配列として書き出す。"""

    def __init__(self, stream: TextIO, indent: int = 2):
        self.stream = stream
        self.indent = indent
        self._items: List[dict] = []

    def accept(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic.to_dict())

    def close(self) -> None:
        json.dump(self._items, self.stream, indent=self.indent, ensure_ascii=False)
        self.stream.write("\n")
        self.stream.flush()
        logger.debug(f"Wrote {len(self._items)} diagnostics as JSON")
