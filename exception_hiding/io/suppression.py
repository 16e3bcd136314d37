"""行単位の抑制コメントに従って診断を除外するシンク。

エンジンは常にすべての隠蔽ハンドラを報告する。抑制はこの下流側で行う。
マーカー文字列は固定で、設定はできない。
"""

from typing import Dict, List
import logging
import re

from ..models.diagnostic import Diagnostic

logger = logging.getLogger(__name__)

IGNORE_MARKER = "ignore: "
IGNORE_FOR_FILE_MARKER = "ignore_for_file: "


def _mentions(line: str, marker: str, rule_id: str) -> bool:
    index = line.find(marker)
    if index < 0:
        return False
    names = re.split(r"[,\s]+", line[index + len(marker):].strip())
    return rule_id in names


class SuppressionFilter:
    """抑制マーカーのある診断を取り除いて内側のシンクへ渡す。

    次のいずれかに当てはまる診断を除外する。
    - ハンドラ節の開始行、またはその直前の行に `ignore: <rule_id>` がある
    - ファイル内のいずれかの行に `ignore_for_file: <rule_id>` がある
    """

    def __init__(self, sink):
        """抑制フィルタを初期化する。

        Args:
            sink: 除外されなかった診断を受け取るシンク
        """
        self.sink = sink
        self.suppressed = 0
        self._lines: Dict[str, List[str]] = {}

    def accept(self, diagnostic: Diagnostic) -> None:
        if self._is_suppressed(diagnostic):
            self.suppressed += 1
            logger.debug(f"Suppressed {diagnostic.rule_id} at {diagnostic.location}")
            return
        self.sink.accept(diagnostic)

    def _is_suppressed(self, diagnostic: Diagnostic) -> bool:
        lines = self._source_lines(diagnostic.location.file_path)
        rule_id = diagnostic.rule_id

        if any(_mentions(line, IGNORE_FOR_FILE_MARKER, rule_id) for line in lines):
            return True

        line_index = diagnostic.location.start_line - 1
        for index in (line_index - 1, line_index):
            if 0 <= index < len(lines) and _mentions(lines[index], IGNORE_MARKER, rule_id):
                return True
        return False

    def _source_lines(self, file_path: str) -> List[str]:
        if file_path not in self._lines:
            with open(file_path, "r", encoding="utf-8", errors="replace") as f:
                self._lines[file_path] = f.read().splitlines()
        return self._lines[file_path]
