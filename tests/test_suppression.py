"""抑制コメントのテスト。"""

import textwrap

from exception_hiding.analyzer import PythonFrontend
from exception_hiding.engine import DiagnosticCollector, check
from exception_hiding.io import SuppressionFilter


def _filter(tmp_path, source: str):
    path = tmp_path / "module.py"
    path.write_text(textwrap.dedent(source), encoding="utf-8")

    collector = DiagnosticCollector()
    suppression = SuppressionFilter(collector)
    for diagnostic in check(PythonFrontend().parse_file(str(path))):
        suppression.accept(diagnostic)
    return collector, suppression


class TestSuppressionFilter:
    """SuppressionFilterのテスト。"""

    def test_no_marker(self, tmp_path):
        """マーカーがなければそのまま渡す。"""
        collector, suppression = _filter(tmp_path, """
            try:
                work()
            except Exception:
                pass
        """)
        assert len(collector) == 1
        assert suppression.suppressed == 0

    def test_marker_on_handler_line(self, tmp_path):
        """ハンドラ節の行のマーカー。"""
        collector, suppression = _filter(tmp_path, """
            try:
                work()
            except Exception:  # ignore: exception_hiding
                pass
        """)
        assert len(collector) == 0
        assert suppression.suppressed == 1

    def test_marker_on_preceding_line(self, tmp_path):
        """ハンドラ節の直前の行のマーカー。"""
        collector, _ = _filter(tmp_path, """
            try:
                work()
            # ignore: unused_import, exception_hiding
            except Exception:
                pass
        """)
        assert len(collector) == 0

    def test_marker_for_other_handler_only(self, tmp_path):
        """マーカーは隣接するハンドラ節にだけ効く。"""
        collector, suppression = _filter(tmp_path, """
            try:
                work()
            except ValueError:  # ignore: exception_hiding
                pass
            except KeyError:
                pass
        """)
        assert len(collector) == 1
        assert collector.diagnostics[0].location.start_line == 6
        assert suppression.suppressed == 1

    def test_marker_for_other_rule(self, tmp_path):
        """別のルールIDのマーカーでは除外しない。"""
        collector, _ = _filter(tmp_path, """
            try:
                work()
            except Exception:  # ignore: exception_hiding_strict
                pass
        """)
        assert len(collector) == 1

    def test_ignore_for_file(self, tmp_path):
        """ファイル全体の抑制。"""
        collector, suppression = _filter(tmp_path, """
            # ignore_for_file: exception_hiding
            try:
                a()
            except Exception:
                pass
            try:
                b()
            except Exception:
                pass
        """)
        assert len(collector) == 0
        assert suppression.suppressed == 2
