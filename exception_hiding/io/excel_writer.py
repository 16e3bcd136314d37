"""診断結果のExcel出力モジュール。"""

from collections import Counter
from datetime import datetime
from typing import Dict, List
from pathlib import Path
import logging

from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font, Alignment, Border, Side

from ..models.diagnostic import Diagnostic
from .sinks import ReportSink

logger = logging.getLogger(__name__)


class ExcelReportSink(ReportSink):
    """診断結果をExcelファイルに書き込む。

    acceptで受け取った診断を蓄積し、closeで「Diagnostics」シートと
    「Summary」シートを持つワークブックを保存する。
    """

    # 診断シートの列定義（ヘッダー, 列幅）
    COLUMNS: List[tuple] = [
        ("ファイル", 50),
        ("開始行", 8),
        ("開始列", 8),
        ("終了行", 8),
        ("終了列", 8),
        ("ルール", 18),
        ("メッセージ", 60),
        ("修正案", 60),
    ]

    HEADER_COLOR = "4472C4"
    HIGHLIGHT_COLOR = "FFC7CE"  # 赤 - 修正必要

    def __init__(self, output_file: str):
        """Excelシンクを初期化する。

        Args:
            output_file: 出力Excelファイルのパス
        """
        self.output_file = Path(output_file)
        self._diagnostics: List[Diagnostic] = []

    def accept(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def close(self) -> None:
        """ワークブックを作成して保存する。"""
        wb = Workbook()
        ws = wb.active
        ws.title = "Diagnostics"

        self._write_headers(ws)
        for row_num, diagnostic in enumerate(self._diagnostics, 2):
            self._write_diagnostic_row(ws, row_num, diagnostic)

        # ヘッダーを固定
        ws.freeze_panes = "A2"

        self._write_summary(wb.create_sheet("Summary"))

        self.output_file.parent.mkdir(parents=True, exist_ok=True)
        wb.save(self.output_file)
        logger.info(f"Results written to {self.output_file}")

    def _thin_border(self) -> Border:
        return Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin")
        )

    def _write_headers(self, ws) -> None:
        """診断シートのヘッダーを書き込む。

        Args:
            ws: ワークシートオブジェクト
        """
        white_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(
            start_color=self.HEADER_COLOR,
            end_color=self.HEADER_COLOR,
            fill_type="solid"
        )
        header_alignment = Alignment(horizontal="center", vertical="center")
        thin_border = self._thin_border()

        for col, (header, width) in enumerate(self.COLUMNS, 1):
            cell = ws.cell(row=1, column=col)
            cell.value = header
            cell.font = white_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = thin_border
            ws.column_dimensions[cell.column_letter].width = width

    def _write_diagnostic_row(self, ws, row_num: int, diagnostic: Diagnostic) -> None:
        """1件分の診断を書き込む。

        Args:
            ws: ワークシートオブジェクト
            row_num: 書き込む行番号
            diagnostic: 書き込む診断
        """
        location = diagnostic.location
        values = [
            location.file_path,
            location.start_line,
            location.start_column,
            location.end_line,
            location.end_column,
            diagnostic.rule_id,
            diagnostic.message,
            diagnostic.correction_message,
        ]
        thin_border = self._thin_border()

        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col)
            cell.value = value
            cell.border = thin_border
            if isinstance(value, int):
                cell.alignment = Alignment(horizontal="right")
            else:
                cell.alignment = Alignment(wrap_text=True, vertical="top")

        # ルール列を強調
        ws.cell(row=row_num, column=6).fill = PatternFill(
            start_color=self.HIGHLIGHT_COLOR,
            end_color=self.HIGHLIGHT_COLOR,
            fill_type="solid"
        )

    def _write_summary(self, ws) -> None:
        """ファイルごとの件数を含むサマリーシートを書き込む。

        Args:
            ws: ワークシートオブジェクト
        """
        counts: Dict[str, int] = Counter(
            d.location.file_path for d in self._diagnostics
        )
        total = len(self._diagnostics)

        # タイトルとタイムスタンプ
        ws["A1"] = "例外隠蔽検出サマリー"
        ws["A1"].font = Font(bold=True, size=14)
        ws.merge_cells("A1:C1")
        ws["A2"] = f"生成日時: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        ws.merge_cells("A2:C2")

        thin_border = self._thin_border()
        for col, header in enumerate(["ファイル", "件数", "割合"], 1):
            cell = ws.cell(row=4, column=col)
            cell.value = header
            cell.font = Font(bold=True)
            cell.border = thin_border
            cell.alignment = Alignment(horizontal="center")

        row = 5
        for file_path in sorted(counts):
            count = counts[file_path]
            ws.cell(row=row, column=1).value = file_path
            ws.cell(row=row, column=2).value = count
            ws.cell(row=row, column=3).value = f"{count / total * 100:.1f}%"
            for col in range(1, 4):
                ws.cell(row=row, column=col).border = thin_border
            row += 1

        # 合計行
        ws.cell(row=row, column=1).value = "合計"
        ws.cell(row=row, column=2).value = total
        ws.cell(row=row, column=3).value = "100%" if total else "0%"
        for col in range(1, 4):
            cell = ws.cell(row=row, column=col)
            cell.font = Font(bold=True)
            cell.border = thin_border

        ws.column_dimensions["A"].width = 50
        ws.column_dimensions["B"].width = 10
        ws.column_dimensions["C"].width = 10
