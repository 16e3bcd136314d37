"""診断の出力と外部ファイル入力のモジュール。"""

from .sinks import ReportSink, TextSink, JsonSink
from .excel_writer import ExcelReportSink
from .suppression import SuppressionFilter
from .compile_db import CompileDatabase, find_compile_commands, load_compile_commands

__all__ = [
    "ReportSink",
    "TextSink",
    "JsonSink",
    "ExcelReportSink",
    "SuppressionFilter",
    "CompileDatabase",
    "find_compile_commands",
    "load_compile_commands",
]
