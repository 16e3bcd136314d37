"""例外隠蔽検出ツールのメインエントリーポイント。"""

import argparse
import io
import sys
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, TextIO, Tuple
from dataclasses import dataclass
import logging

from .config import Config, OUTPUT_FORMATS
from .errors import ConfigError, FrontendError
from .analyzer.base import Frontend
from .analyzer.clang_analyzer import ClangAnalyzer, ClangParseError
from .analyzer.cpp_frontend import CppFrontend
from .analyzer.python_frontend import PythonFrontend
from .engine.reporter import LINT_CODES
from .engine.rule import DiagnosticSink, check
from .io.sinks import ReportSink, TextSink, JsonSink
from .io.excel_writer import ExcelReportSink
from .io.suppression import SuppressionFilter
from .models.diagnostic import Diagnostic
from .utils.logger import setup_logging, ProgressLogger

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "exception_hiding.yaml"

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


@dataclass
class ProcessingStats:
    """処理統計情報。"""
    files: int = 0
    diagnostics: int = 0
    suppressed: int = 0
    errors: int = 0
    skipped: int = 0


class ExceptionHidingLinter:
    """ファイルを解析して診断をシンクへ出力するメインクラス。"""

    def __init__(self, config: Config):
        """リンターを初期化する。

        C++フロントエンドはlibclangの読み込みを伴うため、
        C++ファイルを解析するときに初めて作成する。

        Args:
            config: アプリケーション設定
        """
        self.config = config
        self.stats = ProcessingStats()
        self.frontends: List[Frontend] = []
        self.codes = [LINT_CODES[name] for name in config.rules]

        if "python" in config.languages:
            self.frontends.append(PythonFrontend())

    def _extensions(self) -> Tuple[str, ...]:
        extensions: Tuple[str, ...] = ()
        if "python" in self.config.languages:
            extensions += PythonFrontend.file_extensions
        if "cpp" in self.config.languages:
            extensions += CppFrontend.file_extensions
        return extensions

    def _init_cpp_frontend(self) -> None:
        """C++フロントエンドを初期化する。

        Raises:
            ConfigError: libclangを読み込めない場合
        """
        try:
            analyzer = ClangAnalyzer(
                include_paths=self.config.include_paths,
                additional_args=self.config.compiler_args,
                library_path=self.config.libclang_path
            )
        except ClangParseError as e:
            raise ConfigError(
                f"{e} Set libclang_path or remove 'cpp' from languages."
            ) from e

        self.frontends.append(CppFrontend(analyzer))

    def _frontend_for(self, file_path: str) -> Optional[Frontend]:
        for frontend in self.frontends:
            if frontend.handles(file_path):
                return frontend
        return None

    def process(self, paths: Optional[List[str]], sink: DiagnosticSink) -> ProcessingStats:
        """ファイルを解析し、診断をシンクへ出力する。

        ファイルはjobs数のスレッドで並行に解析するが、
        シンクへの出力は常にファイルパス順に行う。

        Args:
            paths: 解析するファイルまたはディレクトリ（Noneの場合は設定のsource_directories）
            sink: 診断の出力先

        Returns:
            処理統計
        """
        self.stats = ProcessingStats()
        files = self.config.get_source_files(paths, self._extensions())

        needs_cpp = "cpp" in self.config.languages and any(
            f.lower().endswith(CppFrontend.file_extensions) for f in files
        )
        if needs_cpp and not any(isinstance(f, CppFrontend) for f in self.frontends):
            self._init_cpp_frontend()

        targets = []
        for file_path in files:
            if self._frontend_for(file_path) is None:
                logger.warning(f"No frontend for {file_path}, skipped")
                self.stats.skipped += 1
                continue
            targets.append(file_path)

        logger.info(f"Analyzing {len(targets)} files")
        progress = ProgressLogger(len(targets), logger)

        suppression = SuppressionFilter(sink) if self.config.honor_suppressions else None
        destination = suppression or sink
        reported = 0

        with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
            for file_path, diagnostics in executor.map(self._analyze_file, targets):
                progress.update(file_path)
                self.stats.files += 1
                if diagnostics is None:
                    self.stats.errors += 1
                    continue
                for diagnostic in diagnostics:
                    destination.accept(diagnostic)
                reported += len(diagnostics)

        if suppression is not None:
            self.stats.suppressed = suppression.suppressed
        self.stats.diagnostics = reported - self.stats.suppressed

        self._log_statistics()
        return self.stats

    def _analyze_file(self, file_path: str) -> Tuple[str, Optional[List[Diagnostic]]]:
        """単一のファイルを解析する。

        Args:
            file_path: 解析するファイル

        Returns:
            (ファイルパス, 診断のリスト)。パースに失敗した場合は診断がNone
        """
        frontend = self._frontend_for(file_path)
        try:
            tree = frontend.parse_file(file_path)
        except FrontendError as e:
            logger.error(f"Skipping {file_path}: {e}")
            return file_path, None

        diagnostics = [
            diagnostic
            for code in self.codes
            for diagnostic in check(tree, code)
        ]
        logger.debug(f"{file_path}: {len(diagnostics)} hiding handlers")
        return file_path, diagnostics

    def _log_statistics(self) -> None:
        """処理統計をログ出力する。"""
        logger.info("=" * 50)
        logger.info("Processing Statistics:")
        logger.info(f"  Files analyzed: {self.stats.files}")
        logger.info(f"  Diagnostics: {self.stats.diagnostics}")
        logger.info(f"  Suppressed: {self.stats.suppressed}")
        logger.info(f"  Parse errors: {self.stats.errors}")
        logger.info(f"  Skipped: {self.stats.skipped}")
        logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exception-hiding",
        description="例外を握りつぶすcatch節（例外隠蔽）を検出する"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="解析するファイルまたはディレクトリ（省略時は設定のsource_directories）"
    )
    parser.add_argument(
        "-c", "--config",
        help=f"設定ファイルパス（省略時は ./{DEFAULT_CONFIG_FILE} があれば使用）"
    )
    parser.add_argument(
        "-f", "--format",
        choices=OUTPUT_FORMATS,
        help="出力形式"
    )
    parser.add_argument(
        "-o", "--output",
        help="出力ファイル（excel形式では必須）"
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        help="並行して解析するファイル数"
    )
    parser.add_argument(
        "--no-suppress",
        action="store_true",
        help="抑制コメントを無視してすべての診断を出力する"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="詳細ログを有効にする"
    )
    parser.add_argument(
        "--init-config",
        metavar="PROJECT_DIR",
        help="compile_commands.jsonから設定ファイルを自動生成"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """メインエントリーポイント。

    Returns:
        終了コード（0: 検出なし, 1: 検出あり, 2: エラー）
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        output_config = args.config or DEFAULT_CONFIG_FILE
        return _init_config_from_compile_commands(args.init_config, output_config, args.verbose)

    try:
        config = _load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(level=config.log_level, log_file=config.log_file)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return EXIT_ERROR

    if not args.paths and not config.source_directories:
        parser.error("解析対象のパスを指定するか、設定にsource_directoriesを記述してください")

    try:
        with _open_sink(config) as sink:
            linter = ExceptionHidingLinter(config)
            stats = linter.process(args.paths or None, sink)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_ERROR
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return EXIT_ERROR

    if stats.errors:
        return EXIT_ERROR
    return EXIT_FINDINGS if stats.diagnostics else EXIT_CLEAN


def _load_config(args: argparse.Namespace) -> Config:
    """設定ファイルとコマンドライン引数から設定を作成する。"""
    if args.config:
        if not Path(args.config).exists():
            raise ConfigError(f"設定ファイルが見つかりません: {args.config}")
        config = Config.from_yaml(args.config)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        config = Config.from_yaml(DEFAULT_CONFIG_FILE)
    else:
        config = Config.from_dict({})

    # コマンドライン引数で上書き
    if args.verbose:
        config.log_level = "DEBUG"
    if args.format:
        config.output_format = args.format
    if args.output:
        config.report_file = args.output
    if args.jobs is not None:
        config.jobs = args.jobs
    if args.no_suppress:
        config.honor_suppressions = False

    return config


@contextmanager
def _open_sink(config: Config) -> Iterator[ReportSink]:
    """設定に応じた出力シンクを開き、正常終了時に出力を確定する。"""
    if config.output_format == "excel":
        sink = ExcelReportSink(config.report_file)
        yield sink
        sink.close()
        return

    if not config.report_file:
        sink = _stream_sink(config, sys.stdout)
        yield sink
        sink.close()
        return

    # 解析が最後まで終わるまで既存のレポートファイルは上書きしない
    buffer = io.StringIO()
    sink = _stream_sink(config, buffer)
    yield sink
    sink.close()

    report_path = Path(config.report_file)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(buffer.getvalue(), encoding="utf-8")
    logger.info(f"Results written to {report_path}")


def _stream_sink(config: Config, stream: TextIO) -> ReportSink:
    if config.output_format == "json":
        return JsonSink(stream)
    return TextSink(stream)


def _init_config_from_compile_commands(
    project_dir: str,
    output_config: str,
    verbose: bool
) -> int:
    """compile_commands.jsonから設定ファイルを生成する。

    Args:
        project_dir: プロジェクトのルートディレクトリ
        output_config: 出力設定ファイルパス
        verbose: 詳細ログを有効にするかどうか

    Returns:
        終了コード
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    project_path = Path(project_dir)
    if not project_path.is_dir():
        print(f"Error: プロジェクトディレクトリが見つかりません: {project_dir}", file=sys.stderr)
        return EXIT_ERROR

    try:
        config = Config.from_compile_commands(str(project_path), output_path=output_config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(f"設定ファイルを生成しました: {output_config}")
    print(f"  インクルードパス: {len(config.include_paths)}")
    print(f"  ソースディレクトリ: {len(config.source_directories)}")
    print(f"  コンパイラ引数: {len(config.compiler_args)}")
    return EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
