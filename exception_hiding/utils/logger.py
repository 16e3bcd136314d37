"""ロギング設定モジュール。"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

PACKAGE_LOGGER = "exception_hiding"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: str) -> Optional[int]:
    """ログレベル名を数値に変換する。未知の名前ならNone。"""
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else None


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """パッケージロガー（exception_hiding）のハンドラーを設定する。

    診断結果は標準出力に書くため、コンソールログは標準エラーへ出す。
    ルートロガーは変更しない。再度呼び出すと前回のハンドラーを置き換える。

    Args:
        level: ログレベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        log_file: ログファイルへのパス（省略可）
        format_string: カスタムフォーマット文字列（省略可）

    Returns:
        パッケージロガー
    """
    log_level = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level if log_level is not None else logging.INFO)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if log_level is None:
        package_logger.warning(f"Unknown log level {level!r}, using INFO")

    return package_logger


class ProgressLogger:
    """ファイル解析の進捗ログ出力用のヘルパークラス。"""

    def __init__(
        self,
        total: int,
        logger: Optional[logging.Logger] = None,
        log_interval: int = 50
    ):
        """進捗ロガーを初期化する。

        Args:
            total: ファイルの総数
            logger: 使用するロガー
            log_interval: 進捗更新の間隔
        """
        self.total = total
        self.current = 0
        self.logger = logger or logging.getLogger(__name__)
        self.log_interval = log_interval

    def update(self, file_path: Optional[str] = None) -> None:
        """進捗を1件進める。

        Args:
            file_path: 解析を終えたファイル（省略可）
        """
        self.current += 1

        if file_path:
            self.logger.debug(f"Analyzed {file_path}")

        if self.current % self.log_interval == 0 or self.current == self.total:
            progress = self.current / self.total * 100 if self.total else 100.0
            self.logger.info(f"Progress: {self.current}/{self.total} files ({progress:.1f}%)")
