"""ロギング設定のテスト。"""

import logging

import pytest

from exception_hiding.utils import ProgressLogger, resolve_level, setup_logging


@pytest.fixture
def package_logger():
    """テスト後にパッケージロガーを元の状態に戻す。"""
    logger = logging.getLogger("exception_hiding")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:
    """setup_loggingのテスト。"""

    def test_configures_package_logger_only(self, package_logger):
        """パッケージロガーに標準エラーのハンドラーを1つ設定し、ルートロガーは変更しない。"""
        root_handlers = list(logging.getLogger().handlers)

        logger = setup_logging(level="DEBUG")

        assert logger is package_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert logging.getLogger().handlers == root_handlers

    def test_repeated_setup_replaces_handlers(self, package_logger):
        """再設定してもハンドラーは増えない。"""
        setup_logging()
        setup_logging(level="WARNING")

        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING

    def test_log_file(self, package_logger, tmp_path):
        """ログファイルに書き込む。"""
        log_file = tmp_path / "logs" / "run.log"

        setup_logging(level="INFO", log_file=str(log_file), format_string="%(levelname)s %(message)s")
        logging.getLogger("exception_hiding.main").info("解析開始")
        for handler in package_logger.handlers:
            handler.flush()

        assert "INFO 解析開始" in log_file.read_text(encoding="utf-8")

    def test_unknown_level_falls_back_to_info(self, package_logger):
        """未知のレベル名はINFOになる。"""
        setup_logging(level="VERBOSE")
        assert package_logger.level == logging.INFO

    @pytest.mark.parametrize("name, expected", [
        ("debug", logging.DEBUG),
        ("ERROR", logging.ERROR),
        ("verbose", None),
    ])
    def test_resolve_level(self, name, expected):
        """レベル名の変換。"""
        assert resolve_level(name) == expected


class TestProgressLogger:
    """ProgressLoggerのテスト。"""

    def test_interval_and_last(self, caplog):
        """間隔ごとと最後の1件で進捗を出力する。"""
        logger = logging.getLogger("exception_hiding.progress_test")

        with caplog.at_level(logging.INFO, logger="exception_hiding.progress_test"):
            progress = ProgressLogger(5, logger, log_interval=2)
            for i in range(5):
                progress.update(f"file_{i}.py")

        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert messages == [
            "Progress: 2/5 files (40.0%)",
            "Progress: 4/5 files (80.0%)",
            "Progress: 5/5 files (100.0%)",
        ]
