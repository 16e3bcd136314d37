"""ユーティリティモジュール。"""

from .logger import setup_logging, resolve_level, ProgressLogger

__all__ = ["setup_logging", "resolve_level", "ProgressLogger"]
