"""設定管理モジュール。"""

from dataclasses import dataclass, field, fields
from typing import List, Optional, Any, Dict
from pathlib import Path
import os
import logging

import yaml

from .errors import ConfigError
from .engine.reporter import LINT_CODES
from .utils.logger import resolve_level

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("python", "cpp")
OUTPUT_FORMATS = ("text", "json", "excel")


@dataclass
class Config:
    """アプリケーション設定。"""

    # 解析対象
    source_directories: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=lambda: list(SUPPORTED_LANGUAGES))
    exclude_dirs: List[str] = field(
        default_factory=lambda: [".git", "__pycache__", "venv", ".venv", "build"]
    )
    rules: List[str] = field(default_factory=lambda: ["exception_hiding"])

    # C++パース用設定
    include_paths: List[str] = field(default_factory=list)
    compiler_args: List[str] = field(default_factory=list)
    libclang_path: Optional[str] = None

    # 出力設定
    output_format: str = "text"
    report_file: Optional[str] = None
    honor_suppressions: bool = True

    # 処理設定
    jobs: int = 1

    # ロギング設定
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, file_path: str) -> "Config":
        """YAMLファイルから設定を読み込む。

        Args:
            file_path: YAML設定ファイルのパス

        Returns:
            Configインスタンス

        Raises:
            ConfigError: 読み込みまたはYAMLの解析に失敗した場合
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping: {file_path}")

        config = cls.from_dict(data)
        logger.info(f"Configuration loaded from {file_path}")
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """辞書から設定を作成する。環境変数が優先される。

        Args:
            data: 設定辞書

        Returns:
            Configインスタンス
        """
        config = cls()
        known = {f.name for f in fields(cls)}

        for key, value in data.items():
            if key in known:
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown configuration key ignored: {key}")

        config.log_level = os.getenv("EXCEPTION_HIDING_LOG_LEVEL", config.log_level)
        config.libclang_path = os.getenv("LIBCLANG_PATH", config.libclang_path)
        return config

    def validate(self) -> List[str]:
        """設定を検証する。

        Returns:
            検証エラーのリスト（有効な場合は空）
        """
        errors = []

        for language in self.languages:
            if language not in SUPPORTED_LANGUAGES:
                errors.append(f"未対応の言語です: {language}")

        if not self.rules:
            errors.append("rulesには1つ以上のルールを指定してください")
        for rule in self.rules:
            if rule not in LINT_CODES:
                errors.append(f"未知のルールです: {rule}")

        if self.output_format not in OUTPUT_FORMATS:
            errors.append(f"未対応の出力形式です: {self.output_format}")
        elif self.output_format == "excel" and not self.report_file:
            errors.append("excel出力にはreport_fileが必要です")

        if resolve_level(self.log_level) is None:
            errors.append(f"未知のログレベルです: {self.log_level}")

        if not isinstance(self.jobs, int) or self.jobs < 1:
            errors.append(f"jobsは1以上の整数である必要があります: {self.jobs}")

        for path in self.source_directories:
            if not Path(path).is_dir():
                errors.append(f"ソースディレクトリが存在しません: {path}")

        for path in self.include_paths:
            if not Path(path).exists():
                logger.warning(f"Include path does not exist: {path}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """設定を辞書に変換する。

        Returns:
            辞書形式の設定
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get_source_files(
        self,
        paths: Optional[List[str]] = None,
        extensions: Optional[tuple] = None
    ) -> List[str]:
        """解析対象のソースファイルを取得する。

        Args:
            paths: ファイルまたはディレクトリのリスト（省略時はsource_directories）
            extensions: 対象とする拡張子（省略時はすべてのファイル）

        Returns:
            重複のないソースファイルパスのリスト（ソート済み）
        """
        source_files = set()

        for entry in paths or self.source_directories:
            path = Path(entry)
            if path.is_file():
                source_files.add(str(path))
                continue
            if not path.is_dir():
                logger.warning(f"Path does not exist: {entry}")
                continue

            for candidate in path.rglob("*"):
                if not candidate.is_file():
                    continue
                relative_parts = candidate.relative_to(path).parts[:-1]
                if any(part in self.exclude_dirs for part in relative_parts):
                    continue
                if extensions and not candidate.name.lower().endswith(extensions):
                    continue
                source_files.add(str(candidate))

        logger.debug(f"Found {len(source_files)} source files")
        return sorted(source_files)

    @classmethod
    def from_compile_commands(
        cls,
        project_root: str,
        output_path: Optional[str] = None
    ) -> "Config":
        """compile_commands.jsonから設定を自動生成する。

        Args:
            project_root: プロジェクトのルートディレクトリ
            output_path: 生成した設定を保存するパス（省略時は保存しない）

        Returns:
            Config: 自動生成された設定

        Raises:
            ConfigError: compile_commands.jsonが見つからない場合
        """
        from .io.compile_db import find_compile_commands, load_compile_commands

        compile_commands = find_compile_commands(project_root)
        if compile_commands is None:
            raise ConfigError(f"compile_commands.json not found under {project_root}")

        database = load_compile_commands(str(compile_commands))

        config = cls()
        config.languages = ["cpp"]
        config.include_paths = database.include_paths
        config.source_directories = database.source_directories
        config.compiler_args = database.compiler_args

        if output_path:
            config.save_yaml(output_path)

        return config

    def save_yaml(self, file_path: str) -> None:
        """設定をYAMLファイルに保存する。

        Args:
            file_path: 保存先パス
        """
        output_path = Path(file_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.to_dict()
        if not self.log_file:
            data.pop("log_file")

        with open(file_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False
            )

        logger.info(f"Configuration saved to {file_path}")
