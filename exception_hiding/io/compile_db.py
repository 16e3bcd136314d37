"""compile_commands.json reader for configuring the C++ frontend."""

from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path
import json
import logging
import shlex

from ..errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class CompileDatabase:
    """compile_commands.jsonから抽出した設定。

    Attributes:
        include_paths: インクルードパスのリスト
        source_directories: ソースディレクトリのリスト
        compiler_args: コンパイラ引数のリスト（-D定義、-std=など）
        cxx_standard: C++標準バージョン（c++14, c++17など）
    """
    include_paths: List[str] = field(default_factory=list)
    source_directories: List[str] = field(default_factory=list)
    compiler_args: List[str] = field(default_factory=list)
    cxx_standard: Optional[str] = None


def find_compile_commands(project_root: str) -> Optional[Path]:
    """compile_commands.json を一般的なビルドディレクトリから検索する。

    Args:
        project_root: プロジェクトのルートディレクトリ

    Returns:
        compile_commands.json のパス、見つからない場合は None
    """
    root = Path(project_root)
    candidates = [
        root / "compile_commands.json",
        root / "build" / "compile_commands.json",
        root / "cmake-build-debug" / "compile_commands.json",
        root / "cmake-build-release" / "compile_commands.json",
        root / "out" / "build" / "compile_commands.json",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def load_compile_commands(path: str) -> CompileDatabase:
    """compile_commands.json をパースする。

    Args:
        path: compile_commands.json のパス

    Returns:
        CompileDatabase

    Raises:
        ConfigError: 読み込みまたはJSONの解析に失敗した場合
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            entries = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read compile_commands.json: {e}") from e

    if not isinstance(entries, list):
        raise ConfigError(f"compile_commands.json must contain a list: {path}")

    include_set = set()
    source_dirs = set()
    definitions = set()
    cxx_standard: Optional[str] = None

    for entry in entries:
        directory = Path(entry.get("directory", "."))
        args = entry.get("arguments") or shlex.split(entry.get("command", ""))

        i = 0
        while i < len(args):
            arg = args[i]
            if arg.startswith("-I"):
                # -I/path と -I /path の両方に対応
                inc_path = arg[2:]
                if not inc_path and i + 1 < len(args):
                    i += 1
                    inc_path = args[i]
                if inc_path:
                    resolved = (directory / inc_path).resolve()
                    if resolved.is_dir():
                        include_set.add(str(resolved))
            elif arg.startswith("-D"):
                definitions.add(arg)
            elif arg.startswith("-std="):
                cxx_standard = arg.split("=", 1)[1]
            i += 1

        source_file = entry.get("file", "")
        if source_file:
            source_path = (directory / source_file).resolve()
            if source_path.exists():
                source_dirs.add(str(source_path.parent))

    database = CompileDatabase(
        include_paths=sorted(include_set),
        source_directories=sorted(source_dirs),
        compiler_args=sorted(definitions),
        cxx_standard=cxx_standard,
    )
    if cxx_standard:
        database.compiler_args.append(f"-std={cxx_standard}")

    logger.info(
        f"Extracted from {path}: "
        f"{len(database.include_paths)} include paths, "
        f"{len(database.source_directories)} source directories, "
        f"{len(database.compiler_args)} compiler args"
    )
    return database
