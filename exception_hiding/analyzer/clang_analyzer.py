"""libclangを使用したC++ソースコード解析のラッパー。"""

from typing import List, Optional
from pathlib import Path
import os
import logging
import threading

from ..errors import FrontendError

logger = logging.getLogger(__name__)


class ClangParseError(FrontendError):
    """Clangパース時のエラー。"""
    pass


class ClangAnalyzer:
    """libclangを使用したC++解析のメインクラス。

    libclangをラップしてTranslationUnitの生成を担う。
    生成はロックで直列化するため、複数スレッドから同時に呼び出してよい。
    """

    def __init__(
        self,
        include_paths: Optional[List[str]] = None,
        additional_args: Optional[List[str]] = None,
        library_path: Optional[str] = None
    ):
        """Clangアナライザーを初期化する。

        Args:
            include_paths: インクルードディレクトリのリスト
            additional_args: 追加のコンパイラ引数
            library_path: libclangライブラリのパス（任意、未指定時は自動検出）
        """
        self._setup_libclang(library_path)

        import clang.cindex as ci
        self._ci = ci

        self.include_paths = include_paths or []
        self.additional_args = additional_args or []
        self.index = ci.Index.create()
        self._parse_lock = threading.Lock()

        logger.info(f"ClangAnalyzer initialized with {len(self.include_paths)} include paths")

    def _setup_libclang(self, library_path: Optional[str] = None) -> None:
        """libclangライブラリパスを設定する。

        Args:
            library_path: libclangへの明示的なパス（任意）
        """
        try:
            import clang.cindex as ci
        except ImportError as e:
            raise ClangParseError(
                "clang.cindex is not available. Please install libclang with 'pip install libclang'."
            ) from e

        if library_path and not ci.Config.loaded:
            ci.Config.set_library_path(library_path)
            logger.info(f"Using libclang from: {library_path}")
            return

        # pip install libclangでインストールされたライブラリを使用
        try:
            ci.Index.create()
            logger.debug("libclang loaded successfully from pip package")
        except Exception as e:
            # LLVMの一般的なインストール先を試す
            common_paths = [
                "/usr/lib/llvm/lib",
                "/usr/local/opt/llvm/lib",
                r"C:\Program Files\LLVM\bin",
                os.path.expanduser(r"~\AppData\Local\Programs\LLVM\bin"),
            ]

            for path in common_paths:
                if any(Path(path).glob("libclang*")) and not ci.Config.loaded:
                    ci.Config.set_library_path(path)
                    logger.info(f"Using libclang from: {path}")
                    return

            raise ClangParseError(
                f"Failed to load libclang: {e}. "
                "Please install libclang with 'pip install libclang' or install LLVM."
            ) from e

    def _build_compiler_args(self) -> List[str]:
        """パース用のコンパイラ引数を構築する。

        Returns:
            コンパイラ引数のリスト
        """
        args = [
            "-x", "c++",
            "-std=c++17",
            "-fcxx-exceptions",
            "-Wno-pragma-once-outside-header",  # pragma警告を抑制
        ]

        # インクルードパスを追加
        for inc_path in self.include_paths:
            args.extend(["-I", inc_path])

        # 追加の引数を追加（-std=の指定は後勝ち）
        args.extend(self.additional_args)

        return args

    def parse_string(self, source_code: str, filename: str = "temp.cpp"):
        """文字列からC++ソースコードをパースする。

        Args:
            source_code: C++ソースコード
            filename: ソースの仮想ファイル名

        Returns:
            clang.cindex.TranslationUnit

        Raises:
            ClangParseError: パースに失敗した場合
        """
        args = self._build_compiler_args()

        try:
            with self._parse_lock:
                tu = self.index.parse(
                    filename,
                    args=args,
                    unsaved_files=[(filename, source_code)],
                    options=self._ci.TranslationUnit.PARSE_NONE
                )
        except self._ci.TranslationUnitLoadError as e:
            raise ClangParseError(f"Failed to parse {filename}: {e}", file_path=filename) from e

        if tu is None:
            raise ClangParseError(f"Failed to parse {filename}: returned None", file_path=filename)

        # 診断情報をログ出力（エラーがあってもASTは部分的に使える）
        for diag in tu.diagnostics:
            if diag.severity >= self._ci.Diagnostic.Error:
                logger.warning(f"Parse error in {filename}: {diag.spelling}")

        return tu

    @property
    def ci(self):
        """clang.cindexモジュールを取得する。"""
        return self._ci
