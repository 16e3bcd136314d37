"""フロントエンド（構文解析器アダプター）の共通インターフェース。"""

from abc import ABC, abstractmethod
from typing import Tuple

from ..errors import FrontendError
from ..models.syntax import SyntaxTree


class Frontend(ABC):
    """ネイティブの構文木を中立な構文モデルに変換するアダプター。"""

    #: 言語名（設定のlanguagesと対応）
    language: str = ""

    #: 対象とするファイル拡張子
    file_extensions: Tuple[str, ...] = ()

    def handles(self, file_path: str) -> bool:
        """このフロントエンドが扱うファイルかどうか。"""
        return file_path.lower().endswith(self.file_extensions)

    def parse_file(self, file_path: str) -> SyntaxTree:
        """ファイルを読み込んで構文木に変換する。

        Args:
            file_path: ソースファイルのパス

        Returns:
            SyntaxTree

        Raises:
            FrontendError: ファイルを読み込めない場合
        """
        try:
            with open(file_path, "r", encoding="utf-8", errors="replace") as f:
                source = f.read()
        except OSError as e:
            raise FrontendError(f"Failed to read {file_path}: {e}", file_path=file_path) from e
        return self.parse_string(source, file_path)

    @abstractmethod
    def parse_string(self, source: str, filename: str) -> SyntaxTree:
        """ソース文字列を構文木に変換する。

        Args:
            source: ソースコード
            filename: 位置情報に使うファイル名

        Returns:
            SyntaxTree
        """
        raise NotImplementedError
