"""例外隠蔽検出ツールの例外定義。"""


class ExceptionHidingError(Exception):
    """本パッケージが送出する例外の基底クラス。"""
    pass


class InconsistentNodeError(ExceptionHidingError):
    """構文ノードの型タグと内容が矛盾している場合のエラー。

    フロントエンドの不具合を示すため、既定の判定に置き換えずに
    呼び出し元へそのまま伝播させる。
    """
    pass


class FrontendError(ExceptionHidingError):
    """ソースコードを構文木に変換できなかった場合のエラー。"""

    def __init__(self, message: str, file_path: str = ""):
        super().__init__(message)
        self.file_path = file_path


class ConfigError(ExceptionHidingError):
    """設定ファイルの読み込み・検証エラー。"""
    pass
