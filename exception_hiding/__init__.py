"""例外を握りつぶすcatch節（例外隠蔽）を検出する静的解析ルール。"""

__version__ = "0.1.0"
