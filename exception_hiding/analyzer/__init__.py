"""ソースコードを中立な構文木に変換するフロントエンド。"""

from .base import Frontend
from .python_frontend import PythonFrontend
from .clang_analyzer import ClangAnalyzer, ClangParseError
from .cpp_frontend import CppFrontend

__all__ = [
    "Frontend",
    "PythonFrontend",
    "ClangAnalyzer",
    "ClangParseError",
    "CppFrontend",
]
