"""C++フロントエンドのテスト（libclangが必要）。"""

import textwrap

import pytest

pytest.importorskip("clang.cindex")

from exception_hiding.analyzer import ClangAnalyzer, ClangParseError, CppFrontend
from exception_hiding.engine import check, iter_try_constructs
from exception_hiding.models import ExpressionKind, StatementKind

PRELUDE = """\
struct Error {};
struct Wrapped { explicit Wrapped(const Error&) {} };
void work();
void cleanup();
void report_error(const Error&);
bool flag();
"""


@pytest.fixture(scope="module")
def frontend():
    try:
        analyzer = ClangAnalyzer()
    except ClangParseError as e:
        pytest.skip(f"libclang is not available: {e}")
    return CppFrontend(analyzer)


def _parse(frontend, body: str):
    source = PRELUDE + textwrap.dedent(body)
    return frontend.parse_string(source, "sample.cpp")


def _line(body: str, marker: str) -> int:
    """PRELUDEを含めたmarkerの行番号。"""
    lines = (PRELUDE + textwrap.dedent(body)).splitlines()
    return next(i for i, line in enumerate(lines, 1) if marker in line)


class TestConversion:
    """カーソルから中立モデルへの変換のテスト。"""

    def test_catch_clause(self, frontend):
        """catch節の型と本体。"""
        body = """
            void f() {
                try {
                    work();
                } catch (const Error& e) {
                    report_error(e);
                    throw;
                }
            }
        """
        tree = _parse(frontend, body)

        constructs = list(iter_try_constructs(tree))
        assert len(constructs) == 1
        handler = constructs[0].handlers[0]
        assert "Error" in handler.exception_types[0]
        assert handler.span.start_line == _line(body, "catch (const Error& e)")

        kinds = [s.kind for s in handler.body]
        assert kinds == [StatementKind.EXPRESSION, StatementKind.EXPRESSION]
        assert handler.body[0].expression.kind is ExpressionKind.OTHER
        assert handler.body[1].expression.kind is ExpressionKind.RETHROW

    def test_catch_all(self, frontend):
        """catch (...) は型なしの節になる。"""
        tree = _parse(frontend, """
            void f() {
                try { work(); } catch (...) { cleanup(); }
            }
        """)
        handler = next(iter_try_constructs(tree)).handlers[0]
        assert handler.is_catch_all

    def test_throw_with_operand(self, frontend):
        """オペランドのあるthrowはTHROWになる。"""
        tree = _parse(frontend, """
            void f() {
                try {
                    work();
                } catch (const Error& e) {
                    throw Wrapped(e);
                }
            }
        """)
        handler = next(iter_try_constructs(tree)).handlers[0]
        assert handler.body[0].expression.kind is ExpressionKind.THROW

    def test_long_operator_chain(self, frontend):
        """長い演算子チェーンを含む関数でもtry構文を検出する。"""
        chain = " << 1" * 2500
        tree = _parse(frontend, f"""
            struct Stream {{}};
            Stream& operator<<(Stream& s, int value);
            Stream out;
            void f() {{
                try {{ work(); }} catch (...) {{}}
                out{chain};
            }}
        """)

        diagnostics = check(tree)

        assert len(diagnostics) == 1
        assert diagnostics[0].location.start_line == len(PRELUDE.splitlines()) + 6

    def test_handles(self, frontend):
        """対象拡張子の判定。"""
        assert frontend.handles("src/main.cpp")
        assert frontend.handles("include/api.hpp")
        assert not frontend.handles("tool.py")


class TestScenarios:
    """代表的なcatch節の判定。"""

    def test_empty_catch(self, frontend):
        """空のcatch節は報告される。"""
        body = """
            void f() {
                try {
                    work();
                } catch (const Error&) {
                }
            }
        """
        diagnostics = check(_parse(frontend, body))

        assert len(diagnostics) == 1
        assert diagnostics[0].location.start_line == _line(body, "catch (const Error&)")

    def test_log_and_return_default(self, frontend):
        """ログ出力してデフォルト値を返すcatch節は報告される。"""
        diagnostics = check(_parse(frontend, """
            int f() {
                try {
                    work();
                } catch (const Error& e) {
                    report_error(e);
                    return 0;
                }
                return 1;
            }
        """))
        assert len(diagnostics) == 1

    def test_rethrow_and_transformation(self, frontend):
        """再送出と例外の変換は報告されない。"""
        diagnostics = check(_parse(frontend, """
            void f() {
                try { work(); } catch (const Error& e) { report_error(e); throw; }
                try { work(); } catch (const Error& e) { throw Wrapped(e); }
            }
        """))
        assert diagnostics == []

    def test_two_handlers_one_hiding(self, frontend):
        """再送出するcatch節の隣の空のcatch節だけが報告される。"""
        body = """
            void f() {
                try {
                    work();
                } catch (const Error&) {
                    throw;
                } catch (...) {
                }
            }
        """
        diagnostics = check(_parse(frontend, body))

        assert len(diagnostics) == 1
        assert diagnostics[0].location.start_line == _line(body, "catch (...)")

    def test_conditional_rethrow_is_reported(self, frontend):
        """if文の内側だけで再送出するcatch節は報告される。"""
        diagnostics = check(_parse(frontend, """
            void f() {
                try {
                    work();
                } catch (const Error&) {
                    if (flag()) {
                        throw;
                    }
                }
            }
        """))
        assert len(diagnostics) == 1

    def test_try_inside_lambda(self, frontend):
        """ラムダ本体の中のtry構文も解析される。"""
        diagnostics = check(_parse(frontend, """
            void f() {
                auto g = [] {
                    try { work(); } catch (...) {}
                };
                g();
            }
        """))
        assert len(diagnostics) == 1
