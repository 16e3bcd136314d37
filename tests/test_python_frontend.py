"""Pythonフロントエンドのテスト。"""

import textwrap
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from exception_hiding.analyzer import PythonFrontend
from exception_hiding.engine import check, iter_try_constructs
from exception_hiding.errors import FrontendError
from exception_hiding.models import ExpressionKind, StatementKind


def _check(source: str):
    tree = PythonFrontend().parse_string(textwrap.dedent(source), "sample.py")
    return check(tree)


def _handlers(source: str):
    tree = PythonFrontend().parse_string(textwrap.dedent(source), "sample.py")
    return [h for t in iter_try_constructs(tree) for h in t.handlers]


class TestConversion:
    """ast から中立モデルへの変換のテスト。"""

    def test_handler_clause(self):
        """except節の型・範囲・本体。"""
        handlers = _handlers("""
            try:
                work()
            except (ValueError, KeyError) as e:
                log(e)
                raise
        """)

        assert len(handlers) == 1
        handler = handlers[0]
        assert handler.exception_types == ("ValueError", "KeyError")
        assert handler.span.start_line == 4
        assert handler.span.start_column == 1
        assert handler.span.end_line == 6
        assert [s.kind for s in handler.body] == [StatementKind.EXPRESSION, StatementKind.RETHROW]
        assert handler.body[0].expression.kind is ExpressionKind.OTHER

    def test_bare_except_is_catch_all(self):
        """型指定なしのexcept。"""
        handlers = _handlers("""
            try:
                work()
            except:
                pass
        """)
        assert handlers[0].is_catch_all

    def test_raise_forms(self):
        """raiseの形ごとの文の種類。"""
        handlers = _handlers("""
            try:
                work()
            except ValueError:
                raise
            except KeyError as e:
                raise LookupError("missing") from e
            except OSError as e:
                raise e
        """)
        kinds = [h.body[0].kind for h in handlers]
        assert kinds == [StatementKind.RETHROW, StatementKind.THROW, StatementKind.THROW]

    def test_syntax_error(self):
        """構文エラーはFrontendErrorになる。"""
        with pytest.raises(FrontendError) as excinfo:
            PythonFrontend().parse_string("try:\n    x = (\n", "broken.py")
        assert excinfo.value.file_path == "broken.py"

    def test_parse_file(self):
        """ファイルから構文木を作る。"""
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "module.py"
            path.write_text("try:\n    pass\nexcept Exception:\n    pass\n", encoding="utf-8")

            tree = PythonFrontend().parse_file(str(path))

            assert tree.language == "python"
            assert len(check(tree)) == 1

    def test_parse_missing_file(self):
        """読み込めないファイルはFrontendErrorになる。"""
        with TemporaryDirectory() as tmpdir:
            path = str(Path(tmpdir) / "vanished.py")

            with pytest.raises(FrontendError) as excinfo:
                PythonFrontend().parse_file(path)

            assert excinfo.value.file_path == path
            assert isinstance(excinfo.value.__cause__, OSError)

    def test_handles(self):
        """対象拡張子の判定。"""
        frontend = PythonFrontend()
        assert frontend.handles("pkg/module.py")
        assert frontend.handles("pkg/stubs.pyi")
        assert not frontend.handles("src/main.cpp")


class TestScenarios:
    """代表的なハンドラの判定。"""

    def test_empty_handler(self):
        """空のハンドラ（passのみ）は1件報告される。"""
        diagnostics = _check("""
            def f():
                try:
                    critical_operation()
                except Exception:
                    pass
        """)
        assert len(diagnostics) == 1
        assert diagnostics[0].location.start_line == 5

    def test_log_then_rethrow(self):
        """ログ出力後の再送出は報告されない。"""
        assert _check("""
            try:
                dangerous_operation()
            except Exception as e:
                print(e)
                raise
        """) == []

    def test_log_and_return_default(self):
        """ログ出力してデフォルト値を返すハンドラは報告される。"""
        diagnostics = _check("""
            def load():
                try:
                    return parse_important_data()
                except ValueError as e:
                    logger.error(e)
                    return {}
        """)
        assert len(diagnostics) == 1

    def test_exception_transformation(self):
        """別の例外への変換は報告されない。"""
        assert _check("""
            try:
                low_level_operation()
            except OSError as e:
                raise CustomError("high-level operation failed") from e
        """) == []

    def test_two_handlers_one_hiding(self):
        """伝播するハンドラの隣の空のハンドラだけが報告される。"""
        diagnostics = _check("""
            try:
                work()
            except ValueError:
                raise
            except KeyError:
                pass
        """)
        assert len(diagnostics) == 1
        assert diagnostics[0].location.start_line == 6

    def test_conditional_rethrow_is_reported(self):
        """条件分岐の内側だけで再送出するハンドラは報告される。"""
        diagnostics = _check("""
            try:
                work()
            except Exception:
                if flag:
                    raise
        """)
        assert len(diagnostics) == 1

    def test_retry_loop(self):
        """リトライループ内の条件付き再送出は報告される。"""
        diagnostics = _check("""
            async def retry_logic():
                attempt = 0
                while attempt < 3:
                    try:
                        return await unstable_network_call()
                    except Exception:
                        attempt += 1
                        if attempt >= 3:
                            raise
                        await asyncio.sleep(attempt)
                raise RuntimeError("Max retries exceeded")
        """)
        assert len(diagnostics) == 1
        assert diagnostics[0].location.start_line == 7

    def test_cleanup_then_rethrow(self):
        """後始末の後の再送出は報告されない。"""
        assert _check("""
            try:
                allocate_resources()
                do_work()
            except Exception:
                cleanup()
                raise
        """) == []

    def test_nested_try_in_class_method_and_finally(self):
        """クラスのメソッドやfinally節の中のtry構文も解析される。"""
        diagnostics = _check("""
            class Service:
                def run(self):
                    try:
                        step()
                    finally:
                        try:
                            close()
                        except OSError:
                            pass
        """)
        assert [d.location.start_line for d in diagnostics] == [9]

    def test_try_in_with_and_match(self):
        """with文やmatch文の中のtry構文も解析される。"""
        diagnostics = _check("""
            with resource() as r:
                match r.kind:
                    case "a":
                        try:
                            r.use()
                        except Exception:
                            r.reset()
        """)
        assert len(diagnostics) == 1

    def test_try_else_block(self):
        """else節の中のtry構文も解析される。"""
        diagnostics = _check("""
            try:
                first()
            except ValueError:
                raise
            else:
                try:
                    second()
                except ValueError:
                    fallback()
        """)
        assert [d.location.start_line for d in diagnostics] == [9]
