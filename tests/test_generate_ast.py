from __future__ import annotations

import dataclasses
import importlib.util
import sys
import typing
from pathlib import Path
from types import ModuleType
from typing import List

import pytest

from lox_ref import tree
from lox_ref.generate_ast import (
    DEFAULT_DESCRIPTORS,
    DescriptorError,
    FieldSpec,
    NodeSpec,
    define_ast,
    generate,
    main,
    parse_descriptor,
    parse_descriptors,
    snake_case,
    visit_method,
)
from lox_ref.printer import render, render_literal
from lox_ref.token_types import TT
from tests.support.harness import parse_pipeline, tok

BAD_DESCRIPTORS: List[str] = [
    "Binary Expr left",
    "Binary :",
    "Binary : Expr",
    "Binary : Expr left,",
    "1Bad : Expr x",
    ": Expr x",
    "Binary : Expr left Expr right",
]


def _load_generated(path: Path, monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    name = "lox_generated_expr"
    spec = importlib.util.spec_from_file_location(name, path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, name, module)
    spec.loader.exec_module(module)
    return module


def test_parse_descriptor() -> None:
    spec = parse_descriptor("Binary   : Expr left, Token operator, Expr right")

    assert spec == NodeSpec(
        "Binary",
        (
            FieldSpec("Expr", "left"),
            FieldSpec("Token", "operator"),
            FieldSpec("Expr", "right"),
        ),
    )
    assert [f.py_type for f in spec.fields] == ["Expr", "Tok", "Expr"]


def test_object_maps_to_python_object() -> None:
    spec = parse_descriptor("Literal : Object value")
    assert spec.fields[0].py_type == "object"


@pytest.mark.parametrize("text", BAD_DESCRIPTORS)
def test_bad_descriptors(text: str) -> None:
    with pytest.raises(DescriptorError):
        parse_descriptor(text)


def test_duplicate_field() -> None:
    with pytest.raises(DescriptorError, match="duplicate field"):
        parse_descriptor("Pair : Expr a, Expr a")


def test_duplicate_node() -> None:
    with pytest.raises(DescriptorError, match="duplicate node"):
        parse_descriptors(["A : Expr x", "A : Expr y"])


def test_no_descriptors() -> None:
    with pytest.raises(DescriptorError):
        parse_descriptors([])


def test_naming_helpers() -> None:
    assert snake_case("Grouping") == "grouping"
    assert snake_case("BinaryOp") == "binary_op"
    assert visit_method("Unary", "Expr") == "visit_unary_expr"


def test_emission_is_deterministic() -> None:
    specs = parse_descriptors(DEFAULT_DESCRIPTORS)
    first = define_ast("Expr", specs)
    second = define_ast("Expr", parse_descriptors(DEFAULT_DESCRIPTORS))

    assert first == second
    assert "class ExprVisitor(ABC, Generic[R]):" in first
    assert "    def visit_grouping_expr(self, expr: Grouping) -> R: ..." in first
    assert "from lox_ref.token_types import Tok" in first


def test_tok_import_only_when_needed() -> None:
    source = define_ast("Expr", parse_descriptors(["Grouping : Expr expression"]))
    assert "token_types" not in source


def test_generated_fields_match_runtime_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    module = _load_generated(generate(tmp_path), monkeypatch)

    for cls in typing.get_args(tree.Expr):
        generated = getattr(module, cls.__name__)
        assert issubclass(generated, module.Expr)
        assert [f.name for f in dataclasses.fields(generated)] == [
            f.name for f in dataclasses.fields(cls)
        ]


def test_generated_visitor_double_dispatch(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    gen = _load_generated(generate(tmp_path), monkeypatch)

    class Printer(gen.ExprVisitor):
        def visit_binary_expr(self, expr):
            return f"({expr.operator.lexeme} {expr.left.accept(self)} {expr.right.accept(self)})"

        def visit_grouping_expr(self, expr):
            return f"(group {expr.expression.accept(self)})"

        def visit_literal_expr(self, expr):
            return render_literal(expr.value)

        def visit_unary_expr(self, expr):
            return f"({expr.operator.lexeme} {expr.right.accept(self)})"

    minus = tok(TT.MINUS, "-")
    star = tok(TT.STAR, "*")
    node = gen.Binary(
        gen.Unary(minus, gen.Literal(123.0)),
        star,
        gen.Grouping(gen.Literal(45.67)),
    )

    expected = parse_pipeline("-123 * (45.67)").expr
    assert expected is not None
    assert node.accept(Printer()) == render(expected)


def test_generated_visitor_is_abstract(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    gen = _load_generated(generate(tmp_path), monkeypatch)

    class Partial(gen.ExprVisitor):
        def visit_binary_expr(self, expr):
            return None

    with pytest.raises(TypeError):
        Partial()


def test_main_writes_module(tmp_path: Path) -> None:
    out_dir = tmp_path / "nested" / "out"
    main([str(out_dir)])

    path = out_dir / "expr.py"
    assert path.exists()
    assert path.read_text(encoding="utf-8") == define_ast(
        "Expr", parse_descriptors(DEFAULT_DESCRIPTORS)
    )


def test_main_usage(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 64
    assert "Usage: lox-generate-ast" in capsys.readouterr().err
