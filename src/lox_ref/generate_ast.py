"""
Build-time generator for visitor-style expression classes.

Reads node descriptors of the form ``"Name : Type1 field1, Type2 field2"``
and writes a Python module with an abstract ``Expr`` base, an
``ExprVisitor`` interface and one frozen dataclass per node whose
``accept()`` double-dispatches to the visitor.

The runtime tree in ``lox_ref.tree`` is declared by hand and never imports
the generated module.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput

DESCRIPTOR_GRAMMAR = r"""
descriptor: NAME ":" field ("," field)*
field: NAME NAME

%import common.CNAME -> NAME
%import common.WS_INLINE
%ignore WS_INLINE
"""

DEFAULT_DESCRIPTORS = (
    "Binary   : Expr left, Token operator, Expr right",
    "Grouping : Expr expression",
    "Literal  : Object value",
    "Unary    : Token operator, Expr right",
)

# Descriptor type names that differ from the Python spelling.
TYPE_MAP = {
    "Token": "Tok",
    "Object": "object",
}

USAGE = "Usage: lox-generate-ast <output directory>"


class DescriptorError(ValueError):
    """Malformed or inconsistent node descriptor"""


@dataclass(frozen=True)
class FieldSpec:
    type_name: str
    name: str

    @property
    def py_type(self) -> str:
        return TYPE_MAP.get(self.type_name, self.type_name)


@dataclass(frozen=True)
class NodeSpec:
    name: str
    fields: Tuple[FieldSpec, ...]


@v_args(inline=True)
class _ToSpec(Transformer):
    def field(self, type_tok, name_tok) -> FieldSpec:
        return FieldSpec(str(type_tok), str(name_tok))

    def descriptor(self, name_tok, *fields: FieldSpec) -> NodeSpec:
        return NodeSpec(str(name_tok), tuple(fields))


_parser: Optional[Lark] = None


def _descriptor_parser() -> Lark:
    global _parser
    if _parser is None:
        _parser = Lark(DESCRIPTOR_GRAMMAR, start="descriptor", parser="lalr")
    return _parser


def parse_descriptor(text: str) -> NodeSpec:
    try:
        tree = _descriptor_parser().parse(text.strip())
    except UnexpectedInput as exc:
        raise DescriptorError(f"bad descriptor {text!r}: {exc}") from exc

    spec = _ToSpec().transform(tree)

    seen = set()
    for f in spec.fields:
        if f.name in seen:
            raise DescriptorError(f"duplicate field {f.name!r} in {spec.name}")
        seen.add(f.name)

    return spec


def parse_descriptors(lines: Iterable[str]) -> List[NodeSpec]:
    specs: List[NodeSpec] = []
    names = set()

    for line in lines:
        spec = parse_descriptor(line)
        if spec.name in names:
            raise DescriptorError(f"duplicate node {spec.name!r}")
        names.add(spec.name)
        specs.append(spec)

    if not specs:
        raise DescriptorError("no node descriptors given")

    return specs


def snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def visit_method(node: str, base: str) -> str:
    return f"visit_{snake_case(node)}_{snake_case(base)}"


# ============================================================================
# Emission
# ============================================================================

def define_ast(base: str, specs: Sequence[NodeSpec]) -> str:
    """Return the source of the generated module."""
    out: List[str] = []
    w = out.append

    uses_tok = any(f.py_type == "Tok" for s in specs for f in s.fields)

    w(f'"""{base} nodes generated by lox-generate-ast. Do not edit."""')
    w("")
    w("from __future__ import annotations")
    w("")
    w("from abc import ABC, abstractmethod")
    w("from dataclasses import dataclass")
    w("from typing import Generic, TypeVar")
    if uses_tok:
        w("")
        w("from lox_ref.token_types import Tok")
    w("")
    w('R = TypeVar("R")')

    define_visitor(w, base, specs)

    w("")
    w("")
    w(f"class {base}(ABC):")
    w("    @abstractmethod")
    w(f"    def accept(self, visitor: {base}Visitor[R]) -> R: ...")

    for spec in specs:
        define_type(w, base, spec)

    return "\n".join(out) + "\n"


def define_visitor(w, base: str, specs: Sequence[NodeSpec]) -> None:
    w("")
    w("")
    w(f"class {base}Visitor(ABC, Generic[R]):")
    for i, spec in enumerate(specs):
        if i:
            w("")
        w("    @abstractmethod")
        w(f"    def {visit_method(spec.name, base)}(self, {snake_case(base)}: {spec.name}) -> R: ...")


def define_type(w, base: str, spec: NodeSpec) -> None:
    w("")
    w("")
    w("@dataclass(frozen=True)")
    w(f"class {spec.name}({base}):")
    for f in spec.fields:
        w(f"    {f.name}: {f.py_type}")
    w("")
    w(f"    def accept(self, visitor: {base}Visitor[R]) -> R:")
    w(f"        return visitor.{visit_method(spec.name, base)}(self)")


def generate(output_dir: Path, base: str = "Expr", descriptors: Sequence[str] = DEFAULT_DESCRIPTORS) -> Path:
    specs = parse_descriptors(descriptors)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{snake_case(base)}.py"
    path.write_text(define_ast(base, specs), encoding="utf-8")
    return path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv

    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        raise SystemExit(64)

    generate(Path(args[0]))


if __name__ == "__main__":
    main()
