from __future__ import annotations

from typing import Dict

import pytest
from prompt_toolkit.document import Document

from lox_ref.repl_highlight import GROUP_STYLE, LoxLexer, _highlight_line, token_group
from lox_ref.token_types import TT


def _styles(text: str) -> Dict[str, str]:
    frags = _highlight_line(text)
    assert "".join(t for _, t in frags) == text
    return {t: style for style, t in frags if t.strip()}


def test_empty_line() -> None:
    assert _highlight_line("") == [("", "")]


def test_keywords_numbers_and_plain_tokens() -> None:
    styles = _styles("var x = 10")

    assert styles["var"] == GROUP_STYLE["keyword"]
    assert styles["x"] == GROUP_STYLE["identifier"]
    assert styles["="] == GROUP_STYLE["operator"]
    assert styles["10"] == GROUP_STYLE["number"]


def test_literals() -> None:
    styles = _styles('"hi" == nil != true')

    assert styles['"hi"'] == GROUP_STYLE["string"]
    assert styles["nil"] == GROUP_STYLE["constant"]
    assert styles["true"] == GROUP_STYLE["boolean"]


def test_comments_are_styled() -> None:
    frags = _highlight_line("1 // note")
    assert frags == [
        (GROUP_STYLE["number"], "1"),
        ("", " "),
        (GROUP_STYLE["comment"], "// note"),
    ]


def test_block_comment_between_tokens() -> None:
    styles = _styles("1 /* c */ + 2")
    assert styles["/* c */ "] == GROUP_STYLE["comment"]


def test_bad_input_is_left_unstyled() -> None:
    assert _styles('"open') == {'"open': ""}
    assert _styles("@") == {"@": ""}


@pytest.mark.parametrize("tt", [t for t in TT if t != TT.EOF], ids=lambda t: t.name)
def test_every_token_type_has_a_group(tt: TT) -> None:
    assert token_group(tt) in GROUP_STYLE


def test_lex_document_lines() -> None:
    get_line = LoxLexer().lex_document(Document("1\nfun"))

    assert get_line(0) == [(GROUP_STYLE["number"], "1")]
    assert get_line(1) == [(GROUP_STYLE["keyword"], "fun")]
    assert get_line(7) == [("", "")]
