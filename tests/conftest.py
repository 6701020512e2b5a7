"""Shared fixtures: small Typst documents with hand-built syntax trees."""

import pytest

from typst_outline_mcp.parser import LinkedNode, SyntaxKind as K, SyntaxNode
from typst_outline_mcp.parser import extractor


def leaf(kind, text):
    return SyntaxNode.leaf(kind, text)


def node(kind, *children):
    return SyntaxNode.inner(kind, children)


def heading(level, title):
    return node(
        K.HEADING,
        leaf(K.HEADING_MARKER, "=" * level),
        leaf(K.SPACE, " "),
        node(K.MARKUP, leaf(K.TEXT, title)),
    )


def let_function(name, param, body):
    return node(
        K.LET_BINDING,
        leaf(K.LET, "let"),
        leaf(K.SPACE, " "),
        node(
            K.CLOSURE,
            leaf(K.IDENT, name),
            node(K.PARAMS, leaf(K.LEFT_PAREN, "("), leaf(K.IDENT, param), leaf(K.RIGHT_PAREN, ")")),
            leaf(K.SPACE, " "),
            leaf(K.EQ, "="),
            leaf(K.SPACE, " "),
            body,
        ),
    )


NL = leaf(K.SPACE, "\n")

MAIN = "= Intro\n#let f(x) = x\n== Setup <setup>\n"

MAIN_TREE = node(
    K.MARKUP,
    heading(1, "Intro"), NL,
    leaf(K.HASH, "#"), let_function("f", "x", leaf(K.IDENT, "x")), NL,
    heading(2, "Setup"), leaf(K.SPACE, " "), leaf(K.LABEL, "<setup>"), NL,
)

BLOCKS = "#let g(y) = {\n  y\n}\n// a\n// b\n"

BLOCKS_TREE = node(
    K.MARKUP,
    leaf(K.HASH, "#"),
    let_function(
        "g", "y",
        node(
            K.CODE_BLOCK,
            leaf(K.LEFT_BRACE, "{"),
            node(K.CODE, leaf(K.SPACE, "\n  "), leaf(K.IDENT, "y"), NL),
            leaf(K.RIGHT_BRACE, "}"),
        ),
    ),
    NL,
    leaf(K.LINE_COMMENT, "// a"), NL,
    leaf(K.LINE_COMMENT, "// b"), NL,
)

COMMENT_ONLY = "// notes\n"

COMMENT_ONLY_TREE = node(K.MARKUP, leaf(K.LINE_COMMENT, "// notes"), NL)

BROKEN = "<broken\n"

BROKEN_TREE = node(K.MARKUP, leaf(K.LABEL, "<broken"), NL)


@pytest.fixture
def fake_parser(monkeypatch):
    """Serve the hand-built trees above instead of running tree-sitter.

    Returns the content -> tree mapping so tests can register more documents.
    """
    trees = {
        MAIN: MAIN_TREE,
        BLOCKS: BLOCKS_TREE,
        COMMENT_ONLY: COMMENT_ONLY_TREE,
        BROKEN: BROKEN_TREE,
    }

    def parse_source(content, language="typst"):
        return LinkedNode(trees[content])

    monkeypatch.setattr(extractor, "parse_source", parse_source)
    return trees


@pytest.fixture
def workspace(tmp_path):
    """A folder of Typst documents named `thesis`."""
    folder = tmp_path / "thesis"
    (folder / "chapters").mkdir(parents=True)
    (folder / "node_modules").mkdir()
    (folder / "main.typ").write_text(MAIN, encoding="utf-8")
    (folder / "chapters" / "notes.typ").write_text(COMMENT_ONLY, encoding="utf-8")
    (folder / "node_modules" / "pkg.typ").write_text(MAIN, encoding="utf-8")
    (folder / "README.md").write_text("# thesis\n", encoding="utf-8")
    return folder


@pytest.fixture
def storage_path(tmp_path):
    return str(tmp_path / "index")
