"""Tests for the syntax tree and its typed views."""

from typst_outline_mcp.parser import LinkedNode, SyntaxKind as K, SyntaxNode
from typst_outline_mcp.parser.syntax import Expr, Heading, Ident, Label, Pattern


def leaf(kind, text):
    return SyntaxNode.leaf(kind, text)


def node(kind, *children):
    return SyntaxNode.inner(kind, children)


def test_byte_length_counts_utf8():
    tree = node(K.MARKUP, leaf(K.TEXT, "Größe"), leaf(K.SPACE, " "), leaf(K.TEXT, "日本"))

    assert tree.byte_len == 7 + 1 + 6
    assert tree.full_text() == "Größe 日本"


def test_children_carry_absolute_offsets():
    root = LinkedNode(node(K.MARKUP, leaf(K.TEXT, "é"), node(K.STRONG, leaf(K.STAR, "*"), leaf(K.TEXT, "b"))))

    text, strong = list(root.children())
    star, bold = list(strong.children())

    assert text.range == (0, 2)
    assert strong.range == (2, 4)
    assert bold.range == (3, 4)
    assert bold.parent is strong
    assert bold.index == 1


def test_prev_sibling_skips_trivia():
    root = LinkedNode(node(
        K.ARGS,
        leaf(K.LEFT_PAREN, "("),
        leaf(K.SPACE, " "),
        leaf(K.LINE_COMMENT, "// x"),
        leaf(K.SPACE, "\n"),
        leaf(K.LABEL, "<a>"),
    ))
    label = list(root.children())[-1]

    assert label.prev_raw_sibling().kind is K.SPACE
    assert label.prev_sibling().kind is K.LEFT_PAREN
    assert label.prev_sibling().range == (0, 1)
    assert label.prev_sibling_kind() is K.LEFT_PAREN


def test_first_child_has_no_previous_sibling():
    root = LinkedNode(node(K.MARKUP, leaf(K.LABEL, "<a>")))
    (label,) = root.children()

    assert label.prev_sibling() is None
    assert label.prev_sibling_kind() is None
    assert root.prev_raw_sibling() is None


def test_label_view():
    good = LinkedNode(leaf(K.LABEL, "<intro>"))

    assert good.cast(Label).get() == "intro"
    assert LinkedNode(leaf(K.LABEL, "<>")).cast(Label) is None
    assert LinkedNode(leaf(K.LABEL, "intro")).cast(Label) is None
    assert LinkedNode(leaf(K.TEXT, "<intro>")).cast(Label) is None


def test_ident_view():
    assert LinkedNode(leaf(K.IDENT, "my-var_2")).cast(Ident).get() == "my-var_2"
    assert LinkedNode(leaf(K.IDENT, "_x")).is_(Ident)
    assert not LinkedNode(leaf(K.IDENT, "2x")).is_(Ident)
    assert not LinkedNode(leaf(K.IDENT, "")).is_(Ident)
    assert not LinkedNode(node(K.IDENT, leaf(K.TEXT, "x"))).is_(Ident)


def test_heading_depth():
    heading = LinkedNode(node(
        K.HEADING,
        leaf(K.HEADING_MARKER, "==="),
        leaf(K.SPACE, " "),
        node(K.MARKUP, leaf(K.TEXT, "T")),
    ))

    assert heading.cast(Heading).depth() == 3
    assert LinkedNode(node(K.HEADING, node(K.MARKUP))).cast(Heading).depth() == 1


def test_expr_and_pattern_views():
    assert LinkedNode(leaf(K.IDENT, "x")).is_(Expr)
    assert not LinkedNode(leaf(K.SPACE, " ")).is_(Expr)
    assert not LinkedNode(leaf(K.LET, "let")).is_(Expr)
    assert not LinkedNode(node(K.PARAMS)).is_(Expr)

    assert LinkedNode(node(K.DESTRUCTURING)).is_(Pattern)
    assert LinkedNode(leaf(K.UNDERSCORE, "_")).is_(Pattern)
    assert LinkedNode(node(K.CLOSURE)).cast(Pattern).is_closure()
    assert not LinkedNode(leaf(K.IDENT, "f")).cast(Pattern).is_closure()


def test_kind_predicates():
    assert K.LINE_COMMENT.is_trivia()
    assert K.SPACE.is_trivia()
    assert not K.TEXT.is_trivia()
    assert K.IN.is_keyword()
    assert not K.IDENT.is_keyword()
    assert K.ERROR.is_error()
