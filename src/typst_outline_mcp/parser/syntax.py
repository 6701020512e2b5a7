"""Concrete syntax tree for Typst documents.

The outline builder only borrows this tree: nodes are immutable, offsets are
byte offsets into the UTF-8 source, and typed views (``Label``, ``Ident``,
``Heading``, ``Expr``, ``Pattern``) are obtained with ``LinkedNode.cast``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class SyntaxKind(Enum):
    """Kind tag of a syntax node."""
    # Markup
    MARKUP = "markup"
    TEXT = "text"
    SPACE = "space"
    LINEBREAK = "linebreak"
    PARBREAK = "parbreak"
    ESCAPE = "escape"
    SHORTHAND = "shorthand"
    SMART_QUOTE = "smart_quote"
    STRONG = "strong"
    EMPH = "emph"
    RAW = "raw"
    LINK = "link"
    LABEL = "label"
    REF = "ref"
    REF_MARKER = "ref_marker"
    HEADING = "heading"
    HEADING_MARKER = "heading_marker"
    LIST_ITEM = "list_item"
    ENUM_ITEM = "enum_item"
    TERM_ITEM = "term_item"
    EQUATION = "equation"
    MATH = "math"

    # Trivia
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"

    # Code
    CODE = "code"
    CODE_BLOCK = "code_block"
    CONTENT_BLOCK = "content_block"
    IDENT = "ident"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    NUMERIC = "numeric"
    STR = "str"
    PARENTHESIZED = "parenthesized"
    ARRAY = "array"
    DICT = "dict"
    NAMED = "named"
    KEYED = "keyed"
    UNARY = "unary"
    BINARY = "binary"
    FIELD_ACCESS = "field_access"
    FUNC_CALL = "func_call"
    ARGS = "args"
    SPREAD = "spread"
    CLOSURE = "closure"
    PARAMS = "params"
    LET_BINDING = "let_binding"
    SET_RULE = "set_rule"
    SHOW_RULE = "show_rule"
    CONTEXTUAL = "contextual"
    CONDITIONAL = "conditional"
    WHILE_LOOP = "while_loop"
    FOR_LOOP = "for_loop"
    MODULE_IMPORT = "module_import"
    IMPORT_ITEMS = "import_items"
    MODULE_INCLUDE = "module_include"
    LOOP_BREAK = "loop_break"
    LOOP_CONTINUE = "loop_continue"
    FUNC_RETURN = "func_return"
    DESTRUCTURING = "destructuring"

    # Punctuation
    HASH = "hash"
    LEFT_BRACE = "left_brace"
    RIGHT_BRACE = "right_brace"
    LEFT_BRACKET = "left_bracket"
    RIGHT_BRACKET = "right_bracket"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"
    COMMA = "comma"
    SEMICOLON = "semicolon"
    COLON = "colon"
    DOT = "dot"
    DOLLAR = "dollar"
    STAR = "star"
    UNDERSCORE = "underscore"
    EQ = "eq"
    ARROW = "arrow"
    OPERATOR = "operator"

    # Keywords
    NOT = "not"
    AND = "and"
    OR = "or"
    NONE = "none"
    AUTO = "auto"
    LET = "let"
    SET = "set"
    SHOW = "show"
    CONTEXT = "context"
    IF = "if"
    ELSE = "else"
    FOR = "for"
    IN = "in"
    WHILE = "while"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "return"
    IMPORT = "import"
    INCLUDE = "include"
    AS = "as"

    # Recovery
    ERROR = "error"

    def is_trivia(self) -> bool:
        return self in _TRIVIA

    def is_keyword(self) -> bool:
        return self in _KEYWORDS

    def is_error(self) -> bool:
        return self is SyntaxKind.ERROR


_TRIVIA = frozenset({
    SyntaxKind.SPACE,
    SyntaxKind.LINE_COMMENT,
    SyntaxKind.BLOCK_COMMENT,
})

_KEYWORDS = frozenset({
    SyntaxKind.NOT, SyntaxKind.AND, SyntaxKind.OR, SyntaxKind.NONE,
    SyntaxKind.AUTO, SyntaxKind.LET, SyntaxKind.SET, SyntaxKind.SHOW,
    SyntaxKind.CONTEXT, SyntaxKind.IF, SyntaxKind.ELSE, SyntaxKind.FOR,
    SyntaxKind.IN, SyntaxKind.WHILE, SyntaxKind.BREAK, SyntaxKind.CONTINUE,
    SyntaxKind.RETURN, SyntaxKind.IMPORT, SyntaxKind.INCLUDE, SyntaxKind.AS,
})

# Kinds that cast to an expression (markup and code). Whitespace is not one.
EXPR_KINDS = frozenset({
    SyntaxKind.TEXT, SyntaxKind.LINEBREAK, SyntaxKind.PARBREAK,
    SyntaxKind.ESCAPE, SyntaxKind.SHORTHAND, SyntaxKind.SMART_QUOTE,
    SyntaxKind.STRONG, SyntaxKind.EMPH, SyntaxKind.RAW, SyntaxKind.LINK,
    SyntaxKind.LABEL, SyntaxKind.REF, SyntaxKind.HEADING,
    SyntaxKind.LIST_ITEM, SyntaxKind.ENUM_ITEM, SyntaxKind.TERM_ITEM,
    SyntaxKind.EQUATION, SyntaxKind.IDENT, SyntaxKind.NONE, SyntaxKind.AUTO,
    SyntaxKind.BOOL, SyntaxKind.INT, SyntaxKind.FLOAT, SyntaxKind.NUMERIC,
    SyntaxKind.STR, SyntaxKind.CODE_BLOCK, SyntaxKind.CONTENT_BLOCK,
    SyntaxKind.PARENTHESIZED, SyntaxKind.ARRAY, SyntaxKind.DICT,
    SyntaxKind.UNARY, SyntaxKind.BINARY, SyntaxKind.FIELD_ACCESS,
    SyntaxKind.FUNC_CALL, SyntaxKind.CLOSURE, SyntaxKind.LET_BINDING,
    SyntaxKind.SET_RULE, SyntaxKind.SHOW_RULE, SyntaxKind.CONTEXTUAL,
    SyntaxKind.CONDITIONAL, SyntaxKind.WHILE_LOOP, SyntaxKind.FOR_LOOP,
    SyntaxKind.MODULE_IMPORT, SyntaxKind.MODULE_INCLUDE,
    SyntaxKind.LOOP_BREAK, SyntaxKind.LOOP_CONTINUE, SyntaxKind.FUNC_RETURN,
})


@dataclass(frozen=True)
class SyntaxNode:
    """An immutable syntax node: a leaf carries text, an inner node children."""
    kind: SyntaxKind
    text: str = ""
    children: tuple["SyntaxNode", ...] = ()
    byte_len: int = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        if self.children:
            length = sum(child.byte_len for child in self.children)
        else:
            length = len(self.text.encode("utf-8"))
        object.__setattr__(self, "byte_len", length)

    @classmethod
    def leaf(cls, kind: SyntaxKind, text: str) -> "SyntaxNode":
        return cls(kind=kind, text=text)

    @classmethod
    def inner(cls, kind: SyntaxKind, children) -> "SyntaxNode":
        return cls(kind=kind, children=tuple(children))

    def full_text(self) -> str:
        """Source text covered by this node."""
        if not self.children:
            return self.text
        return "".join(child.full_text() for child in self.children)


class LinkedNode:
    """A syntax node together with its parent, index and absolute offset."""

    def __init__(
        self,
        node: SyntaxNode,
        parent: Optional["LinkedNode"] = None,
        index: int = 0,
        offset: int = 0,
    ):
        self.node = node
        self.parent = parent
        self.index = index
        self.offset = offset

    def __repr__(self) -> str:
        start, end = self.range
        return f"LinkedNode({self.kind.name}, {start}..{end})"

    @property
    def kind(self) -> SyntaxKind:
        return self.node.kind

    @property
    def range(self) -> tuple[int, int]:
        """Half-open byte span of the node."""
        return (self.offset, self.offset + self.node.byte_len)

    def full_text(self) -> str:
        return self.node.full_text()

    def children(self) -> Iterator["LinkedNode"]:
        """Iterate over linked children in document order."""
        offset = self.offset
        for index, child in enumerate(self.node.children):
            yield LinkedNode(child, parent=self, index=index, offset=offset)
            offset += child.byte_len

    def prev_raw_sibling(self) -> Optional["LinkedNode"]:
        """Immediately preceding sibling, trivia included."""
        if self.parent is None or self.index == 0:
            return None
        node = self.parent.node.children[self.index - 1]
        return LinkedNode(
            node,
            parent=self.parent,
            index=self.index - 1,
            offset=self.offset - node.byte_len,
        )

    def prev_sibling(self) -> Optional["LinkedNode"]:
        """Closest preceding sibling that is not trivia."""
        sibling = self.prev_raw_sibling()
        while sibling is not None and sibling.kind.is_trivia():
            sibling = sibling.prev_raw_sibling()
        return sibling

    def prev_sibling_kind(self) -> Optional[SyntaxKind]:
        sibling = self.prev_sibling()
        return sibling.kind if sibling else None

    def cast(self, view):
        """Return a typed view of this node, or None if the shape differs."""
        return view.from_untyped(self)

    def is_(self, view) -> bool:
        return self.cast(view) is not None


class Label:
    """A `<name>` label."""

    def __init__(self, node: LinkedNode):
        self.node = node

    @classmethod
    def from_untyped(cls, node: LinkedNode) -> Optional["Label"]:
        if node.kind is not SyntaxKind.LABEL or node.node.children:
            return None
        text = node.node.text
        if len(text) < 3 or not (text.startswith("<") and text.endswith(">")):
            return None
        return cls(node)

    def get(self) -> str:
        return self.node.node.text[1:-1]


class Ident:
    """An identifier such as `foo` or `my-var`."""

    def __init__(self, node: LinkedNode):
        self.node = node

    @classmethod
    def from_untyped(cls, node: LinkedNode) -> Optional["Ident"]:
        if node.kind is not SyntaxKind.IDENT or node.node.children:
            return None
        text = node.node.text
        if not text or not (text[0].isalpha() or text[0] == "_"):
            return None
        if not all(ch.isalnum() or ch in "_-" for ch in text):
            return None
        return cls(node)

    def get(self) -> str:
        return self.node.node.text


class Heading:
    """A markup heading: `== Title`."""

    def __init__(self, node: LinkedNode):
        self.node = node

    @classmethod
    def from_untyped(cls, node: LinkedNode) -> Optional["Heading"]:
        if node.kind is not SyntaxKind.HEADING:
            return None
        return cls(node)

    def depth(self) -> int:
        for child in self.node.children():
            if child.kind is SyntaxKind.HEADING_MARKER:
                return max(1, child.full_text().count("="))
        return 1


class Expr:
    """Any markup or code expression."""

    def __init__(self, node: LinkedNode):
        self.node = node

    @classmethod
    def from_untyped(cls, node: LinkedNode) -> Optional["Expr"]:
        if node.kind not in EXPR_KINDS:
            return None
        return cls(node)


class Pattern:
    """The bound side of a `let` or `for`: a name, `_`, or a destructuring."""

    def __init__(self, node: LinkedNode):
        self.node = node

    @classmethod
    def from_untyped(cls, node: LinkedNode) -> Optional["Pattern"]:
        if node.kind in (SyntaxKind.DESTRUCTURING, SyntaxKind.UNDERSCORE):
            return cls(node)
        if node.kind in EXPR_KINDS:
            return cls(node)
        return None

    def is_closure(self) -> bool:
        """Whether the pattern is a plain name bound to a closure value."""
        return self.node.kind is SyntaxKind.CLOSURE
