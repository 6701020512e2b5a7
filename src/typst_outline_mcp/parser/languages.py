"""Grammar registry with GrammarSpec definitions for supported markup languages."""

from dataclasses import dataclass, field

from .syntax import SyntaxKind


@dataclass
class GrammarSpec:
    """How to lower a tree-sitter grammar onto the Typst syntax kinds."""
    # tree-sitter language name (for tree-sitter-language-pack)
    ts_language: str

    # Named node type -> syntax kind
    node_kinds: dict[str, SyntaxKind]

    # Anonymous token type (its literal text) -> syntax kind
    token_kinds: dict[str, SyntaxKind]

    # Node types rebuilt as Heading[HeadingMarker, Space, Markup]
    heading_types: list[str] = field(default_factory=list)

    # Comment node types; `//` vs `/*` is decided from the text
    comment_types: list[str] = field(default_factory=list)

    # `(..)` node types; refined into Args / Array / Dict / Parenthesized
    group_types: list[str] = field(default_factory=list)

    # Function call node types (a group inside one is an argument list)
    call_types: list[str] = field(default_factory=list)

    # Lambda node types (the side before `=>` becomes Params)
    lambda_types: list[str] = field(default_factory=list)

    # Let node types (`let f(x) = ..` is rebuilt around a Closure)
    let_types: list[str] = field(default_factory=list)

    # Node types kept as one leaf even when the grammar splits them into tokens
    leaf_types: list[str] = field(default_factory=list)

    # Node types whose body is plain markup rather than a content block
    section_types: list[str] = field(default_factory=list)


# File extension to language mapping
LANGUAGE_EXTENSIONS = {
    ".typ": "typst",
}


# Typst grammar (tree-sitter-typst node types)
TYPST_SPEC = GrammarSpec(
    ts_language="typst",
    node_kinds={
        "source_file": SyntaxKind.MARKUP,
        "section": SyntaxKind.MARKUP,
        "content": SyntaxKind.CONTENT_BLOCK,
        "block": SyntaxKind.CODE_BLOCK,
        "code": SyntaxKind.CODE,
        "text": SyntaxKind.TEXT,
        "space": SyntaxKind.SPACE,
        "parbreak": SyntaxKind.PARBREAK,
        "linebreak": SyntaxKind.LINEBREAK,
        "escape": SyntaxKind.ESCAPE,
        "quote": SyntaxKind.SMART_QUOTE,
        "strong": SyntaxKind.STRONG,
        "emph": SyntaxKind.EMPH,
        "raw_span": SyntaxKind.RAW,
        "raw_blck": SyntaxKind.RAW,
        "url": SyntaxKind.LINK,
        "label": SyntaxKind.LABEL,
        "ref": SyntaxKind.REF,
        "heading": SyntaxKind.HEADING,
        "item": SyntaxKind.LIST_ITEM,
        "term": SyntaxKind.TERM_ITEM,
        "math": SyntaxKind.EQUATION,
        "formula": SyntaxKind.MATH,
        "line_comment": SyntaxKind.LINE_COMMENT,
        "block_comment": SyntaxKind.BLOCK_COMMENT,
        "ident": SyntaxKind.IDENT,
        "bool": SyntaxKind.BOOL,
        "number": SyntaxKind.INT,
        "string": SyntaxKind.STR,
        "none": SyntaxKind.NONE,
        "auto": SyntaxKind.AUTO,
        "group": SyntaxKind.PARENTHESIZED,
        "array": SyntaxKind.ARRAY,
        "dict": SyntaxKind.DICT,
        "tagged": SyntaxKind.NAMED,
        "unary": SyntaxKind.UNARY,
        "sign": SyntaxKind.UNARY,
        "binary": SyntaxKind.BINARY,
        "add": SyntaxKind.BINARY,
        "sub": SyntaxKind.BINARY,
        "mul": SyntaxKind.BINARY,
        "div": SyntaxKind.BINARY,
        "cmp": SyntaxKind.BINARY,
        "and": SyntaxKind.BINARY,
        "or": SyntaxKind.BINARY,
        "not": SyntaxKind.UNARY,
        "in": SyntaxKind.BINARY,
        "assign": SyntaxKind.BINARY,
        "field": SyntaxKind.FIELD_ACCESS,
        "call": SyntaxKind.FUNC_CALL,
        "lambda": SyntaxKind.CLOSURE,
        "let": SyntaxKind.LET_BINDING,
        "set": SyntaxKind.SET_RULE,
        "show": SyntaxKind.SHOW_RULE,
        "context": SyntaxKind.CONTEXTUAL,
        "branch": SyntaxKind.CONDITIONAL,
        "while": SyntaxKind.WHILE_LOOP,
        "for": SyntaxKind.FOR_LOOP,
        "import": SyntaxKind.MODULE_IMPORT,
        "include": SyntaxKind.MODULE_INCLUDE,
        "return": SyntaxKind.FUNC_RETURN,
        "break": SyntaxKind.LOOP_BREAK,
        "continue": SyntaxKind.LOOP_CONTINUE,
        "elude": SyntaxKind.SPREAD,
        "wildcard": SyntaxKind.UNDERSCORE,
    },
    token_kinds={
        "#": SyntaxKind.HASH,
        "{": SyntaxKind.LEFT_BRACE,
        "}": SyntaxKind.RIGHT_BRACE,
        "[": SyntaxKind.LEFT_BRACKET,
        "]": SyntaxKind.RIGHT_BRACKET,
        "(": SyntaxKind.LEFT_PAREN,
        ")": SyntaxKind.RIGHT_PAREN,
        ",": SyntaxKind.COMMA,
        ";": SyntaxKind.SEMICOLON,
        ":": SyntaxKind.COLON,
        ".": SyntaxKind.DOT,
        "$": SyntaxKind.DOLLAR,
        "*": SyntaxKind.STAR,
        "_": SyntaxKind.UNDERSCORE,
        "=": SyntaxKind.EQ,
        "=>": SyntaxKind.ARROW,
        "@": SyntaxKind.REF_MARKER,
        "not": SyntaxKind.NOT,
        "and": SyntaxKind.AND,
        "or": SyntaxKind.OR,
        "none": SyntaxKind.NONE,
        "auto": SyntaxKind.AUTO,
        "let": SyntaxKind.LET,
        "set": SyntaxKind.SET,
        "show": SyntaxKind.SHOW,
        "context": SyntaxKind.CONTEXT,
        "if": SyntaxKind.IF,
        "else": SyntaxKind.ELSE,
        "for": SyntaxKind.FOR,
        "in": SyntaxKind.IN,
        "while": SyntaxKind.WHILE,
        "break": SyntaxKind.BREAK,
        "continue": SyntaxKind.CONTINUE,
        "return": SyntaxKind.RETURN,
        "import": SyntaxKind.IMPORT,
        "include": SyntaxKind.INCLUDE,
        "as": SyntaxKind.AS,
    },
    heading_types=["heading"],
    comment_types=["comment"],
    group_types=["group"],
    call_types=["call"],
    lambda_types=["lambda"],
    let_types=["let"],
    leaf_types=["label", "ref", "string", "raw_span", "raw_blck", "url"],
    section_types=["section"],
)


# Language registry
LANGUAGE_REGISTRY = {
    "typst": TYPST_SPEC,
}
