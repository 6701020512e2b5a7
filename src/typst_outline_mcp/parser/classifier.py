"""Decide whether a single syntax node is a symbol on its own."""

from typing import Optional

from .errors import HierarchyError
from .symbols import NamingContext, ScopeConfiguration, SymbolEntry, SymbolKind, SymbolRole
from .syntax import Heading, Ident, Label, LinkedNode, SyntaxKind

# A label right after one of these is a value inside code, not an anchor.
_LABEL_VALUE_CONTEXT = frozenset({
    SyntaxKind.LEFT_BRACKET,
    SyntaxKind.LEFT_BRACE,
    SyntaxKind.LEFT_PAREN,
    SyntaxKind.COMMA,
    SyntaxKind.COLON,
})

_MARKUP_GROUPS = frozenset({
    SyntaxKind.EQUATION,
    SyntaxKind.RAW,
    SyntaxKind.BLOCK_COMMENT,
})

_BLOCK_GROUPS = frozenset({
    SyntaxKind.CODE_BLOCK,
    SyntaxKind.CONTENT_BLOCK,
})

_EXPR_GROUPS = frozenset({
    SyntaxKind.PARENTHESIZED,
    SyntaxKind.DESTRUCTURING,
    SyntaxKind.ARGS,
    SyntaxKind.PARAMS,
    SyntaxKind.ARRAY,
    SyntaxKind.DICT,
})


def classify(
    node: LinkedNode,
    scope: ScopeConfiguration,
    context: NamingContext,
) -> Optional[SymbolEntry]:
    """Get the symbol for a node of a symbol-worthy kind, or None.

    Args:
        node: Node to inspect (its children are not visited)
        scope: Active scope configuration
        context: How an identifier met here should be named

    Returns:
        The entry the node opens, or None if it is not a symbol by itself

    Raises:
        HierarchyError: The node's kind claims a label or identifier but the
            typed view cannot be built from it.
    """
    kind = node.kind

    if kind is SyntaxKind.LABEL and scope.affects_symbol():
        prev_kind = node.prev_sibling_kind()
        if prev_kind is not None and (
            prev_kind in _LABEL_VALUE_CONTEXT or prev_kind.is_keyword()
        ):
            return None
        label = node.cast(Label)
        if label is None:
            raise HierarchyError.cast_failed(node)
        return SymbolEntry(label.get(), SymbolKind.named(SymbolRole.LABEL), node.range)

    if kind is SyntaxKind.IDENT and scope.affects_symbol():
        ident = node.cast(Ident)
        if ident is None:
            raise HierarchyError.cast_failed(node)
        if context is NamingContext.FUNCTION_NAME:
            role = SymbolRole.FUNCTION
        elif context in (NamingContext.VARIABLE_BINDING, NamingContext.PARAMETER):
            role = SymbolRole.VARIABLE
        else:
            return None
        return SymbolEntry(ident.get(), SymbolKind.named(role), node.range)

    if kind in _MARKUP_GROUPS and scope.affects_markup():
        return SymbolEntry("", SymbolKind.group(), node.range)

    if kind in _BLOCK_GROUPS and scope.affects_block():
        return SymbolEntry("", SymbolKind.group(), node.range)

    if kind in _EXPR_GROUPS and scope.affects_expr():
        return SymbolEntry("", SymbolKind.group(), node.range)

    if kind is SyntaxKind.MARKUP:
        parent = node.parent
        if parent is None or parent.kind is not SyntaxKind.HEADING:
            return None
        if not scope.affects_heading():
            return None
        name = node.full_text()
        if not name:
            return None
        heading = parent.cast(Heading)
        return SymbolEntry(name, SymbolKind.heading(heading.depth()), node.range)

    return None
