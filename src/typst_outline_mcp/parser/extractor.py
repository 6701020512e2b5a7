"""Parse Typst sources with tree-sitter and outline them."""

from dataclasses import replace
from typing import Optional

from tree_sitter_language_pack import get_parser

from ..log import get_logger
from .errors import HierarchyError
from .hierarchy import MAX_NESTING_DEPTH, SymbolNode, build_hierarchy
from .languages import GrammarSpec, LANGUAGE_REGISTRY
from .symbols import ScopeConfiguration
from .syntax import LinkedNode, SyntaxKind, SyntaxNode

_GROUP_LIKE = (SyntaxKind.PARENTHESIZED, SyntaxKind.ARRAY, SyntaxKind.DICT)

logger = get_logger(__name__)


def parse_source(content: str, language: str = "typst") -> Optional[LinkedNode]:
    """Parse a document into a linked syntax tree.

    Args:
        content: Raw document text
        language: Language name (must be in LANGUAGE_REGISTRY)

    Returns:
        Root node covering the whole document, or None for unknown languages
    """
    if language not in LANGUAGE_REGISTRY:
        return None

    spec = LANGUAGE_REGISTRY[language]
    source_bytes = content.encode("utf-8")

    parser = get_parser(spec.ts_language)
    tree = parser.parse(source_bytes)

    return LinkedNode(lower_tree(tree.root_node, spec, source_bytes))


def extract_outline(
    content: str,
    scope: ScopeConfiguration = ScopeConfiguration.SYMBOL,
    language: str = "typst",
) -> Optional[list[SymbolNode]]:
    """Parse a document and build its outline.

    Returns an empty list for unknown languages and None when the outline
    could not be built.
    """
    try:
        root = parse_source(content, language)
    except HierarchyError as e:
        logger.error("lexical hierarchy analysis failed", error=e.message, **e.details)
        return None
    if root is None:
        return []
    return build_hierarchy(root, scope)


def lower_tree(ts_root, spec: GrammarSpec, source_bytes: bytes) -> SyntaxNode:
    """Convert a tree-sitter tree into syntax nodes covering every byte.

    Raises:
        HierarchyError: The tree nests deeper than MAX_NESTING_DEPTH
    """
    children = _lower_children(
        ts_root.children, 0, len(source_bytes), ts_root.type, spec, source_bytes, 1
    )
    if not children:
        return SyntaxNode.leaf(SyntaxKind.MARKUP, "")
    return SyntaxNode.inner(SyntaxKind.MARKUP, children)


def _text(source_bytes: bytes, start: int, end: int) -> str:
    return source_bytes[start:end].decode("utf-8", errors="replace")


def _gap(source_bytes: bytes, start: int, end: int) -> SyntaxNode:
    text = _text(source_bytes, start, end)
    kind = SyntaxKind.SPACE if not text.strip() else SyntaxKind.TEXT
    return SyntaxNode.leaf(kind, text)


def _lower_children(
    ts_children,
    start: int,
    end: int,
    parent_type: str,
    spec: GrammarSpec,
    source_bytes: bytes,
    depth: int,
) -> list[SyntaxNode]:
    """Lower children inside [start, end), filling the gaps between them."""
    result = []
    cursor = start
    for child in ts_children:
        # Children that do not fit are covered by gap text instead.
        if child.start_byte < cursor or child.end_byte > end:
            continue
        if child.start_byte > cursor:
            result.append(_gap(source_bytes, cursor, child.start_byte))
        result.append(_lower(child, parent_type, spec, source_bytes, depth))
        cursor = child.end_byte
    if end > cursor:
        result.append(_gap(source_bytes, cursor, end))
    return result


def _lower(
    node, parent_type: str, spec: GrammarSpec, source_bytes: bytes, depth: int
) -> SyntaxNode:
    if depth > MAX_NESTING_DEPTH:
        raise HierarchyError.source_too_deep(node.type, node.start_byte, MAX_NESTING_DEPTH)

    text = _text(source_bytes, node.start_byte, node.end_byte)

    if node.type == "ERROR" or getattr(node, "is_missing", False):
        return SyntaxNode.leaf(SyntaxKind.ERROR, text)

    if not node.is_named:
        kind = spec.token_kinds.get(node.type)
        if kind is None:
            kind = SyntaxKind.SPACE if not text.strip() else SyntaxKind.OPERATOR
        return SyntaxNode.leaf(kind, text)

    if node.type in spec.comment_types:
        if text.startswith("//"):
            return SyntaxNode.leaf(SyntaxKind.LINE_COMMENT, text)
        return SyntaxNode.leaf(SyntaxKind.BLOCK_COMMENT, text)

    if node.type in spec.heading_types:
        return _lower_heading(node, spec, source_bytes, depth)

    kind = spec.node_kinds.get(node.type)
    if kind is SyntaxKind.CONTENT_BLOCK and parent_type in spec.section_types:
        kind = SyntaxKind.MARKUP
    if node.type in spec.leaf_types or not node.children:
        return SyntaxNode.leaf(kind or SyntaxKind.TEXT, text)

    children = _lower_children(
        node.children, node.start_byte, node.end_byte, node.type, spec, source_bytes, depth + 1
    )
    if kind is None:
        kind = SyntaxKind.MARKUP

    if node.type in spec.group_types:
        kind = _group_kind(children, parent_type, spec)
    elif node.type in spec.lambda_types:
        children = _wrap_params(children)
    elif node.type in spec.let_types:
        children = _let_closure(children)

    if kind in (SyntaxKind.LET_BINDING, SyntaxKind.FOR_LOOP):
        children = _mark_destructuring(children)

    return SyntaxNode.inner(kind, children)


def _lower_heading(node, spec: GrammarSpec, source_bytes: bytes, depth: int) -> SyntaxNode:
    """Rebuild a heading as Heading[HeadingMarker, Space, Markup, Space]."""
    start, end = node.start_byte, node.end_byte
    text = _text(source_bytes, start, end)

    marker = len(text) - len(text.lstrip("="))
    body = text[marker:]
    lead = len(body) - len(body.lstrip())
    trail = len(body) - len(body.rstrip())

    marker_end = start + marker
    content_start = marker_end + len(body[:lead].encode("utf-8"))
    content_end = end - len(body[len(body) - trail:].encode("utf-8")) if trail else end

    children = [SyntaxNode.leaf(SyntaxKind.HEADING_MARKER, text[:marker])]
    if content_start > marker_end:
        children.append(_gap(source_bytes, marker_end, content_start))
    if content_end > content_start:
        markup = _lower_children(
            node.children, content_start, content_end, node.type, spec, source_bytes, depth + 1
        )
        children.append(SyntaxNode.inner(SyntaxKind.MARKUP, markup))
    if end > max(content_end, content_start):
        children.append(_gap(source_bytes, max(content_end, content_start), end))
    return SyntaxNode.inner(SyntaxKind.HEADING, children)


def _group_kind(children: list[SyntaxNode], parent_type: str, spec: GrammarSpec) -> SyntaxKind:
    if parent_type in spec.call_types:
        return SyntaxKind.ARGS
    kinds = {child.kind for child in children}
    if SyntaxKind.NAMED in kinds or SyntaxKind.KEYED in kinds:
        return SyntaxKind.DICT
    if SyntaxKind.COMMA in kinds:
        return SyntaxKind.ARRAY
    if not kinds - {SyntaxKind.LEFT_PAREN, SyntaxKind.RIGHT_PAREN, SyntaxKind.SPACE}:
        return SyntaxKind.ARRAY
    return SyntaxKind.PARENTHESIZED


def _as_params(node: SyntaxNode) -> SyntaxNode:
    if node.kind is SyntaxKind.IDENT:
        return SyntaxNode.inner(SyntaxKind.PARAMS, [node])
    return replace(node, kind=SyntaxKind.PARAMS)


def _wrap_params(children: list[SyntaxNode]) -> list[SyntaxNode]:
    """Turn the side before `=>` of a lambda into a parameter list."""
    for index, child in enumerate(children):
        if child.kind is SyntaxKind.ARROW:
            break
        if child.kind is SyntaxKind.IDENT or child.kind in _GROUP_LIKE or child.kind is SyntaxKind.ARGS:
            children = list(children)
            children[index] = _as_params(child)
            break
    return children


def _let_closure(children: list[SyntaxNode]) -> list[SyntaxNode]:
    """Rebuild `let f(x) = body` as LetBinding[let, Closure[f, Params, =, body]]."""
    for index, child in enumerate(children):
        if child.kind is SyntaxKind.EQ:
            break
        if child.kind is not SyntaxKind.FUNC_CALL:
            continue
        signature = [
            _as_params(part) if part.kind in (SyntaxKind.ARGS,) + _GROUP_LIKE else part
            for part in child.children
        ]
        closure = SyntaxNode.inner(SyntaxKind.CLOSURE, signature + list(children[index + 1:]))
        return list(children[:index]) + [closure]
    return children


def _mark_destructuring(children: list[SyntaxNode]) -> list[SyntaxNode]:
    """A bracketed pattern before `=` / `in` destructures."""
    result = list(children)
    for index, child in enumerate(result):
        if child.kind in (SyntaxKind.EQ, SyntaxKind.IN):
            break
        if child.kind in (SyntaxKind.ARRAY, SyntaxKind.DICT):
            result[index] = replace(child, kind=SyntaxKind.DESTRUCTURING)
            break
    return result
