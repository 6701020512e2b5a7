"""Build the nested outline (lexical hierarchy) of a Typst document."""

import itertools
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from ..log import get_logger
from .classifier import classify
from .errors import HierarchyError
from .symbols import KindTag, NamingContext, ScopeConfiguration, SymbolEntry, SymbolKind, SymbolRole
from .syntax import Expr, LinkedNode, Pattern, SyntaxKind

logger = get_logger(__name__)

# Deeper syntax is rejected rather than recursed into.
MAX_NESTING_DEPTH = 200

ANONYMOUS_FUNCTION = "<anonymous>"

# Naming context a construct sets for everything beneath it.
_CONTEXT_OVERRIDES = {
    SyntaxKind.REF_MARKER: NamingContext.REFERENCE,
    SyntaxKind.LET_BINDING: NamingContext.REFERENCE,
    SyntaxKind.CLOSURE: NamingContext.FUNCTION_NAME,
    SyntaxKind.PARAMS: NamingContext.PARAMETER,
}


@dataclass
class SymbolNode:
    """A symbol entry with its nested entries.

    ``children`` is None when there are no nested entries, never an empty list.
    """
    entry: SymbolEntry
    children: Optional[list["SymbolNode"]] = None

    def to_dict(self) -> dict:
        """Convert to the serialized shape; `children` only when present."""
        result = {
            "name": self.entry.name,
            "kind": self.entry.kind.to_json(),
            "range": list(self.entry.range),
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "SymbolNode":
        for key in ("name", "kind", "range"):
            if key not in data:
                raise ValueError(f"missing field `{key}`")
        start, end = data["range"]
        entry = SymbolEntry(
            name=data["name"],
            kind=SymbolKind.from_json(data["kind"]),
            range=(int(start), int(end)),
        )
        children = [cls.from_dict(c) for c in data.get("children") or []]
        return cls(entry=entry, children=children or None)


def finish_node(entry: SymbolEntry, children: list[SymbolNode]) -> SymbolNode:
    return SymbolNode(entry=entry, children=children if children else None)


class HierarchyBuilder:
    """Depth-first walk that keeps a stack of open symbol frames.

    Each frame pairs a not yet finished entry with the children collected for
    it so far. The bottom frame is a sentinel whose children form the result.
    """

    def __init__(self, scope: ScopeConfiguration = ScopeConfiguration.SYMBOL):
        self.scope = scope
        self.stack: list[tuple[SymbolEntry, list[SymbolNode]]] = []
        self.context = NamingContext.REFERENCE
        self.depth = 0

    def run(self, root: LinkedNode) -> Optional[list[SymbolNode]]:
        """Outline the tree under `root`; None if the walk had to abort."""
        self.stack = [(SymbolEntry("", SymbolKind.heading(-1), (0, 0)), [])]
        self.context = NamingContext.REFERENCE
        self.depth = 0

        failed = False
        try:
            self.check_node(root)
        except HierarchyError as e:
            logger.error("lexical hierarchy analysis failed", error=e.message, **e.details)
            failed = True

        while len(self.stack) > 1:
            self.finish_top()

        _, forest = self.stack.pop()
        return None if failed else forest

    def finish_top(self):
        """Close the top frame into its parent's children."""
        entry, children = self.stack.pop()
        self.stack[-1][1].append(finish_node(entry, children))

    def close_to(self, height: int):
        while len(self.stack) > height:
            self.finish_top()

    @contextmanager
    def naming(self, context: NamingContext):
        """Use `context` for the duration of the block."""
        saved = self.context
        self.context = context
        try:
            yield
        finally:
            self.context = saved

    def check_node(self, node: LinkedNode):
        """Check a node and everything beneath it."""
        self.depth += 1
        try:
            if self.depth > MAX_NESTING_DEPTH:
                raise HierarchyError.too_deep(node, MAX_NESTING_DEPTH)

            symbol = classify(node, self.scope, self.context)
            with self.naming(_CONTEXT_OVERRIDES.get(node.kind, self.context)):
                if symbol is not None:
                    self._check_symbol(node, symbol)
                else:
                    self._check_structure(node)
        finally:
            self.depth -= 1

    def check_node_with(self, node: Optional[LinkedNode], context: NamingContext):
        if node is None:
            return
        with self.naming(context):
            self.check_node(node)

    def _check_symbol(self, node: LinkedNode, symbol: SymbolEntry):
        is_heading = symbol.kind.is_heading
        if is_heading:
            self._close_lower_headings(symbol.kind.level)

        self.stack.append((symbol, []))
        height = len(self.stack)

        if node.kind is not SyntaxKind.MODULE_IMPORT:
            for child in node.children():
                self.check_node(child)

        if is_heading:
            # The heading stays open for the content that follows it.
            self.close_to(height)
        else:
            self.close_to(height - 1)

    def _close_lower_headings(self, level: int):
        while len(self.stack) > 1:
            top = self.stack[-1][0].kind
            if top.is_group:
                break
            if top.is_heading and top.level < level:
                break
            self.finish_top()

    def _check_structure(self, node: LinkedNode):
        kind = node.kind
        if kind is SyntaxKind.LINE_COMMENT:
            self._check_line_comment(node)
        elif kind is SyntaxKind.LET_BINDING:
            self._check_let_binding(node)
        elif kind is SyntaxKind.FOR_LOOP:
            self._check_for_loop(node)
        elif kind is SyntaxKind.CLOSURE and self.scope.affects_symbol():
            self._check_closure(node)
        elif kind is SyntaxKind.FIELD_ACCESS:
            self._check_first_sub_expr(node.children(), self.context)
        elif kind is SyntaxKind.NAMED:
            self._check_named(node)
        elif kind is SyntaxKind.MODULE_IMPORT:
            pass
        elif kind.is_trivia() or kind.is_keyword() or kind.is_error():
            pass
        else:
            for child in node.children():
                self.check_node(child)

    def _check_line_comment(self, node: LinkedNode):
        start, end = node.range
        siblings = self.stack[-1][1]
        if siblings and _continues_comment_run(node, siblings[-1]):
            start = siblings.pop().entry.range[0]

        self.stack.append((SymbolEntry("", SymbolKind.comment_run(), (start, end)), []))
        self.finish_top()

    def _check_let_binding(self, node: LinkedNode):
        pattern = next((c for c in node.children() if c.is_(Pattern)), None)

        # `let f(x) = ..`: the closure recovers the name itself.
        if pattern is not None and pattern.cast(Pattern).is_closure():
            self.check_node_with(pattern, NamingContext.REFERENCE)
            return

        name_offset = pattern.offset if pattern is not None else None
        self.check_node_with(pattern, NamingContext.VARIABLE_BINDING)
        self._check_first_sub_expr(
            reversed(list(node.children())),
            NamingContext.REFERENCE,
            after_offset=name_offset,
        )

    def _check_for_loop(self, node: LinkedNode):
        children = list(node.children())
        pattern = next((c for c in children if c.is_(Pattern)), None)
        after_in = itertools.dropwhile(lambda c: c.kind is not SyntaxKind.IN, children)
        iterable = next((c for c in after_in if c.is_(Expr)), None)

        iterable_offset = iterable.offset if iterable is not None else None
        self.check_node_with(iterable, NamingContext.REFERENCE)
        self.check_node_with(pattern, NamingContext.VARIABLE_BINDING)
        self._check_first_sub_expr(
            reversed(children),
            NamingContext.REFERENCE,
            after_offset=iterable_offset,
        )

    def _check_closure(self, node: LinkedNode):
        children = list(node.children())
        siblings = self.stack[-1][1]
        before = len(siblings)

        if children and children[0].kind is SyntaxKind.IDENT:
            self.check_node_with(children[0], NamingContext.FUNCTION_NAME)

        body = next((c for c in reversed(children) if c.is_(Expr)), None)
        if body is None:
            return

        if len(siblings) == before:
            symbol = SymbolEntry(
                ANONYMOUS_FUNCTION,
                SymbolKind.named(SymbolRole.FUNCTION),
                node.range,
            )
        else:
            # The name was just closed as a sibling; widen it to the closure.
            symbol = replace(siblings.pop().entry, range=node.range)

        self.stack.append((symbol, []))
        height = len(self.stack)
        self.check_node_with(body, NamingContext.REFERENCE)
        self.close_to(height - 1)

    def _check_named(self, node: LinkedNode):
        in_params = self.context is NamingContext.PARAMETER
        value_context = NamingContext.REFERENCE if in_params else self.context
        self._check_first_sub_expr(reversed(list(node.children())), value_context)

        if in_params:
            ident = next((c for c in node.children() if c.kind is SyntaxKind.IDENT), None)
            self.check_node_with(ident, NamingContext.VARIABLE_BINDING)

    def _check_first_sub_expr(
        self,
        nodes: Iterable[LinkedNode],
        context: NamingContext,
        after_offset: Optional[int] = None,
    ):
        """Check the first expression in `nodes`.

        With `after_offset`, the expression is skipped unless it starts after
        that offset.
        """
        body = next((n for n in nodes if n.is_(Expr)), None)
        if body is None:
            return
        if after_offset is not None and after_offset >= body.offset:
            return
        self.check_node_with(body, context)


def _continues_comment_run(node: LinkedNode, last: SymbolNode) -> bool:
    """Whether a line comment extends the comment run closed just before it.

    Only whitespace with at most one line break may sit between the two
    comments; a blank line starts a new run.
    """
    if last.entry.kind.tag is not KindTag.COMMENT_RUN:
        return False

    previous = node.prev_raw_sibling()
    if previous is not None and previous.kind is SyntaxKind.SPACE:
        if previous.full_text().count("\n") > 1:
            return False
        previous = previous.prev_raw_sibling()

    if previous is None or previous.kind is not SyntaxKind.LINE_COMMENT:
        return False
    return previous.range[1] == last.entry.range[1]


def build_hierarchy(
    root: LinkedNode,
    scope: ScopeConfiguration = ScopeConfiguration.SYMBOL,
) -> Optional[list[SymbolNode]]:
    """Extract the outline forest of a parsed document.

    Args:
        root: Root of the parsed syntax tree
        scope: Which constructs count as symbols

    Returns:
        Top-level symbol nodes in document order, or None when the tree is
        inconsistent (the failure is logged, no partial forest is returned)
    """
    start = time.perf_counter()
    forest = HierarchyBuilder(scope).run(root)
    logger.debug(
        "lexical hierarchy analysis finished",
        scope=scope.value,
        elapsed_ms=round((time.perf_counter() - start) * 1000, 3),
    )
    return forest


def flatten_tree(nodes: list[SymbolNode], depth: int = 0) -> list[tuple[SymbolEntry, int]]:
    """Flatten symbol tree with depth information.

    Returns list of (entry, depth) tuples for indentation.
    """
    result = []
    for node in nodes:
        result.append((node.entry, depth))
        result.extend(flatten_tree(node.children or [], depth + 1))
    return result
