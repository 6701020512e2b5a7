"""Parser package for outlining Typst documents."""

from .symbols import (
    KindTag,
    NamingContext,
    ScopeConfiguration,
    SymbolEntry,
    SymbolKind,
    SymbolRole,
    make_symbol_id,
    slugify,
    to_lsp_symbol_kind,
)
from .syntax import LinkedNode, SyntaxKind, SyntaxNode
from .errors import HierarchyError, OutlineError
from .classifier import classify
from .hierarchy import SymbolNode, HierarchyBuilder, build_hierarchy, flatten_tree
from .languages import GrammarSpec, LANGUAGE_REGISTRY, LANGUAGE_EXTENSIONS, TYPST_SPEC
from .extractor import parse_source, extract_outline
from .lines import LineIndex

__all__ = [
    "KindTag",
    "NamingContext",
    "ScopeConfiguration",
    "SymbolEntry",
    "SymbolKind",
    "SymbolRole",
    "make_symbol_id",
    "slugify",
    "to_lsp_symbol_kind",
    "LinkedNode",
    "SyntaxKind",
    "SyntaxNode",
    "HierarchyError",
    "OutlineError",
    "classify",
    "SymbolNode",
    "HierarchyBuilder",
    "build_hierarchy",
    "flatten_tree",
    "GrammarSpec",
    "LANGUAGE_REGISTRY",
    "LANGUAGE_EXTENSIONS",
    "TYPST_SPEC",
    "parse_source",
    "extract_outline",
    "LineIndex",
]
