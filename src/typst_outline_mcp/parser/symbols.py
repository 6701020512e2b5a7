"""Symbol data model and utility functions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from lsprotocol import types


class SymbolRole(Enum):
    """How a name is used where it appears."""
    REFERENCE = "reference"             # `#foo`
    LABEL_REFERENCE = "label_reference"  # `@foo` (reserved, never emitted)
    LABEL = "label"                     # `<foo>`
    BIBLIOGRAPHY_KEY = "bibliography_key"  # `foo:` (reserved, never emitted)
    VARIABLE = "variable"               # `let foo`
    FUNCTION = "function"               # `let foo()`


class KindTag(Enum):
    HEADING = "heading"
    NAMED = "named"
    GROUP = "group"
    COMMENT_RUN = "comment_run"


@dataclass(frozen=True)
class SymbolKind:
    """Kind of a symbol entry.

    A closed tagged union: ``HEADING`` carries a level, ``NAMED`` carries a
    role, ``GROUP`` and ``COMMENT_RUN`` carry nothing.
    """
    tag: KindTag
    level: Optional[int] = None
    role: Optional[SymbolRole] = None

    @classmethod
    def heading(cls, level: int) -> "SymbolKind":
        return cls(KindTag.HEADING, level=level)

    @classmethod
    def named(cls, role: SymbolRole) -> "SymbolKind":
        return cls(KindTag.NAMED, role=role)

    @classmethod
    def group(cls) -> "SymbolKind":
        return cls(KindTag.GROUP)

    @classmethod
    def comment_run(cls) -> "SymbolKind":
        return cls(KindTag.COMMENT_RUN)

    @property
    def is_heading(self) -> bool:
        return self.tag is KindTag.HEADING

    @property
    def is_group(self) -> bool:
        return self.tag is KindTag.GROUP

    def label(self) -> str:
        """Short display name ("heading", "function", "group", ...)."""
        if self.tag is KindTag.NAMED:
            return self.role.value
        return self.tag.value

    def to_json(self) -> Union[str, dict]:
        if self.tag is KindTag.HEADING:
            return {"heading": self.level}
        if self.tag is KindTag.NAMED:
            return {"named": self.role.value}
        return self.tag.value

    @classmethod
    def from_json(cls, data: Union[str, dict]) -> "SymbolKind":
        if isinstance(data, str):
            tag = KindTag(data)
            if tag in (KindTag.HEADING, KindTag.NAMED):
                raise ValueError(f"Symbol kind {data!r} needs a payload")
            return cls(tag)
        if "heading" in data:
            return cls.heading(int(data["heading"]))
        if "named" in data:
            return cls.named(SymbolRole(data["named"]))
        raise ValueError(f"Unknown symbol kind: {data!r}")


@dataclass(frozen=True)
class SymbolEntry:
    """One named or anonymous region of a document."""
    name: str                   # Empty for groups and comment runs
    kind: SymbolKind
    range: tuple[int, int]      # Half-open byte span in the source


class ScopeConfiguration(Enum):
    """Which constructs count as symbols for one traversal."""
    SYMBOL = "symbol"   # identifiers, labels and headings
    BRACED = "braced"   # headings plus anonymous groups for every block

    def affects_symbol(self) -> bool:
        return self is ScopeConfiguration.SYMBOL

    def affects_markup(self) -> bool:
        return self is ScopeConfiguration.BRACED

    def affects_block(self) -> bool:
        return self is ScopeConfiguration.BRACED

    def affects_expr(self) -> bool:
        return self is ScopeConfiguration.BRACED

    def affects_heading(self) -> bool:
        return self in (ScopeConfiguration.SYMBOL, ScopeConfiguration.BRACED)


class NamingContext(Enum):
    """How the next identifier is classified during traversal."""
    REFERENCE = "reference"
    FUNCTION_NAME = "function_name"
    VARIABLE_BINDING = "variable_binding"
    PARAMETER = "parameter"


_LSP_KINDS = {
    SymbolRole.VARIABLE: types.SymbolKind.Variable,
    SymbolRole.FUNCTION: types.SymbolKind.Function,
    SymbolRole.LABEL: types.SymbolKind.Constant,
}


def to_lsp_symbol_kind(kind: SymbolKind) -> Optional[types.SymbolKind]:
    """Map a symbol kind to its LSP kind, or None when pickers omit it."""
    if kind.tag is KindTag.HEADING:
        return types.SymbolKind.Namespace
    if kind.tag is KindTag.NAMED:
        return _LSP_KINDS.get(kind.role)
    return None


def slugify(text: str) -> str:
    """Convert file path to slug format.

    Replace / with - and . with - for use in symbol IDs.
    Example: chapters/intro.typ -> chapters-intro-typ
    """
    return text.replace("/", "-").replace(".", "-")


def make_symbol_id(file_path: str, qualified_name: str) -> str:
    """Generate unique symbol ID.

    Format: {file_slug}::{qualified_name}
    Example: main-typ::Introduction.setup
    """
    return f"{slugify(file_path)}::{qualified_name}"
