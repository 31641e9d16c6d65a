"""
Core types for the ordering-lint Tree-sitter engine.

This module provides shared dataclasses and types used across the engine,
adapters, and rules.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional, Protocol, Tuple
from abc import ABC, abstractmethod

# Type aliases for clarity
Severity = Literal["info", "warn", "error"]
Priority = Literal["P0", "P1", "P2", "P3"]
Tier = Literal[0, 1, 2]
NodeRange = Tuple[int, int]  # (start_byte, end_byte) 0-based

# Host-facing rule classification:
# - "problem": code that is likely wrong
# - "suggestion": code that could be done better
# - "layout": whitespace, ordering and other presentation concerns
RuleKind = Literal["problem", "suggestion", "layout"]


@dataclass(frozen=True)
class Edit:
    """A suggested edit to fix an issue."""
    start_byte: int
    end_byte: int
    replacement: str


@dataclass(frozen=True)
class Finding:
    """A finding represents an issue detected by a rule."""
    rule: str
    message: str
    file: str
    start_byte: int
    end_byte: int
    severity: Severity
    autofix: Optional[List[Edit]] = None
    meta: Optional[Dict[str, Any]] = None

    def _replace(self, **kwargs):
        """Provide NamedTuple-like _replace method for compatibility."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class RuleMeta:
    """Metadata about a rule.

    Attributes:
        id: Unique rule identifier (e.g., "imports.alphabetic_order")
        category: Rule category for grouping
        tier: Analysis tier (0=syntax only)
        priority: P0..P3 priority level
        autofix_safety: Whether autofix is safe/caution/suggest-only
        description: Human-readable description
        langs: List of supported languages
        kind: Host classification of the rule ("problem", "suggestion", "layout")
        fixable: Kind of automatic fix the rule offers ("code", "whitespace"), or None
        has_suggestions: Whether findings may carry suggested edits
        options_schema: JSON schema list for rule options; empty means no options
    """
    id: str
    category: str
    tier: Tier
    priority: Priority
    autofix_safety: Literal["safe", "caution", "suggest-only"]
    description: str = ""
    langs: List[str] = None
    kind: RuleKind = "problem"
    fixable: Optional[Literal["code", "whitespace"]] = None
    has_suggestions: bool = False
    options_schema: List[Dict[str, Any]] = None

    def __post_init__(self):
        if self.langs is None:
            object.__setattr__(self, 'langs', [])
        if self.options_schema is None:
            object.__setattr__(self, 'options_schema', [])


@dataclass(frozen=True)
class Requires:
    """Represents requirements that a rule needs to run."""
    syntax: bool = True


@dataclass
class RuleContext:
    """Context passed to rules during execution."""
    file_path: str
    text: str
    tree: Any
    adapter: 'LanguageAdapter'  # Forward reference
    config: Dict[str, Any]


class Rule(Protocol):
    """Protocol for all rules in the engine.

    Rules analyze code and return findings. They should be stateless and thread-safe.
    """
    meta: RuleMeta
    requires: Requires

    def visit(self, ctx: RuleContext) -> Iterable[Finding]:
        """Visit a file and return findings.

        Args:
            ctx: Rule context containing file path, text, tree, adapter, and config

        Returns:
            Iterable of findings for this file
        """
        ...


# Import declarations as seen by ordering rules
class SpecifierKind(str, Enum):
    """Binding clause variants of an ES import declaration."""
    DEFAULT = "default"       # import X from 'm'
    NAMED = "named"           # import { a, b as c } from 'm'
    NAMESPACE = "namespace"   # import * as ns from 'm'


@dataclass(frozen=True)
class ImportSpecifier:
    """One binding of an import declaration."""
    kind: SpecifierKind
    local_name: str
    imported_name: Optional[str] = None  # exported name for NAMED specifiers


@dataclass(frozen=True)
class SourceRange:
    """Byte span of a node in the source text (end exclusive)."""
    start_byte: int
    end_byte: int

    def as_tuple(self) -> NodeRange:
        return (self.start_byte, self.end_byte)


@dataclass(frozen=True, eq=False)
class ImportDeclaration:
    """A top-level `import ... from '<module>'` statement.

    Declarations compare by identity: two statements importing the same module
    are still different slots in the file.
    """
    source: str
    specifiers: Tuple[ImportSpecifier, ...] = field(default_factory=tuple)
    range: Optional[SourceRange] = None  # None for synthetic or malformed nodes
    line: int = 0


class LanguageAdapter(ABC):
    """Abstract base class for language adapters."""

    @property
    @abstractmethod
    def language_id(self) -> str:
        """Return the language identifier (e.g., 'typescript', 'javascript')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions (e.g., ('.js',), ('.ts', '.tsx'))."""
        pass

    @abstractmethod
    def parse(self, text: str, file_path: Optional[str] = None) -> Any:
        """Parse text and return a Tree-sitter tree, or None if no parser is available."""
        pass

    @abstractmethod
    def list_files(self, paths: List[str]) -> List[str]:
        """List all files matching this adapter's extensions in the given paths."""
        pass

    @abstractmethod
    def iter_import_declarations(self, tree: Any) -> Iterable[ImportDeclaration]:
        """Yield the top-level import declarations with a string-literal source."""
        pass

    def node_text(self, text: str, start_byte: int, end_byte: int) -> str:
        """Extract text between byte offsets."""
        try:
            return text.encode('utf-8')[start_byte:end_byte].decode('utf-8')
        except UnicodeDecodeError:
            return ""
