"""
TypeScript language adapter for tree-sitter.

TypeScript shares the ES import grammar with JavaScript, so this adapter only
swaps the grammar: ``.tsx`` files use the TSX grammar, everything else the
plain TypeScript one.
"""
from typing import Optional, Tuple

import tree_sitter

from .javascript_adapter import JavaScriptAdapter


class TypeScriptAdapter(JavaScriptAdapter):
    """Tree-sitter adapter for TypeScript language."""

    @property
    def language_id(self) -> str:
        """Return the language identifier."""
        return "typescript"

    @property
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions."""
        return (".ts", ".tsx", ".mts", ".cts")

    def _grammar_for(self, file_path: Optional[str]) -> str:
        """Use the TSX grammar for .tsx files, TypeScript otherwise."""
        if file_path and file_path.endswith('.tsx'):
            return "tsx"
        return "typescript"

    def _load_language(self, grammar: str) -> tree_sitter.Language:
        """Load the TypeScript or TSX language object."""
        from tree_sitter_typescript import language_tsx, language_typescript

        if grammar == "tsx":
            return tree_sitter.Language(language_tsx())
        return tree_sitter.Language(language_typescript())


# Create default instance
default_typescript_adapter = TypeScriptAdapter()
