"""
JavaScript language adapter for tree-sitter.
"""
import logging
import os
import threading
from typing import Any, Dict, Iterator, List, Optional, Tuple

import tree_sitter

from .es_imports import iter_import_declarations
from .file_filter import EXCLUDED_DIRS
from .types import ImportDeclaration, LanguageAdapter

logger = logging.getLogger(__name__)


class JavaScriptAdapter(LanguageAdapter):
    """Tree-sitter adapter for JavaScript language."""

    def __init__(self):
        """Initialize JavaScript adapter; parsers are created lazily, one set per thread."""
        self._local = threading.local()

    @property
    def language_id(self) -> str:
        """Return the language identifier."""
        return "javascript"

    @property
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions."""
        return (".js", ".jsx", ".mjs", ".cjs")

    def _grammar_for(self, file_path: Optional[str]) -> str:
        """Name of the grammar used for a file."""
        return "javascript"

    def _load_language(self, grammar: str) -> tree_sitter.Language:
        """Load the tree-sitter language object for a grammar name."""
        from tree_sitter_javascript import language

        return tree_sitter.Language(language())

    def _get_parser(self, file_path: Optional[str] = None):
        """Get or create the tree-sitter parser for this thread."""
        grammar = self._grammar_for(file_path)
        parsers: Dict[str, Any] = getattr(self._local, 'parsers', None)
        if parsers is None:
            parsers = self._local.parsers = {}

        if grammar not in parsers:
            try:
                parsers[grammar] = tree_sitter.Parser(self._load_language(grammar))
                logger.debug("%s parser initialized", grammar)
            except ImportError as e:
                logger.warning("tree-sitter grammar '%s' not available: %s", grammar, e)
                parsers[grammar] = None
            except Exception as e:
                logger.warning("Could not initialize %s parser: %s", grammar, e)
                parsers[grammar] = None

        return parsers[grammar]

    def parse(self, text: str, file_path: Optional[str] = None) -> Any:
        """Parse text and return a Tree-sitter tree."""
        parser = self._get_parser(file_path)
        if parser is None:
            return None

        # Handle both str and bytes input
        if isinstance(text, bytes):
            text_bytes = text
        elif isinstance(text, str):
            text_bytes = text.encode('utf-8')
        else:
            return None

        return parser.parse(text_bytes)

    def list_files(self, paths: List[str]) -> List[str]:
        """List all files with this adapter's extensions in the given paths."""
        found = []

        for path in paths:
            if os.path.isfile(path):
                if path.endswith(self.file_extensions):
                    found.append(path)
            elif os.path.isdir(path):
                for root, dirs, files in os.walk(path):
                    # Skip hidden and vendored directories
                    dirs[:] = [d for d in dirs if not d.startswith('.') and d not in EXCLUDED_DIRS]

                    for file in files:
                        if file.endswith(self.file_extensions):
                            found.append(os.path.join(root, file))

        return found

    def iter_import_declarations(self, tree: Any) -> Iterator[ImportDeclaration]:
        """Yield top-level import declarations with a string-literal source."""
        return iter_import_declarations(tree)


# Create default instance
default_javascript_adapter = JavaScriptAdapter()
