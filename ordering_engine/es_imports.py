"""
Extraction of ES import declarations from tree-sitter syntax trees.

Shared by the JavaScript and TypeScript adapters: both grammars produce the
same ``import_statement`` / ``import_clause`` shape for ES module imports.

Only direct children of the program node are considered, and only those whose
module source is a string literal. TypeScript's ``import x = require('y')``
keeps its string inside an ``import_require_clause`` and is therefore skipped.
"""

import logging
from typing import Any, Iterator, Optional

from .types import ImportDeclaration, ImportSpecifier, SourceRange, SpecifierKind

logger = logging.getLogger(__name__)

_QUOTES = ('"', "'")


def node_text_to_str(node_text: Any) -> str:
    """Helper to convert tree-sitter node.text to string, handling bytes/str."""
    if node_text is None:
        return ""
    if isinstance(node_text, bytes):
        return node_text.decode('utf-8', errors='ignore')
    return str(node_text)


def string_literal_value(string_node) -> Optional[str]:
    """Return the contents of a quoted string node, or None if it is not a plain literal."""
    if string_node is None:
        return None
    text = node_text_to_str(getattr(string_node, 'text', None))
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        return text[1:-1]
    return None


def iter_import_declarations(tree) -> Iterator[ImportDeclaration]:
    """Yield the top-level import declarations of a parsed file in source order."""
    if tree is None:
        return

    root_node = tree.root_node if hasattr(tree, 'root_node') else tree
    for node in getattr(root_node, 'children', []):
        if node.type != 'import_statement':
            continue
        declaration = declaration_from_node(node)
        if declaration is not None:
            yield declaration


def declaration_from_node(node) -> Optional[ImportDeclaration]:
    """Build an ImportDeclaration from an ``import_statement`` node.

    Returns None when the statement has no string-literal source.
    """
    source = None
    specifiers = []

    for child in node.children:
        if child.type == 'string':
            source = string_literal_value(child)
        elif child.type == 'import_clause':
            specifiers.extend(_clause_specifiers(child))

    if source is None:
        logger.debug("Skipping import without a literal source at line %d", node.start_point[0] + 1)
        return None

    return ImportDeclaration(
        source=source,
        specifiers=tuple(specifiers),
        range=_node_range(node),
        line=node.start_point[0] + 1,
    )


def _node_range(node) -> Optional[SourceRange]:
    # Malformed statements get no range so that nothing rewrites them
    if getattr(node, 'has_error', False) or getattr(node, 'is_missing', False):
        return None
    return SourceRange(node.start_byte, node.end_byte)


def _clause_specifiers(clause) -> Iterator[ImportSpecifier]:
    for child in clause.children:
        # Default import: import X from 'module'
        if child.type == 'identifier':
            yield ImportSpecifier(SpecifierKind.DEFAULT, node_text_to_str(child.text))

        # Namespace import: import * as X from 'module'
        elif child.type == 'namespace_import':
            for ns_child in child.children:
                if ns_child.type == 'identifier':
                    yield ImportSpecifier(SpecifierKind.NAMESPACE, node_text_to_str(ns_child.text))
                    break

        # Named imports: import { a, b as c } from 'module'
        elif child.type == 'named_imports':
            for spec in child.children:
                if spec.type == 'import_specifier':
                    specifier = _named_specifier(spec)
                    if specifier is not None:
                        yield specifier


def _named_specifier(spec) -> Optional[ImportSpecifier]:
    imported = _export_name(spec.child_by_field_name('name'))
    alias_node = spec.child_by_field_name('alias')
    local = _export_name(alias_node) if alias_node is not None else imported
    if not local:
        return None
    return ImportSpecifier(SpecifierKind.NAMED, local, imported_name=imported)


def _export_name(node) -> Optional[str]:
    if node is None:
        return None
    if node.type == 'string':
        return string_literal_value(node)
    return node_text_to_str(node.text)
