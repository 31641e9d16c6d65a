"""
Canonical rendering of import declarations and replacement edits.

The rendered form is a single line with single quotes and no semicolon::

    import X, { a, b } from 'm'
    import { a } from 'm'
    import X from 'm'

Only default and named bindings get dedicated syntax; any other specifier
is listed inside the braces by its local name.
"""

from typing import Iterable, Optional

from ordering_engine.types import Edit, ImportDeclaration, ImportSpecifier, SpecifierKind


def render_specifiers(specifiers: Iterable[ImportSpecifier]) -> str:
    specifiers = list(specifiers)
    default = next((s for s in specifiers if s.kind is SpecifierKind.DEFAULT), None)
    rest = [s.local_name for s in specifiers if s is not default]

    parts = []
    if default is not None:
        parts.append(default.local_name)
    if rest:
        if default is not None:
            parts.append(", ")
        parts.append("{ " + ", ".join(rest) + " }")
    return "".join(parts)


def render_import(declaration: ImportDeclaration) -> str:
    return f"import {render_specifiers(declaration.specifiers)} from '{declaration.source}'"


def build_replacement(target: ImportDeclaration, original: ImportDeclaration) -> Optional[Edit]:
    """Edit that rewrites `original` in place as `target`, or None without a range."""
    if original.range is None:
        return None
    return Edit(
        start_byte=original.range.start_byte,
        end_byte=original.range.end_byte,
        replacement=render_import(target),
    )
