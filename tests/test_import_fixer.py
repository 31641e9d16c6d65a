"""
Tests for canonical import rendering and replacement edits.
"""

from ordering_engine.types import (
    Edit, ImportDeclaration, ImportSpecifier, SourceRange, SpecifierKind
)
from ordering_rules.import_fixer import build_replacement, render_import, render_specifiers


def default(name):
    return ImportSpecifier(SpecifierKind.DEFAULT, name)


def named(name, imported=None):
    return ImportSpecifier(SpecifierKind.NAMED, name, imported_name=imported or name)


def namespace(name):
    return ImportSpecifier(SpecifierKind.NAMESPACE, name)


def test_render_default_and_named():
    d = ImportDeclaration(source="m", specifiers=(default("X"), named("a"), named("b")))
    assert render_import(d) == "import X, { a, b } from 'm'"


def test_render_named_only():
    d = ImportDeclaration(source="m", specifiers=(named("a"),))
    assert render_import(d) == "import { a } from 'm'"


def test_render_default_only():
    d = ImportDeclaration(source="m", specifiers=(default("X"),))
    assert render_import(d) == "import X from 'm'"


def test_render_default_after_named_is_moved_first():
    specs = (named("a"), default("X"), named("b"))
    assert render_specifiers(specs) == "X, { a, b }"


def test_render_alias_uses_local_name():
    d = ImportDeclaration(source="m", specifiers=(named("c", imported="b"),))
    assert render_import(d) == "import { c } from 'm'"


def test_render_namespace_goes_into_braces():
    d = ImportDeclaration(source="m", specifiers=(namespace("ns"),))
    assert render_import(d) == "import { ns } from 'm'"


def test_render_no_specifiers():
    d = ImportDeclaration(source="./side-effect")
    assert render_import(d) == "import  from './side-effect'"


def test_render_uses_single_quotes_and_no_semicolon():
    d = ImportDeclaration(source="@scope/pkg", specifiers=(default("P"),))
    rendered = render_import(d)
    assert rendered.endswith("from '@scope/pkg'")
    assert ";" not in rendered
    assert "\n" not in rendered


def test_build_replacement_covers_original_range():
    target = ImportDeclaration(source="cee", specifiers=(default("c"),))
    original = ImportDeclaration(source="./alpha", specifiers=(default("a"),),
                                 range=SourceRange(18, 42))
    edit = build_replacement(target, original)
    assert edit == Edit(start_byte=18, end_byte=42, replacement="import c from 'cee'")


def test_build_replacement_without_range():
    target = ImportDeclaration(source="cee", specifiers=(default("c"),))
    original = ImportDeclaration(source="./alpha", specifiers=(default("a"),), range=None)
    assert build_replacement(target, original) is None


def test_build_replacement_ignores_target_range():
    target = ImportDeclaration(source="b", specifiers=(default("B"),), range=None)
    original = ImportDeclaration(source="a", specifiers=(default("A"),), range=SourceRange(0, 17))
    assert build_replacement(target, original).start_byte == 0
