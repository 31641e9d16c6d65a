"""
Tests for imports.alphabetic_order rule.

This module tests detection of out-of-order import declarations and
verification of the autofix rewriting each slot.
"""

from typing import Optional

from ordering_engine.types import Edit, ImportDeclaration, SourceRange
from ordering_rules.imports_alphabetic_order import (
    MESSAGE, RULES, ImportsAlphabeticOrderRule, check_import_order
)

from conftest import apply_fixes, run_rule

RULE = ImportsAlphabeticOrderRule()


class ListReporter:
    """Reporter that records raw report calls."""

    def __init__(self):
        self.calls = []

    def report(self, anchor: ImportDeclaration, message: str, fix: Optional[Edit] = None) -> None:
        self.calls.append((anchor, message, fix))


def decl(source: str, start: int = None) -> ImportDeclaration:
    rng = SourceRange(start, start + 10) if start is not None else None
    return ImportDeclaration(source=source, range=rng)


# ---------------------------------------------------------------------------
# check_import_order on plain declarations
# ---------------------------------------------------------------------------

def test_scenario_reports_misplaced_slots():
    bee, alpha, cee = decl("bee", 0), decl("./alpha", 20), decl("cee", 44)
    reporter = ListReporter()

    count = check_import_order([bee, alpha, cee], reporter)

    assert count == 2
    assert [call[0] for call in reporter.calls] == [alpha, cee]
    assert all(call[1] == MESSAGE for call in reporter.calls)
    assert reporter.calls[0][2].start_byte == 20
    assert reporter.calls[0][2].replacement == "import  from 'cee'"
    assert reporter.calls[1][2].replacement == "import  from './alpha'"


def test_sorted_declarations_report_nothing():
    reporter = ListReporter()
    declarations = [decl("lodash", 0), decl("react", 10), decl("@scope/pkg", 20), decl("./utils", 30)]
    assert check_import_order(declarations, reporter) == 0
    assert reporter.calls == []


def test_empty_and_single():
    reporter = ListReporter()
    assert check_import_order([], reporter) == 0
    assert check_import_order([decl("./only", 0)], reporter) == 0
    assert reporter.calls == []


def test_missing_range_reports_without_fix():
    reporter = ListReporter()
    declarations = [decl("./b"), decl("a")]

    assert check_import_order(declarations, reporter) == 2
    assert [call[2] for call in reporter.calls] == [None, None]


def test_report_count_equals_mismatched_positions():
    declarations = [decl(s, i * 20) for i, s in enumerate(["./z", "b", "a", "@x/y"])]
    reporter = ListReporter()
    count = check_import_order(declarations, reporter)
    # expected order: a, b, @x/y, ./z
    assert count == 3
    assert [c[0].source for c in reporter.calls] == ["./z", "a", "@x/y"]


# ---------------------------------------------------------------------------
# Rule on parsed source
# ---------------------------------------------------------------------------

SCENARIO = (
    "import b from 'bee'\n"
    "import a from './alpha'\n"
    "import c from 'cee'\n"
)


def test_rule_scenario_javascript():
    findings = run_rule(RULE, SCENARIO)

    assert len(findings) == 2
    assert [f.start_byte for f in findings] == [20, 44]
    assert [f.end_byte for f in findings] == [43, 63]
    assert findings[0].autofix[0].replacement == "import c from 'cee'"
    assert findings[1].autofix[0].replacement == "import a from './alpha'"
    assert all(f.message == MESSAGE for f in findings)
    assert all(f.rule == "imports.alphabetic_order" for f in findings)
    assert all(f.severity == "warn" for f in findings)
    assert [f.meta["line"] for f in findings] == [2, 3]


def test_rule_fixes_converge_in_one_pass():
    findings = run_rule(RULE, SCENARIO)
    fixed = apply_fixes(SCENARIO, findings)

    assert fixed == (
        "import b from 'bee'\n"
        "import c from 'cee'\n"
        "import a from './alpha'\n"
    )
    assert run_rule(RULE, fixed) == []


def test_rule_findings_share_fix_group():
    findings = run_rule(RULE, SCENARIO)
    groups = {f.meta["fix_group"] for f in findings}
    assert len(groups) == 1


def test_rule_sorted_file_has_no_findings():
    code = (
        "import _ from 'lodash';\n"
        "import React, { useState } from 'react';\n"
        "import { Button } from '@ui/kit';\n"
        "import api from '../api';\n"
        "import { helper } from './utils';\n"
    )
    assert run_rule(RULE, code) == []


def test_rule_renders_default_and_named_specifiers():
    code = (
        "import { helper as h } from './utils';\n"
        "import React, { useState, useEffect } from 'react';\n"
    )
    findings = run_rule(RULE, code)
    assert len(findings) == 2
    assert findings[0].autofix[0].replacement == "import React, { useState, useEffect } from 'react'"
    assert findings[1].autofix[0].replacement == "import { h } from './utils'"

    fixed = apply_fixes(code, findings)
    assert fixed == (
        "import React, { useState, useEffect } from 'react'\n"
        "import { h } from './utils'\n"
    )
    assert run_rule(RULE, fixed) == []


def test_rule_ignores_non_top_level_and_non_import_statements():
    code = (
        "import b from 'bee'\n"
        "export { x } from 'aaa'\n"
        "async function load() {\n"
        "  const m = await import('aardvark')\n"
        "  return m\n"
        "}\n"
        "import c from 'cee'\n"
    )
    assert run_rule(RULE, code) == []


def test_rule_typescript():
    code = (
        "import { Component } from './component'\n"
        "import type { Props } from './props'\n"
        "import express from 'express'\n"
    )
    findings = run_rule(RULE, code, language="typescript")
    assert len(findings) == 3
    fixed = apply_fixes(code, findings)
    assert fixed.splitlines()[0] == "import express from 'express'"
    assert run_rule(RULE, fixed, language="typescript") == []


def test_rule_typescript_skips_import_require():
    code = (
        "import fs = require('fs')\n"
        "import b from 'bee'\n"
        "import a from './alpha'\n"
    )
    assert run_rule(RULE, code, language="typescript") == []


def test_rule_tsx_file():
    code = (
        "import './styles.css'\n"
        "import React from 'react'\n"
        "export const App = () => <div />\n"
    )
    findings = run_rule(RULE, code, language="typescript", file_path="App.tsx")
    assert len(findings) == 2


def test_rule_meta():
    meta = RULE.meta
    assert meta.id == "imports.alphabetic_order"
    assert meta.kind == "layout"
    assert meta.fixable == "code"
    assert meta.has_suggestions is True
    assert meta.options_schema == []
    assert set(meta.langs) == {"javascript", "typescript"}


def test_rule_exported_for_discovery():
    assert len(RULES) == 1
    assert RULES[0].meta.id == "imports.alphabetic_order"
