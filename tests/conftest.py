"""Shared fixtures and helpers for ordering-lint tests."""

from typing import Any, Dict, List

import pytest

from ordering_engine import registry
from ordering_engine.javascript_adapter import JavaScriptAdapter
from ordering_engine.types import Finding, RuleContext
from ordering_engine.typescript_adapter import TypeScriptAdapter

ADAPTERS = {
    "javascript": JavaScriptAdapter(),
    "typescript": TypeScriptAdapter(),
}

EXTENSIONS = {
    "javascript": "js",
    "typescript": "ts",
}


def create_test_context(code: str, language: str = "javascript", config: Dict[str, Any] = None,
                        file_path: str = None) -> RuleContext:
    """Create a RuleContext for testing; skips the test when the grammar is unavailable."""
    adapter = ADAPTERS[language]
    file_path = file_path or f"test.{EXTENSIONS[language]}"

    tree = adapter.parse(code, file_path=file_path)
    if tree is None:
        pytest.skip(f"tree-sitter grammar for {language} not available")

    return RuleContext(
        file_path=file_path,
        text=code,
        tree=tree,
        adapter=adapter,
        config=config or {},
    )


def run_rule(rule, code: str, language: str = "javascript", **kwargs) -> List[Finding]:
    """Helper to run a rule on test code."""
    return list(rule.visit(create_test_context(code, language, **kwargs)))


def apply_fixes(code: str, findings: List[Finding]) -> str:
    """Apply autofix edits from findings to the code, all at once."""
    all_edits = []
    for finding in findings:
        if finding.autofix:
            all_edits.extend(finding.autofix)

    # Apply from end to start so offsets stay valid
    data = code.encode('utf-8')
    for edit in sorted(all_edits, key=lambda e: e.start_byte, reverse=True):
        data = data[:edit.start_byte] + edit.replacement.encode('utf-8') + data[edit.end_byte:]
    return data.decode('utf-8')


@pytest.fixture
def js_adapter():
    return ADAPTERS["javascript"]


@pytest.fixture
def ts_adapter():
    return ADAPTERS["typescript"]


@pytest.fixture
def clean_registry():
    """Empty global registry for the duration of a test."""
    registry.clear()
    yield registry
    registry.clear()
