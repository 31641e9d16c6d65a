"""
Tests for suppression comments and fix-group stripping.
"""

from ordering_engine.reporting import FindingCollector, strip_broken_fix_groups
from ordering_engine.suppressions import (
    SuppressionParser, partition_suppressed_findings, validate_suppression_patterns
)
from ordering_engine.types import Edit, Finding, ImportDeclaration, SourceRange


def make_finding(start_byte, rule="imports.alphabetic_order"):
    return Finding(rule=rule, message="m", file="f.js", start_byte=start_byte,
                   end_byte=start_byte + 1, severity="warn")


def test_line_comment_suppression():
    text = "import b from 'b'\nimport a from 'a' // ordering-lint: ignore[imports.alphabetic_order]\n"
    parser = SuppressionParser(text)
    assert parser.is_suppressed("imports.alphabetic_order", 18)
    assert not parser.is_suppressed("imports.alphabetic_order", 0)


def test_block_comment_and_glob_patterns():
    text = "import a from 'a' /* ordering-lint: ignore[other.rule, imports.*] */\n"
    parser = SuppressionParser(text)
    assert parser.is_suppressed("imports.alphabetic_order", 0)
    assert parser.is_suppressed("other.rule", 5)
    assert not parser.is_suppressed("style.quotes", 0)


def test_hash_comment_is_not_a_suppression():
    parser = SuppressionParser("# ordering-lint: ignore[*]\n")
    assert parser.line_suppressions == {}


def test_byte_offsets_with_multibyte_text():
    first = "// ünïcödé\n"
    text = first + "import a from 'a' // ordering-lint: ignore[*]\n"
    parser = SuppressionParser(text)
    assert parser.is_suppressed("x", len(first.encode("utf-8")))
    assert not parser.is_suppressed("x", 0)


def test_partition():
    text = "line one\nline two // ordering-lint: ignore[imports.alphabetic_order]\n"
    findings = [make_finding(0), make_finding(9)]
    kept, suppressed = partition_suppressed_findings(findings, text)
    assert kept == [findings[0]]
    assert suppressed == [findings[1]]


def test_validate_suppression_patterns():
    text = "a // ordering-lint: ignore[]\nb // ordering-lint: ignore[x\nc // ordering-lint: ignore[x]\n"
    assert validate_suppression_patterns(text) == [
        (1, "Empty suppression pattern"),
        (2, "Unclosed suppression bracket"),
    ]


def _group_findings():
    collector = FindingCollector("imports.alphabetic_order", "f.js")
    for i, source in enumerate(["./b", "a", "c"]):
        anchor = ImportDeclaration(source=source, range=SourceRange(i * 10, i * 10 + 5), line=i + 1)
        collector.report(anchor, "m", Edit(i * 10, i * 10 + 5, "x"))
    return collector.findings


def test_strip_broken_fix_groups():
    findings = _group_findings()
    kept, stripped = strip_broken_fix_groups(findings[1:], findings[:1])
    assert stripped == 2
    assert all(f.autofix is None for f in kept)
    assert all(f.meta["fix_dropped"] for f in kept)


def test_strip_keeps_intact_groups():
    findings = _group_findings()
    other = _group_findings()
    kept, stripped = strip_broken_fix_groups(findings, other[:1])
    assert stripped == 0
    assert kept == findings


def test_fixless_member_breaks_group():
    collector = FindingCollector("imports.alphabetic_order", "f.js")
    collector.report(ImportDeclaration(source="zed", line=1), "m")
    collector.report(ImportDeclaration(source="a", range=SourceRange(20, 30), line=2), "m", Edit(20, 30, "x"))

    kept, stripped = strip_broken_fix_groups(collector.findings, [])
    assert stripped == 1
    assert all(f.autofix is None for f in kept)
    assert kept[1].meta["fix_dropped"]


def test_collector_without_range_or_fix():
    collector = FindingCollector("imports.alphabetic_order", "f.js", severity="error")
    collector.report(ImportDeclaration(source="a", line=3), "msg")
    (f,) = collector.findings
    assert (f.start_byte, f.end_byte) == (0, 0)
    assert f.autofix is None
    assert f.severity == "error"
    assert f.meta == {"line": 3, "source": "a", "fix_group": collector.fix_group}


def test_collector_anchors_rangeless_finding_to_its_line():
    text = "import b from 'b'\n// ünï\nimport { q r } from 'a'\n"
    collector = FindingCollector("imports.alphabetic_order", "f.js", text=text)
    collector.report(ImportDeclaration(source="a", line=3), "msg")
    (f,) = collector.findings
    offset = len("import b from 'b'\n// ünï\n".encode("utf-8"))
    assert (f.start_byte, f.end_byte) == (offset, offset)
