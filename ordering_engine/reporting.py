"""
Reporting sink used by rules to turn diagnostics into findings.

Rules that work on higher-level values than syntax nodes (for example
ImportDeclaration) report through a ``Reporter``; ``FindingCollector`` is the
engine's implementation and produces ``Finding`` objects.
"""

import itertools
from typing import Iterable, List, Optional, Protocol, Set, Tuple

from .types import Edit, Finding, ImportDeclaration, Severity

_fix_group_counter = itertools.count(1)


class Reporter(Protocol):
    """Diagnostic sink: one call per diagnostic."""

    def report(self, anchor: ImportDeclaration, message: str, fix: Optional[Edit] = None) -> None:
        ...


def new_fix_group(rule_id: str) -> str:
    """Return a fresh fix group identifier for one rule pass."""
    return f"{rule_id}#{next(_fix_group_counter)}"


class FindingCollector:
    """Reporter that collects findings for one rule on one file.

    Every finding collected by one instance shares its fix group: the edits
    only converge on a valid file when they are applied together. A finding
    reported without a fix still joins the group, which then cannot be
    applied at all.
    """

    def __init__(self, rule_id: str, file_path: str, severity: Severity = "warn",
                 fix_group: Optional[str] = None, text: Optional[str] = None):
        self.rule_id = rule_id
        self.file_path = file_path
        self.severity = severity
        self.fix_group = fix_group or new_fix_group(rule_id)
        self.findings: List[Finding] = []
        self._data = text.encode('utf-8') if text is not None else None

    def _line_start_byte(self, line: int) -> int:
        # Anchors without a range are located at the start of their line
        if self._data is None or line <= 1:
            return 0
        offset = 0
        for _ in range(line - 1):
            offset = self._data.find(b'\n', offset)
            if offset == -1:
                return len(self._data)
            offset += 1
        return offset

    def report(self, anchor: ImportDeclaration, message: str, fix: Optional[Edit] = None) -> None:
        if anchor.range is not None:
            start_byte, end_byte = anchor.range.as_tuple()
        else:
            start_byte = end_byte = self._line_start_byte(anchor.line)

        self.findings.append(Finding(
            rule=self.rule_id,
            message=message,
            file=self.file_path,
            start_byte=start_byte,
            end_byte=end_byte,
            severity=self.severity,
            autofix=[fix] if fix is not None else None,
            meta={"line": anchor.line, "source": anchor.source, "fix_group": self.fix_group},
        ))

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self):
        return iter(self.findings)


def fix_group_of(finding: Finding) -> Optional[str]:
    """Return the fix group of a finding, if it has one."""
    return (finding.meta or {}).get("fix_group")


def strip_broken_fix_groups(kept: Iterable[Finding], dropped: Iterable[Finding]) -> Tuple[List[Finding], int]:
    """Remove autofix from kept findings whose fix group is incomplete.

    A group is incomplete when one of its members was dropped or when a
    kept member has no autofix. Returns the new list of kept findings and
    how many were stripped.
    """
    kept = list(kept)
    broken: Set[str] = {g for g in (fix_group_of(f) for f in dropped) if g}
    broken.update(g for g in (fix_group_of(f) for f in kept if not f.autofix) if g)

    result = []
    stripped = 0
    for finding in kept:
        if finding.autofix and fix_group_of(finding) in broken:
            meta = dict(finding.meta or {})
            meta.pop("fix_group", None)
            meta["fix_dropped"] = True
            finding = finding._replace(autofix=None, meta=meta)
            stripped += 1
        result.append(finding)
    return result, stripped
