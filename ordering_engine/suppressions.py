"""
Suppression system for ordering-lint rules.

This module provides functionality to parse and check suppression comments
in source code to selectively disable rule findings:

    import b from 'b' // ordering-lint: ignore[imports.alphabetic_order]
    import a from 'a' /* ordering-lint: ignore[imports.*] */

A suppression applies to findings that start on the same line.
"""

import fnmatch
import re
from typing import Dict, List, Set, Tuple

_IGNORE_PATTERN = re.compile(
    r'(?://|/\*)\s*ordering-lint:\s*ignore\s*\[\s*([^\]]+)\s*\]',
    re.IGNORECASE
)
_MALFORMED_PATTERN = re.compile(
    r'(?://|/\*)\s*ordering-lint:\s*ignore\s*\[[^\]]*(?:\]|$)',
    re.IGNORECASE
)


class SuppressionParser:
    """Parser for ordering-lint suppression comments."""

    def __init__(self, text: str):
        self.text = text
        self.lines = text.split('\n')
        self._data = text.encode('utf-8')
        self._parse_suppressions()

    def _parse_suppressions(self):
        """Parse all suppression comments in the text."""
        self.line_suppressions: Dict[int, Set[str]] = {}  # line_number -> {rule_patterns}

        for line_num, line in enumerate(self.lines, 1):
            patterns = self._extract_suppression_patterns(line)
            if patterns:
                self.line_suppressions[line_num] = patterns

    def _extract_suppression_patterns(self, line: str) -> Set[str]:
        """Extract suppression patterns from a line."""
        patterns = set()

        for match in _IGNORE_PATTERN.finditer(line):
            # Split on commas and clean up whitespace
            for pattern in match.group(1).split(','):
                pattern = pattern.strip()
                if pattern:
                    patterns.add(pattern)

        return patterns

    def is_suppressed(self, rule_id: str, start_byte: int) -> bool:
        """Check if a rule finding should be suppressed."""
        line_num = self._byte_to_line(start_byte)

        for pattern in self.line_suppressions.get(line_num, ()):
            if self._matches_pattern(rule_id, pattern):
                return True

        return False

    def _byte_to_line(self, byte_offset: int) -> int:
        """Convert UTF-8 byte offset to 1-based line number."""
        if byte_offset < 0:
            return 1
        if byte_offset >= len(self._data):
            return len(self.lines)

        return self._data[:byte_offset].count(b'\n') + 1

    def _matches_pattern(self, rule_id: str, pattern: str) -> bool:
        """Check if a rule ID matches a suppression pattern (exact or glob, e.g. imports.*)."""
        return rule_id == pattern or fnmatch.fnmatch(rule_id, pattern)


def partition_suppressed_findings(findings: List, text: str) -> Tuple[List, List]:
    """Split findings into (kept, suppressed)."""
    if not findings:
        return list(findings), []

    parser = SuppressionParser(text)
    kept, suppressed = [], []

    for finding in findings:
        if parser.is_suppressed(finding.rule, finding.start_byte):
            suppressed.append(finding)
        else:
            kept.append(finding)

    return kept, suppressed


def validate_suppression_patterns(text: str) -> List[Tuple[int, str]]:
    """
    Validate suppression patterns in text and return any errors.

    Returns:
        List of (line_number, error_message) tuples
    """
    errors = []

    for line_num, line in enumerate(text.split('\n'), 1):
        for match in _MALFORMED_PATTERN.finditer(line):
            comment = match.group(0)
            if not comment.endswith(']'):
                errors.append((line_num, "Unclosed suppression bracket"))
            elif re.search(r'\[\s*\]', comment):
                errors.append((line_num, "Empty suppression pattern"))

    return errors
