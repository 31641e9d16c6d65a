"""
Autofix application for ordering-lint findings.

Edits carry UTF-8 byte offsets, so they are applied on the encoded text.
``fix_text`` repeats analysis and application until the file is stable,
since a rewrite can expose further findings.
"""

import difflib
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Tuple

from .types import Edit, Finding

logger = logging.getLogger(__name__)

DEFAULT_MAX_FIX_PASSES = 10


@dataclass
class FixResult:
    """Outcome of fixing one text."""
    text: str
    passes: int = 0
    edits_applied: int = 0
    remaining: List[Finding] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.edits_applied > 0


def collect_edits(findings: Iterable[Finding]) -> List[Edit]:
    """Flatten the autofix edits of all findings."""
    edits = []
    for finding in findings:
        if finding.autofix:
            edits.extend(finding.autofix)
    return edits


def apply_edits(text: str, edits: Iterable[Edit]) -> Tuple[str, int]:
    """Apply edits to text and return (new_text, number_of_edits_applied).

    Edits are taken in start order; an edit overlapping one already accepted,
    or falling outside the text, is skipped.
    """
    data = text.encode('utf-8')
    accepted: List[Edit] = []
    last_end = -1

    for edit in sorted(edits, key=lambda e: (e.start_byte, e.end_byte)):
        if edit.start_byte < 0 or edit.end_byte > len(data) or edit.start_byte > edit.end_byte:
            logger.debug("Skipping out-of-range edit %r", edit)
            continue
        if edit.start_byte < last_end:
            logger.debug("Skipping overlapping edit %r", edit)
            continue
        accepted.append(edit)
        last_end = edit.end_byte

    # Apply from end to start so earlier offsets stay valid
    for edit in reversed(accepted):
        data = data[:edit.start_byte] + edit.replacement.encode('utf-8') + data[edit.end_byte:]

    return data.decode('utf-8'), len(accepted)


def fix_text(text: str, analyze: Callable[[str], List[Finding]],
             max_passes: int = DEFAULT_MAX_FIX_PASSES) -> FixResult:
    """Repeat analyze -> apply until no fixable finding is left.

    Args:
        text: Source text
        analyze: Callable returning the findings for a given text
        max_passes: Upper bound on analyze/apply rounds

    Returns:
        FixResult with the final text and the findings left on it
    """
    result = FixResult(text=text)
    findings = analyze(text)

    while result.passes < max_passes:
        edits = collect_edits(findings)
        if not edits:
            break

        new_text, applied = apply_edits(result.text, edits)
        result.passes += 1
        if applied == 0 or new_text == result.text:
            break

        result.text = new_text
        result.edits_applied += applied
        findings = analyze(new_text)
    else:
        if collect_edits(findings):
            logger.warning("Fixes did not converge after %d passes", max_passes)

    result.remaining = findings
    return result


def unified_diff(original: str, fixed: str, file_path: str) -> str:
    """Render the change between two texts as a unified diff."""
    return "".join(difflib.unified_diff(
        original.splitlines(keepends=True),
        fixed.splitlines(keepends=True),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
    ))
