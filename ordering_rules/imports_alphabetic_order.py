"""Rule: imports.alphabetic_order

Requires the top-level import declarations of a JavaScript/TypeScript file to
appear in the order defined by ``import_ordering``: flat package names A to Z,
then scoped and other names in descending order, then relative paths A to Z.

Each declaration that sits in the wrong slot is reported, with an autofix
that rewrites the slot as the declaration expected there. The fixes of one
file only produce a valid permutation when applied together, so they share
a fix group.

Examples:
- import b from 'bee'; import a from './alpha'; import c from 'cee'   # BAD
- import b from 'bee'; import c from 'cee'; import a from './alpha'   # GOOD
"""

import logging
from typing import Iterator, Sequence

from ordering_engine.reporting import FindingCollector, Reporter
from ordering_engine.types import Finding, ImportDeclaration, Requires, RuleContext, RuleMeta

from .import_fixer import build_replacement
from .import_ordering import sort_imports

logger = logging.getLogger(__name__)

MESSAGE = "Imports must be arranged in alphabetical order"


def check_import_order(declarations: Sequence[ImportDeclaration], reporter: Reporter) -> int:
    """Report every declaration not in its expected slot; returns the report count."""
    original = list(declarations)
    expected = sort_imports(original)

    reported = 0
    for actual, wanted in zip(original, expected):
        if actual is wanted:
            continue
        reporter.report(anchor=actual, message=MESSAGE, fix=build_replacement(wanted, actual))
        reported += 1
    return reported


class ImportsAlphabeticOrderRule:
    """Flag import declarations that are out of order."""

    meta = RuleMeta(
        id="imports.alphabetic_order",
        category="imports",
        tier=0,
        priority="P3",
        autofix_safety="safe",
        description="Imports must be arranged in alphabetical order",
        langs=["javascript", "typescript"],
        kind="layout",
        fixable="code",
        has_suggestions=True,
        options_schema=[],
    )

    requires = Requires(syntax=True)

    def visit(self, ctx: RuleContext) -> Iterator[Finding]:
        if not ctx.tree or not ctx.adapter:
            return iter(())

        declarations = list(ctx.adapter.iter_import_declarations(ctx.tree))
        collector = FindingCollector(self.meta.id, ctx.file_path, severity="warn", text=ctx.text)
        count = check_import_order(declarations, collector)
        if count:
            logger.debug("%s: %d of %d imports out of order", ctx.file_path, count, len(declarations))
        return iter(collector.findings)


# Export rule for auto-discovery
RULES = [ImportsAlphabeticOrderRule()]
