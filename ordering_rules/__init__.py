"""
ordering-lint Rules Package

This package contains the rules that check ES import declarations.
Rules are discovered and registered by the engine when this package is
passed to ``--discover`` (the default).

To add a new rule:
1. Create a Python file in this directory (e.g., my_rule.py)
2. Define your rule class implementing the Rule protocol
3. Create a RULES list containing your rule instance, or call register(rule)

Example rule structure:

```python
from ordering_engine.types import RuleMeta, Requires, RuleContext, Finding

class MyRule:
    meta = RuleMeta(
        id="imports.my_rule",
        category="imports",
        tier=0,
        priority="P2",
        autofix_safety="safe",
        description="Detects my specific issue",
        langs=["javascript", "typescript"]
    )

    requires = Requires(syntax=True)

    def visit(self, ctx: RuleContext) -> Iterable[Finding]:
        ...

RULES = [MyRule()]
```
"""

from ordering_engine.registry import register_rule
from ordering_engine.types import Rule


def register(rule: Rule) -> Rule:
    """Register a rule with the global registry and return it."""
    register_rule(rule)
    return rule
