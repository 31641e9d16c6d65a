"""
Registry for rules and language adapters.

Rules live in plain packages (``ordering_rules`` by default). Any module in
such a package that exports a ``RULES`` list is picked up by
``discover_rules``; entries may be rule instances or rule classes.
"""

import fnmatch
import importlib
import logging
import pkgutil
from typing import Dict, Iterator, List, Optional
from .types import Rule, LanguageAdapter

logger = logging.getLogger(__name__)


def _iter_package_modules(package_name: str) -> Iterator:
    """Yield the package itself and every importable submodule."""
    try:
        package = importlib.import_module(package_name)
    except ImportError as e:
        logger.warning("Could not import package %s: %s", package_name, e)
        return

    yield package

    for _importer, modname, _ispkg in pkgutil.walk_packages(getattr(package, '__path__', []),
                                                            package.__name__ + "."):
        try:
            yield importlib.import_module(modname)
        except Exception as e:
            logger.warning("Failed to import %s: %s", modname, e)


class Registry:
    """Rules by id, adapters by language id."""

    def __init__(self):
        self._rules: Dict[str, Rule] = {}
        self._adapters: Dict[str, LanguageAdapter] = {}

    def register_rule(self, rule: Rule) -> bool:
        """Register a rule. Returns False when its id is already taken."""
        if rule.meta.id in self._rules:
            return False
        self._rules[rule.meta.id] = rule
        return True

    def register_adapter(self, language: str, adapter: LanguageAdapter) -> None:
        self._adapters.setdefault(language, adapter)

    def get_adapter(self, language: str) -> Optional[LanguageAdapter]:
        return self._adapters.get(language)

    def get_all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def get_rule_ids(self) -> List[str]:
        return list(self._rules)

    def get_enabled_rules(self, enabled_patterns: List[str], language: str) -> List[Rule]:
        """Rules for ``language`` whose id matches one of the glob patterns.

        ``["*"]`` enables everything, an empty list disables everything.
        """
        return [
            rule for rule in self._rules.values()
            if language in rule.meta.langs
            and any(fnmatch.fnmatch(rule.meta.id, pattern) for pattern in enabled_patterns)
        ]

    def discover_rules(self, entry_packages: List[str]) -> int:
        """Register the RULES of every module under the given packages.

        Returns the number of newly registered rules.
        """
        registered = 0
        for package_name in entry_packages:
            for module in _iter_package_modules(package_name):
                rules = getattr(module, 'RULES', None)
                if not isinstance(rules, list):
                    continue
                for rule in rules:
                    try:
                        if isinstance(rule, type):
                            rule = rule()
                        registered += self.register_rule(rule)
                    except Exception as e:
                        logger.warning("Failed to register rule from %s: %s", module.__name__, e)
        return registered

    def clear(self) -> None:
        """Clear all registered rules and adapters (mainly for testing)."""
        self._rules.clear()
        self._adapters.clear()


_global_registry = Registry()


def register_rule(rule: Rule) -> bool:
    return _global_registry.register_rule(rule)


def register_adapter(language: str, adapter: LanguageAdapter) -> None:
    _global_registry.register_adapter(language, adapter)


def get_adapter(language: str) -> Optional[LanguageAdapter]:
    return _global_registry.get_adapter(language)


def get_all_rules() -> List[Rule]:
    return _global_registry.get_all_rules()


def get_rule_ids() -> List[str]:
    return _global_registry.get_rule_ids()


def get_enabled_rules(enabled_patterns: List[str], language: str) -> List[Rule]:
    return _global_registry.get_enabled_rules(enabled_patterns, language)


def discover_rules(entry_packages: List[str]) -> int:
    """Auto-discover and register rules from packages."""
    return _global_registry.discover_rules(entry_packages)


def clear() -> None:
    """Clear the global registry (mainly for testing)."""
    _global_registry.clear()
