"""
ordering-lint Tree-sitter engine package.

This package provides the rule engine, language adapters and CLI used to
check the order of ES import declarations in JavaScript and TypeScript.
"""

from .types import (
    Finding, RuleMeta, Rule, RuleContext, Edit, Requires,
    LanguageAdapter, ImportDeclaration, ImportSpecifier, SpecifierKind, SourceRange,
    Severity, NodeRange
)

from .registry import (
    register_rule, register_adapter, get_adapter, get_all_rules, get_rule_ids,
    get_enabled_rules, discover_rules, clear
)

from .config import (
    EngineConfig, load_config, get_default_config, save_config, find_config_file, get_rule_severity
)

from .reporting import Reporter, FindingCollector

__all__ = [
    # Types
    "Finding", "RuleMeta", "Rule", "RuleContext", "Edit", "Requires",
    "LanguageAdapter", "ImportDeclaration", "ImportSpecifier", "SpecifierKind", "SourceRange",
    "Severity", "NodeRange",

    # Registry
    "register_rule", "register_adapter", "get_adapter", "get_all_rules", "get_rule_ids",
    "get_enabled_rules", "discover_rules", "clear",

    # Config
    "EngineConfig", "load_config", "get_default_config", "save_config", "find_config_file", "get_rule_severity",

    # Reporting
    "Reporter", "FindingCollector",
]
