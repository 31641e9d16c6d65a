"""
CLI runner for the ordering-lint Tree-sitter engine.

This module provides the main CLI entry point for loading adapters,
parsing files, running rules, applying fixes, and outputting results.
"""

import argparse
import concurrent.futures
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from .autofix import FixResult, fix_text, unified_diff
from .config import EngineConfig, find_config_file, get_rule_severity, load_config
from .file_filter import should_analyze_file
from .registry import (
    discover_rules, get_adapter, get_all_rules, get_enabled_rules, get_rule_ids, register_adapter
)
from .reporting import strip_broken_fix_groups
from .schema import (
    ENGINE_VERSION, PROTOCOL_KEY, PROTOCOL_VERSION, findings_to_json,
    validate_rule_options, validate_runner_output
)
from .suppressions import partition_suppressed_findings, validate_suppression_patterns
from .types import Finding, RuleContext

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ["javascript", "typescript"]
DEFAULT_DISCOVERY_PACKAGES = ["ordering_rules"]

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2

# Rule ids whose invalid options were already reported
_warned_options: Set[str] = set()


def setup_adapters():
    """Set up and register language adapters."""
    try:
        from .javascript_adapter import default_javascript_adapter
        from .typescript_adapter import default_typescript_adapter
        register_adapter(default_javascript_adapter.language_id, default_javascript_adapter)
        register_adapter(default_typescript_adapter.language_id, default_typescript_adapter)
    except ImportError as e:
        logger.warning("Could not load JavaScript/TypeScript adapters: %s", e)


def collect_files(paths: List[str], language: str) -> List[str]:
    """Collect files to analyze based on paths and language.

    Vendor/generated directories and generated files are excluded using the
    file_filter module. Directories are matched below each scanned root only,
    so a project checked out under e.g. ``build/`` is still analyzed.
    """
    adapter = get_adapter(language)
    if not adapter:
        logger.error("No adapter found for language '%s'", language)
        return []

    found = set()
    for path in paths:
        if not os.path.exists(path):
            logger.warning("Path '%s' does not exist", path)
            continue

        root = path if os.path.isdir(path) else os.path.dirname(path)
        for file_path in adapter.list_files([path]):
            if should_analyze_file(file_path, language, root=root):
                found.add(str(Path(file_path).absolute()))

    return sorted(found)


def collect_files_by_language(paths: List[str], language: str = "auto") -> List[Tuple[str, str]]:
    """Collect (file_path, language) pairs; "auto" means every supported language."""
    languages = SUPPORTED_LANGUAGES if language == "auto" else [language]
    pairs = []
    for lang in languages:
        pairs.extend((file_path, lang) for file_path in collect_files(paths, lang))
    return sorted(pairs)


def _rule_options(rule, config: EngineConfig) -> Optional[Any]:
    """Return validated options for a rule, or None when absent or invalid."""
    rule_id = rule.meta.id
    options = config.rule_configs.get(rule_id)
    if options is None:
        return None

    errors = validate_rule_options(options, rule.meta.options_schema)
    if errors:
        if rule_id not in _warned_options:
            _warned_options.add(rule_id)
            for error in errors:
                logger.warning("Ignoring options for rule '%s': %s", rule_id, error)
        return None
    return options


def analyze_text(text: str, file_path: str, language: str, rules: List,
                 config: EngineConfig) -> Tuple[List[Finding], float]:
    """Analyze source text and return findings and parse time in ms.

    Applies severity overrides, suppression comments and the per-file
    finding limit. Findings whose fix group lost a member to suppression or
    truncation, or has a member without a fix, keep their message but lose
    their autofix. Malformed suppression comments are logged.
    """
    adapter = get_adapter(language)
    if not adapter:
        return [], 0.0

    parse_start = time.time()
    tree = adapter.parse(text, file_path=file_path)
    parse_time = (time.time() - parse_start) * 1000
    if tree is None:
        logger.warning("No %s parser available, skipping %s", language, file_path)
        return [], parse_time

    findings = []
    for rule in rules:
        if language not in rule.meta.langs:
            continue

        rule_config = dict(config.language_configs.get(language, {}))
        options = _rule_options(rule, config)
        if options is not None:
            rule_config["options"] = options

        context = RuleContext(
            file_path=file_path,
            text=text,
            tree=tree,
            adapter=adapter,
            config=rule_config,
        )

        try:
            rule_findings = list(rule.visit(context))
        except Exception as e:
            logger.warning("Rule '%s' failed on %s: %s", rule.meta.id, file_path, e)
            continue

        # Apply severity overrides from config
        for finding in rule_findings:
            severity = get_rule_severity(finding.rule, config, finding.severity)
            if severity != finding.severity:
                finding = finding._replace(severity=severity)
            findings.append(finding)

    for line, error in validate_suppression_patterns(text):
        logger.warning("%s:%d: %s", file_path, line, error)

    kept, dropped = partition_suppressed_findings(findings, text)

    # Apply per-file limit
    if len(kept) > config.max_findings_per_file:
        dropped.extend(kept[config.max_findings_per_file:])
        kept = kept[:config.max_findings_per_file]

    kept, stripped = strip_broken_fix_groups(kept, dropped)
    if stripped:
        logger.debug("Dropped autofix from %d finding(s) in %s", stripped, file_path)

    return kept, parse_time


def _read_text(file_path: str) -> Optional[str]:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", file_path, e)
        return None


def analyze_file(file_path: str, language: str, rules: List, config: EngineConfig,
                 content: Optional[str] = None) -> Tuple[List[Finding], float]:
    """Analyze a single file and return findings and parse time.

    Args:
        file_path: Path to the file (used for context even if content is provided)
        language: Language to analyze
        rules: List of rules to run
        config: Engine configuration
        content: Optional file content (if None, reads from disk)
    """
    if content is None:
        content = _read_text(file_path)
        if content is None:
            return [], 0.0

    return analyze_text(content, file_path, language, rules, config)


def fix_file(file_path: str, language: str, rules: List, config: EngineConfig,
             write: bool = True) -> Tuple[Optional[str], Optional[FixResult]]:
    """Apply autofixes to a file until it is stable.

    Returns the original text and the FixResult, or (None, None) when the
    file cannot be read.
    """
    original = _read_text(file_path)
    if original is None:
        return None, None

    def analyze(text: str) -> List[Finding]:
        return analyze_text(text, file_path, language, rules, config)[0]

    result = fix_text(original, analyze, max_passes=config.max_fix_passes)

    if write and result.text != original:
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(result.text)
        logger.info("Fixed %s (%d edits in %d passes)", file_path, result.edits_applied, result.passes)

    return original, result


def _truncate_total(findings: List[Finding], config: EngineConfig) -> List[Finding]:
    if len(findings) <= config.max_total_findings:
        return findings
    kept, _ = strip_broken_fix_groups(findings[:config.max_total_findings],
                                      findings[config.max_total_findings:])
    return kept


def run_analysis_parallel(files: List[Tuple[str, str]], rules_by_language: Dict[str, List],
                          config: EngineConfig, jobs: int) -> Tuple[List[Finding], float]:
    """Run analysis on (file, language) pairs with optional parallelization.

    Results are collected in file order regardless of the number of jobs.
    """
    def run(item: Tuple[str, str]) -> Tuple[List[Finding], float]:
        file_path, language = item
        return analyze_file(file_path, language, rules_by_language.get(language, []), config)

    if jobs <= 1:
        results = [run(item) for item in files]
    else:
        results = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = [executor.submit(run, item) for item in files]
            for (file_path, _), future in zip(files, futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.warning("Failed to process %s: %s", file_path, e)
                    results.append(([], 0.0))

    all_findings = []
    total_parse_time = 0.0
    for findings, parse_time in results:
        all_findings.extend(findings)
        total_parse_time += parse_time

    return _truncate_total(all_findings, config), total_parse_time


def _location(text: Optional[str], byte_offset: int) -> str:
    if text is None:
        return f"byte {byte_offset}"
    data = text.encode('utf-8')[:byte_offset]
    line = data.count(b'\n') + 1
    col = byte_offset - (data.rfind(b'\n') + 1)
    return f"{line}:{col + 1}"


def format_output(findings: List[Finding], files_count: int, rules_count: int, metrics: Dict[str, float],
                  format_type: str, text_cache: Dict[str, str] = None) -> str:
    """Format output according to specified format."""
    if text_cache is None:
        text_cache = {}

    if format_type == "json":
        output = {
            PROTOCOL_KEY: PROTOCOL_VERSION,
            "engine_version": ENGINE_VERSION,
            "files_scanned": files_count,
            "rules_run": rules_count,
            "findings": findings_to_json(findings, text_cache),
            "metrics": metrics
        }
        return json.dumps(output, indent=2)

    elif format_type == "pretty":
        lines = [
            f"Scanned {files_count} files with {rules_count} rules",
            f"Found {len(findings)} issues",
            "",
        ]

        # Group findings by file
        by_file: Dict[str, List[Finding]] = {}
        for finding in findings:
            by_file.setdefault(finding.file, []).append(finding)

        for file_path, file_findings in sorted(by_file.items()):
            lines.append(file_path)
            text = text_cache.get(str(Path(file_path).resolve()))
            for finding in file_findings:
                fixable = " [fixable]" if finding.autofix else ""
                lines.append(
                    f"  {_location(text, finding.start_byte)}  {finding.severity:<5}  "
                    f"{finding.message} ({finding.rule}){fixable}"
                )
            lines.append("")

        lines.append(
            f"parse {metrics['parse_ms']:.1f}ms, rules {metrics['rules_ms']:.1f}ms, "
            f"total {metrics['total_ms']:.1f}ms"
        )
        return "\n".join(lines)

    else:
        raise ValueError(f"Unknown format: {format_type}")


def _rules_by_language(rule_patterns: List[str], languages: List[str]) -> Dict[str, List]:
    return {lang: get_enabled_rules(rule_patterns, lang) for lang in languages}


def _count_rules(rules_by_language: Dict[str, List]) -> int:
    return len({rule.meta.id for rules in rules_by_language.values() for rule in rules})


def _build_text_cache(files: List[Tuple[str, str]]) -> Dict[str, str]:
    text_cache = {}
    for file_path, _ in files:
        text = _read_text(file_path)
        if text is not None:
            text_cache[str(Path(file_path).resolve())] = text
    return text_cache


def analyze_paths(paths: List[str], discovery_packages: List[str] = None,
                  rule_patterns: List[str] = None, config_path: str = None,
                  language: str = "auto", jobs: int = 1) -> Dict[str, Any]:
    """
    Library function to analyze paths using the tree-sitter engine.

    Args:
        paths: List of file/directory paths to analyze
        discovery_packages: Packages to discover rules from (default: ["ordering_rules"])
        rule_patterns: Rule patterns to run (default: enabled_rules from config)
        config_path: Path to config file (default: auto-detect)
        language: "auto", "javascript" or "typescript"
        jobs: Number of worker threads

    Returns:
        Dictionary with analysis results in protocol v1 format
    """
    total_start = time.time()
    setup_adapters()

    if not config_path:
        config_path = find_config_file(paths[0] if paths else ".")
    config = load_config(config_path)

    discover_rules(discovery_packages or DEFAULT_DISCOVERY_PACKAGES)

    languages = SUPPORTED_LANGUAGES if language == "auto" else [language]
    rules_by_language = _rules_by_language(rule_patterns or config.enabled_rules, languages)

    files = collect_files_by_language(paths, language)

    rules_start = time.time()
    findings, parse_ms = run_analysis_parallel(files, rules_by_language, config, jobs)
    rules_ms = (time.time() - rules_start) * 1000

    return {
        PROTOCOL_KEY: PROTOCOL_VERSION,
        "engine_version": ENGINE_VERSION,
        "files_scanned": len(files),
        "rules_run": _count_rules(rules_by_language),
        "findings": findings_to_json(findings, _build_text_cache(files)),
        "metrics": {
            "parse_ms": parse_ms,
            "rules_ms": rules_ms,
            "total_ms": (time.time() - total_start) * 1000
        }
    }


def _list_rules(format_type: str) -> str:
    rules = sorted(get_all_rules(), key=lambda r: r.meta.id)
    if format_type == "json":
        return json.dumps([
            {
                "id": rule.meta.id,
                "description": rule.meta.description,
                "kind": rule.meta.kind,
                "fixable": rule.meta.fixable,
                "has_suggestions": rule.meta.has_suggestions,
                "options_schema": rule.meta.options_schema,
                "langs": rule.meta.langs,
            }
            for rule in rules
        ], indent=2)
    return "\n".join(
        f"{rule.meta.id:<28} {rule.meta.kind:<10} fixable={rule.meta.fixable or '-'}  {rule.meta.description}"
        for rule in rules
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ordering-lint",
        description="ordering-lint: import order checks for JavaScript and TypeScript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ordering-lint src/ --format pretty
  ordering-lint src/app.ts --lang typescript --validate
  ordering-lint src/ --fix
  ordering-lint src/ --diff
        """
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Paths to files or directories to analyze"
    )

    parser.add_argument(
        "--lang", "--language",
        default="auto",
        choices=["auto"] + SUPPORTED_LANGUAGES,
        help="Language to analyze (default: auto, by file extension)"
    )

    parser.add_argument(
        "--discover",
        default=",".join(DEFAULT_DISCOVERY_PACKAGES),
        help="Comma-separated packages to discover rules from (default: ordering_rules)"
    )

    parser.add_argument(
        "--rules",
        help="Rule patterns to run: '*' for all, or comma-separated IDs/patterns (default: from config)"
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--format",
        choices=["json", "pretty"],
        default="json",
        help="Output format: json (protocol v1) or pretty (human-readable)"
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate JSON output against schema"
    )

    parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply autofixes in place, then report what is left"
    )

    parser.add_argument(
        "--diff",
        action="store_true",
        help="Print the autofix changes as a unified diff instead of the report"
    )

    parser.add_argument(
        "--jobs",
        type=int,
        default=0,
        help="Number of parallel jobs (0=auto, 1=sequential, N=parallel)"
    )

    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List discovered rules and their metadata"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    total_start = time.time()

    setup_adapters()

    discovery_packages = [pkg.strip() for pkg in args.discover.split(",") if pkg.strip()]
    rules_discovered = discover_rules(discovery_packages)
    logger.debug("Discovered %d rules from %s: %s", rules_discovered, discovery_packages, get_rule_ids())

    if args.list_rules:
        print(_list_rules(args.format))
        return EXIT_CLEAN

    if not args.paths:
        parser.print_usage(sys.stderr)
        logger.error("No paths given")
        return EXIT_USAGE

    # Load configuration
    config_path = args.config or find_config_file(args.paths[0])
    config = load_config(config_path)
    logger.debug("Using config: %s", config_path or "defaults")

    if args.rules:
        rule_patterns = [pattern.strip() for pattern in args.rules.split(",")]
    else:
        rule_patterns = config.enabled_rules

    languages = SUPPORTED_LANGUAGES if args.lang == "auto" else [args.lang]
    rules_by_language = _rules_by_language(rule_patterns, languages)
    rules_count = _count_rules(rules_by_language)
    logger.debug("Running %d rules", rules_count)

    files = collect_files_by_language(args.paths, args.lang)
    logger.debug("Found %d files to analyze", len(files))

    if not files:
        logger.error("No files found to analyze")
        return EXIT_USAGE

    if args.diff or args.fix:
        any_diff = False
        for file_path, language in files:
            original, result = fix_file(file_path, language, rules_by_language.get(language, []),
                                        config, write=args.fix)
            if args.diff and result is not None and result.text != original:
                any_diff = True
                sys.stdout.write(unified_diff(original, result.text, os.path.relpath(file_path)))
        if args.diff:
            return EXIT_FINDINGS if any_diff else EXIT_CLEAN

    # Determine number of jobs
    jobs = args.jobs
    if jobs == 0:
        jobs = min(4, len(files), os.cpu_count() or 1)

    rules_start = time.time()
    findings, parse_time_ms = run_analysis_parallel(files, rules_by_language, config, jobs)
    rules_time_ms = (time.time() - rules_start) * 1000

    metrics = {
        "parse_ms": parse_time_ms,
        "rules_ms": rules_time_ms,
        "total_ms": (time.time() - total_start) * 1000
    }

    output = format_output(findings, len(files), rules_count, metrics, args.format,
                           _build_text_cache(files))

    # Validate output if requested
    if args.validate and args.format == "json":
        errors = validate_runner_output(json.loads(output))
        if errors:
            print("JSON validation errors:", file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            return EXIT_FINDINGS

    print(output)
    return EXIT_FINDINGS if findings else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
