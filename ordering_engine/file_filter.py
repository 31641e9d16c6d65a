"""
Centralized file filtering for the ordering-lint engine.

This module decides whether a file should be analyzed at all, based on:
- Vendor/generated directory exclusions (node_modules, dist, etc.)
- Language-inappropriate or generated file name suffixes

Usage:
    from ordering_engine.file_filter import should_analyze_file

    if not should_analyze_file(file_path, language):
        return  # skip this file
"""

import os
import re
from functools import lru_cache
from typing import Dict, FrozenSet, Optional


# ============================================================================
# VENDOR / GENERATED DIRECTORY EXCLUSIONS
# ============================================================================
# These directories are universally excluded from analysis.
# They contain third-party code, build artifacts, or generated files.
EXCLUDED_DIRS: FrozenSet[str] = frozenset([
    # Package managers / dependencies
    "node_modules",
    "bower_components",
    "jspm_packages",
    "vendor",
    "vendors",

    # Build output
    "dist",
    "build",
    "out",
    ".next",  # Next.js
    ".nuxt",  # Nuxt.js
    ".svelte-kit",  # SvelteKit
    ".vercel",
    ".netlify",

    # Version control
    ".git",
    ".svn",
    ".hg",

    # Cache / temp
    ".cache",
    ".parcel-cache",
    ".turbo",
    ".nx",
    "__snapshots__",
    "coverage",
    ".nyc_output",

    # Generated code markers
    "generated",
    "__generated__",
])

# Pattern: /dirname/ or /dirname at end of path (requires full directory name match)
_EXCLUDED_DIR_PATTERN = re.compile(
    r'[/\\](?:' + '|'.join(re.escape(d) for d in EXCLUDED_DIRS) + r')(?:[/\\]|$)',
    re.IGNORECASE
)


# ============================================================================
# FILE NAME FILTERS
# ============================================================================
# Map of language -> file name suffixes that should be EXCLUDED from analysis.
EXCLUDED_SUFFIXES_BY_LANG: Dict[str, FrozenSet[str]] = {
    "typescript": frozenset([
        ".d.ts",     # Type declarations only
    ]),
    "javascript": frozenset([
        ".min.js",     # Minified bundles
        ".bundle.js",
    ]),
}


# ============================================================================
# MAIN API
# ============================================================================

@lru_cache(maxsize=4096)
def is_excluded_path(file_path: str) -> bool:
    """
    Check if a file path is in an excluded directory.

    Args:
        file_path: Absolute or relative path to check

    Returns:
        True if the file should be excluded, False otherwise
    """
    normalized = file_path.replace('\\', '/')
    return bool(_EXCLUDED_DIR_PATTERN.search(normalized))


def has_excluded_suffix(file_path: str, language: Optional[str] = None) -> bool:
    """Check if a file name ends with a suffix excluded for its language."""
    if language is None:
        language = detect_language(file_path)

    excluded = EXCLUDED_SUFFIXES_BY_LANG.get(language)
    if not excluded:
        return False

    lower_path = file_path.lower()
    return any(lower_path.endswith(suffix) for suffix in excluded)


def detect_language(file_path: str) -> Optional[str]:
    """Detect language from file extension."""
    lower = file_path.lower()
    if lower.endswith(('.ts', '.tsx', '.mts', '.cts')):
        return 'typescript'
    elif lower.endswith(('.js', '.jsx', '.mjs', '.cjs')):
        return 'javascript'
    return None


def should_analyze_file(file_path: str, language: Optional[str] = None, root: Optional[str] = None) -> bool:
    """
    Central decision point: should we analyze this file?

    Args:
        file_path: Path to the file being analyzed
        language: Language ID or None to auto-detect
        root: Scanned root; when given, only directories below it are checked

    Returns:
        True if the file should be analyzed, False if it should be skipped
    """
    dir_path = file_path
    if root is not None:
        dir_path = os.sep + os.path.relpath(file_path, root or os.curdir)

    if is_excluded_path(dir_path):
        return False

    if has_excluded_suffix(file_path, language):
        return False

    return True
