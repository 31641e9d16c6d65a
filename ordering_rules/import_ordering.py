"""
Ordering of ES import declarations by module string.

Modules are grouped into three categories by their leading character:

- RELATIVE: starts with ``.`` (``./utils``, ``../api``)
- FLAT: starts with a lowercase ASCII letter (``react``, ``lodash/get``)
- OTHER: everything else (``@scope/pkg``, ``React``, ``/abs/path``, ``''``)

Two modules of the same RELATIVE or FLAT category compare ascending; every
other pair compares descending. The comparator never reports equality, so
ties are broken by argument position.

For a typical file this yields: flat packages A to Z, then scoped and other
names, then relative paths::

    lodash, react, React, @scope/pkg, ../api, ./utils
"""

import functools
import re
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from ordering_engine.types import ImportDeclaration

_RELATIVE_RE = re.compile(r'^\.')
_FLAT_RE = re.compile(r'^[a-z]')

ASCENDING = 1
DESCENDING = -1


class ModuleCategory(Enum):
    RELATIVE = "relative"
    FLAT = "flat"
    OTHER = "other"


ORDERING_SENSE: Dict[Tuple[ModuleCategory, ModuleCategory], int] = {
    (a, b): DESCENDING for a in ModuleCategory for b in ModuleCategory
}
ORDERING_SENSE[(ModuleCategory.RELATIVE, ModuleCategory.RELATIVE)] = ASCENDING
ORDERING_SENSE[(ModuleCategory.FLAT, ModuleCategory.FLAT)] = ASCENDING


def classify_module(source: str) -> ModuleCategory:
    """Return the category of a module string."""
    if _RELATIVE_RE.match(source):
        return ModuleCategory.RELATIVE
    if _FLAT_RE.match(source):
        return ModuleCategory.FLAT
    return ModuleCategory.OTHER


def compare_modules(a: str, b: str) -> int:
    """Compare two module strings; returns 1 or -1, never 0."""
    sense = ORDERING_SENSE[(classify_module(a), classify_module(b))]
    return sense if a > b else -sense


def compare_imports(a: ImportDeclaration, b: ImportDeclaration) -> int:
    return compare_modules(a.source, b.source)


def sort_imports(declarations: Iterable[ImportDeclaration]) -> List[ImportDeclaration]:
    """Return the declarations in expected order as a new list."""
    return sorted(declarations, key=functools.cmp_to_key(compare_imports))
