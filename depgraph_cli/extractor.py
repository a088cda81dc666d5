"""Lexical import-specifier extraction.

This is a heuristic scanner, not a parser. Each entry of ``IMPORT_PATTERNS``
is applied to the whole text on its own; the patterns overlap, and a single
statement can be captured by several of them, which the result set absorbs.
Strings that merely look like imports will be reported (false positives), and
syntax the table does not cover will be missed (false negatives). Both are
the accepted accuracy bound of the approach.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Set, Tuple

_QUOTES_RE = re.compile(r"['\"]")


@dataclass(frozen=True)
class ImportPattern:
    name: str
    regex: re.Pattern
    group: int = 1


IMPORT_PATTERNS: Tuple[ImportPattern, ...] = (
    # import x from './x'
    ImportPattern("es-module", re.compile(r"""import\s+.*?from\s+['"]([^'"]+)['"]""")),
    # require('./x')
    ImportPattern("require", re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")),
    # import('./x')
    ImportPattern("dynamic-import", re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)""")),
    # from "./x" (also re-exports)
    ImportPattern("from-clause", re.compile(r"""from\s+['"]([^'"]+)['"]""")),
    # import "./x" / Go import "fmt"
    ImportPattern("quoted-import", re.compile(r"""import\s+(['"]([^'"]+)['"])"""), group=2),
    # import com.acme.Widget;
    ImportPattern("statement-import", re.compile(r"import\s+([^;]+);")),
    # #include "x.h" / #include <x.h>
    ImportPattern("include", re.compile(r"""#include\s*["<]([^">]+)[">]""")),
    # using Acme.Widgets;
    ImportPattern("using", re.compile(r"using\s+([^;]+);")),
    # load('./x.js')
    ImportPattern("loader", re.compile(r"""load\s*\(\s*['"]([^'"]+)['"]\s*\)""")),
    # @import './x.css';
    ImportPattern("css-import", re.compile(r"""@import\s*['"]([^'"]+)['"]""")),
)


def clean_specifier(raw: str) -> Optional[str]:
    """Strip quotes and whitespace; ``None`` when the capture should be dropped."""
    specifier = _QUOTES_RE.sub("", raw).strip()
    if not specifier:
        return None
    if "node_modules" in specifier or specifier.startswith("http"):
        return None
    return specifier


def _scan(content: str, pattern: ImportPattern) -> Set[str]:
    found: Set[str] = set()
    for match in pattern.regex.finditer(content):
        raw = match.group(pattern.group)
        if raw is None:
            continue
        specifier = clean_specifier(raw)
        if specifier:
            found.add(specifier)
    return found


def extract_imports(content: str) -> Set[str]:
    """Return the deduplicated set of specifiers found in *content*."""
    specifiers: Set[str] = set()
    for pattern in IMPORT_PATTERNS:
        specifiers |= _scan(content, pattern)
    return specifiers


def extract_imports_by_pattern(content: str) -> Dict[str, Set[str]]:
    """Per-pattern captures, for diagnosing what the scanner sees in one file."""
    return {pattern.name: _scan(content, pattern) for pattern in IMPORT_PATTERNS}
