from __future__ import annotations

import re
from typing import List, Tuple

from .masking import count_format_specifiers
from .terms import TARGET_DIACRITICS


_LATIN_RE = re.compile(r"[a-zA-Z]")
_TARGET_LETTER_RE = re.compile(f"[{TARGET_DIACRITICS}]")


def has_untranslated_content(text: str) -> bool:
    """Heuristic: does ``text`` still look like untranslated source language?

    Any target-language diacritic counts as "already translated".
    """
    if not text or not _LATIN_RE.search(text):
        return False
    if _TARGET_LETTER_RE.search(text):
        return False
    return True


def validate_translation(original: str, candidate: str) -> Tuple[bool, List[str]]:
    """
    Structural checks of a translated string against its source.
    Returns: (ok, issues)
    """
    issues: List[str] = []
    if not candidate or not candidate.strip():
        issues.append("Empty translation")
        return False, issues

    src_count = count_format_specifiers(original)
    tr_count = count_format_specifiers(candidate)
    if src_count != tr_count:
        issues.append(f"Format specifier count changed: src={src_count} vs trans={tr_count}")

    return len(issues) == 0, issues


def quality_check(original: str, candidate: str) -> str:
    """Return ``candidate`` unless it is empty or lost/gained a format specifier.

    Word choice, length and fluency are the provider's business and are
    never used to reject a translation.
    """
    ok, _ = validate_translation(original, candidate)
    return candidate if ok else original
