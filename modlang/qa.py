from __future__ import annotations

import re
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from .glossary import DictionaryEntry
from .masking import COLOR_CODE_RE, FORMAT_SPECIFIER_RE, count_format_specifiers


_SEPARATOR_LINE_RE = re.compile(r"[=\-*#~_+]{3,}")
# %% is already gone with the format specifiers
_PLACEHOLDER_STRIP_RE = re.compile(r"\{\{[^}]+\}\}|\{[^}]*\}|\[[^\]]+\]|<[^>]+>")
_DATE_TIME_RE = re.compile(r"\b[HhMmSsDdYy]{1,4}:[HhMmSsDdYy]{1,4}(?::[HhMmSsDdYy]{1,4})?\b")
_LETTER_RE = re.compile(r"[a-zA-ZğüşıöçĞÜŞİÖÇ]")
_REPEAT_RE = re.compile(r"(.)\1{4,}")
_VOWEL_RE = re.compile(r"[aeıioöuüAEIİOÖUÜyY]")
_WORD_JOINER_RE = re.compile(r"[-_:]")
_WHITESPACE_RE = re.compile(r"\s+")


def is_gibberish(text: Any) -> bool:
    """Heuristically flag garbled text.

    Decorative rule lines ("=====") and deliberately elongated words
    ("sooooooul", "TIMBEEEEER") are valid; a lone repeated character
    ("zzzzzzzzzz") or a short run of long vowel-less words is not.
    """
    if not text or not isinstance(text, str):
        return False

    if _SEPARATOR_LINE_RE.fullmatch(text.strip()):
        return False

    cleaned = FORMAT_SPECIFIER_RE.sub("", text)
    cleaned = COLOR_CODE_RE.sub("", cleaned)
    cleaned = _PLACEHOLDER_STRIP_RE.sub("", cleaned)
    cleaned = _DATE_TIME_RE.sub("", cleaned)

    trimmed = cleaned.strip()
    if not trimmed:
        return False
    if len(trimmed) <= 3:
        return False
    if len(trimmed) > 30 and _LETTER_RE.search(trimmed):
        return False

    if _REPEAT_RE.search(cleaned):
        distinct = set(_WHITESPACE_RE.sub("", cleaned).lower())
        if _LETTER_RE.search(cleaned) and len(distinct) > 3:
            return False
        return True

    if len(trimmed) <= 30:
        words = cleaned.split()
        if not words:
            return False
        suspicious = 0
        for word in words:
            # abbreviations (RF, TNT, SCS) and short words are fine
            if len(word) <= 4 or word == word.upper():
                continue
            if len(word) > 40 and not _WORD_JOINER_RE.search(word):
                suspicious += 1
            elif len(word) > 8 and not _VOWEL_RE.search(word):
                suspicious += 1
        return suspicious > len(words) / 2

    return False


def iter_string_leaves(value: Any, path: str = "") -> Iterator[Tuple[str, str]]:
    """Yield ``(path, text)`` for every string leaf of a nested language value."""

    if isinstance(value, str):
        yield path, value
    elif isinstance(value, list):
        for i, item in enumerate(value):
            yield from iter_string_leaves(item, f"{path}[{i}]")
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from iter_string_leaves(item, f"{path}.{key}" if path else str(key))


def run_basic_checks(source: Dict[str, Any], translated: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    One QA row per string leaf:
      - format_ok: same number of format specifiers as the source
      - unchanged: translation identical to the source (fallback or untranslatable)
      - gibberish: translation flagged by is_gibberish
    """
    translated_leaves = dict(iter_string_leaves(translated))
    rows: List[Dict[str, Any]] = []
    for path, src in iter_string_leaves(source):
        tr = translated_leaves.get(path, "")
        rows.append(
            {
                "key": path,
                "source": src,
                "translated": tr,
                "format_ok": count_format_specifiers(src) == count_format_specifiers(tr),
                "unchanged": tr == src,
                "gibberish": is_gibberish(tr),
            }
        )
    return rows


def terminology_report(
    source: Dict[str, Any],
    translated: Dict[str, Any],
    table: Sequence[DictionaryEntry],
) -> List[Dict[str, Any]]:
    """Return rows where a dictionary term occurs in the source but its translation is missing."""

    translated_leaves = dict(iter_string_leaves(translated))
    patterns = [
        (re.compile(rf"\b{re.escape(entry.source)}\b", flags=re.IGNORECASE), entry)
        for entry in table
        if entry.source.strip() and entry.target
    ]
    rows: List[Dict[str, Any]] = []
    for pattern, entry in patterns:
        mismatches: List[str] = []
        for path, src in iter_string_leaves(source):
            tr = translated_leaves.get(path, "")
            if not tr or not pattern.search(src):
                continue
            if entry.target.lower() not in tr.lower():
                mismatches.append(path)
        if mismatches:
            rows.append(
                {
                    "term": entry.source,
                    "expected": entry.target,
                    "occurrences": len(mismatches),
                    "keys": mismatches,
                }
            )
    return rows
