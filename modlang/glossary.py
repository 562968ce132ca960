from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple

from . import storage
from .terms import DEFAULT_TERMS


@dataclass(frozen=True)
class DictionaryEntry:
    source: str
    target: str


def _pluralize(term: str) -> List[str]:
    variants = []
    if term.endswith("y") and len(term) > 2 and term[-2] not in "aeiou":
        variants.append(term[:-1] + "ies")
    elif term.endswith("s") or term.endswith("x") or term.endswith("sh") or term.endswith("ch"):
        variants.append(term + "es")
    else:
        variants.append(term + "s")
    return variants


def _plural_variants(term: str) -> List[str]:
    head, sep, last = term.rpartition(" ")
    if "-" in last:
        return []
    return [f"{head}{sep}{plural}" for plural in _pluralize(last)]


def glossary_to_map(glossary_rows: List[Dict[str, Any]]) -> Dict[str, str]:
    """Convert glossary rows to a mapping {source_term: translation}.

    Rows with an empty translation are drafts and are ignored.
    """

    mapping: Dict[str, str] = {}
    for row in glossary_rows:
        src = str(row.get("term", "")).strip()
        tgt = str(row.get("translation", "")).strip()
        if src and tgt:
            mapping[src] = tgt
    return mapping


def load_dictionary(path: Optional[str | Path], merge_defaults: bool = True) -> Dict[str, str]:
    """Load a term table from a JSON object or a ``term,translation`` CSV.

    JSON tables may map a term to ``""`` to delete it (articles, fillers).
    """

    mapping: Dict[str, str] = dict(DEFAULT_TERMS) if merge_defaults else {}
    if not path:
        return mapping

    path = Path(path)
    if path.suffix.lower() == ".csv":
        mapping.update(glossary_to_map(storage.read_glossary_csv(path)))
        return mapping

    data = storage.read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Dictionary file must contain a JSON object: {path}")
    for src, tgt in data.items():
        if not isinstance(src, str) or not isinstance(tgt, str):
            raise ValueError(f"Dictionary entries must map strings to strings: {src!r}")
        if src.strip():
            mapping[src.strip()] = tgt.strip()
    return mapping


def build_dictionary(
    mapping: Mapping[str, str] | Iterable[Tuple[str, str]],
    plural_variants: bool = True,
) -> Tuple[DictionaryEntry, ...]:
    """Freeze a term mapping into dictionary entries.

    With ``plural_variants`` each term also gets its English plural
    ("diamond" -> "diamonds") unless the table already defines it.
    Matching is case-insensitive, so terms differing only by case collapse
    onto the first one seen.
    """

    pairs = mapping.items() if isinstance(mapping, Mapping) else mapping
    explicit: Dict[str, DictionaryEntry] = {}
    for src, tgt in pairs:
        key = src.lower()
        if src and key not in explicit:
            explicit[key] = DictionaryEntry(src, tgt)

    entries = dict(explicit)
    if plural_variants:
        for entry in explicit.values():
            if not entry.target:
                continue
            for variant in _plural_variants(entry.source):
                entries.setdefault(variant.lower(), DictionaryEntry(variant, entry.target))
    return tuple(entries.values())


@lru_cache(maxsize=8)
def _compile_table(table: Tuple[DictionaryEntry, ...]) -> Tuple[Tuple[Pattern[str], str], ...]:
    # Longest source first so "fishing rod" wins over "rod". sorted() is stable.
    ordered = sorted(table, key=lambda e: len(e.source), reverse=True)
    compiled: List[Tuple[Pattern[str], str]] = []
    for entry in ordered:
        if not entry.source.strip():
            continue
        if entry.target:
            pattern = re.compile(rf"\b{re.escape(entry.source)}\b", flags=re.IGNORECASE)
        else:
            # a deletion also eats one following blank so no double space is left
            pattern = re.compile(rf"\b{re.escape(entry.source)}\b[ \t]?", flags=re.IGNORECASE)
        compiled.append((pattern, entry.target))
    return tuple(compiled)


def _match_case(matched: str, replacement: str) -> str:
    first = matched[:1]
    if replacement and first and first == first.upper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def apply_dictionary(text: str, table: Sequence[DictionaryEntry]) -> str:
    """Deterministic term substitution, longest term first, word bounded."""

    if not text or not table:
        return text
    result = text
    for pattern, target in _compile_table(tuple(table)):
        result = pattern.sub(lambda m, t=target: _match_case(m.group(0), t), result)
    return result
