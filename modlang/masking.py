from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Pattern, Sequence, Tuple

from .terms import PROPER_NOUNS
from .utils import literal_sub


class TokenClass(Enum):
    """Control-token classes, declared in extraction order."""

    FORMAT_SPECIFIER = "FMT"
    COLOR_CODE = "CLR"
    PLACEHOLDER = "PH"
    NUMBER = "NUM"

    @property
    def prefix(self) -> str:
        return self.value


# printf / java.util.Formatter: %s, %1$s, %.2f, %5.2f, %n, %%
FORMAT_SPECIFIER_RE = re.compile(r"%\d*\.?\d*\$?[sdfbiuoxXeEfFgGaAcspnhtbHBTN%]")
COLOR_CODE_RE = re.compile(r"§[0-9a-fk-or]", re.IGNORECASE)
PLACEHOLDER_RE = re.compile(r"\{\{[^}]+\}\}|\{[^}]*\}|%%|\[[^\]]+\]|<[^>]+>")
NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?%?\b")

TOKEN_MATCHERS: Tuple[Tuple[TokenClass, Pattern[str]], ...] = (
    (TokenClass.FORMAT_SPECIFIER, FORMAT_SPECIFIER_RE),
    (TokenClass.COLOR_CODE, COLOR_CODE_RE),
    (TokenClass.PLACEHOLDER, PLACEHOLDER_RE),
    (TokenClass.NUMBER, NUMBER_RE),
)

# Later classes are restored first so a half-restored marker of one class is
# never picked up by the variant patterns of another.
RESTORE_ORDER: Tuple[TokenClass, ...] = (
    TokenClass.NUMBER,
    TokenClass.PLACEHOLDER,
    TokenClass.COLOR_CODE,
    TokenClass.FORMAT_SPECIFIER,
)


def marker(token_class: TokenClass, index: int) -> str:
    return f"<{token_class.prefix}{index}/>"


def noun_marker(index: int) -> str:
    return f"__NOUN{index}__"


def count_format_specifiers(text: str) -> int:
    return len(FORMAT_SPECIFIER_RE.findall(text or ""))


@dataclass
class ProtectedText:
    text: str
    tokens: Dict[TokenClass, List[str]] = field(default_factory=lambda: {cls: [] for cls in TokenClass})

    def of(self, token_class: TokenClass) -> List[str]:
        return self.tokens[token_class]

    def token_count(self) -> int:
        return sum(len(found) for found in self.tokens.values())


@dataclass
class ProperNounShieldResult:
    text: str
    nouns: List[str] = field(default_factory=list)


def protect_tokens(text: str) -> ProtectedText:
    """Replace every control token with an opaque ``<PREFIX{i}/>`` marker.

    Classes are scanned one at a time in ``TOKEN_MATCHERS`` order. Each pass
    only looks at the text left between markers of the previous passes, so a
    span belongs to exactly one class.
    """

    protected = ProtectedText(text=text or "")
    if not text:
        return protected

    # (is_marker, chunk)
    pieces: List[Tuple[bool, str]] = [(False, text)]
    for token_class, pattern in TOKEN_MATCHERS:
        found = protected.tokens[token_class]
        reduced: List[Tuple[bool, str]] = []
        for is_marker, chunk in pieces:
            if is_marker:
                reduced.append((True, chunk))
                continue
            cursor = 0
            for match in pattern.finditer(chunk):
                if match.start() > cursor:
                    reduced.append((False, chunk[cursor : match.start()]))
                reduced.append((True, marker(token_class, len(found))))
                found.append(match.group(0))
                cursor = match.end()
            if cursor < len(chunk):
                reduced.append((False, chunk[cursor:]))
        pieces = reduced

    protected.text = "".join(chunk for _, chunk in pieces)
    return protected


def _compile_noun_patterns(nouns: Iterable[str]) -> List[Pattern[str]]:
    # Longest first so "Elder Guardian" is shielded as a phrase before "Guardian".
    ordered = sorted(dict.fromkeys(n for n in nouns if n), key=len, reverse=True)
    return [re.compile(rf"\b{re.escape(noun)}\b") for noun in ordered]


_DEFAULT_NOUN_PATTERNS = _compile_noun_patterns(PROPER_NOUNS)


def shield_proper_nouns(text: str, nouns: Sequence[str] | None = None) -> ProperNounShieldResult:
    """Hide fixed identifiers (mob names, loaders, mod acronyms) behind ``__NOUN{i}__``.

    Matching is case-sensitive on the canonical spelling and word bounded.
    """

    patterns = _DEFAULT_NOUN_PATTERNS if nouns is None else _compile_noun_patterns(nouns)
    result = ProperNounShieldResult(text=text or "")

    def _repl(match: re.Match[str]) -> str:
        index = len(result.nouns)
        result.nouns.append(match.group(0))
        return noun_marker(index)

    for pattern in patterns:
        result.text = pattern.sub(_repl, result.text)
    return result


def _marker_variants(core: str) -> List[Pattern[str]]:
    """Delimiter variants a translation engine is known to produce for ``<core/>``."""

    return [
        re.compile(re.escape(f"<{core}/>")),
        re.compile(re.escape(f"<%{core}/>")),
        re.compile(rf"<\s*{re.escape(core)}\s*/>"),
        re.compile(re.escape(f"&lt;{core}/&gt;")),
    ]


def restore_markers(
    text: str,
    protected: ProtectedText,
    shielded: ProperNounShieldResult | None = None,
) -> str:
    """Put the original tokens and proper nouns back in place of their markers."""

    result = text or ""
    for token_class in RESTORE_ORDER:
        for index, literal in enumerate(protected.of(token_class)):
            for pattern in _marker_variants(f"{token_class.prefix}{index}"):
                result = literal_sub(pattern, literal, result)

    if shielded:
        for index, noun in enumerate(shielded.nouns):
            result = result.replace(noun_marker(index), noun)
    return result
