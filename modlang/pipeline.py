from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import storage
from .glossary import DictionaryEntry, apply_dictionary, build_dictionary
from .masking import protect_tokens, restore_markers, shield_proper_nouns
from .postproc import has_untranslated_content, validate_translation
from .terms import DEFAULT_TERMS
from .translator import ProviderError, TranslationGateway
from .utils import shorten


class ValueKind(Enum):
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SCALAR = "scalar"


def classify_value(value: Any) -> ValueKind:
    """Tag a JSON-like value; numbers, booleans and None are scalars."""
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    return ValueKind.SCALAR


@dataclass
class PipelineStats:
    total: int = 0
    translated: int = 0
    cached: int = 0
    failed: int = 0
    skipped: int = 0
    provider_errors: int = 0

    def snapshot(self) -> PipelineStats:
        return replace(self)

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class AuditTrail:
    """Lightweight audit collector for per-entry pipeline decisions."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def record(self, kind: str, payload: Dict[str, Any]) -> None:
        entry = {"kind": kind, **payload}
        with self._lock:
            self.records.append(entry)

    def as_list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self.records)


class TranslationCache:
    """Exact-text memo of final translations. Never evicted, only cleared.

    With ``storage_path`` entries are appended to a JSONL file and reloaded
    on the next run. Entries set with ``persist=False`` (fallbacks) live only
    as long as this instance.
    """

    def __init__(self, storage_path: Optional[str | Path] = None):
        self.storage_path = Path(storage_path) if storage_path else None
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()

        if self.storage_path and self.storage_path.exists():
            self._load()

    def _load(self) -> None:
        if not self.storage_path:
            return
        with open(self.storage_path, "r", encoding="utf-8") as f:
            for line in f:
                try:
                    rec = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(rec, dict) and isinstance(rec.get("src"), str) and isinstance(rec.get("tgt"), str):
                    self._entries[rec["src"]] = rec["tgt"]

    def _persist(self, source: str, target: str) -> None:
        if not self.storage_path:
            return
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.storage_path, "a", encoding="utf-8") as f:
            f.write(json.dumps({"src": source, "tgt": target}, ensure_ascii=False) + "\n")

    def get(self, source: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(source)

    def set(self, source: str, target: str, persist: bool = True) -> None:
        with self._lock:
            if self._entries.get(source) == target:
                return
            self._entries[source] = target
            if persist:
                self._persist(source, target)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            if self.storage_path and self.storage_path.exists():
                self.storage_path.unlink()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class LangFileTranslator:
    """
    Translate language resources string by string:

      protect tokens -> shield proper nouns -> dictionary -> (gateway) ->
      restore markers -> quality gate

    Without a gateway the dictionary output is the translation (offline mode).
    """

    def __init__(
        self,
        table: Optional[Sequence[DictionaryEntry]] = None,
        gateway: Optional[TranslationGateway] = None,
        proper_nouns: Optional[Sequence[str]] = None,
        parallel_workers: int = 1,
        cache: Optional[TranslationCache] = None,
        audit: Optional[AuditTrail] = None,
        logger: Optional[logging.Logger] = None,
        progress_every: int = 50,
    ):
        self.table = tuple(table) if table is not None else build_dictionary(DEFAULT_TERMS)
        self.gateway = gateway
        self.proper_nouns = tuple(proper_nouns) if proper_nouns is not None else None
        self.parallel_workers = max(1, int(parallel_workers))
        self.cache = cache if cache is not None else TranslationCache()
        self.audit = audit
        self.logger = logger
        self.progress_every = progress_every
        self._stats = PipelineStats()
        self._stats_lock = threading.Lock()

    @property
    def stats(self) -> PipelineStats:
        with self._stats_lock:
            return self._stats.snapshot()

    def reset_stats(self) -> None:
        with self._stats_lock:
            self._stats.reset()

    def clear_cache(self) -> None:
        self.cache.clear()

    def _bump(self, counter: str, n: int = 1) -> None:
        with self._stats_lock:
            setattr(self._stats, counter, getattr(self._stats, counter) + n)

    def _call_gateway(self, gateway: TranslationGateway, text: str, original: str) -> Tuple[str, bool]:
        """Return ``(text, ok)``; ``ok`` is False when the provider gave up."""
        try:
            translated = gateway.translate(text)
        except ProviderError as exc:
            self._bump("provider_errors")
            if self.logger:
                self.logger.warning("Provider failed for %r, keeping dictionary translation: %s", shorten(original), exc)
            if self.audit:
                self.audit.record("provider_error", {"source": original, "error": str(exc)})
            return text, False
        if not translated or not translated.strip():
            return text, True
        return translated, True

    def translate_string(self, text: str) -> str:
        self._bump("total")
        if not text or not text.strip():
            self._bump("skipped")
            return text

        cached = self.cache.get(text)
        if cached is not None:
            self._bump("cached")
            return cached

        protected = protect_tokens(text)
        shielded = shield_proper_nouns(protected.text, self.proper_nouns)
        result = apply_dictionary(shielded.text, self.table)

        provider_ok = True
        if self.gateway is not None and has_untranslated_content(result):
            result, provider_ok = self._call_gateway(self.gateway, result, text)

        restored = restore_markers(result, protected, shielded)
        ok, issues = validate_translation(text, restored)
        if ok:
            final = restored
            self._bump("translated")
        else:
            final = text
            self._bump("failed")
            if self.logger:
                self.logger.warning("Rejected translation of %r (%s)", shorten(text), "; ".join(issues))
            if self.audit:
                self.audit.record("fallback", {"source": text, "candidate": restored, "issues": issues})

        # degraded results are reused in this run only, a later run retries them
        self.cache.set(text, final, persist=ok and provider_ok)
        return final

    def translate_value(self, value: Any) -> Any:
        kind = classify_value(value)
        if kind is ValueKind.STRING:
            return self.translate_string(value)
        if kind is ValueKind.SEQUENCE:
            return [self.translate_value(item) for item in value]
        if kind is ValueKind.MAPPING:
            return {key: self.translate_value(item) for key, item in value.items()}
        return value

    def _translate_entry(self, key: str, value: Any) -> Any:
        try:
            return self.translate_value(value)
        except Exception as exc:  # noqa: BLE001 - one bad entry must not sink the batch
            self._bump("failed")
            if self.logger:
                self.logger.warning("Entry %s failed, keeping original: %s", key, exc)
            if self.audit:
                self.audit.record("entry_error", {"key": key, "error": f"{type(exc).__name__}: {exc}"})
            return value

    def _log_progress(self, done: int, total: int) -> None:
        if self.logger and (done == total or (self.progress_every and done % self.progress_every == 0)):
            self.logger.info("   %s/%s entries translated", done, total)

    def translate_all(self, mapping: Dict[str, Any]) -> Dict[str, Any]:
        """Translate every value of ``mapping``; output keys keep the input order."""

        keys = list(mapping.keys())
        results: List[Any] = [None] * len(keys)

        if self.parallel_workers <= 1 or len(keys) <= 1:
            for idx, key in enumerate(keys):
                results[idx] = self._translate_entry(key, mapping[key])
                self._log_progress(idx + 1, len(keys))
        else:
            executor = ThreadPoolExecutor(max_workers=self.parallel_workers)
            try:
                futures = {executor.submit(self._translate_entry, key, mapping[key]): idx for idx, key in enumerate(keys)}
                for done, future in enumerate(as_completed(futures), start=1):
                    results[futures[future]] = future.result()
                    self._log_progress(done, len(keys))
            except BaseException:
                # aborted batch: drop what has not started, cache entries stay valid
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown()

        return {key: results[idx] for idx, key in enumerate(keys)}

    def translate_language_file(self, content: str) -> str:
        """Parse a serialized language file, translate it, serialize it back.

        Raises StructuralError when ``content`` is not a JSON object.
        """
        parsed = storage.parse_language_file(content)
        if self.logger:
            self.logger.info("Translating %s keys…", len(parsed))
        translated = self.translate_all(parsed)
        return storage.dump_language_file(translated)
