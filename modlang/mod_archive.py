from __future__ import annotations

import json
import logging
import re
import shutil
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence

from . import storage


MOD_SUFFIXES = (".jar", ".zip")

_INCLUDE_DIRS = (
    "/lang/",
    "/localization/",
    "/quests/",
    "/questbook/",
    "/advancements/",
    "/books/",
    "/texts/",
    "/jei/",
    "/descriptions/",
)

_TOML_FIELDS = {
    "mod_id": re.compile(r'modId\s*=\s*"([^"]+)"'),
    "version": re.compile(r'version\s*=\s*"([^"]+)"'),
    "name": re.compile(r'displayName\s*=\s*"([^"]+)"'),
}


@dataclass
class ModMetadata:
    mod_id: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    loader: Optional[str] = None


@dataclass
class LangResource:
    """A translatable JSON file read from inside a mod archive."""

    path: str
    content: str
    type: str = "unknown"
    translated: Optional[str] = field(default=None, repr=False)


def is_language_file(path: str) -> bool:
    """True for JSON files that carry player-facing text (lang, books, quests, ...)."""

    normalized = "/" + path.lower().lstrip("/")
    if not normalized.endswith(".json"):
        return False
    if "patchouli_books/" in normalized and "/en_us/" in normalized:
        return True
    return any(d in normalized for d in _INCLUDE_DIRS)


def file_type(path: str) -> str:
    normalized = "/" + path.lower().lstrip("/")
    if "/lang/" in normalized:
        return "lang"
    if "patchouli_books/" in normalized:
        return "patchouli"
    if "/quests/" in normalized:
        return "quest"
    if "/advancements/" in normalized:
        return "advancement"
    if "/jei/" in normalized:
        return "jei"
    if "/books/" in normalized:
        return "book"
    return "unknown"


def is_locale_file(path: str, locale: str = "en_us") -> bool:
    p = PurePosixPath(path.lower())
    return p.name == f"{locale}.json" or locale in p.parts[:-1]


def target_path(path: str, source_locale: str = "en_us", target_locale: str = "tr_tr") -> str:
    """Map a source-locale entry name onto the target locale.

    ``assets/x/lang/en_us.json`` -> ``assets/x/lang/tr_tr.json``; Patchouli
    style folders (``.../en_us/entries/a.json``) get the folder renamed.
    """
    src_file = f"{source_locale}.json"
    if src_file in path:
        return path.replace(src_file, f"{target_locale}.json")
    src_dir = f"/{source_locale}/"
    if src_dir in path:
        return path.replace(src_dir, f"/{target_locale}/")
    return path


def find_mods(directory: str | Path, recursive: bool = True) -> List[Path]:
    root = Path(directory)
    pattern = "**/*" if recursive else "*"
    return sorted(p for p in root.glob(pattern) if p.is_file() and p.suffix.lower() in MOD_SUFFIXES)


def _parse_toml_fields(content: str) -> ModMetadata:
    found: Dict[str, Optional[str]] = {}
    for name, pattern in _TOML_FIELDS.items():
        m = pattern.search(content)
        found[name] = m.group(1) if m else None
    return ModMetadata(loader="forge", **found)


def read_mod_metadata(jar_path: str | Path, logger: Optional[logging.Logger] = None) -> Optional[ModMetadata]:
    """Read id/name/version from fabric.mod.json, META-INF/mods.toml or mcmod.info."""

    with zipfile.ZipFile(jar_path) as zf:
        names = set(zf.namelist())

        if "fabric.mod.json" in names:
            try:
                data = json.loads(zf.read("fabric.mod.json").decode("utf-8-sig"))
                return ModMetadata(data.get("id"), data.get("name"), data.get("version"), "fabric")
            except (ValueError, AttributeError) as exc:
                if logger:
                    logger.warning("Unreadable fabric.mod.json in %s: %s", jar_path, exc)

        if "META-INF/mods.toml" in names:
            return _parse_toml_fields(zf.read("META-INF/mods.toml").decode("utf-8", errors="replace"))

        if "mcmod.info" in names:
            try:
                data = json.loads(zf.read("mcmod.info").decode("utf-8-sig"))
                if isinstance(data, list):
                    data = data[0] if data else {}
                elif isinstance(data, dict) and data.get("modList"):
                    data = data["modList"][0]
                return ModMetadata(data.get("modid"), data.get("name"), data.get("version"), "forge")
            except (ValueError, AttributeError, IndexError, KeyError) as exc:
                if logger:
                    logger.warning("Unreadable mcmod.info in %s: %s", jar_path, exc)

    return None


def extract_translatable_files(
    jar_path: str | Path,
    source_locale: str = "en_us",
    logger: Optional[logging.Logger] = None,
) -> List[LangResource]:
    """Collect every source-locale language file of a mod.

    Entries that are not valid JSON objects are logged and skipped.
    """
    resources: List[LangResource] = []
    with zipfile.ZipFile(jar_path) as zf:
        for name in zf.namelist():
            if not is_language_file(name) or not is_locale_file(name, source_locale):
                continue
            content = zf.read(name).decode("utf-8", errors="replace")
            try:
                storage.parse_language_file(content)
            except storage.StructuralError as exc:
                if logger:
                    logger.warning("Skipping %s in %s: %s", name, Path(jar_path).name, exc)
                continue
            resources.append(LangResource(path=name, content=content, type=file_type(name)))
    return resources


def inject_translations(
    jar_path: str | Path,
    resources: Sequence[LangResource],
    output_path: str | Path,
    source_locale: str = "en_us",
    target_locale: str = "tr_tr",
) -> List[str]:
    """Write a copy of the mod with the translated files added.

    Existing target-locale entries are replaced. Returns the written entry names.
    """
    additions: Dict[str, str] = {}
    for res in resources:
        if res.translated is None:
            continue
        additions[target_path(res.path, source_locale, target_locale)] = res.translated

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_suffix(output_path.suffix + ".tmp")

    try:
        with zipfile.ZipFile(jar_path) as src, zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED) as dst:
            for info in src.infolist():
                if info.filename in additions:
                    continue
                dst.writestr(info, src.read(info.filename))
            for name, content in additions.items():
                dst.writestr(name, content.encode("utf-8"))
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    shutil.move(str(tmp_path), str(output_path))
    return list(additions)


@dataclass
class ModSummary:
    name: str
    mod_id: Optional[str]
    version: Optional[str]
    loader: Optional[str]
    has_source: bool
    has_target: bool
    key_count: int
    size: int


def has_locale_file(jar_path: str | Path, locale: str) -> bool:
    """True when the archive already ships a language file for ``locale``."""

    with zipfile.ZipFile(jar_path) as zf:
        return any(is_language_file(n) and is_locale_file(n, locale) for n in zf.namelist())


def summarize_mod(
    jar_path: str | Path,
    source_locale: str = "en_us",
    target_locale: str = "tr_tr",
    logger: Optional[logging.Logger] = None,
) -> ModSummary:
    """Name, version, locale coverage and translatable key count of one mod."""

    jar_path = Path(jar_path)
    meta = read_mod_metadata(jar_path, logger=logger) or ModMetadata()
    resources = extract_translatable_files(jar_path, source_locale=source_locale, logger=logger)
    key_count = sum(len(storage.parse_language_file(r.content)) for r in resources if r.type == "lang")
    return ModSummary(
        name=meta.name or jar_path.stem,
        mod_id=meta.mod_id,
        version=meta.version,
        loader=meta.loader,
        has_source=has_locale_file(jar_path, source_locale),
        has_target=has_locale_file(jar_path, target_locale),
        key_count=key_count,
        size=jar_path.stat().st_size,
    )
