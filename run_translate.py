from __future__ import annotations

import argparse
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from modlang import storage
from modlang.glossary import build_dictionary, load_dictionary
from modlang.mod_archive import (
    MOD_SUFFIXES,
    extract_translatable_files,
    find_mods,
    has_locale_file,
    inject_translations,
    read_mod_metadata,
    target_path,
)
from modlang.pipeline import AuditTrail, LangFileTranslator, TranslationCache
from modlang.qa import run_basic_checks, terminology_report
from modlang.translator import MissingApiKeyError, build_gateway
from modlang.utils import setup_logger


DEFAULT_CONFIG: Dict[str, Any] = {
    "paths": {"logs_dir": "logs", "output_dir": "output"},
    "translation": {"provider": "google", "source_lang": "en", "target_lang": "tr"},
    "glossary": {"enabled": True},
    "cache": {},
    "qa": {"enabled": True},
    "mods": {"skip_existing": False},
}


def load_config(path: Optional[str]) -> Dict[str, Any]:
    cfg = {k: dict(v) for k, v in DEFAULT_CONFIG.items()}
    if path and Path(path).exists():
        for section, values in storage.read_json(path).items():
            if isinstance(values, dict):
                cfg.setdefault(section, {}).update(values)
            else:
                cfg[section] = values
    return cfg


def apply_cli_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    tcfg = cfg.setdefault("translation", {})
    if args.provider:
        tcfg["provider"] = args.provider
    if args.offline:
        tcfg["provider"] = "none"
    if args.workers is not None:
        tcfg.setdefault("scheduling", {})["parallel_workers"] = args.workers
    if args.output:
        cfg.setdefault("paths", {})["output_dir"] = args.output
    if args.skip_existing:
        cfg.setdefault("mods", {})["skip_existing"] = True
    return cfg


def build_pipeline(cfg: Dict[str, Any], audit: AuditTrail, logger) -> LangFileTranslator:
    gcfg = cfg.get("glossary", {})
    if gcfg.get("enabled", True):
        mapping = load_dictionary(gcfg.get("path"), merge_defaults=bool(gcfg.get("merge_defaults", True)))
    else:
        mapping = {}
    table = build_dictionary(mapping, plural_variants=bool(gcfg.get("plural_variants", True)))
    logger.info("   Dictionary size: %s terms.", len(table))
    audit.record("dictionary", {"terms": len(table)})

    gateway = build_gateway(cfg, logger=logger)
    if gateway is None:
        logger.info("   Offline mode: dictionary translation only.")

    sched = cfg.get("translation", {}).get("scheduling", {})
    return LangFileTranslator(
        table=table,
        gateway=gateway,
        proper_nouns=gcfg.get("proper_nouns"),
        parallel_workers=int(sched.get("parallel_workers", 1)),
        cache=TranslationCache(cfg.get("cache", {}).get("path")),
        audit=audit,
        logger=logger,
    )


def run_qa(
    name: str,
    source: Dict[str, Any],
    translated: Dict[str, Any],
    pipeline: LangFileTranslator,
    report_rows: List[Dict[str, Any]],
    audit: AuditTrail,
) -> None:
    rows = run_basic_checks(source, translated)
    for row in rows:
        row["file"] = name
    report_rows.extend(r for r in rows if not r["format_ok"] or r["gibberish"])
    missing_terms = terminology_report(source, translated, pipeline.table)
    if missing_terms:
        audit.record("terminology", {"file": name, "rows": missing_terms})


def translate_json_file(
    path: Path,
    out_dir: Path,
    pipeline: LangFileTranslator,
    cfg: Dict[str, Any],
    report_rows: List[Dict[str, Any]],
    audit: AuditTrail,
    logger,
) -> Path:
    tcfg = cfg.get("translation", {})
    source_locale = tcfg.get("source_locale", "en_us")
    target_locale = tcfg.get("target_locale", "tr_tr")

    content = storage.read_text(path)
    translated_text = pipeline.translate_language_file(content)
    out_path = out_dir / target_path(path.name, source_locale, target_locale)
    storage.write_text(out_path, translated_text)
    logger.info("   Wrote %s", out_path)

    if cfg.get("qa", {}).get("enabled", True):
        run_qa(path.name, storage.parse_language_file(content), storage.parse_language_file(translated_text), pipeline, report_rows, audit)
    return out_path


def translate_mod(
    jar_path: Path,
    out_dir: Path,
    pipeline: LangFileTranslator,
    cfg: Dict[str, Any],
    report_rows: List[Dict[str, Any]],
    audit: AuditTrail,
    logger,
) -> Optional[Path]:
    tcfg = cfg.get("translation", {})
    source_locale = tcfg.get("source_locale", "en_us")
    target_locale = tcfg.get("target_locale", "tr_tr")

    meta = read_mod_metadata(jar_path, logger=logger)
    label = (meta.name or meta.mod_id) if meta and (meta.name or meta.mod_id) else jar_path.stem
    if cfg.get("mods", {}).get("skip_existing", False) and has_locale_file(jar_path, target_locale):
        logger.info("   %s: already ships %s, skipped.", label, target_locale)
        audit.record("mod_skipped", {"mod": label, "reason": f"has {target_locale}"})
        return None
    resources = extract_translatable_files(jar_path, source_locale=source_locale, logger=logger)
    if not resources:
        logger.info("   %s: nothing to translate.", label)
        audit.record("mod", {"mod": label, "files": 0})
        return None

    logger.info("   %s: %s language file(s)", label, len(resources))
    for res in resources:
        res.translated = pipeline.translate_language_file(res.content)
        if cfg.get("qa", {}).get("enabled", True):
            run_qa(
                f"{jar_path.name}:{res.path}",
                storage.parse_language_file(res.content),
                storage.parse_language_file(res.translated),
                pipeline,
                report_rows,
                audit,
            )

    out_path = out_dir / jar_path.name
    written = inject_translations(jar_path, resources, out_path, source_locale, target_locale)
    audit.record(
        "mod",
        {
            "mod": label,
            "mod_id": meta.mod_id if meta else None,
            "version": meta.version if meta else None,
            "files": written,
        },
    )
    logger.info("   Wrote %s (%s entries added)", out_path, len(written))
    return out_path


def collect_inputs(target: Path) -> Tuple[List[Path], List[Path]]:
    """Split the input into plain language files and mod archives."""

    if target.is_dir():
        return sorted(target.glob("*.json")), find_mods(target)
    if target.suffix.lower() in MOD_SUFFIXES:
        return [], [target]
    return [target], []


def main() -> None:
    parser = argparse.ArgumentParser(description="Translate Minecraft mod language files (lang JSON, mod jars, mod folders).")
    parser.add_argument("input", type=str, help="A lang .json file, a mod .jar/.zip, or a folder of mods")
    parser.add_argument("--config", type=str, default="config.json", help="Path to config.json")
    parser.add_argument("--provider", type=str, help="google | openai | deepl | dummy | none")
    parser.add_argument("--offline", action="store_true", help="Dictionary-only translation, no provider calls")
    parser.add_argument("--workers", type=int, help="Parallel entries in flight")
    parser.add_argument("--output", type=str, help="Output folder")
    parser.add_argument("--skip-existing", action="store_true", help="Skip mods that already ship the target locale")
    args = parser.parse_args()

    load_dotenv()

    cfg = apply_cli_overrides(load_config(args.config), args)
    paths = cfg["paths"]
    logger = setup_logger(paths.get("logs_dir", "logs"))
    audit = AuditTrail()

    target = Path(args.input)
    if not target.exists():
        logger.error("Input not found: %s", target)
        raise SystemExit(1)
    out_dir = Path(paths.get("output_dir", "output"))

    try:
        logger.info("1) Loading dictionary and provider…")
        pipeline = build_pipeline(cfg, audit, logger)
    except MissingApiKeyError as exc:
        logger.error(str(exc))
        raise SystemExit(1)
    except Exception:
        logger.exception("Setup failed.")
        raise SystemExit(1)

    lang_files, mods = collect_inputs(target)
    report_rows: List[Dict[str, Any]] = []
    mod_failures = 0

    logger.info("2) Translating %s language file(s) and %s mod(s)…", len(lang_files), len(mods))
    try:
        for path in lang_files:
            translate_json_file(path, out_dir, pipeline, cfg, report_rows, audit, logger)
        for jar_path in mods:
            try:
                translate_mod(jar_path, out_dir, pipeline, cfg, report_rows, audit, logger)
            except (storage.StructuralError, zipfile.BadZipFile, OSError) as exc:
                # a broken archive costs that mod only
                mod_failures += 1
                logger.error("%s: %s", jar_path.name, exc)
                audit.record("mod_error", {"mod": jar_path.name, "error": f"{type(exc).__name__}: {exc}"})
    except storage.StructuralError as exc:
        logger.error(str(exc))
        raise SystemExit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted; partial results were not written for the current file.")
        raise SystemExit(130)
    except Exception:
        logger.exception("Translation failed.")
        raise SystemExit(1)

    stats = pipeline.stats
    logger.info(
        "3) Done: %s strings, %s translated, %s cached, %s skipped, %s failed, %s provider errors",
        stats.total,
        stats.translated,
        stats.cached,
        stats.skipped,
        stats.failed,
        stats.provider_errors,
    )
    if mod_failures:
        logger.warning("   %s of %s mod(s) could not be processed, see the audit trail.", mod_failures, len(mods))
    audit.record("stats", stats.as_dict())

    if cfg.get("qa", {}).get("enabled", True):
        report_path = paths.get("qa_report", str(out_dir / "qa_report.csv"))
        storage.write_report_csv(report_path, report_rows)
        logger.info("   QA report (%s flagged strings): %s", len(report_rows), report_path)

    audit_path = paths.get("audit_report", "logs/audit.json")
    storage.write_json(audit_path, audit.as_list())
    logger.info("   Audit trail saved to: %s", audit_path)


if __name__ == "__main__":
    main()
