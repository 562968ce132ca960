from __future__ import annotations

import argparse

from modlang import storage
from modlang.glossary import build_dictionary, load_dictionary
from modlang.qa import run_basic_checks, terminology_report


def main() -> None:
    parser = argparse.ArgumentParser(description="QA report for a translated language file.")
    parser.add_argument("--source", required=True, help="Source lang file (en_us.json)")
    parser.add_argument("--translated", required=True, help="Translated lang file (tr_tr.json)")
    parser.add_argument("--out", required=True, help="Output report .csv")
    parser.add_argument("--dictionary", default="", help="Optional term table (.json or .csv) for the terminology report")
    parser.add_argument("--all", action="store_true", help="Keep rows without any issue")
    args = parser.parse_args()

    source = storage.parse_language_file(storage.read_text(args.source))
    translated = storage.parse_language_file(storage.read_text(args.translated))

    rows = run_basic_checks(source, translated)
    if not args.all:
        rows = [r for r in rows if not r["format_ok"] or r["gibberish"]]
    storage.write_report_csv(args.out, rows)
    print(f"Wrote {len(rows)} rows to {args.out}")

    if args.dictionary:
        table = build_dictionary(load_dictionary(args.dictionary, merge_defaults=False))
        missing = terminology_report(source, translated, table)
        for row in missing:
            print(f"  {row['term']} -> {row['expected']}: missing in {row['occurrences']} key(s)")


if __name__ == "__main__":
    main()
