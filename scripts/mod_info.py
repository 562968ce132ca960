from __future__ import annotations

import argparse

from modlang.mod_archive import summarize_mod


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize mod archives: metadata, locale coverage, key count.")
    parser.add_argument("mods", nargs="+", help="Mod .jar/.zip files")
    parser.add_argument("--source-locale", default="en_us")
    parser.add_argument("--target-locale", default="tr_tr")
    args = parser.parse_args()

    for path in args.mods:
        s = summarize_mod(path, source_locale=args.source_locale, target_locale=args.target_locale)
        print(f"{s.name} ({s.mod_id or '?'} {s.version or '?'}, {s.loader or 'unknown loader'})")
        print(f"  {args.source_locale}: {'yes' if s.has_source else 'no'}")
        print(f"  {args.target_locale}: {'yes' if s.has_target else 'no'}")
        print(f"  keys: {s.key_count}")
        print(f"  size: {format_size(s.size)}")


if __name__ == "__main__":
    main()
