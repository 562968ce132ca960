from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd


class StructuralError(ValueError):
    """Raised when a language resource cannot be parsed. Fatal for the whole batch."""


def _ensure_exists(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path


def read_text(path: str | Path, encoding: str = "utf-8") -> str:
    p = _ensure_exists(Path(path))
    return p.read_text(encoding=encoding)


def write_text(path: str | Path, text: str, encoding: str = "utf-8") -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding=encoding)


def read_json(path: str | Path) -> Any:
    p = _ensure_exists(Path(path))
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: str | Path, obj: Any, indent: int = 2) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=indent)


def parse_language_file(content: str) -> Dict[str, Any]:
    """Parse a serialized language resource (a JSON object of key -> value)."""

    # Some mod authors save lang files with a UTF-8 BOM.
    content = content.lstrip("\ufeff")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise StructuralError(f"Invalid language file: {exc.msg} (line {exc.lineno}, column {exc.colno})") from exc
    if not isinstance(data, dict):
        raise StructuralError(f"Invalid language file: expected a JSON object, got {type(data).__name__}")
    return data


def dump_language_file(data: Dict[str, Any], indent: int = 2) -> str:
    return json.dumps(data, ensure_ascii=False, indent=indent)


def write_report_csv(path: str | Path, rows: List[Dict[str, Any]]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(rows)
    df.to_csv(p, index=False, encoding="utf-8")


def read_glossary_csv(path: str | Path) -> List[Dict[str, Any]]:
    df = pd.read_csv(_ensure_exists(Path(path)), dtype=str, keep_default_na=False)
    return df.to_dict(orient="records")
