from __future__ import annotations

import json
import sys
import zipfile
from pathlib import Path
from typing import Any, Dict

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture
def make_jar(tmp_path):
    """Build a mod archive from ``{entry_name: str | dict}``; dicts are JSON encoded."""

    def _make(entries: Dict[str, Any], name: str = "examplemod-1.0.jar") -> Path:
        jar_path = tmp_path / name
        jar_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(jar_path, "w") as zf:
            for entry, content in entries.items():
                if not isinstance(content, str):
                    content = json.dumps(content, ensure_ascii=False)
                zf.writestr(entry, content)
        return jar_path

    return _make
