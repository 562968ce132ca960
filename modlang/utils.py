from __future__ import annotations

import logging
import re
from pathlib import Path


def setup_logger(log_dir: str | Path, name: str = "modlang") -> logging.Logger:
    """Create a simple file+console logger."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    # Avoid adding multiple handlers when the runner is invoked twice in-process
    if logger.handlers:
        return logger

    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")

    fh = logging.FileHandler(log_dir / "app.log", encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)

    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(ch)
    return logger



def literal_sub(pattern: re.Pattern[str], literal: str, text: str) -> str:
    """Replace every match of ``pattern`` with ``literal`` taken verbatim.

    ``re.sub`` would interpret backslashes and group references in a string
    replacement, which corrupts tokens such as ``\\n`` inside a placeholder.
    """
    return pattern.sub(lambda _m: literal, text)


def shorten(text: str, limit: int = 80) -> str:
    text = text.replace("\n", "\\n")
    return text if len(text) <= limit else text[: limit - 1] + "…"
