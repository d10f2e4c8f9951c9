"""
JSON Utilities

Reading and writing the product JSON files that connect pipeline stages.
"""

import json
import shutil
import time
from pathlib import Path
from typing import Any


def read_json(file_path: str | Path) -> Any:
    """Read a UTF-8 JSON file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json(file_path: str | Path, data: Any) -> None:
    """
    Write data as pretty-printed UTF-8 JSON.

    Hangul is written as-is (ensure_ascii=False). Parent directories are
    created when missing.
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def backup_json(file_path: str | Path) -> Path:
    """
    Copy a JSON file next to itself as <stem>.backup.<epoch_ms>.json.

    Returns:
        Path of the backup file
    """
    path = Path(file_path)
    backup = path.with_name(f"{path.stem}.backup.{int(time.time() * 1000)}{path.suffix}")
    shutil.copyfile(path, backup)
    return backup
