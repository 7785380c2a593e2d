from __future__ import annotations

import difflib
import os
from pathlib import Path


class BindgenError(Exception):
    pass


def unified_diff(path: Path, existing: str, content: str) -> str:
    diff = difflib.unified_diff(
        existing.splitlines(),
        content.splitlines(),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
        lineterm="",
    )
    return "\n".join(diff)


def write_atomic(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` so readers never observe a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        with temp_path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise BindgenError(f"Unable to write '{path}': {exc}") from exc


def read_existing(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BindgenError(f"Unable to read '{path}': {exc}") from exc


def write_if_changed(path: Path, content: str, check: bool, dry_run: bool) -> int:
    existing = read_existing(path)
    if existing == content:
        return 0
    if check:
        print(unified_diff(path, existing, content))
        return 1
    if not dry_run:
        write_atomic(path, content)
    return 0
