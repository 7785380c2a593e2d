from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from .common import BindgenError


def build_command(tool: str, header: str, output: Path) -> list[str]:
    return [tool, "-c", "-I.", "-o", str(output), header]


def generate_metadata(tool: str, native_root: Path, header: str, output: Path) -> Path:
    """Run the BridgeSupport generator over ``header`` and return the document path."""
    if shutil.which(tool) is None:
        raise BindgenError(f"can't generate bridgesupport file: '{tool}' was not found")
    if not (native_root / header).is_file():
        raise BindgenError(f"can't generate bridgesupport file: header '{native_root / header}' does not exist")

    command = build_command(tool, header, output)
    try:
        subprocess.run(command, cwd=native_root, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as exc:
        detail = exc.stderr.strip() or exc.stdout.strip() or f"exit status {exc.returncode}"
        raise BindgenError(f"can't generate bridgesupport file: {' '.join(command)}: {detail}") from exc
    except OSError as exc:
        raise BindgenError(f"can't generate bridgesupport file: {exc}") from exc

    if not output.is_file():
        raise BindgenError(f"can't generate bridgesupport file: '{output}' was not produced")
    return output
