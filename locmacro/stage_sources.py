# -*- coding: utf-8 -*-
"""Copy localizable sources into a flat scratch directory and blank out their
#include / #import lines, so the preprocessor only ever sees local macros.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List

from locmacro.common import atomic_write_text, read_text
from locmacro.config import SCRATCH_PREFIX
from locmacro.errors import StagingError

log = logging.getLogger(__name__)

INCLUDE_DIRECTIVES = ("include", "import")


def make_scratch_dir() -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX))
    except OSError as exc:
        raise StagingError(f"Can't create temp dir: {exc}") from exc


def copy_sources(paths: Iterable[Path], scratch: Path) -> List[Path]:
    """Copy every source into scratch, dropping the directory structure.

    Two sources sharing a basename collide: the one copied last wins and a
    warning names both.
    """
    origin: Dict[str, Path] = {}
    for src in paths:
        dest = scratch / src.name
        if src.name in origin:
            log.warning("%s overwrites %s in the scratch directory (same file name)",
                        src, origin[src.name])
        try:
            shutil.copy(src, dest)
        except OSError as exc:
            raise StagingError(f"Can't copy {src}: {exc}") from exc
        origin[src.name] = src
    return [scratch / name for name in origin]


def is_include_directive(line: str) -> bool:
    s = line.lstrip()
    if not s.startswith("#"):
        return False
    return s[1:].lstrip().startswith(INCLUDE_DIRECTIVES)


def strip_includes(text: str) -> str:
    """Empty every include/import line, keeping its line terminator."""
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if is_include_directive(line):
            lines[i] = "\r" if line.endswith("\r") else ""
    return "\n".join(lines)


def strip_includes_in_dir(scratch: Path):
    for f in sorted(scratch.iterdir()):
        if not f.is_file():
            continue
        text = read_text(f)
        stripped = strip_includes(text)
        if stripped != text:
            atomic_write_text(f, stripped)
