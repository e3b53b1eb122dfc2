# -*- coding: utf-8 -*-
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Pattern, Sequence, Type

from locmacro.errors import StagingError, SubprocessError

log = logging.getLogger(__name__)

# Staged copies may hold any bytes; surrogateescape round-trips them unchanged.
ENCODING = "utf-8"
ERRORS = "surrogateescape"


def collect_sources(root: Path, pattern: Pattern) -> Iterator[Path]:
    """Yield files under root whose "./relative/path" matches pattern.

    Matches the whole path like `find -E . -iregex`, so the pattern should be
    compiled with re.IGNORECASE. Directories and files are visited in lexical
    order; every call walks the tree again.
    """
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            p = Path(dirpath) / name
            rel = "./" + p.relative_to(root).as_posix()
            if pattern.fullmatch(rel):
                yield p


def read_text(path: Path) -> str:
    # newline="" keeps CRLF files byte-identical through a rewrite
    try:
        with open(path, encoding=ENCODING, errors=ERRORS, newline="") as fh:
            return fh.read()
    except OSError as exc:
        raise StagingError(f"Can't read {path}: {exc}") from exc


def atomic_write_text(path: Path, text: str):
    """Replace path with text via a uniquely named temp file in the same dir."""
    path = Path(path)
    try:
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise StagingError(f"Can't write {path}: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, errors=ERRORS, newline="") as fh:
            fh.write(text)
        os.replace(tmp, path)
    except BaseException as exc:
        if os.path.exists(tmp):
            os.unlink(tmp)
        if isinstance(exc, OSError):
            raise StagingError(f"Can't write {path}: {exc}") from exc
        raise


def prepend_line(path: Path, line: str):
    atomic_write_text(path, line + "\n" + read_text(path))


def run_tool(argv: Sequence[str], cwd: Optional[Path] = None,
             error_cls: Type[SubprocessError] = SubprocessError) -> subprocess.CompletedProcess:
    """Run an external tool, capturing its output as text.

    Output is decoded like the staged files, so bytes that are not UTF-8 come
    back unchanged when written out again. A tool that cannot be started
    raises error_cls; a non-zero exit status is left for the caller to judge.
    """
    argv = [str(a) for a in argv]
    if not argv:
        raise error_cls("empty command")
    log.debug("running %s (cwd=%s)", " ".join(argv), cwd)
    try:
        proc = subprocess.run(argv, cwd=str(cwd) if cwd else None, capture_output=True)
    except OSError as exc:
        raise error_cls(f"{argv[0]}: cannot run ({exc.strerror or exc})", argv=argv) from exc
    # Decoded by hand: text mode would also fold CRLF line endings
    proc.stdout = proc.stdout.decode(ENCODING, ERRORS)
    proc.stderr = proc.stderr.decode(ENCODING, ERRORS)
    return proc
