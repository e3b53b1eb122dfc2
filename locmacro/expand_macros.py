# -*- coding: utf-8 -*-
"""Run the C preprocessor over every staged file to expand the L10N macros.

For each file except the macro header:
 1. prepend `#include "<header>"`
 2. run `<cc> -E <file>` inside the scratch directory
 3. replace the file with the preprocessor output

The header itself may live outside the project, anywhere the preprocessor
searches (e.g. `--cc "cc -I/shared/include"`). The first failure aborts the
run and leaves that file as it was.
"""

import logging
from pathlib import Path
from typing import List

from locmacro.common import atomic_write_text, prepend_line, read_text, run_tool
from locmacro.config import Settings
from locmacro.errors import PreprocessError

log = logging.getLogger(__name__)


def include_line(header: str) -> str:
    return f'#include "{header}"'


def expandable_files(scratch: Path, header: str) -> List[Path]:
    return [f for f in sorted(scratch.iterdir()) if f.is_file() and f.name != header]


def expand_file(path: Path, settings: Settings):
    original = read_text(path)
    prepend_line(path, include_line(settings.header))

    argv = settings.cc_argv + ["-E", path.name]
    try:
        proc = run_tool(argv, cwd=path.parent, error_cls=PreprocessError)
        if proc.returncode != 0:
            raise PreprocessError(
                f"Preprocessing {path.name} failed (exit status {proc.returncode}):\n{proc.stderr}",
                argv=argv, returncode=proc.returncode, output=proc.stderr,
            )
    except PreprocessError:
        atomic_write_text(path, original)
        raise
    atomic_write_text(path, proc.stdout)


def main(scratch: Path, settings: Settings) -> List[Path]:
    files = expandable_files(scratch, settings.header)
    for f in files:
        log.debug("expanding %s", f.name)
        expand_file(f, settings)
    print(f"Expanded localization macros in {len(files)} files")
    return files
