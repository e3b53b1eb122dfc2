# -*- coding: utf-8 -*-
import logging
from pathlib import Path
from typing import List

from locmacro.common import run_tool
from locmacro.config import Settings
from locmacro.errors import ExtractionError, StagingError

log = logging.getLogger(__name__)


def remove_header(scratch: Path, header: str):
    # genstrings must not scan the macro definitions themselves
    (scratch / header).unlink(missing_ok=True)


def ensure_lproj(settings: Settings) -> Path:
    # genstrings chokes if the output folder is missing
    try:
        settings.lproj_dir.mkdir(exist_ok=True)
    except OSError as exc:
        raise StagingError(f"Can't create {settings.lproj_name}: {exc}") from exc
    return settings.lproj_dir


def genstrings_inputs(scratch: Path, header: str) -> List[Path]:
    return [f for f in sorted(scratch.iterdir()) if f.is_file() and f.name != header]


def main(scratch: Path, settings: Settings) -> List[Path]:
    remove_header(scratch, settings.header)
    outdir = ensure_lproj(settings)

    inputs = genstrings_inputs(scratch, settings.header)
    argv = settings.genstrings_argv + ["-o", str(outdir)] + [str(f) for f in inputs]
    proc = run_tool(argv, error_cls=ExtractionError)
    if proc.returncode != 0:
        raise ExtractionError(
            f"genstrings failed (exit status {proc.returncode}):\n{proc.stderr}",
            argv=argv, returncode=proc.returncode, output=proc.stderr,
        )
    if proc.stderr:
        log.warning("genstrings: %s", proc.stderr.strip())
    print(f"{settings.strings_label} has been updated.")
    return inputs
