# -*- coding: utf-8 -*-
"""
Expand custom localization macros and then run genstrings.

Run from the root directory of your Xcode project:

    locmacro            # asks before touching <region>.lproj
    locmacro --yes      # for scripts and CI

Stages:
 1. Read the base localization region from *Info.plist.
 2. Confirm the destructive write.
 3. Copy every localizable source into a flat temp directory.
 4. Blank out #include / #import lines in the copies.
 5. Prepend the macro header to each copy and run `cc -E` on it.
 6. Drop the header copy and run genstrings into <region>.lproj.

Exit status: 0 success, 1 configuration or staging problem, 2 preprocessor
failure, 3 genstrings failure.
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import Callable, List, Optional

from locmacro import config, expand_macros, run_genstrings
from locmacro.common import collect_sources
from locmacro.config import Settings
from locmacro.errors import ConfigError, LocMacroError
from locmacro.stage_sources import copy_sources, make_scratch_dir, strip_includes_in_dir

log = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def describe_destination(settings: Settings) -> str:
    if settings.strings_path.exists():
        return f"{settings.strings_label} will be replaced."
    return (f"NOTE: {settings.strings_label} does not exist.\n"
            "      It will be generated if you continue.")


def confirm(settings: Settings, assume_yes: bool = False,
            input_fn: Callable[[str], str] = input):
    print(describe_destination(settings))
    if assume_yes:
        return
    try:
        print("Press return to continue or Ctrl-C to cancel.")
        input_fn("")
    except EOFError as exc:
        raise ConfigError("No terminal to confirm on; pass --yes to run unattended.") from exc


def stage(title: str):
    print(f"=== {title} ===")


def run(settings: Settings) -> List[Path]:
    """Run stages 3-6 against a fresh scratch directory."""
    sources = collect_sources(settings.project_dir, settings.source_re)

    scratch = make_scratch_dir()
    log.debug("scratch directory: %s", scratch)
    try:
        stage("copy sources")
        staged = copy_sources(sources, scratch)
        if not staged:
            raise ConfigError(
                f"No localizable source files match {settings.pattern!r} "
                f"under {settings.project_dir}."
            )
        print(f"Copied {len(staged)} files into {scratch}")

        stage("strip includes")
        strip_includes_in_dir(scratch)

        stage("expand macros")
        expand_macros.main(scratch, settings)

        stage("genstrings")
        return run_genstrings.main(scratch, settings)
    finally:
        if settings.keep_temp:
            print(f"Temp files left in {scratch}")
        else:
            shutil.rmtree(scratch, ignore_errors=True)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="locmacro",
        description="Expand custom localization macros and run genstrings.",
    )
    p.add_argument("--header", help=f"macro header file name (default: {config.LOC_HEADER_FILE})")
    p.add_argument("--cc", help=f"C compiler used for preprocessing (default: {config.CC})")
    p.add_argument("--pattern", help="case-insensitive regex for localizable source paths "
                                     f"(default: {config.SOURCES_REGEX})")
    p.add_argument("--genstrings", help=f"string extraction command (default: {config.GENSTRINGS})")
    p.add_argument("-C", "--project-dir", type=Path, default=None,
                   help="project root holding *Info.plist (default: current directory)")
    p.add_argument("--keep-temp", action="store_true", default=None,
                   help="leave the scratch directory in place for inspection")
    p.add_argument("-y", "--yes", "--force", dest="yes", action="store_true",
                   help="do not ask before writing the .strings file")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def main(argv: Optional[List[str]] = None,
         input_fn: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = config.resolve(
            args.project_dir,
            header=args.header,
            cc=args.cc,
            pattern=args.pattern,
            genstrings=args.genstrings,
            keep_temp=args.keep_temp,
        )
        confirm(settings, assume_yes=args.yes, input_fn=input_fn)
        run(settings)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except LocMacroError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("All done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
