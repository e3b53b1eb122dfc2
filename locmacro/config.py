# -*- coding: utf-8 -*-
"""User-editable defaults for the localization macro expander.

Run the tool from the root directory of your Xcode project. Every value below
can be overridden on the command line; update them here if your project
always uses something different.

All of your custom localization macros should live in one header file. That
header must not import any other files, and the macros it defines must expand
to something genstrings understands (NSLocalizedString and friends), e.g.:

    #define LOC NSLocalizedString

    #define LOC_DEF(__key, __defvalue, __comment) \\
        NSLocalizedStringWithDefaultValue(\\
            (__key), nil, [NSBundle mainBundle],\\
            (__defvalue), (__comment))

    #define LOC_F(__key, __comment, ...) \\
        [NSString stringWithFormat:\\
         LOC(__key, __comment), __VA_ARGS__]
"""

import plistlib
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from locmacro.errors import ConfigError


# --- Macro expansion ---------------------------------------------------------

# The name of the header file that defines your custom localization macros.
LOC_HEADER_FILE = "Localization.h"

# The C compiler used for preprocessing (invoked as `<CC> -E <file>`).
CC = "cc"

# Extended regex for localizable source files. Matched case-insensitively
# against the whole relative path, e.g. "./Classes/AppDelegate.m".
SOURCES_REGEX = r".*\.(m|h|mm)$"


# --- String extraction -------------------------------------------------------

# The native extraction utility (invoked as `<GENSTRINGS> -o <dir> <files>`).
GENSTRINGS = "genstrings"

# genstrings writes this table into the .lproj folder.
STRINGS_FILE = "Localizable.strings"


# --- Project metadata --------------------------------------------------------

# The base language (native development region) is read from the first file
# matching this pattern in the project directory.
INFO_PLIST_GLOB = "*Info.plist"
REGION_KEY = "CFBundleDevelopmentRegion"


# --- Scratch area ------------------------------------------------------------

# Prefix of the temp directory the sources are copied into.
SCRATCH_PREFIX = "genstrings"


@dataclass
class Settings:
    project_dir: Path
    region: str
    header: str = LOC_HEADER_FILE
    cc: str = CC
    pattern: str = SOURCES_REGEX
    genstrings: str = GENSTRINGS
    keep_temp: bool = False

    @property
    def cc_argv(self) -> List[str]:
        return shlex.split(self.cc)

    @property
    def genstrings_argv(self) -> List[str]:
        return shlex.split(self.genstrings)

    @property
    def source_re(self):
        return re.compile(self.pattern, re.IGNORECASE)

    @property
    def lproj_name(self) -> str:
        return f"{self.region}.lproj"

    @property
    def lproj_dir(self) -> Path:
        return self.project_dir / self.lproj_name

    @property
    def strings_path(self) -> Path:
        return self.lproj_dir / STRINGS_FILE

    @property
    def strings_label(self) -> str:
        # Relative form used in user-facing messages
        return f"{self.lproj_name}/{STRINGS_FILE}"


def find_info_plist(project_dir: Path) -> Path:
    """Return the first *Info.plist in project_dir (lexical order)."""
    matches = sorted(p for p in project_dir.glob(INFO_PLIST_GLOB) if p.is_file())
    if not matches:
        raise ConfigError(f"Cannot find {INFO_PLIST_GLOB}.")
    return matches[0]


def read_region(plist_path: Path) -> str:
    try:
        with plist_path.open("rb") as fh:
            info = plistlib.load(fh)
    except (OSError, plistlib.InvalidFileException, ValueError) as exc:
        raise ConfigError(
            f"Cannot determine localization native development region "
            f"(failed to read '{plist_path.name}': {exc})."
        ) from exc

    region = info.get(REGION_KEY) if isinstance(info, dict) else None
    if not isinstance(region, str) or not region.strip():
        raise ConfigError(
            "Cannot determine localization native development region "
            f"(tried to read {REGION_KEY} from '{plist_path.name}')."
        )
    return region.strip()


def resolve(project_dir: Optional[Path] = None, **overrides) -> Settings:
    """Locate the project metadata and build the settings for one run.

    Keyword overrides replace the defaults above; None values are ignored so
    argparse results can be passed straight through.
    """
    project_dir = Path(project_dir or Path.cwd()).resolve()
    region = read_region(find_info_plist(project_dir))
    given = {k: v for k, v in overrides.items() if v is not None}
    settings = Settings(project_dir=project_dir, region=region, **given)
    try:
        settings.source_re
    except re.error as exc:
        raise ConfigError(f"Invalid source pattern {settings.pattern!r}: {exc}") from exc
    return settings
