"""
Pytest configuration and shared fixtures for locmacro tests.

This module provides:
- A minimal Xcode-style project tree (Info.plist, macro header, sources)
- Fake `cc` and `genstrings` tools written as small Python scripts
"""

import json
import plistlib
import shlex
import sys
import textwrap
from pathlib import Path

import pytest

from locmacro.config import Settings


# ---------------------------------------------------------------------------
# Fake tools
# ---------------------------------------------------------------------------

# Handles `[-I<dir>...] -E <file>` with object-like `#define NAME VALUE`
# macros from the header named on the first `#include "..."` line, looked up
# in the working directory and then the -I directories, like a tiny cpp.
FAKE_CC = textwrap.dedent(r'''
    import os, re, sys
    args = [a for a in sys.argv[1:] if a != "-E"]
    search = ["."] + [a[2:] for a in args if a.startswith("-I")]
    path = args[-1]
    text = open(path, encoding="utf-8").read()
    if "#error" in text:
        sys.stderr.write(path + ":1:2: error: forced failure\n")
        sys.exit(1)
    lines = text.split("\n")
    macros = {}
    m = re.match(r'#include "(.+)"', lines[0])
    if m:
        found = [os.path.join(d, m.group(1)) for d in search
                 if os.path.isfile(os.path.join(d, m.group(1)))]
        if not found:
            sys.stderr.write("%s:1:10: fatal error: '%s' file not found\n" % (path, m.group(1)))
            sys.exit(1)
        for line in open(found[0], encoding="utf-8"):
            d = re.match(r"\s*#define\s+(\w+)\s+(.*)", line)
            if d:
                macros[d.group(1)] = d.group(2).strip()
        lines = lines[1:]
    out = "\n".join(lines)
    for name, value in macros.items():
        out = re.sub(r"\b%s\b" % name, value, out)
    sys.stdout.write('# 1 "%s"\n' % path + out)
''')

# Drops the injected include line and echoes the rest byte for byte.
BYTE_CC = textwrap.dedent(r'''
    import sys
    data = open(sys.argv[-1], "rb").read()
    sys.stdout.buffer.write(data.split(b"\n", 1)[1])
''')

# Records its arguments next to itself and writes a genstrings-style table
# for every NSLocalizedString(@"KEY", @"comment") it finds.
FAKE_GENSTRINGS = textwrap.dedent(r'''
    import json, os, re, sys
    args = sys.argv[1:]
    here = os.path.dirname(os.path.abspath(__file__))
    with open(os.path.join(here, "genstrings_args.json"), "w") as fh:
        json.dump(args, fh)
    outdir = args[args.index("-o") + 1]
    files = args[args.index("-o") + 2:]
    if not os.path.isdir(outdir):
        sys.stderr.write("genstrings: couldn't connect to output directory %s\n" % outdir)
        sys.exit(1)
    entries = []
    for f in files:
        text = open(f, encoding="utf-8").read()
        entries += re.findall(r'NSLocalizedString\(@"([^"]*)",\s*@"([^"]*)"\)', text)
    with open(os.path.join(outdir, "Localizable.strings"), "w", encoding="utf-8") as fh:
        for key, comment in sorted(set(entries)):
            fh.write('/* %s */\n"%s" = "%s";\n\n' % (comment, key, key))
''')

FAILING_TOOL = textwrap.dedent(r'''
    import sys
    sys.stderr.write("tool exploded\n")
    sys.exit(7)
''')


def _tool(tools_dir: Path, name: str, source: str) -> str:
    tools_dir.mkdir(exist_ok=True)
    script = tools_dir / f"{name}.py"
    script.write_text(source, encoding="utf-8")
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"


@pytest.fixture
def tools_dir(tmp_path):
    return tmp_path / "tools"


@pytest.fixture
def fake_cc(tools_dir):
    return _tool(tools_dir, "fake_cc", FAKE_CC)


@pytest.fixture
def byte_cc(tools_dir):
    return _tool(tools_dir, "byte_cc", BYTE_CC)


@pytest.fixture
def fake_genstrings(tools_dir):
    return _tool(tools_dir, "fake_genstrings", FAKE_GENSTRINGS)


@pytest.fixture
def failing_tool(tools_dir):
    return _tool(tools_dir, "failing_tool", FAILING_TOOL)


@pytest.fixture
def genstrings_args(tools_dir):
    """Read back the arguments the fake genstrings was called with."""
    def read():
        return json.loads((tools_dir / "genstrings_args.json").read_text())
    return read


# ---------------------------------------------------------------------------
# Project tree
# ---------------------------------------------------------------------------

HEADER = "#define LOC NSLocalizedString\n"

SOURCE_A = textwrap.dedent('''\
    #import <Foundation/Foundation.h>
    #import "Localization.h"

    NSString *greeting(void) {
        return LOC(@"KEY", @"comment");
    }
''')


def write_info_plist(project: Path, region="en", name="App-Info.plist"):
    with (project / name).open("wb") as fh:
        plistlib.dump({"CFBundleDevelopmentRegion": region, "CFBundleName": "App"}, fh)


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "Classes").mkdir(parents=True)
    write_info_plist(root)
    (root / "Localization.h").write_text(HEADER, encoding="utf-8")
    (root / "Classes" / "a.m").write_text(SOURCE_A, encoding="utf-8")
    (root / "README.txt").write_text("not a source\n", encoding="utf-8")
    return root


@pytest.fixture
def settings(project, fake_cc, fake_genstrings):
    return Settings(project_dir=project, region="en", cc=fake_cc, genstrings=fake_genstrings)


@pytest.fixture
def scratch(tmp_path):
    d = tmp_path / "scratch"
    d.mkdir()
    return d
