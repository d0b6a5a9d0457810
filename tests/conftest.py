import stat
from pathlib import Path

import pytest

from animscript.errors import ChildTermination
from animscript.models.keymap import KeyMap, KeyPos
from animscript.protocol.info import parse_info
from animscript.utils.logger import get_logger, configure_logger

WAVE_GUID = "8c9b4b5c-4b6d-4c8a-9d2e-1f0a2b3c4d5e"

BASE_INFO = [
    f"guid %7B{WAVE_GUID}%7D",
    "name Wave",
    "version 1.0",
    "year 2024",
    "author Tester",
    "license GPLv2",
    "description A%20simple%20wave",
]


class FakeProcess:
    """In-memory stand-in for ScriptProcess"""

    def __init__(self, path):
        self.path = Path(path)
        self.pid = 4242
        self.written = []
        self.output = []
        self.eof = False
        self.broken = False
        self.killed = False
        self.detached = False
        self.exits_on_kill = True
        self.kill_timeout = None

    def write_lines(self, lines):
        if self.broken:
            raise ChildTermination("closed")
        self.written.extend(lines)

    def flush(self):
        if self.broken:
            raise ChildTermination("closed")

    def read_lines(self):
        lines, self.output = self.output, []
        return lines

    def kill(self, timeout=None):
        self.killed = True
        self.kill_timeout = timeout
        return self.exits_on_kill

    def detach(self):
        self.killed = True
        self.detached = True

    def after_begin_run(self):
        """Lines written after the startup blocks"""
        return self.written[self.written.index("begin run") + 1:]


@pytest.fixture(autouse=True)
def restore_logger():
    logger = get_logger()
    level, colors = logger.min_level, logger.use_colors
    yield
    configure_logger(level, colors)


@pytest.fixture
def spawned():
    """Every FakeProcess created through `process_factory`"""
    return []


@pytest.fixture
def process_factory(spawned):
    def factory(path):
        proc = FakeProcess(path)
        spawned.append(proc)
        return proc
    return factory


@pytest.fixture
def keymap():
    return KeyMap({
        "q": KeyPos(20, 30),
        "w": KeyPos(32, 30),
        "s": KeyPos(35, 42),
    })


@pytest.fixture
def make_descriptor():
    """Build a descriptor from BASE_INFO plus extra info lines"""
    def make(*extra, path="/fake/wave"):
        return parse_info(BASE_INFO + list(extra), path=Path(path) if path else None)
    return make


# ------------------------------------------------------------
# Real executables (POSIX shell)
# ------------------------------------------------------------

def _info_script(guid, name, extra=""):
    """Shell body answering --ckb-info with a valid descriptor"""
    return f"""
if [ "$1" = "--ckb-info" ]; then
  echo "guid {{{guid}}}"
  echo "name {name}"
  echo "version 1.0"
  echo "year 2024"
  echo "author Tester"
  echo "license GPLv2"
  {extra}
  exit 0
fi
"""


@pytest.fixture
def write_script(tmp_path):
    """Create an executable /bin/sh script in tmp_path"""
    def write(filename, body, executable=True):
        path = tmp_path / filename
        path.write_text("#!/bin/sh\n" + body)
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path
    return write


@pytest.fixture
def info_script():
    return _info_script
