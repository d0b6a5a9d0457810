"""
Logger singleton and output format
"""

from animscript.models.enums import LogCategory, LogLevel
from animscript.utils.logger import get_logger, get_category_logger, configure_logger


def test_logger_is_singleton():
    assert get_logger() is get_logger()


def test_configure_logger_preserves_singleton():
    original = get_logger()
    bound = original.for_category(LogCategory.SCRIPT)

    configure_logger(LogLevel.DEBUG)

    assert get_logger() is original
    assert get_logger().min_level is LogLevel.DEBUG
    assert bound._base is original


def test_output_format(capsys):
    configure_logger(LogLevel.INFO, use_colors=False)
    log = get_category_logger(LogCategory.CATALOG)

    log.info("Accepted Wave", version="1.0", path="/anims/wave")

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("CATALOG   ✓ Accepted Wave")
    assert lines[1] == " " * 11 + "├─ version: 1.0"
    assert lines[2] == " " * 11 + "└─ path: /anims/wave"


def test_level_filter(capsys):
    configure_logger(LogLevel.WARN, use_colors=False)
    log = get_category_logger(LogCategory.SCRIPT)

    log.debug("hidden")
    log.info("hidden")
    log.warn("shown")
    log.error("shown too")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "⚠ shown" in out
    assert "✗ shown too" in out


def test_category_override(capsys):
    configure_logger(LogLevel.INFO, use_colors=False)
    log = get_category_logger(LogCategory.SCRIPT)

    log.log("Spawned", category=LogCategory.PROCESS)
    out = capsys.readouterr().out
    assert "PROCESS" in out
    assert "SCRIPT" not in out


def test_colors(capsys):
    configure_logger(LogLevel.INFO, use_colors=True)
    get_category_logger(LogCategory.SYSTEM).info("Started")
    assert "\033[" in capsys.readouterr().out
