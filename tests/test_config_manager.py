import pytest

from animscript.managers.config_manager import ConfigManager
from animscript.models.config import EngineConfig
from animscript.models.enums import LogLevel
from animscript.utils.enum_helper import EnumHelper
from animscript.utils.logger import get_logger


@pytest.fixture
def config_file(tmp_path):
    def write(text):
        path = tmp_path / "animscript.yaml"
        path.write_text(text, encoding="utf-8")
        return path
    return write


def test_defaults_without_file():
    config = ConfigManager().load()
    assert config == EngineConfig()
    assert config.fps == 60
    assert config.animations_dir == "ckb-animations"


def test_loads_yaml(config_file):
    path = config_file(
        "animations_dir: /opt/anims\n"
        "fps: 30\n"
        "info_timeout: 0.5\n"
        "log_level: DEBUG\n"
        "use_colors: false\n"
    )
    config = ConfigManager(path).load()

    assert config.animations_dir == "/opt/anims"
    assert config.fps == 30
    assert config.info_timeout == 0.5
    assert config.kill_timeout == 1.0
    assert not config.use_colors


@pytest.mark.parametrize("text", [
    "fps: 1000\n",                  # out of range
    "info_timeout: 0\n",            # must be positive
    "fps: [1, 2\n",                 # broken yaml
    "- just\n- a list\n",           # not a mapping
])
def test_invalid_falls_back_to_defaults(config_file, text):
    config = ConfigManager(config_file(text)).load()
    assert config == EngineConfig()


def test_missing_file_falls_back(tmp_path):
    config = ConfigManager(tmp_path / "nope.yaml").load()
    assert config == EngineConfig()


def test_empty_file(config_file):
    assert ConfigManager(config_file("")).load() == EngineConfig()


def test_apply_logging(config_file):
    manager = ConfigManager(config_file("log_level: warn\nuse_colors: false\n"))
    manager.load()
    manager.apply_logging()

    assert get_logger().min_level is LogLevel.WARN
    assert get_logger().use_colors is False


def test_apply_logging_unknown_level(config_file):
    manager = ConfigManager(config_file("log_level: chatty\n"))
    manager.load()
    manager.apply_logging()
    assert get_logger().min_level is LogLevel.INFO


def test_enum_helper_lookup():
    assert EnumHelper.from_string(LogLevel, " debug ") is LogLevel.DEBUG
    assert EnumHelper.names(LogLevel) == ["DEBUG", "INFO", "WARN", "ERROR"]
    with pytest.raises(ValueError):
        EnumHelper.from_string(LogLevel, "chatty")
