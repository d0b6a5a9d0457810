import json
import sys

import pytest

from animscript.main import main, parse_overrides

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh scripts")

GUID = "11111111-2222-3333-4444-555555555555"

RUN_BODY = """
while read -r cmd rest; do
  case "$cmd" in
    frame)
      echo "begin frame"
      echo "argb w ff00ff00"
      echo "end frame"
      ;;
  esac
done
"""


def test_parse_overrides():
    assert parse_overrides(["Speed=5", "text=a=b"]) == {"speed": "5", "text": "a=b"}
    with pytest.raises(ValueError):
        parse_overrides(["speed"])


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out


@posix_only
def test_info(write_script, info_script, capsys):
    path = write_script("wave", info_script(GUID, "Wave", extra='echo "param long speed x x 5"'))

    assert main(["info", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Wave  {11111111-2222-3333-4444-555555555555}" in out
    assert "speed" in out


@posix_only
def test_info_rejects_invalid(write_script, capsys):
    path = write_script("junk", "echo hello\n")
    assert main(["info", str(path)]) == 1
    assert "not a valid animation script" in capsys.readouterr().out


@posix_only
def test_list_json(tmp_path, write_script, info_script, capsys):
    write_script("wave", info_script(GUID, "Wave"))

    assert main(["list", str(tmp_path), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["count"] == 1
    script = data["scripts"][0]
    assert script["name"] == "Wave"
    assert script["kpmode"] == "none"
    assert script["guid"] == "{11111111-2222-3333-4444-555555555555}"
    assert "duration" in [p["name"] for p in script["params"]]


def test_list_empty(tmp_path, capsys):
    assert main(["list", str(tmp_path)]) == 1
    assert "No animation scripts found" in capsys.readouterr().out


@posix_only
def test_run(tmp_path, write_script, info_script, capsys):
    write_script("runner", info_script(GUID, "Runner") + RUN_BODY)

    code = main(["run", "Runner", "--dir", str(tmp_path), "--keys", "w,a", "--seconds", "0.3"])
    assert code == 0
    assert "w        ff00ff00" in capsys.readouterr().out


def test_run_unknown_script(tmp_path, capsys):
    assert main(["run", "Nothing", "--dir", str(tmp_path)]) == 1
    assert "Unknown script" in capsys.readouterr().out


@posix_only
def test_run_rejects_unknown_param(tmp_path, write_script, info_script, capsys):
    write_script("runner", info_script(GUID, "Runner") + RUN_BODY)

    code = main(["run", "Runner", "--dir", str(tmp_path), "--param", "sped=5"])
    assert code == 2
    assert "Unknown parameter(s) for Runner: sped" in capsys.readouterr().out
