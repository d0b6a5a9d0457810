from uuid import UUID

from animscript.models.enums import ParamType
from animscript.models.keymap import KeyMap, KeyPos
from animscript.models.schemas import ScriptResponse

from conftest import WAVE_GUID


def test_param_type_tokens():
    assert ParamType.from_token("DOUBLE") is ParamType.DOUBLE
    assert ParamType.from_token("agradient") is ParamType.AGRADIENT
    assert ParamType.from_token("nope") is ParamType.INVALID


def test_descriptor_helpers(make_descriptor):
    desc = make_descriptor("param long speed x x 5")

    assert desc.is_valid
    assert desc.guid_text == "{" + WAVE_GUID.upper() + "}"
    assert desc.has_param("SPEED")
    assert desc.param("missing") is None
    assert desc.default_values()["speed"] == "5"
    assert list(desc.default_values())[0] == "speed"


def test_missing_fields(make_descriptor):
    desc = make_descriptor()
    assert desc.missing_fields() == ()

    broken = desc.renamed("")
    assert not broken.is_valid
    assert broken.missing_fields() == ("name",)


def test_renamed_is_a_copy(make_descriptor):
    desc = make_descriptor()
    renamed = desc.renamed("Wave {X}")

    assert renamed.name == "Wave {X}"
    assert desc.name == "Wave"
    assert renamed.guid == UUID(WAVE_GUID)
    assert renamed.params == desc.params


def test_keymap_from_rows():
    keymap = KeyMap.from_rows([["esc", "f1"], ["grave"]], pitch=12)

    assert keymap.key("f1") == KeyPos(12, 0)
    assert keymap.key("grave") == KeyPos(0, 12)
    assert keymap.key("nope") is None
    assert "esc" in keymap
    assert len(keymap) == 3
    assert list(keymap) == ["esc", "f1", "grave"]


def test_script_response(make_descriptor):
    desc = make_descriptor("kpmode position", "param rgb color x x ff0000")
    response = ScriptResponse.from_descriptor(desc)

    assert response.kpmode == "position"
    assert response.path == "/fake/wave"
    assert response.params[0].type == "rgb"
    assert response.params[0].default == "ff0000"
