import pytest

from animscript.errors import ProtocolDesync
from animscript.protocol import commands
from animscript.protocol.frames import FrameEventType, FrameOutputParser, parse_argb


# ------------------------------------------------------------
# Outbound commands
# ------------------------------------------------------------

@pytest.mark.parametrize("value,text", [
    (True, "true"),
    (False, "false"),
    (1.0, "1"),
    (-1, "-1"),
    (0.25, "0.25"),
    ("ff00ff", "ff00ff"),
])
def test_format_value(value, text):
    assert commands.format_value(value) == text


def test_keymap_block():
    lines = commands.keymap_block([("w", 0, 0), ("s", 3, 12)])
    assert lines == [
        "begin keymap",
        "keycount 2",
        "key w 0,0",
        "key s 3,12",
        "end keymap",
    ]


def test_params_block_sorted_and_encoded():
    lines = commands.params_block({"text": "hello world/1", "duration": 2.5, "trigger": True})
    assert lines == [
        "begin params",
        "param duration 2.5",
        "param text hello%20world%2F1",
        "param trigger true",
        "end params",
    ]


@pytest.mark.parametrize("delta,line", [
    (0., "frame 0"),
    (0.5, "frame 0.5"),
    (1., "frame 1"),
    (2.5, "frame 2.5"),
])
def test_frame_command(delta, line):
    assert commands.frame_command(delta) == line


def test_key_command():
    assert commands.key_command("w", True) == "key w down"
    assert commands.key_command("3,12", False) == "key 3,12 up"


# ------------------------------------------------------------
# Inbound frames
# ------------------------------------------------------------

def test_parse_argb():
    assert parse_argb("argb w ff00ff00") == ("w", 0xff00ff00)
    assert parse_argb("argb space 0") == ("space", 0)


@pytest.mark.parametrize("line", [
    "argb w",
    "argb w ff00ff00 extra",
    "rgb w ff00ff00",
    "argb w zz",
    "argb w 1ffffffff",
])
def test_parse_argb_rejects(line):
    with pytest.raises(ProtocolDesync):
        parse_argb(line)


def feed_all(parser, lines):
    return [parser.feed(line) for line in lines]


def test_frame_block_yields_colors():
    parser = FrameOutputParser()
    events = feed_all(parser, [
        "noise before frame",
        "begin frame",
        "argb w ff00ff00",
        "argb s 80112233",
        "end frame",
    ])

    assert [e.type for e in events[:-1]] == [FrameEventType.NONE] * 4
    assert events[-1].type is FrameEventType.FRAME
    assert events[-1].colors == {"w": 0xff00ff00, "s": 0x80112233}
    assert not parser.in_frame


def test_bad_lines_dropped_rest_applied():
    parser = FrameOutputParser()
    events = feed_all(parser, [
        "begin frame",
        "argb w nothex",
        "argb q ff0000ff",
        "garbage",
        "end frame",
    ])
    assert events[-1].colors == {"q": 0xff0000ff}


def test_later_color_wins_within_frame():
    parser = FrameOutputParser()
    events = feed_all(parser, ["begin frame", "argb w 1", "argb w 2", "end frame"])
    assert events[-1].colors == {"w": 2}


def test_end_run_anywhere():
    parser = FrameOutputParser()
    assert parser.feed("end run").type is FrameEventType.END_RUN

    feed_all(parser, ["begin frame", "argb w ff00ff00"])
    event = parser.feed("end run")
    assert event.type is FrameEventType.END_RUN
    assert event.colors == {}
    assert not parser.in_frame and parser.buffer == []


def test_end_frame_outside_frame_is_ignored():
    parser = FrameOutputParser()
    assert parser.feed("end frame").type is FrameEventType.NONE


def test_whitespace_is_trimmed():
    parser = FrameOutputParser()
    events = feed_all(parser, ["  begin frame ", "argb w ff00ff00  ", "end frame\r"])
    assert events[-1].colors == {"w": 0xff00ff00}
