import pytest

from studiosync.utils.color_utils import adjust_color, is_hex_color


@pytest.mark.parametrize(
    "color, percent, expected",
    [
        ("#3DCED7", -10, "#24b5be"),
        ("#000000", -10, "#000000"),
        ("#FFFFFF", 10, "#ffffff"),
        ("#808080", 0, "#808080"),
        ("3A506B", 20, "#6d839e"),
    ],
)
def test_adjust_color(color, percent, expected):
    assert adjust_color(color, percent) == expected


def test_adjust_color_clamps_each_channel_independently():
    assert adjust_color("#F00A80", 10) == "#ff249a"


def test_adjust_color_rejects_invalid():
    with pytest.raises(ValueError):
        adjust_color("blue", -10)
    with pytest.raises(ValueError):
        adjust_color("#FFF", -10)


def test_is_hex_color():
    assert is_hex_color("#3DCED7")
    assert is_hex_color("3dced7")
    assert not is_hex_color("")
    assert not is_hex_color("#3DCED")


@pytest.mark.parametrize("value", [None, 123, 0x3DCED7, ["#3DCED7"]])
def test_non_string_is_not_a_colour(value):
    assert not is_hex_color(value)
