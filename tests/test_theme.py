from pathlib import Path

import pytest

from dexedfm.theme import (
    THEME_FILE_NAME,
    Colour,
    Theme,
    find_image,
    parse_colour,
)


def test_colour_from_rgb_components():
    colour = Colour.from_rgb(77, 159, 151)
    assert (colour.alpha, colour.red, colour.green, colour.blue) == (255, 77, 159, 151)


def test_colour_from_rgb_rejects_out_of_range():
    with pytest.raises(ValueError):
        Colour.from_rgb(256, 0, 0)


def test_colour_rejects_oversized_argb():
    with pytest.raises(ValueError):
        Colour(0x1FFFFFFFF)


@pytest.mark.parametrize(
    "text",
    ["FF0FC00F", "ff0fc00f", "0xFF0FC00F", "  FF0FC00F", "FF0FC00Fzz"],
)
def test_parse_colour_accepts_strtol_forms(text):
    assert parse_colour(text) == Colour(0xFF0FC00F)


def test_parse_colour_without_digits_is_zero():
    assert parse_colour("zzzzzzzz") == Colour(0)


def test_parse_colour_negative_wraps_to_32_bits():
    assert parse_colour("-1") == Colour(0xFFFFFFFF)


def test_parse_colour_keeps_low_32_bits():
    assert parse_colour("12FF0FC00F") == Colour(0xFF0FC00F)


def test_find_image_short_path_is_none():
    assert find_image("abc") is None


def test_find_image_missing_file_is_none(tmp_path):
    assert find_image(str(tmp_path / "missing.png")) is None


def test_find_image_existing_file(tmp_path):
    image = tmp_path / "knob.png"
    image.write_bytes(b"\x89PNG")
    assert find_image(str(image)) == image


def test_default_theme_colours():
    theme = Theme()
    assert theme.colours["TextButton::buttonColourId"] == Colour(0xFF0FC00F)
    assert theme.colours["TextEditor::highlightColourId"] == theme.fill_colour
    assert theme.colours["PopupMenu::backgroundColourId"] == theme.background
    assert theme.image_overrides == {}


def test_apply_xml_overrides_registered_colour():
    theme = Theme()
    theme.apply_xml(
        '<theme><colour id="ComboBox::textColourId" value="FF112233"/></theme>'
    )
    assert theme.colours["ComboBox::textColourId"] == parse_colour("FF112233")


def test_apply_xml_sets_editor_colours():
    theme = Theme()
    theme.apply_xml(
        "<theme>"
        '<colour id="Dexed::backgroundId" value="FF010203"/>'
        '<colour id="Dexed::fillColourId" value="0xFF040506"/>'
        "</theme>"
    )
    assert theme.background == parse_colour("FF010203")
    assert theme.fill_colour == parse_colour("0xFF040506")
    assert "Dexed::backgroundId" not in theme.colours


def test_apply_xml_skips_short_empty_and_unknown():
    theme = Theme()
    before = dict(theme.colours)
    theme.apply_xml(
        "<theme>"
        '<colour id="ComboBox::textColourId" value="FF1122"/>'
        '<colour id="" value="FF112233"/>'
        '<colour id="Unknown::colourId" value="FF112233"/>'
        '<colour id="TreeView::backgroundColourId"/>'
        "</theme>"
    )
    assert theme.colours == before
    assert theme.background == Theme().background


def test_apply_xml_images(tmp_path):
    image = tmp_path / "knob.png"
    image.write_bytes(b"\x89PNG")
    theme = Theme()
    theme.apply_xml(
        "<theme>"
        f'<image id="Knob_34x34.png" path="{image}"/>'
        '<image id="Light_14x14.png" path="ab"/>'
        f'<image id="Other.png" path="{image}"/>'
        "</theme>"
    )
    assert theme.image_overrides == {"Knob_34x34.png": image, "Light_14x14.png": None}


def test_apply_xml_malformed_raises():
    with pytest.raises(ValueError):
        Theme().apply_xml("<theme><colour")


def test_load_missing_file_gives_defaults(tmp_path):
    assert Theme.load(tmp_path / "none.xml") == Theme()


def test_load_malformed_file_gives_defaults(tmp_path):
    theme_file = tmp_path / THEME_FILE_NAME
    theme_file.write_text("<theme><colour", encoding="utf-8")
    assert Theme.load(theme_file) == Theme()


def test_load_from_directory(tmp_path):
    (tmp_path / THEME_FILE_NAME).write_text(
        '<theme><colour id="Dexed::fillColourId" value="FF0A0B0C"/></theme>',
        encoding="utf-8",
    )
    theme = Theme.load(tmp_path)
    assert theme.fill_colour == parse_colour("FF0A0B0C")
    assert theme.colours == Theme().colours


def test_load_from_file_path(tmp_path):
    theme_file = Path(tmp_path) / "custom.xml"
    theme_file.write_text(
        '<theme><colour id="PopupMenu::textColourId" value="80FFFFFF"/></theme>',
        encoding="utf-8",
    )
    theme = Theme.load(theme_file)
    assert theme.colours["PopupMenu::textColourId"].alpha == 0x80