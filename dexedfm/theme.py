"""Colour scheme and image overrides of the editor's look and feel.

A theme starts from the built-in colours and images. A theme file
(``DexedTheme.xml``) can then replace registered colours, the editor's own
background and fill colours, and any of the skin images. The file looks
like::

    <theme>
      <colour id="PopupMenu::backgroundColourId" value="0xFF202020"/>
      <colour id="Dexed::fillColourId" value="FF4D9F97"/>
      <image id="Knob_34x34.png" path="/path/to/knob.png"/>
    </theme>
"""

from __future__ import annotations

import string
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass, field
from pathlib import Path

THEME_FILE_NAME = "DexedTheme.xml"

_LONG_MAX = (1 << 63) - 1
_LONG_MIN = -(1 << 63)
_HEX_DIGITS = frozenset(string.hexdigits)

# Image ids a theme file may override; unknown ids are ignored.
IMAGE_NAMES: tuple[str, ...] = (
    "Knob_34x34.png",
    "Switch_48x26.png",
    "SwitchLighted_48x26.png",
    "Switch_32x64.png",
    "ButtonUnlabeled_50x30.png",
    "Slider_26x26.png",
    "Scaling_36_26.png",
    "Light_14x14.png",
    "LFO_36_26.png",
    "OperatorEditor_287x218.png",
    "GlobalEditor_864x144.png",
)

BACKGROUND_ID = "Dexed::backgroundId"
FILL_COLOUR_ID = "Dexed::fillColourId"


@dataclass(frozen=True)
class Colour:
    """A colour stored as a 32-bit ARGB value."""

    argb: int

    def __post_init__(self) -> None:
        if not 0 <= self.argb <= 0xFFFFFFFF:
            raise ValueError(f"ARGB value must fit in 32 bits, got {self.argb:#x}")

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int) -> Colour:
        """Return an opaque colour from its red, green and blue components."""
        for name, component in (("red", red), ("green", green), ("blue", blue)):
            if not 0 <= component <= 0xFF:
                raise ValueError(f"{name} must be 0..255, got {component}")
        return cls(0xFF000000 | (red << 16) | (green << 8) | blue)

    @property
    def alpha(self) -> int:
        return (self.argb >> 24) & 0xFF

    @property
    def red(self) -> int:
        return (self.argb >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.argb >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.argb & 0xFF


WHITE = Colour(0xFFFFFFFF)
TRANSPARENT_BLACK = Colour(0x00000000)
BUTTON_GREEN = Colour(0xFF0FC00F)

DEFAULT_FILL_COLOUR = Colour.from_rgb(77, 159, 151)
DEFAULT_LIGHT_BACKGROUND = Colour.from_rgb(78, 72, 63)
DEFAULT_BACKGROUND = Colour.from_rgb(60, 50, 47)
DEFAULT_ROUND_BACKGROUND = Colour.from_rgb(58, 52, 48)
CONTROL_BACKGROUND = Colour.from_rgb(20, 18, 18)


def parse_colour(value: str) -> Colour:
    """Read a hexadecimal ARGB value the way ``strtol`` with base 16 does.

    Leading whitespace, a sign and a ``0x`` prefix are accepted; parsing
    stops at the first character that is not a hex digit, and text with no
    digits gives 0. The result keeps the low 32 bits.
    """
    text = value.lstrip()
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text[:2].lower() == "0x" and text[2:3] in _HEX_DIGITS and text[2:3]:
        text = text[2:]
    digits = []
    for char in text:
        if char not in _HEX_DIGITS:
            break
        digits.append(char)
    number = int("".join(digits), 16) if digits else 0
    if negative:
        number = -number
    number = max(_LONG_MIN, min(_LONG_MAX, number))
    return Colour(number & 0xFFFFFFFF)


def find_image(path: str) -> Path | None:
    """Return the image file named by ``path``, or None when it cannot be used.

    Paths of three characters or fewer are treated as empty.
    """
    if len(path) <= 3:
        return None
    image = Path(path)
    return image if image.is_file() else None


def _default_colours() -> dict[str, Colour]:
    return {
        "TextButton::buttonColourId": BUTTON_GREEN,
        "TextButton::textColourOnId": WHITE,
        "TextButton::textColourOffId": WHITE,
        "Slider::rotarySliderOutlineColourId": BUTTON_GREEN,
        "Slider::rotarySliderFillColourId": WHITE,
        "AlertWindow::backgroundColourId": DEFAULT_LIGHT_BACKGROUND,
        "AlertWindow::textColourId": WHITE,
        "TextEditor::backgroundColourId": CONTROL_BACKGROUND,
        "TextEditor::textColourId": WHITE,
        "TextEditor::highlightColourId": DEFAULT_FILL_COLOUR,
        "TextEditor::outlineColourId": TRANSPARENT_BLACK,
        "ComboBox::backgroundColourId": CONTROL_BACKGROUND,
        "ComboBox::textColourId": WHITE,
        "ComboBox::buttonColourId": WHITE,
        "PopupMenu::backgroundColourId": DEFAULT_BACKGROUND,
        "PopupMenu::textColourId": WHITE,
        "PopupMenu::highlightedTextColourId": WHITE,
        "PopupMenu::highlightedBackgroundColourId": DEFAULT_FILL_COLOUR,
        "TreeView::backgroundColourId": DEFAULT_BACKGROUND,
        "DirectoryContentsDisplayComponent::highlightColourId": DEFAULT_FILL_COLOUR,
        "DirectoryContentsDisplayComponent::textColourId": WHITE,
    }


@dataclass
class Theme:
    """Colours and image overrides of the editor.

    ``colours`` maps registered colour ids to their colour. ``image_overrides``
    holds the images a theme file replaced; a value of None means the file
    named an image that cannot be used, so the plain look is drawn instead.
    Images without an entry keep the built-in skin.
    """

    colours: dict[str, Colour] = field(default_factory=_default_colours)
    fill_colour: Colour = DEFAULT_FILL_COLOUR
    light_background: Colour = DEFAULT_LIGHT_BACKGROUND
    background: Colour = DEFAULT_BACKGROUND
    round_background: Colour = DEFAULT_ROUND_BACKGROUND
    image_overrides: dict[str, Path | None] = field(default_factory=dict)

    def apply_xml(self, text: str) -> None:
        """Apply the colour and image entries of a theme document.

        Raises ValueError when the text is not well-formed XML.
        """
        try:
            root = ElementTree.fromstring(text)
        except ElementTree.ParseError as exc:
            raise ValueError(f"theme is not valid XML: {exc}") from exc

        for element in root.findall("colour"):
            name = element.get("id", "")
            value = element.get("value", "")
            if not name or len(value) < 8:
                continue
            colour = parse_colour(value)
            if name in self.colours:
                self.colours[name] = colour
            elif name == BACKGROUND_ID:
                self.background = colour
            elif name == FILL_COLOUR_ID:
                self.fill_colour = colour

        for element in root.findall("image"):
            name = element.get("id", "")
            if name in IMAGE_NAMES:
                self.image_overrides[name] = find_image(element.get("path", ""))

    @classmethod
    def load(cls, path: str | Path) -> Theme:
        """Build a theme from a theme file, or from the theme file inside a directory.

        A missing or unreadable file leaves the built-in theme unchanged.
        """
        theme = cls()
        location = Path(path)
        if location.is_dir():
            location = location / THEME_FILE_NAME
        if not location.is_file():
            return theme
        try:
            text = location.read_text(encoding="utf-8")
            theme.apply_xml(text)
        except (OSError, UnicodeDecodeError, ValueError):
            return cls()
        return theme