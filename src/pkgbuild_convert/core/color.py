"""Color specification parsing for status output."""

from __future__ import annotations

from dataclasses import dataclass, field

# Standard color names and their prompt_toolkit equivalents
COLORS = {
    "black": "ansiblack",
    "red": "ansired",
    "green": "ansigreen",
    "yellow": "ansiyellow",
    "blue": "ansiblue",
    "magenta": "ansimagenta",
    "cyan": "ansicyan",
    "white": "ansiwhite",
    "gray": "ansibrightblack",
    "grey": "ansibrightblack",
}

BASE_COLORS = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

# Text attributes, mapped to prompt_toolkit names
ATTRIBUTES = {
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "blink": "blink",
    "reverse": "reverse",
    "inverse": "reverse",
    "hidden": "hidden",
    "strikethrough": "strike",
}


@dataclass
class ParsedColor:
    """Parsed color specification.

    Attributes:
        fg: Foreground color in prompt_toolkit form, or None
        bg: Background color in prompt_toolkit form, or None
        attributes: Text attributes in prompt_toolkit form
    """

    fg: str | None = None
    bg: str | None = None
    attributes: list[str] = field(default_factory=list)

    def to_prompt_toolkit_style(self) -> str:
        """Convert to a prompt_toolkit style string."""
        parts = list(self.attributes)
        if self.fg:
            parts.append(self.fg)
        if self.bg:
            parts.append(f"bg:{self.bg}")
        return " ".join(parts)


def _color_name(words: list[str]) -> str | None:
    """Resolve 'red', 'bright red' or '#ff0000' to a prompt_toolkit color."""
    if not words:
        return None
    if words[0].startswith("#"):
        return words[0]
    if words[0] == "bright" and len(words) > 1 and words[1] in BASE_COLORS:
        return COLORS[words[1]].replace("ansi", "ansibright", 1)
    return COLORS.get(words[0])


class ColorParser:
    """Parser for color specification strings."""

    def parse(self, color_spec: str) -> ParsedColor:
        """Parse a color specification string.

        Args:
            color_spec: Color string like "bold yellow" or "bright red on white"

        Returns:
            ParsedColor object

        Examples:
            >>> ColorParser().parse("bold red on white").to_prompt_toolkit_style()
            'bold ansired bg:ansiwhite'
        """
        result = ParsedColor()
        if not color_spec:
            return result

        words = color_spec.lower().split()
        background: list[str] = []
        if "on" in words:
            split = words.index("on")
            words, background = words[:split], words[split + 1 :]

        color_words: list[str] = []
        for word in words:
            if word in ATTRIBUTES:
                result.attributes.append(ATTRIBUTES[word])
            else:
                color_words.append(word)

        result.fg = _color_name(color_words)
        result.bg = _color_name(background)
        return result


def parse_color(color_spec: str) -> ParsedColor:
    """Parse a color specification string."""
    return ColorParser().parse(color_spec)
