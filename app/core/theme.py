"""
Theme derivation from the configured primary colour.

Produces the CSS custom properties and utility overrides the base layout
injects ahead of page content.
"""
import colorsys
import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hex_to_hsl(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert ``#rrggbb`` to (hue degrees, saturation %, lightness %).

    Raises:
        ValueError: if the colour is not a 6-digit hex string
    """
    if not HEX_COLOR_PATTERN.match(hex_color or ""):
        raise ValueError(f"Invalid hex colour: {hex_color!r}")

    r, g, b = (int(hex_color[i:i + 2], 16) / 255 for i in (1, 3, 5))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    return _round_half_up(h * 360), _round_half_up(s * 100), _round_half_up(l * 100)


def build_theme_css(primary_color: str) -> str:
    """Stylesheet applying the primary colour to the shared utility classes."""
    h, s, l = hex_to_hsl(primary_color)
    return f"""
:root {{
  --primary-color: {primary_color};
  --primary: {h} {s}% {l}%;
}}
.btn-primary {{
  background-color: {primary_color} !important;
  border-color: {primary_color} !important;
}}
.btn-primary:hover {{
  background-color: {primary_color}dd !important;
  border-color: {primary_color}dd !important;
}}
.text-primary {{
  color: {primary_color} !important;
}}
.bg-primary {{
  background-color: {primary_color} !important;
}}
.border-primary {{
  border-color: {primary_color} !important;
}}
""".strip()


@dataclass(frozen=True)
class ThemeContext:
    primary_color: Optional[str]
    hsl: Optional[Tuple[int, int, int]]
    css: Optional[str]

    @classmethod
    def from_primary_color(cls, primary_color: Optional[str]) -> "ThemeContext":
        """Build the theme; an unusable colour yields an empty theme."""
        if not primary_color:
            return cls(primary_color=None, hsl=None, css=None)
        try:
            return cls(
                primary_color=primary_color,
                hsl=hex_to_hsl(primary_color),
                css=build_theme_css(primary_color),
            )
        except ValueError:
            logger.warning(
                sanitize_log_message("Ignoring invalid primary colour", PrimaryColor=primary_color)
            )
            return cls(primary_color=None, hsl=None, css=None)
