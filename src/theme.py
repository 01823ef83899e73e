"""Color & style helpers for list output.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via TASKTRACK_COLOR_* variables (the .env
  file is already merged into the environment by config.load_settings).
"""
from __future__ import annotations
import os, sys
from dataclasses import dataclass
from typing import Mapping, Optional, TextIO

# Default palette
HEX_ID_DEFAULT = '#476EAE'
HEX_DONE_DEFAULT = '#A7E399'
HEX_PENDING_DEFAULT = '#F6FF99'

PALETTE_VARS = {
    'id': 'TASKTRACK_COLOR_ID',
    'done': 'TASKTRACK_COLOR_DONE',
    'pending': 'TASKTRACK_COLOR_PENDING',
}

_TRUTHY = {"1", "true", "yes", "on"}


def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m"

def _is_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_truecolor(r: int, g: int, b: int) -> str:
    """Generate ANSI escape code for truecolor foreground."""
    return f"\033[38;2;{r};{g};{b}m"

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"


RESET = _code('0')
BOLD = _code('1')


@dataclass
class Theme:
    enabled: bool = False
    truecolor: bool = False
    hex_id: str = HEX_ID_DEFAULT
    hex_done: str = HEX_DONE_DEFAULT
    hex_pending: str = HEX_PENDING_DEFAULT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, stream: Optional[TextIO] = None) -> "Theme":
        """Resolve color support and palette (priority: env var > default)."""
        env = os.environ if environ is None else environ
        out = sys.stdout if stream is None else stream
        force = env.get("FORCE_COLOR", "").lower() in _TRUTHY
        no_color = env.get("NO_COLOR") is not None
        isatty = getattr(out, 'isatty', None)
        enabled = (force or bool(isatty and isatty())) and not no_color
        colorterm = env.get("COLORTERM", "").lower()
        truecolor = enabled and any(tok in colorterm for tok in ("truecolor", "24bit"))
        palette = {}
        for slot, var in PALETTE_VARS.items():
            value = env.get(var, '').strip()
            if value and _is_hex(value):
                palette['hex_' + slot] = '#' + value.lstrip('#')
        return cls(enabled=enabled, truecolor=truecolor, **palette)

    def _from_hex(self, hex_code: str) -> str:
        """Convert a hex color code to an ANSI escape sequence."""
        r, g, b = _hex_to_rgb(hex_code)
        if self.truecolor:
            return _fg_truecolor(r, g, b)
        return _fg_256(r, g, b)

    def color(self, text: str, *styles: str) -> str:
        """Apply ANSI styles to a given text."""
        if not self.enabled:
            return text
        return ''.join(styles) + text + RESET

    def task_id(self, text: str) -> str:
        return self.color(text, self._from_hex(self.hex_id), BOLD)

    def status(self, text: str, completed: bool) -> str:
        return self.color(text, self._from_hex(self.hex_done if completed else self.hex_pending))


PLAIN = Theme()

__all__ = ['Theme', 'PLAIN', 'RESET', 'BOLD', 'PALETTE_VARS']
