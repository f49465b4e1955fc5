"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides come from the environment (TODO_PRIMARY, TODO_PENDING,
  TODO_DONE, TODO_SELECTED), including a project .env file.
"""
from __future__ import annotations
import os, sys, re

from config import load_env
from models import Severity

load_env()

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))
_HEX_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''


def _hex_to_rgb(hex_code: str) -> tuple[int, int, int]:
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    idx = 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)
    return f"\033[38;5;{idx}m"


def _from_hex(hex_code: str) -> str:
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)


def _palette(name: str, default: str) -> str:
    """Env override when it is a valid 6-digit hex, else the default."""
    value = os.environ.get(name, '').strip()
    if _HEX_RE.match(value):
        return '#' + value.lstrip('#')
    return default


RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
UNDERLINE = _code('4')
STRIKE = _code('9')
REVERSE = _code('7')

HEX_PRIMARY = _palette('TODO_PRIMARY', '#476EAE')
HEX_PENDING = _palette('TODO_PENDING', '#48B3AF')
HEX_DONE = _palette('TODO_DONE', '#A7E399')
HEX_SELECTED = _palette('TODO_SELECTED', '#F6FF99')

PRIMARY = _from_hex(HEX_PRIMARY)
C_PENDING = _from_hex(HEX_PENDING)
C_DONE = _from_hex(HEX_DONE)
C_SELECTED = _from_hex(HEX_SELECTED)

HEADER_COLOR = PRIMARY
COUNTER_COLOR = PRIMARY + BOLD
EMPTY_COLOR = DIM + PRIMARY

SEVERITY_COLOR = {
    Severity.INFO: _from_hex('#6FA8DC'),
    Severity.SUCCESS: _from_hex('#7BC67B'),
    Severity.WARNING: _from_hex('#F1C232'),
    Severity.ERROR: _from_hex('#E06666'),
}


def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET


__all__ = [
    'color', 'RESET', 'BOLD', 'DIM', 'UNDERLINE', 'STRIKE', 'REVERSE', 'HEADER_COLOR',
    'COUNTER_COLOR', 'EMPTY_COLOR', 'SEVERITY_COLOR', 'C_PENDING', 'C_DONE', 'C_SELECTED',
    'HEX_PRIMARY', 'HEX_PENDING', 'HEX_DONE', 'HEX_SELECTED',
]
