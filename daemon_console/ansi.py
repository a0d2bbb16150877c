"""SGR escape-sequence parser.

Turns one line of daemon output into styled segments.  Only the SGR family
``ESC[<codes>m`` is understood, and only the codes for bold, italic,
underline and the 16 standard/bright foreground colours.  Every other
escape sequence stays in the text untouched.
"""
import enum
import re
from dataclasses import dataclass, replace

SGR_SEQUENCE = re.compile(r'\x1b\[([0-9;]*)m')


class Color(enum.Enum):
    BLACK = 'black'
    RED = 'red'
    GREEN = 'green'
    YELLOW = 'yellow'
    BLUE = 'blue'
    MAGENTA = 'magenta'
    CYAN = 'cyan'
    WHITE = 'white'
    BRIGHT_BLACK = 'bright_black'
    BRIGHT_RED = 'bright_red'
    BRIGHT_GREEN = 'bright_green'
    BRIGHT_YELLOW = 'bright_yellow'
    BRIGHT_BLUE = 'bright_blue'
    BRIGHT_MAGENTA = 'bright_magenta'
    BRIGHT_CYAN = 'bright_cyan'
    BRIGHT_WHITE = 'bright_white'


_STANDARD = [
    Color.BLACK, Color.RED, Color.GREEN, Color.YELLOW,
    Color.BLUE, Color.MAGENTA, Color.CYAN, Color.WHITE,
]
_BRIGHT = [
    Color.BRIGHT_BLACK, Color.BRIGHT_RED, Color.BRIGHT_GREEN, Color.BRIGHT_YELLOW,
    Color.BRIGHT_BLUE, Color.BRIGHT_MAGENTA, Color.BRIGHT_CYAN, Color.BRIGHT_WHITE,
]

# 30-37 standard, 90-97 bright
COLOR_TABLE = {
    **{30 + i: c for i, c in enumerate(_STANDARD)},
    **{90 + i: c for i, c in enumerate(_BRIGHT)},
}

DEFAULT_PALETTE = {
    Color.BLACK:          '#666666',
    Color.RED:            '#FF6B6B',
    Color.GREEN:          '#69FF94',
    Color.YELLOW:         '#FFFF6B',
    Color.BLUE:           '#6B6BFF',
    Color.MAGENTA:        '#FF6BFF',
    Color.CYAN:           '#6BFFFF',
    Color.WHITE:          '#FFFFFF',
    Color.BRIGHT_BLACK:   '#666666',
    Color.BRIGHT_RED:     '#FF4136',
    Color.BRIGHT_GREEN:   '#2ECC40',
    Color.BRIGHT_YELLOW:  '#FFDC00',
    Color.BRIGHT_BLUE:    '#0074D9',
    Color.BRIGHT_MAGENTA: '#B10DC9',
    Color.BRIGHT_CYAN:    '#7FDBFF',
    Color.BRIGHT_WHITE:   '#F1F3F5',
}

DEFAULT_COLOR = '#94A3B8'

# Codes are matched by their literal decimal text, so "01" or a 5000-digit
# run is simply an unknown code.
RESET, BOLD, ITALIC, UNDERLINE = '0', '1', '3', '4'
_COLOR_CODES = {str(code): color for code, color in COLOR_TABLE.items()}


@dataclass(frozen=True)
class StyleState:
    color: Color = None
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def apply(self, code):
        """Return the style after applying a single SGR code."""
        if code == RESET:
            return DEFAULT_STYLE
        if code == BOLD:
            return replace(self, bold=True)
        if code == ITALIC:
            return replace(self, italic=True)
        if code == UNDERLINE:
            return replace(self, underline=True)
        color = _COLOR_CODES.get(code)
        if color is not None:
            return replace(self, color=color)
        return self


DEFAULT_STYLE = StyleState()


@dataclass(frozen=True)
class Segment:
    style: StyleState
    text: str

    def to_dict(self, palette=None, default_color=None):
        """Display record for one styled run.

        With a *palette* the colour is resolved to a hex string, falling back
        to *default_color* when the style leaves it unset.  Without one the
        colour is the enum value name, or ``None``.
        """
        color = self.style.color
        if palette is not None:
            color = palette.get(color, default_color) if color else default_color
        elif color is not None:
            color = color.value
        return {
            'text': self.text,
            'color': color,
            'bold': self.style.bold,
            'italic': self.style.italic,
            'underline': self.style.underline,
        }


def _codes(params):
    # ESC[m is a reset; an empty element inside a list is a no-op.
    if not params:
        return [RESET]
    return params.split(';')


def parse(line):
    """Split *line* into styled segments.

    Style starts from the defaults on every call.  The segment texts joined
    together equal *line* with its SGR sequences removed.  Never raises.
    """
    segments = []
    style = DEFAULT_STYLE
    last = 0

    for m in SGR_SEQUENCE.finditer(line):
        if m.start() > last:
            segments.append(Segment(style, line[last:m.start()]))
        for code in _codes(m.group(1)):
            style = style.apply(code)
        last = m.end()

    if last < len(line):
        segments.append(Segment(style, line[last:]))
    return segments


def strip_sgr(line):
    """Return *line* without its SGR sequences."""
    return SGR_SEQUENCE.sub('', line)
