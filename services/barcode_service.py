"""
services.barcode_service - Code 128 barcode generation for membership labels.

Encodes reference IDs as Code 128 subset B and renders the bar pattern
as a vector image (SVG) or a 1-bit raster for thermal printers.

Public API:
    encode(data)                         → bit pattern "1101..."
    checksum(data)                       → mod-103 check value
    render(pattern, data, width, height) → VectorImage
    generate_barcode_svg(data, ...)      → SVG markup
    generate_barcode_data_uri(data, ...) → data:image/svg+xml;base64,...
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from types import MappingProxyType
from xml.sax.saxutils import escape

from PIL import Image, ImageDraw, ImageFont


# ── Code 128 encoding tables ──────────────────────────────────────────
CODE128_START_B = 104
CODE128_STOP = 106
CODE128_MODULUS = 103

# Indexed by symbol value.  Values 0-94 double as Code 128B characters
# (ASCII 32-126); the rest are function codes that only ever appear as
# checksum symbols or start/stop markers.
CODE128_PATTERNS = (
    "11011001100", "11001101100", "11001100110", "10010011000", "10010001100",  # 0-4
    "10001001100", "10011001000", "10011000100", "10001100100", "11001001000",  # 5-9
    "11001000100", "11000100100", "10110011100", "10011011100", "10011001110",  # 10-14
    "10111001100", "10011101100", "10011100110", "11001110010", "11001011100",  # 15-19
    "11001001110", "11011100100", "11001110100", "11101101110", "11101001100",  # 20-24
    "11100101100", "11100100110", "11101100100", "11100110100", "11100110010",  # 25-29
    "11011011000", "11011000110", "11000110110", "10100011000", "10001011000",  # 30-34
    "10001000110", "10110001000", "10001101000", "10001100010", "11010001000",  # 35-39
    "11000101000", "11000100010", "10110111000", "10110001110", "10001101110",  # 40-44
    "10111011000", "10111000110", "10001110110", "11101110110", "11010001110",  # 45-49
    "11000101110", "11011101000", "11011100010", "11011101110", "11101011000",  # 50-54
    "11101000110", "11100010110", "11101101000", "11101100010", "11100011010",  # 55-59
    "11101111010", "11001000010", "11110001010", "10100110000", "10100001100",  # 60-64
    "10010110000", "10010000110", "10000101100", "10000100110", "10110010000",  # 65-69
    "10110000100", "10011010000", "10011000010", "10000110100", "10000110010",  # 70-74
    "11000010010", "11001010000", "11110111010", "11000010100", "10001111010",  # 75-79
    "10100111100", "10010111100", "10010011110", "10111100100", "10011110100",  # 80-84
    "10011110010", "11110100100", "11110010100", "11110010010", "11011011110",  # 85-89
    "11011110110", "11110110110", "10101111000", "10100011110", "10001011110",  # 90-94
    "10111101000", "10111100010", "11110101000", "11110100010", "10111011110",  # 95-99
    "10111101110", "11101011110", "11110101110",                                # 100-102
    "11010000100", "11010010000", "11010011100",  # 103 START A, 104 START B, 105 START C
    "1100011101011",                              # 106 STOP (with final bar)
)

START_B = CODE128_PATTERNS[CODE128_START_B]
STOP = CODE128_PATTERNS[CODE128_STOP]
SYMBOL_WIDTH = 11

# Printable ASCII space (32) through tilde (126)
FIRST_CHAR = 32
LAST_CHAR = 126

CODE128B_CHARSET = MappingProxyType({
    chr(code): CODE128_PATTERNS[code - FIRST_CHAR]
    for code in range(FIRST_CHAR, LAST_CHAR + 1)
})

# Rendering proportions
BAR_HEIGHT_RATIO = 0.8
CAPTION_FONT_RATIO = 0.16
CAPTION_MARGIN = 2.0
CAPTION_FONT_FAMILY = "monospace"


# ── Errors ────────────────────────────────────────────────────────────

class BarcodeError(ValueError):
    """Base class for everything that stops a barcode from being generated."""


class UnsupportedCharacter(BarcodeError):
    """Input holds a character Code 128B cannot encode."""

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(
            f"Unsupported Code 128 character {char!r} at position {position}"
        )


class EmptyBarcodeData(UnsupportedCharacter):
    def __init__(self):
        super().__init__("", 0)
        self.args = ("Barcode data must not be empty",)


class InvalidDimensions(BarcodeError):
    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        super().__init__(
            f"Barcode width and height must be positive (got {width} x {height})"
        )


# ── Encoding ──────────────────────────────────────────────────────────

def lookup(char: str) -> str:
    """Return the 11-bit pattern for a single Code 128B character."""
    try:
        return CODE128B_CHARSET[char]
    except KeyError:
        raise UnsupportedCharacter(char, 0) from None


def symbol_value(char: str) -> int:
    """Code 128B symbol value of *char* (ASCII code minus 32)."""
    if char not in CODE128B_CHARSET:
        raise UnsupportedCharacter(char, 0)
    return ord(char) - FIRST_CHAR


def _validate(data: str) -> None:
    if not data:
        raise EmptyBarcodeData()
    for position, char in enumerate(data, 1):
        if char not in CODE128B_CHARSET:
            raise UnsupportedCharacter(char, position)


def checksum(data: str) -> int:
    """
    Modulo-103 check value for *data* encoded in subset B.

    The start symbol contributes 104; each data symbol contributes its
    value times its 1-based position.
    """
    _validate(data)
    total = CODE128_START_B
    for position, char in enumerate(data, 1):
        total += symbol_value(char) * position
    return total % CODE128_MODULUS


def encode(data: str) -> str:
    """
    Encode text as a Code 128B bar pattern.

    Returns a string of 1s (bar) and 0s (space), 11*(len(data)+2)+13
    modules long.  Raises UnsupportedCharacter for anything outside
    ASCII 32-126; characters are never dropped or substituted.
    """
    check = checksum(data)
    return "".join(
        [START_B]
        + [lookup(char) for char in data]
        + [CODE128_PATTERNS[check], STOP]
    )


def decode_symbols(pattern: str) -> list[int]:
    """
    Split a full pattern back into symbol values.

    Used to verify output; raises BarcodeError when a chunk is not a
    known Code 128 symbol.
    """
    if len(pattern) < 2 * SYMBOL_WIDTH + len(STOP) or not pattern.endswith(STOP):
        raise BarcodeError("Pattern is not a complete Code 128 symbol")
    body = pattern[:-len(STOP)]
    if len(body) % SYMBOL_WIDTH:
        raise BarcodeError("Pattern length is not a multiple of the symbol width")
    index = {p: v for v, p in enumerate(CODE128_PATTERNS[:CODE128_STOP])}
    values = []
    for i in range(0, len(body), SYMBOL_WIDTH):
        chunk = body[i:i + SYMBOL_WIDTH]
        if chunk not in index:
            raise BarcodeError(f"Unknown symbol {chunk} at module {i}")
        values.append(index[chunk])
    values.append(CODE128_STOP)
    return values


# ── Vector rendering ──────────────────────────────────────────────────

def _fmt(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text or "0"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str = "black"

    def to_svg(self) -> str:
        return (f'<rect x="{_fmt(self.x)}" y="{_fmt(self.y)}" '
                f'width="{_fmt(self.width)}" height="{_fmt(self.height)}" '
                f'fill="{self.fill}"/>')


@dataclass(frozen=True)
class Caption:
    text: str
    x: float
    y: float
    font_size: float
    font_family: str = CAPTION_FONT_FAMILY
    fill: str = "black"

    def to_svg(self) -> str:
        return (f'<text x="{_fmt(self.x)}" y="{_fmt(self.y)}" text-anchor="middle" '
                f'font-family="{self.font_family}" font-size="{_fmt(self.font_size)}" '
                f'fill="{self.fill}">{escape(self.text)}</text>')


@dataclass(frozen=True)
class VectorImage:
    """Fully specified drawing of a barcode: background, bars, caption."""

    width: float
    height: float
    background: Rect
    bars: tuple[Rect, ...]
    caption: Caption

    def to_svg_group(self) -> str:
        """Bars only, as an SVG <g> element for embedding in labels."""
        return f'<g>{"".join(bar.to_svg() for bar in self.bars)}</g>'

    def to_svg(self) -> str:
        return (
            f'<svg width="{_fmt(self.width)}" height="{_fmt(self.height)}" '
            f'viewBox="0 0 {_fmt(self.width)} {_fmt(self.height)}" '
            f'xmlns="http://www.w3.org/2000/svg">'
            f'{self.background.to_svg()}'
            f'{"".join(bar.to_svg() for bar in self.bars)}'
            f'{self.caption.to_svg()}'
            f'</svg>'
        )

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.to_svg().encode("utf-8")).decode("ascii")
        return f"data:image/svg+xml;base64,{encoded}"


def render(pattern: str, data: str, width: float, height: float,
           margin: float = CAPTION_MARGIN) -> VectorImage:
    """
    Lay out *pattern* on a width x height canvas.

    One rectangle per '1' module, each one module wide and 80% of the
    canvas tall, with *data* centred underneath as a caption.
    """
    if not _positive(width) or not _positive(height):
        raise InvalidDimensions(width, height)
    if not pattern or set(pattern) - {"0", "1"}:
        raise BarcodeError("Pattern must be a non-empty string of 0s and 1s")

    unit = width / len(pattern)
    bar_height = height * BAR_HEIGHT_RATIO

    bars = []
    for i, bit in enumerate(pattern):
        if bit == "1":
            x = i * unit
            # float error must not push the last bar past the canvas
            bars.append(Rect(x, 0, min(unit, width - x), bar_height))

    caption = Caption(
        text=data,
        x=width / 2,
        y=height - margin,
        font_size=height * CAPTION_FONT_RATIO,
    )
    return VectorImage(
        width=width,
        height=height,
        background=Rect(0, 0, width, height, fill="white"),
        bars=tuple(bars),
        caption=caption,
    )


def render_barcode(data: str, width: float = 200, height: float = 50) -> VectorImage:
    """Encode *data* and render it in one step."""
    return render(encode(data), data, width, height)


def generate_barcode_svg(data: str, width: float = 200, height: float = 50) -> str:
    return render_barcode(data, width, height).to_svg()


def generate_barcode_data_uri(data: str, width: float = 200, height: float = 50) -> str:
    return render_barcode(data, width, height).to_data_uri()


# ── Raster output ─────────────────────────────────────────────────────

def rasterize(image: VectorImage, scale: float = 1.0) -> Image.Image:
    """
    Draw a VectorImage onto a 1-bit Pillow image.

    *scale* converts vector units to pixels.  Bars are snapped to whole
    pixels, so pick a scale that gives at least one pixel per module.
    """
    if not _positive(scale):
        raise InvalidDimensions(scale, scale)
    px_w = max(1, round(image.width * scale))
    px_h = max(1, round(image.height * scale))
    img = Image.new("1", (px_w, px_h), 1)
    draw = ImageDraw.Draw(img)

    for bar in image.bars:
        x0 = round(bar.x * scale)
        x1 = max(x0, round((bar.x + bar.width) * scale) - 1)
        y1 = max(0, round(bar.height * scale) - 1)
        draw.rectangle([x0, 0, x1, y1], fill=0)

    cap = image.caption
    font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), cap.text, font=font)
    text_w = bbox[2] - bbox[0]
    text_h = bbox[3] - bbox[1]
    draw.text(
        (round(cap.x * scale - text_w / 2), round(cap.y * scale - text_h)),
        cap.text, fill=0, font=font,
    )
    return img
