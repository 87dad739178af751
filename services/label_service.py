"""
services.label_service - Membership card label layout.

Builds SVG labels carrying the customer name, vehicle and the
reference ID barcode, and converts them to PDF / PNG for printing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from xml.sax.saxutils import escape

from PIL import Image

from services.barcode_service import render_barcode

logger = logging.getLogger(__name__)


# Label size definitions: (width_mm, height_mm, name)
LABEL_SIZES = {
    "60x24": (60, 24, "60 × 24 mm (24 mm tape)"),
    "50x30": (50, 30, "50 × 30 mm (Small)"),
}


class LabelDataError(ValueError):
    pass


@dataclass(frozen=True)
class LabelData:
    customer_name: str
    car_model: str
    car_color: str
    reference_id: str

    # JSON body keys: camelCase from the membership form, snake_case otherwise
    _KEYS = {
        "customer_name": ("customerName", "customer_name"),
        "car_model": ("carModel", "car_model"),
        "car_color": ("carColor", "car_color"),
        "reference_id": ("referenceId", "reference_id"),
    }

    @classmethod
    def from_dict(cls, data: dict | None) -> "LabelData":
        if not isinstance(data, dict):
            raise LabelDataError("label data must be a JSON object")
        values = {}
        for attr, keys in cls._KEYS.items():
            raw = next((data[k] for k in keys if data.get(k) is not None), "")
            values[attr] = str(raw).strip()
        if not values["reference_id"]:
            raise LabelDataError("referenceId required")
        return cls(**values)

    @property
    def vehicle(self) -> str:
        return " / ".join(v for v in (self.car_model, self.car_color) if v)


def _truncate(text: str, max_len: int) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return ""
    return text[:max_len-1] + "…" if len(text) > max_len else text


def _generate_label_60x24(label: LabelData, for_print: bool = False) -> str:
    """
    Generate 60x24mm label SVG.
    Landscape layout for the 24 mm tape printer.
    """
    # Scale: viewBox 600x240 = 60x24mm (10 units per mm)
    barcode = render_barcode(label.reference_id, width=540, height=90)

    name = escape(_truncate(label.customer_name, 24))
    vehicle = escape(_truncate(label.vehicle, 40))
    ref = escape(label.reference_id)

    frame = '' if for_print else '<rect x="3" y="3" width="594" height="234" fill="none" stroke="#ccc" stroke-width="1" stroke-dasharray="5,5"/>'

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<svg width="60mm" height="24mm" viewBox="0 0 600 240" xmlns="http://www.w3.org/2000/svg">
  <rect x="0" y="0" width="600" height="240" fill="white"/>
  {frame}
  <text x="300" y="40" font-size="30" font-weight="bold" font-family="Arial, sans-serif" text-anchor="middle">{name}</text>
  <text x="300" y="72" font-size="22" font-family="Arial, sans-serif" text-anchor="middle">{vehicle}</text>
  <g transform="translate(30,88)">{barcode.to_svg_group()}</g>
  <text x="300" y="228" font-size="22" font-family="monospace" text-anchor="middle" fill="#333">{ref}</text>
</svg>'''


def _generate_label_50x30(label: LabelData, for_print: bool = False) -> str:
    """
    Generate 50x30mm label SVG.
    Compact label for windscreen stickers.
    """
    # Scale: viewBox 500x300 = 50x30mm (10 units per mm)
    barcode = render_barcode(label.reference_id, width=440, height=100)

    name = escape(_truncate(label.customer_name, 22))
    model = escape(_truncate(label.car_model, 28))
    color = escape(_truncate(label.car_color, 28))
    ref = escape(label.reference_id)

    frame = '' if for_print else '<rect x="5" y="5" width="490" height="290" fill="none" stroke="#ccc" stroke-width="1" stroke-dasharray="5,5"/>'

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<svg width="50mm" height="30mm" viewBox="0 0 500 300" xmlns="http://www.w3.org/2000/svg">
  <rect x="0" y="0" width="500" height="300" fill="white"/>
  {frame}
  <text x="20" y="45" font-size="30" font-weight="bold" font-family="Arial, sans-serif">{name}</text>
  <line x1="20" y1="60" x2="480" y2="60" stroke="#999" stroke-width="1"/>
  <text x="20" y="92" font-size="22" font-family="Arial, sans-serif"><tspan font-weight="bold">Car:</tspan> {model}</text>
  <text x="20" y="122" font-size="22" font-family="Arial, sans-serif"><tspan font-weight="bold">Color:</tspan> {color}</text>
  <g transform="translate(30,140)">{barcode.to_svg_group()}</g>
  <text x="250" y="285" font-size="20" font-family="monospace" text-anchor="middle" fill="#333">{ref}</text>
</svg>'''


# Label generator dispatch
LABEL_GENERATORS = {
    "60x24": _generate_label_60x24,
    "50x30": _generate_label_50x30,
}


def generate_label_svg(label: LabelData, size: str = "60x24",
                       for_print: bool = False) -> str:
    """
    Render *label* as a complete SVG document.

    Raises ValueError for an unknown size and BarcodeError when the
    reference ID cannot be encoded.
    """
    if size not in LABEL_GENERATORS:
        raise ValueError(f"Invalid size. Valid: {list(LABEL_SIZES.keys())}")
    return LABEL_GENERATORS[size](label, for_print=for_print)


def render_label_pdf(svg_content: str) -> bytes:
    """Convert label SVG to a single-page PDF sized to the label."""
    import cairosvg

    return cairosvg.svg2pdf(bytestring=svg_content.encode("utf-8"))


def render_label_png(svg_content: str, dpi: int = 360) -> Image.Image:
    """
    Convert label SVG to a 1-bit PIL Image for thermal printing.

    Brother PT tape printers print at 360 DPI.
    """
    import cairosvg

    png_data = cairosvg.svg2png(
        bytestring=svg_content.encode("utf-8"),
        dpi=dpi,
        background_color="white",
    )
    img = Image.open(BytesIO(png_data)).convert("L")
    return img.point(lambda x: 0 if x < 128 else 255, "1")
