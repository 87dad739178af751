"""
api.routes_barcode - /api/v1/barcode endpoint.
"""

import math
from io import BytesIO

from flask import request, jsonify, Response

from api import api_bp
from services.barcode_service import checksum, encode, render, rasterize
import config


def _float_arg(name: str, default: float) -> float:
    raw = request.args.get(name, "").strip()
    value = float(raw) if raw else default
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    return value


@api_bp.route("/barcode")
def get_barcode():
    """
    GET /api/v1/barcode?data=...&width=200&height=50&format=svg|json|datauri|png&scale=4

    Encode *data* as Code 128B.  Spaces are significant, so data is not
    stripped.
    """
    if "data" not in request.args:
        return jsonify({"error": "data required"}), 400
    data = request.args["data"]
    fmt = request.args.get("format", "svg").strip().lower()

    try:
        width = min(_float_arg("width", config.BARCODE_WIDTH),
                    config.BARCODE_MAX_DIMENSION)
        height = min(_float_arg("height", config.BARCODE_HEIGHT),
                     config.BARCODE_MAX_DIMENSION)
        scale = _float_arg("scale", 4.0)
    except ValueError:
        return jsonify({"error": "width, height and scale must be finite numbers"}), 400

    if fmt not in ("svg", "json", "datauri", "png"):
        return jsonify({"error": "Invalid format. Valid: svg, json, datauri, png"}), 400

    pattern = encode(data)
    if fmt == "json":
        return jsonify({
            "data": data,
            "pattern": pattern,
            "length": len(pattern),
            "checksum": checksum(data),
            "bars": pattern.count("1"),
        })

    image = render(pattern, data, width, height)
    if fmt == "datauri":
        return jsonify({"data": data, "uri": image.to_data_uri()})
    if fmt == "png":
        # longest side never exceeds BARCODE_MAX_PIXELS
        scale = min(scale, config.BARCODE_MAX_PIXELS / max(image.width, image.height))
        buf = BytesIO()
        rasterize(image, scale).save(buf, "PNG")
        return Response(buf.getvalue(), mimetype="image/png")
    return Response(image.to_svg(), mimetype="image/svg+xml")
