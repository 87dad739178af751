"""
api.routes_labels - Membership label preview, download and printing.

Every endpoint takes the label fields as a JSON body:
{customerName, carModel, carColor, referenceId}.
"""

import logging
import re
from io import BytesIO

from flask import request, Response, jsonify

from api import api_bp
from db import get_session
from services.label_service import (
    LABEL_SIZES, LabelData, generate_label_svg, render_label_pdf, render_label_png,
)
from services.print_job_service import PrintJobService
from services.print_service import PrintError, print_pdf, list_printers
import config

logger = logging.getLogger(__name__)


def _label_request():
    """Parse body + ?size=.  Returns (label, size) or an error response."""
    size = request.args.get("size", config.DEFAULT_LABEL_SIZE).strip()
    if size not in LABEL_SIZES:
        return None, (jsonify({"error": f"Invalid size. Valid: {list(LABEL_SIZES.keys())}"}), 400)
    label = LabelData.from_dict(request.get_json(silent=True))
    return (label, size), None


@api_bp.route("/labels/sizes")
def label_sizes():
    """GET /api/v1/labels/sizes"""
    return jsonify({
        "default": config.DEFAULT_LABEL_SIZE,
        "sizes": [
            {"key": key, "width_mm": w, "height_mm": h, "name": name}
            for key, (w, h, name) in LABEL_SIZES.items()
        ],
    })


@api_bp.route("/labels/preview", methods=["POST"])
def label_preview():
    """
    POST /api/v1/labels/preview?size=60x24&print=1

    Label SVG for on-screen preview.  Add print=1 to omit the preview frame.
    """
    parsed, error = _label_request()
    if error:
        return error
    label, size = parsed
    for_print = request.args.get("print", "0") == "1"

    svg = generate_label_svg(label, size, for_print=for_print)
    return Response(svg, mimetype="image/svg+xml")


@api_bp.route("/labels/pdf", methods=["POST"])
def label_pdf():
    """
    POST /api/v1/labels/pdf?size=60x24

    Download the label as a PDF file.
    """
    parsed, error = _label_request()
    if error:
        return error
    label, size = parsed

    svg = generate_label_svg(label, size, for_print=True)
    try:
        pdf = render_label_pdf(svg)
    except Exception as exc:
        logger.error(f"PDF rendering failed for {label.reference_id}: {exc}")
        return jsonify({"error": "label rendering failed"}), 500

    safe_ref = re.sub(r"[^A-Za-z0-9_-]", "_", label.reference_id)
    filename = f"label_{safe_ref}.pdf"
    return Response(
        pdf,
        mimetype="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@api_bp.route("/labels/png", methods=["POST"])
def label_png():
    """
    POST /api/v1/labels/png?size=60x24

    1-bit PNG of the label at config.PNG_DPI, for bitmap label printers.
    """
    parsed, error = _label_request()
    if error:
        return error
    label, size = parsed

    svg = generate_label_svg(label, size, for_print=True)
    try:
        image = render_label_png(svg, dpi=config.PNG_DPI)
    except Exception as exc:
        logger.error(f"PNG rendering failed for {label.reference_id}: {exc}")
        return jsonify({"error": "label rendering failed"}), 500

    buf = BytesIO()
    image.save(buf, "PNG", dpi=(config.PNG_DPI, config.PNG_DPI))
    return Response(buf.getvalue(), mimetype="image/png")


@api_bp.route("/labels/print", methods=["POST"])
def label_print():
    """
    POST /api/v1/labels/print?size=60x24

    Render the label to PDF and send it to the CUPS label printer.
    Every attempt is written to the print log.
    """
    parsed, error = _label_request()
    if error:
        return error
    label, size = parsed
    printer = config.LABEL_PRINTER

    svg = generate_label_svg(label, size, for_print=True)

    failure = ""
    try:
        pdf = render_label_pdf(svg)
    except Exception as exc:
        logger.error(f"PDF rendering failed for {label.reference_id}: {exc}")
        failure = "label rendering failed"
    else:
        try:
            print_pdf(pdf, printer=printer)
        except PrintError as exc:
            failure = str(exc)

    session = get_session()
    try:
        job = PrintJobService.record(session, label.reference_id, size,
                                     printer, error=failure)
        session.commit()
        job_dict = job.to_dict()
    finally:
        session.close()

    if failure:
        return jsonify({"success": False, "error": failure, "job": job_dict}), 500
    return jsonify({"success": True, "message": "label printed", "job": job_dict})


@api_bp.route("/labels/jobs")
def label_jobs():
    """GET /api/v1/labels/jobs?limit=100&reference_id="""
    try:
        limit = min(int(request.args.get("limit", config.API_DEFAULT_LIMIT)),
                    config.API_MAX_LIMIT)
    except ValueError:
        return jsonify({"error": "limit must be an integer"}), 400
    reference_id = request.args.get("reference_id", "").strip()

    session = get_session()
    try:
        jobs = PrintJobService.recent(session, limit=limit, reference_id=reference_id)
        return jsonify({"jobs": [j.to_dict() for j in jobs]})
    finally:
        session.close()


@api_bp.route("/printers")
def printers():
    """GET /api/v1/printers"""
    return jsonify({
        "default": config.LABEL_PRINTER,
        "printers": list_printers(),
    })
