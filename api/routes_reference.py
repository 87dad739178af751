"""
api.routes_reference - Stores and reference ID allocation.
"""

from flask import request, jsonify

from api import api_bp
from services.reference_service import generate_reference_id, store_prefix
import config


@api_bp.route("/stores")
def list_stores():
    """GET /api/v1/stores"""
    return jsonify({
        "stores": [
            {"name": name, "prefix": prefix}
            for name, prefix in config.STORE_PREFIXES.items()
        ],
    })


@api_bp.route("/reference-ids", methods=["POST"])
def create_reference_id():
    """
    POST /api/v1/reference-ids

    JSON body: {store}.  Unknown stores get the catch-all prefix.
    """
    data = request.get_json(silent=True) or {}
    store = str(data.get("store", "")).strip()
    if not store:
        return jsonify({"error": "store required"}), 400
    return jsonify({
        "store": store,
        "prefix": store_prefix(store),
        "reference_id": generate_reference_id(store),
    }), 201
