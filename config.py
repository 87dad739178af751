"""
WashLabel - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import json
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR  = Path(__file__).resolve().parent
TEMP_DIR  = Path(os.environ.get("WASHLABEL_TEMP_DIR", BASE_DIR / "temp"))

# ── Database ───────────────────────────────────────────────────────────
# Only the label print log lives here; customer records stay in the
# membership system.
DB_URL = os.environ.get("WASHLABEL_DB", f"sqlite:///{BASE_DIR / 'washlabel.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("WASHLABEL_HOST", "0.0.0.0")
PORT   = int(os.environ.get("WASHLABEL_PORT", "5000"))
DEBUG  = os.environ.get("WASHLABEL_DEBUG", "0") == "1"
SECRET = os.environ.get("WASHLABEL_SECRET", "washlabel-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("WASHLABEL_LOG_LEVEL", "INFO").upper()

# ── Label printer (CUPS) ───────────────────────────────────────────────
LABEL_PRINTER   = os.environ.get("WASHLABEL_PRINTER", "Brother_P950NW")
LABEL_MEDIA     = os.environ.get("WASHLABEL_MEDIA", "Custom.24x60mm")
DEFAULT_LABEL_SIZE = os.environ.get("WASHLABEL_LABEL_SIZE", "60x24")
PRINT_TIMEOUT   = float(os.environ.get("WASHLABEL_PRINT_TIMEOUT", "30"))
LP_BINARY       = os.environ.get("WASHLABEL_LP", "lp")
LPSTAT_BINARY   = os.environ.get("WASHLABEL_LPSTAT", "lpstat")

# ── Barcode defaults ───────────────────────────────────────────────────
BARCODE_WIDTH  = float(os.environ.get("WASHLABEL_BARCODE_WIDTH", "200"))
BARCODE_HEIGHT = float(os.environ.get("WASHLABEL_BARCODE_HEIGHT", "50"))
PNG_DPI        = int(os.environ.get("WASHLABEL_PNG_DPI", "360"))
# Upper bounds for query-string sizes; raster output is capped in pixels
BARCODE_MAX_DIMENSION = float(os.environ.get("WASHLABEL_BARCODE_MAX_DIMENSION", "2000"))
BARCODE_MAX_PIXELS    = int(os.environ.get("WASHLABEL_BARCODE_MAX_PIXELS", "4000"))

# ── Stores → reference ID prefix ───────────────────────────────────────
_DEFAULT_STORES = {
    "SPLASH'N'GO!前橋50号店": "001",
    "SPLASH'N'GO!伊勢崎韮塚店": "002",
    "SPLASH'N'GO!高崎棟高店": "003",
    "SPLASH'N'GO!足利緑町店": "004",
    "SPLASH'N'GO!新前橋店": "005",
}
STORE_PREFIXES: dict[str, str] = (
    json.loads(os.environ["WASHLABEL_STORES"])
    if os.environ.get("WASHLABEL_STORES") else _DEFAULT_STORES
)
UNKNOWN_STORE_PREFIX = "000"
REFERENCE_RANDOM_DIGITS = 9

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100
