"""
services - Business-logic layer sitting between API and DB.
"""

from services.barcode_service import encode, render, BarcodeError   # noqa: F401
from services.label_service import LabelData, generate_label_svg    # noqa: F401
from services.print_job_service import PrintJobService              # noqa: F401
from services.reference_service import generate_reference_id        # noqa: F401
