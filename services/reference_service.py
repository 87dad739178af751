"""
services.reference_service - Membership reference ID allocation.

A reference ID is the 3-digit store prefix followed by random digits,
e.g. 001 + 482913307.  It is what ends up in the label barcode.
"""

from __future__ import annotations

import re
import secrets

import config


def store_prefix(store: str) -> str:
    """Prefix for *store*; unknown stores share the catch-all prefix."""
    return config.STORE_PREFIXES.get(store, config.UNKNOWN_STORE_PREFIX)


def generate_reference_id(store: str) -> str:
    digits = config.REFERENCE_RANDOM_DIGITS
    random_part = f"{secrets.randbelow(10 ** digits):0{digits}d}"
    return store_prefix(store) + random_part


def is_valid_reference_id(value: str) -> bool:
    """True for a 3-digit prefix plus the configured number of digits."""
    pattern = rf"\d{{3}}\d{{{config.REFERENCE_RANDOM_DIGITS}}}"
    return bool(re.fullmatch(pattern, value or ""))
