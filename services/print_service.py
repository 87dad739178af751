"""
services.print_service - CUPS label printing.

Thin adapter around the `lp` / `lpstat` command-line tools.  Any
spooler failure surfaces as PrintError; the details only go to the log.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import List

import config

logger = logging.getLogger(__name__)


class PrintError(RuntimeError):
    """Label could not be handed to the printer."""

    def __init__(self, message: str = "label printing failed"):
        super().__init__(message)


def build_lp_command(path: str, printer: str, media: str) -> List[str]:
    return [
        config.LP_BINARY, "-d", printer,
        "-o", f"media={media}",
        "-o", "fit-to-page",
        path,
    ]


def print_pdf(pdf_bytes: bytes, printer: str | None = None,
              media: str | None = None) -> str:
    """
    Spool a PDF label and return the spooler's job message.

    The PDF is written to a temporary file under config.TEMP_DIR which
    is removed again whether or not printing succeeded.
    """
    printer = printer or config.LABEL_PRINTER
    media = media or config.LABEL_MEDIA

    config.TEMP_DIR.mkdir(parents=True, exist_ok=True)
    fd, path = tempfile.mkstemp(prefix="label_", suffix=".pdf", dir=config.TEMP_DIR)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(pdf_bytes)

        command = build_lp_command(path, printer, media)
        logger.info(f"Printing label on {printer} ({media})")
        try:
            completed = subprocess.run(
                command, capture_output=True, text=True,
                timeout=config.PRINT_TIMEOUT, check=False,
            )
        except FileNotFoundError as exc:
            logger.error(f"Print spooler not available: {exc}")
            raise PrintError() from exc
        except subprocess.TimeoutExpired as exc:
            logger.error(f"Print spooler timed out after {config.PRINT_TIMEOUT}s")
            raise PrintError() from exc

        if completed.stderr.strip():
            logger.warning(f"lp stderr: {completed.stderr.strip()}")
        if completed.returncode != 0:
            logger.error(f"lp exited with status {completed.returncode}")
            raise PrintError()

        logger.info(f"lp stdout: {completed.stdout.strip()}")
        return completed.stdout.strip()
    finally:
        try:
            os.unlink(path)
        except OSError:
            logger.warning(f"Could not remove temporary label file {path}")


def list_printers() -> List[str]:
    """Printer names reported by `lpstat -p`."""
    try:
        completed = subprocess.run(
            [config.LPSTAT_BINARY, "-p"], capture_output=True, text=True,
            timeout=config.PRINT_TIMEOUT, check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as exc:
        logger.error(f"lpstat failed: {exc}")
        raise PrintError("printer list unavailable") from exc

    if completed.returncode != 0:
        logger.error(f"lpstat exited with status {completed.returncode}: {completed.stderr.strip()}")
        raise PrintError("printer list unavailable")

    # "printer Brother_P950NW is idle.  enabled since ..."
    printers = []
    for line in completed.stdout.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "printer":
            printers.append(parts[1])
    return printers
