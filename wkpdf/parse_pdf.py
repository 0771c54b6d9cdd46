"""Read rendered PDFs back, mainly to check that a conversion produced real content."""
import io
import logging
import os
import tempfile
from subprocess import run

import fitz  # PyMuPDF
from pdfminer.high_level import extract_text as pdfminer_extract_text

logger = logging.getLogger(__name__)


def _pdfminer_text(pdf: bytes) -> str:
    return pdfminer_extract_text(io.BytesIO(pdf))


def _fitz_text(pdf: bytes) -> str:
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        return "".join(page.get_text() for page in doc)


def _poppler_text(pdf: bytes) -> str:
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "document.pdf")
        with open(path, "wb") as f:
            f.write(pdf)
        result = run(["pdftotext", path, "-"], capture_output=True, text=True, timeout=30)
    if result.returncode != 0:
        logger.debug("Poppler extraction failed: %s", result.stderr)
        return ""
    return result.stdout


METHODS = [
    ("pdfminer", _pdfminer_text),
    ("PyMuPDF", _fitz_text),
    ("poppler", _poppler_text),
]


def extract_text(pdf: bytes) -> str:
    """Try multiple PDF extraction methods in sequence"""
    for method_name, method_func in METHODS:
        try:
            logger.debug("Trying %s extraction...", method_name)
            text = method_func(pdf)
            if text and text.strip():
                logger.debug("Extracted %d characters using %s", len(text), method_name)
                return text
            logger.debug("%s returned empty text", method_name)
        except Exception as e:
            logger.debug("%s extraction failed: %s", method_name, e)

    logger.warning("All PDF extraction methods failed")
    return ""


def page_count(pdf: bytes) -> int:
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        return doc.page_count
