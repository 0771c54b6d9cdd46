import codecs
import logging
import os
import re
import uuid
from dataclasses import dataclass
from subprocess import TimeoutExpired, run
from typing import List, Optional
from urllib.parse import urlparse

from .config import get_settings
from .errors import ConversionError, MissingOutputError
from .provision import locate_tool

logger = logging.getLogger(__name__)

ENGINES = ("wkhtmltopdf", "weasyprint")

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")


@dataclass(frozen=True)
class ConversionRequest:
    """Page geometry and encoding for one conversion. Lengths are in mm."""

    width: int
    height: int
    quality: int = 100
    dpi: int = 100
    margin_left: int = 0
    margin_top: int = 0
    margin_right: int = 0
    margin_bottom: int = 0
    encoding: str = "UTF-8"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Page width and height must be greater than 0")
        if not 0 <= self.quality <= 100:
            raise ValueError("Image quality must be between 0 and 100")
        if self.dpi <= 0:
            raise ValueError("DPI must be greater than 0")
        for name in ("margin_left", "margin_top", "margin_right", "margin_bottom"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding {self.encoding!r}") from None


def is_local_path(source: str) -> bool:
    if source.startswith("http"):
        return False
    if _WINDOWS_DRIVE_RE.match(source):
        return True
    return urlparse(source).scheme in ("", "file")


def build_command(tool: str, source: str, output: str, request: ConversionRequest) -> List[str]:
    """
    Build the renderer argv.

    Args:
        tool (str): Path of the wkhtmltopdf executable
        source (str): Local file path or URL to render
        output (str): Path the PDF is written to
        request (ConversionRequest): Page geometry and encoding

    Returns:
        list: Arguments for subprocess, no shell quoting needed
    """
    return [
        tool,
        # progress goes to stderr otherwise, and stderr means failure
        "--quiet",
        "--encoding", request.encoding,
        "--page-height", str(request.height),
        "--page-width", str(request.width),
        "--image-quality", str(request.quality),
        "--dpi", str(request.dpi),
        "--disable-smart-shrinking",
        "--margin-bottom", str(request.margin_bottom),
        "--margin-left", str(request.margin_left),
        "--margin-right", str(request.margin_right),
        "--margin-top", str(request.margin_top),
        source,
        output,
    ]


def _remove(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def render(source: str, request: ConversionRequest) -> bytes:
    """Run wkhtmltopdf on ``source`` and return the bytes of the PDF it wrote."""
    settings = get_settings()
    tool = locate_tool()

    # the renderer runs inside WORKDIR, so relative paths are pinned to the caller's cwd
    if is_local_path(source) and not source.startswith("file:") and not os.path.isabs(source):
        source = os.path.abspath(source)

    os.makedirs(settings.WORKDIR, exist_ok=True)
    output = os.path.join(settings.WORKDIR, f"{uuid.uuid4()}.pdf")
    cmd = build_command(tool, source, output, request)
    logger.debug("Running command: %s", " ".join(cmd))

    try:
        try:
            result = run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                cwd=settings.WORKDIR,
                timeout=settings.TIMEOUT,
            )
        except TimeoutExpired as e:
            logger.error("wkhtmltopdf timed out after %ss on %s", settings.TIMEOUT, source)
            stderr = e.stderr or ""
            if isinstance(stderr, bytes):
                stderr = stderr.decode(errors="replace")
            raise ConversionError(f"wkhtmltopdf timed out after {settings.TIMEOUT}s", stderr=stderr, command=cmd) from e

        if result.stderr or result.returncode != 0:
            logger.error("wkhtmltopdf stderr: %s", result.stderr.strip())
            raise ConversionError(
                f"wkhtmltopdf failed: {result.stderr.strip() or 'exit code ' + str(result.returncode)}",
                stderr=result.stderr,
                returncode=result.returncode,
                command=cmd,
            )

        if not os.path.exists(output):
            raise MissingOutputError("Something went wrong. Please check input parameters")

        with open(output, "rb") as f:
            data = f.read()
        logger.info("Generated PDF size: %d bytes", len(data))
        return data
    finally:
        _remove(output)


def _request(width, height, quality, dpi, margin_left, margin_top, margin_right, margin_bottom, encoding):
    return ConversionRequest(
        width=width,
        height=height,
        quality=quality,
        dpi=dpi,
        margin_left=margin_left,
        margin_top=margin_top,
        margin_right=margin_right,
        margin_bottom=margin_bottom,
        encoding=encoding,
    )


def from_url(
    url: str,
    width: int,
    height: int,
    quality: int = 100,
    dpi: int = 100,
    margin_left: int = 0,
    margin_top: int = 0,
    margin_right: int = 0,
    margin_bottom: int = 0,
    encoding: str = "UTF-8",
    engine: str = "wkhtmltopdf",
) -> bytes:
    """
    Convert an HTML page into PDF bytes.

    Args:
        url (str): Valid http(s)://example.com URL, file:// URL or local path
        width (int): Page width in mm
        height (int): Page height in mm
        encoding (str): Default text encoding of the input

    Returns:
        bytes: The rendered PDF
    """
    request = _request(width, height, quality, dpi, margin_left, margin_top, margin_right, margin_bottom, encoding)
    if engine == "weasyprint":
        from .generate_pdf import render_with_weasyprint

        return render_with_weasyprint(request, url=url)
    if engine != "wkhtmltopdf":
        raise ValueError(f"Unknown engine {engine!r}, expected one of {', '.join(ENGINES)}")
    return render(url, request)


def from_file(path: str, width: int, height: int, **options) -> bytes:
    """Convert an existing local HTML file. The file is left in place."""
    if not os.path.isfile(path):
        raise ValueError(f"HTML file {path} not found")
    return from_url(os.path.abspath(path), width, height, **options)


def from_html_string(
    html: str,
    width: int,
    height: int,
    quality: int = 100,
    dpi: int = 100,
    margin_left: int = 0,
    margin_top: int = 0,
    margin_right: int = 0,
    margin_bottom: int = 0,
    encoding: str = "UTF-8",
    engine: str = "wkhtmltopdf",
    base_url: Optional[str] = None,
) -> bytes:
    """
    Convert a raw HTML string into PDF bytes.

    The HTML is written to a uniquely named file in the working directory,
    which is removed again whether or not the conversion succeeds.
    ``base_url`` is only used by the weasyprint engine.
    """
    if not html:
        raise ValueError("HTML content is required")

    request = _request(width, height, quality, dpi, margin_left, margin_top, margin_right, margin_bottom, encoding)
    if engine == "weasyprint":
        from .generate_pdf import render_with_weasyprint

        return render_with_weasyprint(request, html=html, base_url=base_url)
    if engine != "wkhtmltopdf":
        raise ValueError(f"Unknown engine {engine!r}, expected one of {', '.join(ENGINES)}")

    try:
        payload = html.encode(encoding)
    except UnicodeEncodeError as e:
        raise ValueError(f"HTML cannot be encoded as {encoding}: {e}") from None

    settings = get_settings()
    os.makedirs(settings.WORKDIR, exist_ok=True)
    html_path = os.path.join(settings.WORKDIR, f"{uuid.uuid4()}.html")
    logger.debug("HTML Content Length: %d characters", len(html))
    try:
        with open(html_path, "wb") as f:
            f.write(payload)
        return render(html_path, request)
    finally:
        _remove(html_path)
