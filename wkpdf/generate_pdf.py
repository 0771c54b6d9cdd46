"""In-process rendering with WeasyPrint, for hosts without wkhtmltopdf."""
import logging
import os

from weasyprint import CSS, HTML
from weasyprint.text.fonts import FontConfiguration

from .convert import ConversionRequest, is_local_path
from .errors import ConversionError

logger = logging.getLogger(__name__)


def page_css(request: ConversionRequest) -> str:
    return f"""
        @page {{
            size: {request.width}mm {request.height}mm;
            margin: {request.margin_top}mm {request.margin_right}mm {request.margin_bottom}mm {request.margin_left}mm;
        }}
        """


def render_with_weasyprint(request, html=None, url=None, base_url=None):
    """Generate PDF bytes from inline HTML or a URL/path using WeasyPrint.

    Quality, dpi and encoding only mean something to wkhtmltopdf and are ignored.
    """
    if (html is None) == (url is None):
        raise ValueError("Pass exactly one of html or url")

    font_config = FontConfiguration()
    css = CSS(string=page_css(request), font_config=font_config)
    try:
        # fetching happens here for url sources
        if html is not None:
            document = HTML(string=html, base_url=base_url)
        elif is_local_path(url) and not url.startswith("file:"):
            document = HTML(filename=os.path.abspath(url))
        else:
            document = HTML(url=url)
        data = document.write_pdf(stylesheets=[css], font_config=font_config)
    except Exception as e:
        logger.error("WeasyPrint failed: %s", e)
        raise ConversionError(f"weasyprint failed: {e}") from e

    logger.info("Generated PDF size: %d bytes", len(data))
    return data
