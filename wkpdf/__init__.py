"""Convert HTML strings and URLs to PDF bytes with wkhtmltopdf."""
from .convert import ConversionRequest, build_command, from_file, from_html_string, from_url, is_local_path
from .errors import (
    ConversionError,
    HtmlToPdfError,
    MissingOutputError,
    MissingToolError,
    UnsupportedPlatformError,
)
from .provision import detect_platform, locate_tool, tool_info

__version__ = "0.1.0"

__all__ = [
    "ConversionRequest",
    "build_command",
    "from_file",
    "from_html_string",
    "from_url",
    "is_local_path",
    "ConversionError",
    "HtmlToPdfError",
    "MissingOutputError",
    "MissingToolError",
    "UnsupportedPlatformError",
    "detect_platform",
    "locate_tool",
    "tool_info",
]
