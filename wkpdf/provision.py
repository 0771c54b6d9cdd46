import logging
import os
import shutil
import sys
import uuid
from functools import lru_cache
from subprocess import run

from .config import get_settings
from .errors import MissingToolError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

TOOL_NAME = "wkhtmltopdf"
DOWNLOAD_URL = "https://wkhtmltopdf.org/downloads.html"


def detect_platform():
    if sys.platform.startswith("win") or sys.platform == "cygwin":
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def _extract_windows_tool(workdir, bundle):
    """Copy the bundled wkhtmltopdf.exe next to the working files if it is not there yet."""
    target = os.path.join(workdir, TOOL_NAME + ".exe")
    if os.path.isfile(target):
        return target
    if not os.path.isfile(bundle):
        raise MissingToolError(f"{TOOL_NAME}.exe is not in {workdir} and no bundled copy exists at {bundle}")
    os.makedirs(workdir, exist_ok=True)
    logger.info("Extracting bundled %s to %s", bundle, target)
    partial = f"{target}.{uuid.uuid4().hex}.part"
    try:
        shutil.copyfile(bundle, partial)
        os.replace(partial, target)
    finally:
        if os.path.exists(partial):
            os.remove(partial)
    return target


@lru_cache(maxsize=None)
def locate_tool():
    """Resolve the renderer executable once per process.

    Call ``locate_tool.cache_clear()`` to force a new lookup.
    """
    settings = get_settings()

    if settings.WKHTMLTOPDF_BIN:
        if not os.path.isfile(settings.WKHTMLTOPDF_BIN):
            raise MissingToolError(f"WKHTMLTOPDF_BIN points at {settings.WKHTMLTOPDF_BIN}, which does not exist")
        logger.debug("Using %s from environment", settings.WKHTMLTOPDF_BIN)
        return settings.WKHTMLTOPDF_BIN

    platform = detect_platform()
    if platform == "windows":
        tool = _extract_windows_tool(settings.WORKDIR, settings.WKHTMLTOPDF_BUNDLE)
    elif platform == "linux":
        tool = shutil.which(TOOL_NAME)
        if not tool:
            raise MissingToolError(
                f"{TOOL_NAME} does not appear to be installed on this linux system; go to {DOWNLOAD_URL}"
            )
    else:
        raise UnsupportedPlatformError(f"{platform} platform not implemented yet")

    logger.debug("Resolved %s to %s", TOOL_NAME, tool)
    return tool


def tool_info():
    """Get system info for debugging differences between hosts (Docker vs local)."""
    info = {}
    try:
        tool = locate_tool()
        info["tool_path"] = tool
        result = run([tool, "--version"], capture_output=True, text=True, timeout=30)
        info["wkhtmltopdf_version"] = result.stdout.strip() if result.returncode == 0 else result.stderr.strip()
    except Exception as e:
        info["wkhtmltopdf_version"] = f"Error: {e}"

    try:
        result = run(["fc-list", "--format=%{family}\n"], capture_output=True, text=True, timeout=30)
        fonts = result.stdout.strip().split("\n") if result.returncode == 0 else []
        info["available_fonts"] = sorted(set(f for f in fonts if f))[:10]
    except Exception as e:
        info["available_fonts"] = f"Error: {e}"

    info["python_version"] = sys.version
    info["platform"] = detect_platform()
    return info
