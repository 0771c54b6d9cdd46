"""Exceptions raised while provisioning or running the renderer."""


class HtmlToPdfError(Exception):
    """Base class for every conversion failure."""


class MissingToolError(HtmlToPdfError):
    """The wkhtmltopdf executable could not be found or extracted."""


class UnsupportedPlatformError(HtmlToPdfError):
    """No provisioning strategy exists for the current operating system."""


class ConversionError(HtmlToPdfError):
    """The renderer wrote to stderr, exited non-zero or timed out."""

    def __init__(self, message, stderr="", returncode=None, command=None):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode
        self.command = command or []


class MissingOutputError(HtmlToPdfError):
    """The renderer exited cleanly but left no output file behind."""
