from __future__ import annotations


class CsimError(Exception):
    """Base class for all fatal simulator errors."""
    category = "error"


class ConfigurationError(CsimError):
    """Invalid or missing cache geometry / run options."""
    category = "configuration error"


class TraceFormatError(CsimError):
    """A trace line does not match `<op> <hex-address>,<decimal-size>`."""
    category = "trace format error"

    def __init__(self, message: str, line_no: int | None = None, line: str | None = None):
        self.line_no = line_no
        self.line = line
        if line_no is not None:
            message = f"line {line_no}: {message}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class TraceIOError(CsimError):
    """Trace file missing or unreadable."""
    category = "I/O error"


class ResourceError(CsimError):
    """Cache structures could not be allocated."""
    category = "resource error"
