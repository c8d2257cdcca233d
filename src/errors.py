from typing import Optional


class CNVDistanceError(Exception):
    """Base class for all errors that abort a profile comparison."""


class InvalidConfiguration(CNVDistanceError, ValueError):
    """Raised when precision or the chromosome length table is unusable."""


class FileOpenError(CNVDistanceError):
    """Raised when an input file cannot be opened for reading."""

    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        message = f"Cannot open file {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ParseError(CNVDistanceError, ValueError):
    """
    Raised on a malformed segment line.

    Args:
        message: What is wrong with the line
        path: File the line was read from
        line_number: 1-based line number within the file
    """

    def __init__(self, message: str, path: Optional[str] = None, line_number: Optional[int] = None):
        self.path = str(path) if path is not None else None
        self.line_number = line_number
        self.reason = message
        location = ""
        if self.path is not None and line_number is not None:
            location = f"{self.path}:{line_number}: "
        elif self.path is not None:
            location = f"{self.path}: "
        super().__init__(location + message)


class UnknownChromosome(ParseError):
    """Raised when a segment names a chromosome missing from the length table."""

    def __init__(self, chrom: str, path: Optional[str] = None, line_number: Optional[int] = None):
        self.chrom = chrom
        super().__init__(f"Unknown chromosome '{chrom}' (not in chromosome length table)", path, line_number)


class SegmentOutOfRange(ParseError):
    """Raised when a segment maps past the last bin of its chromosome."""
