import math
from pathlib import Path
from typing import Iterator, NamedTuple, Optional, Union

from errors import FileOpenError, ParseError


class Segment(NamedTuple):
    """One record of a segment file."""
    chrom: str
    start: int
    end: int
    lrr: float
    copy_number: Optional[float]
    line_number: int

    @property
    def span(self) -> int:
        return self.end - self.start


class CNVParser:
    """
    Parse tab-delimited CNV segment files.

    File format (no header, one segment per line):
    chromosome <TAB> start-end <TAB> LRR <TAB> copy-number (optional)

    Example:
    chr2	90397715-91794601	-0.704403	1
    chr5	71904-46115086	0.377794	3
    """

    def __init__(self, segment_file: Union[str, Path]):
        self.segment_file = Path(segment_file)

    def _error(self, message: str, line_number: int) -> ParseError:
        return ParseError(message, str(self.segment_file), line_number)

    def parse_position(self, value: str, name: str, line_number: int) -> int:
        """Parse a base-pair coordinate, which must be a non-negative integer."""
        value = value.strip()
        if not value.isascii() or not value.isdigit():
            raise self._error(f"Invalid {name} position '{value}' (expected a non-negative integer)", line_number)
        return int(value)

    def parse_float(self, value: str, name: str, line_number: int) -> float:
        try:
            result = float(value)
        except ValueError:
            raise self._error(f"Invalid {name} value '{value.strip()}' (expected a number)", line_number)
        if not math.isfinite(result):
            raise self._error(f"Invalid {name} value '{value.strip()}' (must be finite)", line_number)
        return result

    def parse_line(self, line: str, line_number: int) -> Segment:
        """
        Parse one non-empty line into a Segment.

        Raises:
            ParseError: on a wrong field count, a start-end field without a
                single hyphen, non-numeric coordinates/LRR/copy-number, or start > end
        """
        parts = line.split('\t')
        if len(parts) not in (3, 4):
            raise self._error(f"Expected 3 or 4 tab-separated fields, found {len(parts)}", line_number)

        chrom = parts[0].strip()
        if not chrom:
            raise self._error("Missing chromosome name", line_number)

        # start-end, e.g. 16335799-16379884
        start_end = parts[1].split('-')
        if len(start_end) != 2:
            raise self._error(f"Invalid start-end field '{parts[1].strip()}' (expected <start>-<end>)", line_number)
        start = self.parse_position(start_end[0], 'start', line_number)
        end = self.parse_position(start_end[1], 'end', line_number)
        if start > end:
            raise self._error(f"Segment start {start} is after end {end}", line_number)

        lrr = self.parse_float(parts[2], 'LRR', line_number)

        copy_number = None
        if len(parts) == 4 and parts[3].strip():
            copy_number = self.parse_float(parts[3], 'copy-number', line_number)

        return Segment(chrom, start, end, lrr, copy_number, line_number)

    def iter_segments(self) -> Iterator[Segment]:
        """
        Yield segments in file order. Blank lines and '#' comment lines are skipped.

        The file is opened lazily and closed when the iterator is exhausted,
        closed, or a line fails to parse. Lines are decoded as UTF-8 one at a
        time so an undecodable line is reported with its own line number.
        """
        try:
            f = open(self.segment_file, 'rb')
        except OSError as e:
            raise FileOpenError(self.segment_file, e.strerror or str(e))

        with f:
            for line_number, raw_line in enumerate(f, start=1):
                try:
                    line = raw_line.decode('utf-8')
                except UnicodeDecodeError as e:
                    raise self._error(f"Line is not valid UTF-8 ({e.reason} at byte {e.start})", line_number)
                line = line.rstrip('\r\n')
                if not line.strip() or line.startswith('#'):
                    continue
                yield self.parse_line(line, line_number)
