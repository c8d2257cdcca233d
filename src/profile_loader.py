from contextlib import closing
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Union

from cnv_parser import CNVParser
from errors import SegmentOutOfRange, UnknownChromosome
from reference_grid import Grid
from utils import bin_index


@dataclass
class LoadStatistics:
    """Counters collected while applying one segment file to a grid."""
    segment_file: str
    segments_read: int = 0
    segments_applied: int = 0
    segments_skipped: int = 0
    bins_written: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def load_profile(grid: Grid, segment_file: Union[str, Path], precision: int) -> LoadStatistics:
    """
    Apply the segments of a CNV segment file onto a grid, in place.

    Segments shorter than one bin (end - start < precision) are skipped. Every
    other segment sets bins round(start / precision) .. round(end / precision)
    to its LRR; segments are applied in file order, so later segments overwrite
    earlier ones where they overlap.

    Args:
        grid: Grid built by build_reference_grid, mutated in place
        segment_file: Path to the tab-delimited segment file
        precision: Bin width in base pairs used to build the grid

    Returns:
        LoadStatistics for the file

    Raises:
        FileOpenError: if the file cannot be opened
        ParseError: on a malformed line
        UnknownChromosome: if a segment's chromosome is not in the grid
        SegmentOutOfRange: if a segment maps past the chromosome's last bin
    """
    parser = CNVParser(segment_file)
    stats = LoadStatistics(segment_file=str(segment_file))

    with closing(parser.iter_segments()) as segments:
        for segment in segments:
            stats.segments_read += 1

            if segment.chrom not in grid:
                raise UnknownChromosome(segment.chrom, str(segment_file), segment.line_number)

            if segment.span < precision:
                stats.segments_skipped += 1
                continue

            bin_start = bin_index(segment.start, precision)
            bin_end = bin_index(segment.end, precision)

            values = grid[segment.chrom]
            if bin_end >= len(values):
                raise SegmentOutOfRange(
                    f"Segment {segment.chrom}:{segment.start}-{segment.end} maps to bin {bin_end}, "
                    f"past the last bin ({len(values) - 1}) of {segment.chrom}",
                    str(segment_file), segment.line_number
                )

            values[bin_start:bin_end + 1] = segment.lrr
            stats.segments_applied += 1
            stats.bins_written += bin_end - bin_start + 1

    return stats
