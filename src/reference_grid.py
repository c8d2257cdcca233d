from typing import Dict, Tuple
import numpy as np

from chromosomes import sort_chromosomes, validate_chromosome_lengths
from errors import InvalidConfiguration
from utils import bin_index

# A profile grid: chromosome -> LRR per bin index (array position == bin index)
Grid = Dict[str, np.ndarray]

DEFAULT_LRR = 0.0


def max_bin_index(length: int, precision: int) -> int:
    """Index of the last bin of a chromosome, round(length / precision)."""
    return bin_index(length, precision)


def build_reference_grid(chrom_lengths: Dict[str, int], precision: int) -> Tuple[Grid, int]:
    """
    Build an empty profile grid covering every chromosome of the length table.

    Each chromosome gets bins 0..round(length / precision) inclusive, all set to
    the default LRR of 0.

    Args:
        chrom_lengths: Dictionary mapping chromosome name -> length in base pairs
        precision: Bin width in base pairs

    Returns:
        Tuple of (grid, total_bin_count) where total_bin_count is the number of
        bins summed over all chromosomes
    """
    if isinstance(precision, bool) or not isinstance(precision, int) or precision <= 0:
        raise InvalidConfiguration(f"Precision must be a positive integer, got {precision!r}")
    chrom_lengths = validate_chromosome_lengths(chrom_lengths)

    grid = {}
    total_bin_count = 0
    for chrom in sort_chromosomes(chrom_lengths.keys()):
        n_bins = max_bin_index(chrom_lengths[chrom], precision) + 1
        grid[chrom] = np.full(n_bins, DEFAULT_LRR, dtype=np.float64)
        total_bin_count += n_bins

    return grid, total_bin_count


def copy_grid(grid: Grid) -> Grid:
    """Return an independent copy of a grid, sharing no arrays with the original."""
    return {chrom: values.copy() for chrom, values in grid.items()}


def grid_bin_count(grid: Grid) -> int:
    return sum(len(values) for values in grid.values())
