import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from chromosomes import sort_chromosomes
from errors import InvalidConfiguration
from reference_grid import Grid
from utils import format_number, round_half_away

bin_columns = ['chrom', 'bin', 'lrr1', 'lrr2', 'cn1', 'cn2', 'abs_cn_diff', 'abs_lrr_diff']


@dataclass
class ScoreResult:
    """
    Outcome of comparing two profile grids.

    score_cn is the summed absolute copy-number difference, score_lrr the
    summed absolute LRR difference (reported for diagnostics only) and score
    the normalized value printed as 'Score: <score> * 10^-1'.
    """
    score_cn: float
    score_lrr: float
    total_bin_count: int
    score: float

    @property
    def score_line(self) -> str:
        return f"Score: {format_number(self.score)} * 10^-1"

    def to_dict(self) -> dict:
        return {
            'score': self.score,
            'score_line': self.score_line,
            'score_cn': self.score_cn,
            'score_lrr': self.score_lrr,
            'total_bin_count': self.total_bin_count,
        }


def copy_number(lrr):
    """Convert log-R-ratio to an estimated copy number, 2 * 2^LRR (LRR 0 -> 2 copies)."""
    return 2.0 * np.exp2(lrr)


def normalize_score(score_cn: float, total_bin_count: int) -> float:
    """round(1000 * score_cn / total_bin_count) / 100, ties away from zero."""
    return round_half_away(1000 * score_cn / total_bin_count) / 100


def _check_same_layout(grid1: Grid, grid2: Grid):
    if set(grid1) != set(grid2):
        missing = sorted(set(grid1) ^ set(grid2))
        raise InvalidConfiguration(f"Profiles cover different chromosomes: {missing}")
    for chrom in grid1:
        if len(grid1[chrom]) != len(grid2[chrom]):
            raise InvalidConfiguration(
                f"Profiles have different bin counts for {chrom}: {len(grid1[chrom])} vs {len(grid2[chrom])}"
            )


def score_profiles(grid1: Grid, grid2: Grid, total_bin_count: Optional[int] = None) -> ScoreResult:
    """
    Compute the copy-number distance between two grids.

    Chromosomes are visited in canonical order and bins in ascending order;
    each bin contributes |cn(lrr2) - cn(lrr1)| to the copy-number score and
    |lrr2 - lrr1| to the LRR score. Sums are computed with math.fsum so the
    result does not depend on summation order.

    Args:
        grid1: First profile grid
        grid2: Second profile grid, same layout as grid1
        total_bin_count: Bin count from build_reference_grid (computed from grid1 if None)

    Returns:
        ScoreResult
    """
    _check_same_layout(grid1, grid2)
    if total_bin_count is None:
        total_bin_count = sum(len(values) for values in grid1.values())
    if total_bin_count <= 0:
        raise InvalidConfiguration("Cannot score profiles without any bins")

    cn_diffs = []
    lrr_diffs = []
    for chrom in sort_chromosomes(grid1.keys()):
        lrr1 = grid1[chrom]
        lrr2 = grid2[chrom]
        cn_diffs.append(np.abs(copy_number(lrr2) - copy_number(lrr1)))
        lrr_diffs.append(np.abs(lrr2 - lrr1))

    score_cn = math.fsum(np.concatenate(cn_diffs)) if cn_diffs else 0.0
    score_lrr = math.fsum(np.concatenate(lrr_diffs)) if lrr_diffs else 0.0

    return ScoreResult(
        score_cn=score_cn,
        score_lrr=score_lrr,
        total_bin_count=total_bin_count,
        score=normalize_score(score_cn, total_bin_count),
    )


def per_bin_table(grid1: Grid, grid2: Grid) -> pd.DataFrame:
    """
    Tabulate per-bin values of both profiles in canonical chromosome order.

    Returns:
        DataFrame with columns: chrom, bin, lrr1, lrr2, cn1, cn2, abs_cn_diff, abs_lrr_diff
    """
    _check_same_layout(grid1, grid2)

    frames = []
    for chrom in sort_chromosomes(grid1.keys()):
        lrr1 = grid1[chrom]
        lrr2 = grid2[chrom]
        cn1 = copy_number(lrr1)
        cn2 = copy_number(lrr2)
        frames.append(pd.DataFrame({
            'chrom': chrom,
            'bin': np.arange(len(lrr1)),
            'lrr1': lrr1,
            'lrr2': lrr2,
            'cn1': cn1,
            'cn2': cn2,
            'abs_cn_diff': np.abs(cn2 - cn1),
            'abs_lrr_diff': np.abs(lrr2 - lrr1),
        }))

    if not frames:
        return pd.DataFrame(columns=bin_columns)
    return pd.concat(frames, ignore_index=True)[bin_columns]
