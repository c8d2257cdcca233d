import os
import sys
import json
from pathlib import Path
from typing import Optional

from profile_loader import LoadStatistics, load_profile
from reference_grid import Grid, build_reference_grid, copy_grid
from scorer import ScoreResult, per_bin_table, score_profiles


def _log(message: str, quiet: bool = False):
    if not quiet:
        print(message, file=sys.stderr)


def _report_load(stats: LoadStatistics, quiet: bool = False):
    _log(f"  {stats.segment_file}: {stats.segments_read} segments read, "
         f"{stats.segments_applied} applied, {stats.segments_skipped} skipped (shorter than precision), "
         f"{stats.bins_written} bins written", quiet)


def _write_summary_log(
        log_file: Path,
        config: dict,
        result: ScoreResult,
        stats1: LoadStatistics,
        stats2: LoadStatistics
    ):
    summary = {
        'file1': str(config['file1']),
        'file2': str(config['file2']),
        'precision': config['precision'],
        'chromosome_count': len(config['chromosome_lengths']),
        **result.to_dict(),
        'profile1': stats1.to_dict(),
        'profile2': stats2.to_dict(),
    }
    os.makedirs(Path(log_file).parent, exist_ok=True)
    with open(log_file, 'w') as f:
        json.dump(summary, f, indent=4)


def _write_bins_output(bins_output: Path, grid1: Grid, grid2: Grid):
    os.makedirs(Path(bins_output).parent, exist_ok=True)
    per_bin_table(grid1, grid2).to_csv(bins_output, sep='\t', index=False)


def compare_profiles(config: dict) -> ScoreResult:
    """
    Compare the two CNV profiles named in the configuration.

    Args:
        config: Configuration dictionary resolved by utils.resolve_config, with
            keys file1, file2, precision, chromosome_lengths and optionally
            log_file, bins_output, quiet

    Returns:
        ScoreResult
    """
    quiet = config.get('quiet', False)
    precision = config['precision']

    _log(f"Step 1: Building reference grid ({len(config['chromosome_lengths'])} chromosomes, precision {precision} bp)...", quiet)
    empty_grid, total_bin_count = build_reference_grid(config['chromosome_lengths'], precision)
    _log(f"  {total_bin_count} bins", quiet)

    _log("Step 2: Loading profile 1...", quiet)
    grid1 = copy_grid(empty_grid)
    stats1 = load_profile(grid1, config['file1'], precision)
    _report_load(stats1, quiet)

    _log("Step 3: Loading profile 2...", quiet)
    grid2 = empty_grid
    stats2 = load_profile(grid2, config['file2'], precision)
    _report_load(stats2, quiet)

    _log("Step 4: Scoring...", quiet)
    result = score_profiles(grid1, grid2, total_bin_count)
    _log(f"  CN difference sum: {result.score_cn:.6g}, LRR difference sum: {result.score_lrr:.6g}", quiet)

    log_file: Optional[Path] = config.get('log_file')
    if log_file:
        _write_summary_log(log_file, config, result, stats1, stats2)
        _log(f"Summary written to {log_file}", quiet)

    bins_output: Optional[Path] = config.get('bins_output')
    if bins_output:
        _write_bins_output(bins_output, grid1, grid2)
        _log(f"Per-bin values written to {bins_output}", quiet)

    return result


def main(config: dict) -> ScoreResult:
    result = compare_profiles(config)
    print(result.score_line)
    return result


if __name__ == "__main__":
    # Allow running standalone with a YAML config naming file1 and file2
    import argparse
    from utils import load_config, resolve_config

    parser = argparse.ArgumentParser(description='CNV profile distance computation')
    parser.add_argument('--config', '-c', required=True, type=Path, help='Path to configuration YAML file')
    args = parser.parse_args()

    main(resolve_config(load_config(args.config)))
