import argparse
import math
from pathlib import Path
from typing import Optional, Sequence
import yaml

from chromosomes import HG19_CHROMOSOME_LENGTHS, load_genome_file, validate_chromosome_lengths
from errors import FileOpenError, InvalidConfiguration

DEFAULT_PRECISION = 40000

# Slightly above 0.5 to absorb float error just below a tie
ROUND_HALF = 0.50000000000008

USAGE = "cnv-distance [options] <file 1> <file 2>"


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        usage=USAGE,
        description='Compare two CNV profiles and compute a copy-number distance score'
    )
    parser.add_argument('file1', type=Path, help='Segment file of the first CNV profile')
    parser.add_argument('file2', type=Path, help='Segment file of the second CNV profile')
    parser.add_argument('--config', '-c', type=Path, help='Path to configuration YAML file')
    parser.add_argument('--precision', '-p', type=int, help=f'Bin width in base pairs (default: {DEFAULT_PRECISION})')
    parser.add_argument('--genome-file', '-g', type=Path, help='Tab-delimited chrom/length table replacing the hg19 lengths')
    parser.add_argument('--log-file', type=Path, help='Write a JSON summary of the comparison to this path')
    parser.add_argument('--bins-output', type=Path, help='Write per-bin LRR and copy-number values to this TSV path')
    parser.add_argument('--quiet', '-q', action='store_true', help='Do not print progress messages')
    return parser.parse_args(argv)


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3).

    The half is ROUND_HALF rather than 0.5, the same constant Math::Round uses,
    so values a few ulps below a tie still round away from zero.
    """
    return int(math.copysign(math.floor(abs(value) + ROUND_HALF), value))


def bin_index(position: int, precision: int) -> int:
    """
    Map a base-pair position onto its bin index: round(position / precision),
    ties away from zero.

    Integer inputs are rounded in exact integer arithmetic so that positions
    lying exactly half a bin away from a boundary always round up.
    """
    if isinstance(position, int) and isinstance(precision, int):
        if position >= 0:
            return (2 * position + precision) // (2 * precision)
        return -((-2 * position + precision) // (2 * precision))
    return round_half_away(position / precision)


def format_number(value: float) -> str:
    """Format a float the way a scripting language stringifies it (0, 0.06, 1.5, 12.34)."""
    text = '%.15g' % value
    if text == '-0':
        return '0'
    return text


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load a YAML configuration file, returning an empty dict when no path is given."""
    if config_path is None:
        return {}

    try:
        with open(config_path, 'rb') as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise FileOpenError(config_path, e.strerror or str(e))
    except yaml.YAMLError as e:
        raise InvalidConfiguration(f"Configuration file {config_path} is not valid YAML: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise InvalidConfiguration(f"Configuration file {config_path} must contain a mapping")
    return config


def build_config(args: argparse.Namespace) -> dict:
    """
    Merge the YAML configuration with command-line overrides and resolve
    precision and the chromosome length table.

    Returns:
        Configuration dictionary with keys: file1, file2, precision,
        chromosome_lengths, log_file, bins_output, quiet
    """
    config = load_config(args.config)

    overrides = {
        'precision': args.precision,
        'genome_file': args.genome_file,
        'log_file': args.log_file,
        'bins_output': args.bins_output,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    if args.genome_file is not None:
        # A genome file on the command line replaces any inline table from the config
        config.pop('chromosome_lengths', None)

    config['file1'] = args.file1
    config['file2'] = args.file2
    config['quiet'] = bool(args.quiet or config.get('quiet', False))
    return resolve_config(config)


def resolve_config(config: dict) -> dict:
    """Fill in defaults and validate precision and chromosome lengths."""
    config = dict(config)

    precision = config.get('precision', DEFAULT_PRECISION)
    if isinstance(precision, bool) or not isinstance(precision, int) or precision <= 0:
        raise InvalidConfiguration(f"Precision must be a positive integer, got {precision!r}")
    config['precision'] = precision

    if config.get('genome_file') is not None and config.get('chromosome_lengths') is not None:
        raise InvalidConfiguration("Specify either 'genome_file' or 'chromosome_lengths', not both")

    if config.get('genome_file') is not None:
        chrom_lengths = load_genome_file(config['genome_file'])
    elif config.get('chromosome_lengths') is not None:
        if not isinstance(config['chromosome_lengths'], dict):
            raise InvalidConfiguration("'chromosome_lengths' must be a mapping of chromosome -> length")
        chrom_lengths = validate_chromosome_lengths(config['chromosome_lengths'])
    else:
        chrom_lengths = dict(HG19_CHROMOSOME_LENGTHS)
    config['chromosome_lengths'] = chrom_lengths

    for key in ('log_file', 'bins_output'):
        if config.get(key) is not None:
            config[key] = Path(config[key])

    return config
