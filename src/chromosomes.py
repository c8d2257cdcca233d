from functools import cmp_to_key
from pathlib import Path
from typing import Dict, Iterable, List, Union

import pandas as pd

from errors import FileOpenError, InvalidConfiguration

# Chromosome lengths for hg19, swap the whole table for other builds or organisms
HG19_CHROMOSOME_LENGTHS: Dict[str, int] = {
    "chr1": 249250621,
    "chr2": 243199373,
    "chr3": 198022430,
    "chr4": 191154276,
    "chr5": 180915260,
    "chr6": 171115067,
    "chr7": 159138663,
    "chrX": 155270560,
    "chr8": 146364022,
    "chr9": 141213431,
    "chr10": 135534747,
    "chr11": 135006516,
    "chr12": 133851895,
    "chr13": 115169878,
    "chr14": 107349540,
    "chr15": 102531392,
    "chr16": 90354753,
    "chr17": 81195210,
    "chr18": 78077248,
    "chr20": 63025520,
    "chrY": 59373566,
    "chr19": 59128983,
    "chr22": 51304566,
    "chr21": 48129895,
}


def strip_chr_prefix(chrom: str) -> str:
    """Remove a leading 'chr' (any case) from a chromosome name."""
    if chrom[:3].lower() == 'chr':
        return chrom[3:]
    return chrom


def compare_chromosomes(chrom1: str, chrom2: str) -> int:
    """
    Three-way comparison of chromosome names.

    After stripping the 'chr' prefix, numeric names sort before non-numeric
    ones, numeric names compare as integers and non-numeric names compare
    lexicographically. Numeric names with equal value but different spelling
    (e.g. '01' and '1') fall back to string comparison so the order stays total.

    Returns:
        -1, 0 or 1
    """
    name1 = strip_chr_prefix(chrom1)
    name2 = strip_chr_prefix(chrom2)
    numeric1 = name1.isascii() and name1.isdigit()
    numeric2 = name2.isascii() and name2.isdigit()

    if numeric1 and not numeric2:
        return -1
    if numeric2 and not numeric1:
        return 1

    if numeric1 and numeric2:
        value1, value2 = int(name1), int(name2)
        if value1 != value2:
            return -1 if value1 < value2 else 1

    if name1 != name2:
        return -1 if name1 < name2 else 1
    if chrom1 != chrom2:
        return -1 if chrom1 < chrom2 else 1
    return 0


chromosome_sort_key = cmp_to_key(compare_chromosomes)


def sort_chromosomes(chroms: Iterable[str]) -> List[str]:
    """Return chromosome names in canonical order (chr1, chr2, ..., chr22, chrX, chrY)."""
    return sorted(chroms, key=chromosome_sort_key)


def validate_chromosome_lengths(chrom_lengths: Dict[str, int]) -> Dict[str, int]:
    """Check that the table is non-empty and every length is a positive integer."""
    if not chrom_lengths:
        raise InvalidConfiguration("Chromosome length table is empty")

    validated = {}
    for chrom, length in chrom_lengths.items():
        if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
            raise InvalidConfiguration(
                f"Invalid length for chromosome '{chrom}': {length!r} (must be a positive integer)"
            )
        validated[str(chrom)] = length
    return validated


def load_genome_file(genome_file: Union[str, Path]) -> Dict[str, int]:
    """
    Load a chromosome length table from a genome file.

    The genome file is the two-column, tab-delimited layout used by bedtools:
    chrom <TAB> length, no header. Extra columns are ignored.

    Args:
        genome_file: Path to the genome file

    Returns:
        Dictionary mapping chromosome name -> length in base pairs
    """
    genome_file = Path(genome_file)
    if not genome_file.is_file():
        raise FileOpenError(genome_file, "genome file not found")

    try:
        df = pd.read_csv(
            genome_file, sep='\t', header=None, usecols=[0, 1],
            names=['chrom', 'length'], comment='#', dtype={'chrom': str}
        )
    except OSError as e:
        raise FileOpenError(genome_file, e.strerror or str(e))
    except pd.errors.EmptyDataError:
        raise InvalidConfiguration(f"Genome file {genome_file} is empty")
    except ValueError as e:
        raise InvalidConfiguration(f"Genome file {genome_file} is malformed: {e}")

    if df['chrom'].duplicated().any():
        duplicates = sorted(set(df.loc[df['chrom'].duplicated(), 'chrom']))
        raise InvalidConfiguration(f"Genome file {genome_file} lists chromosomes more than once: {duplicates}")

    lengths = pd.to_numeric(df['length'], errors='coerce')
    if lengths.isna().any() or (lengths % 1 != 0).any():
        raise InvalidConfiguration(f"Genome file {genome_file} has non-integer lengths")

    return validate_chromosome_lengths(
        {chrom: int(length) for chrom, length in zip(df['chrom'], lengths)}
    )
