import numpy as np
import pytest

from errors import ParseError, SegmentOutOfRange, UnknownChromosome
from profile_loader import load_profile
from reference_grid import build_reference_grid


@pytest.fixture
def grid(small_lengths):
    grid, _ = build_reference_grid(small_lengths, 40000)
    return grid


def test_segment_sets_covered_bins(grid, write_segments):
    path = write_segments("profile.txt", [("chr1", 0, 80000, 1.0, 3)])
    stats = load_profile(grid, path, 40000)

    assert np.array_equal(grid["chr1"][:3], [1.0, 1.0, 1.0])
    assert (grid["chr1"][3:] == 0).all()
    assert (grid["chr2"] == 0).all()
    assert stats.segments_read == 1
    assert stats.segments_applied == 1
    assert stats.bins_written == 3


def test_short_segment_is_skipped(grid, write_segments):
    path = write_segments("profile.txt", [
        ("chr1", 0, 39999, 2.0),
        ("chr2", 100000, 139999, -1.0),
    ])
    stats = load_profile(grid, path, 40000)

    assert (grid["chr1"] == 0).all()
    assert (grid["chr2"] == 0).all()
    assert stats.segments_skipped == 2
    assert stats.segments_applied == 0
    assert stats.bins_written == 0


def test_short_segment_keeps_earlier_value(grid, write_segments):
    path = write_segments("profile.txt", [
        ("chr1", 0, 200000, 0.5),
        ("chr1", 40000, 60000, -2.0),
    ])
    load_profile(grid, path, 40000)
    assert (grid["chr1"][:6] == 0.5).all()


def test_segment_of_exactly_one_bin_is_applied(grid, write_segments):
    path = write_segments("profile.txt", [("chr1", 0, 40000, 0.3)])
    stats = load_profile(grid, path, 40000)
    assert np.array_equal(grid["chr1"][:2], [0.3, 0.3])
    assert grid["chr1"][2] == 0
    assert stats.bins_written == 2


def test_later_segment_overwrites_earlier(grid, write_segments):
    path = write_segments("profile.txt", [
        ("chr1", 0, 200000, 0.5),
        ("chr1", 120000, 200000, -1.0),
    ])
    load_profile(grid, path, 40000)
    assert np.array_equal(grid["chr1"][:6], [0.5, 0.5, 0.5, -1.0, -1.0, -1.0])


def test_loading_is_idempotent(small_lengths, write_segments):
    path = write_segments("profile.txt", [
        ("chr1", 0, 200000, 0.5),
        ("chr2", 80000, 400000, -0.25),
    ])
    grid_a, _ = build_reference_grid(small_lengths, 40000)
    grid_b, _ = build_reference_grid(small_lengths, 40000)
    load_profile(grid_a, path, 40000)
    load_profile(grid_b, path, 40000)
    assert grid_a.keys() == grid_b.keys()
    for chrom in grid_a:
        assert np.array_equal(grid_a[chrom], grid_b[chrom])


def test_segment_reaching_last_bin(grid, write_segments):
    path = write_segments("profile.txt", [("chr2", 360000, 419999, 1.0)])
    load_profile(grid, path, 40000)
    assert np.array_equal(grid["chr2"][9:], [1.0, 1.0])


def test_segment_past_last_bin(grid, write_segments):
    path = write_segments("profile.txt", [("chr2", 360000, 440000, 1.0)])
    with pytest.raises(SegmentOutOfRange) as excinfo:
        load_profile(grid, path, 40000)
    assert excinfo.value.line_number == 1


def test_unknown_chromosome(grid, write_segments):
    path = write_segments("profile.txt", [
        ("chr1", 0, 80000, 1.0),
        ("chr3", 0, 80000, 1.0),
    ])
    with pytest.raises(UnknownChromosome) as excinfo:
        load_profile(grid, path, 40000)
    assert excinfo.value.chrom == "chr3"
    assert excinfo.value.line_number == 2
    assert "chr3" not in grid


def test_parse_error_is_reported_with_line(grid, write_segments):
    path = write_segments("profile.txt", [("chr1", 0, 80000, 1.0), "chr1\t0-80000\tNA"])
    with pytest.raises(ParseError) as excinfo:
        load_profile(grid, path, 40000)
    assert excinfo.value.line_number == 2
