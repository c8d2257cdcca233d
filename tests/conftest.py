import pytest


@pytest.fixture
def write_segments(tmp_path):
    """
    Return a function writing segment lines to a temporary file and returning
    its path. Each segment is a tuple (chrom, start, end, lrr[, copy_number])
    or a raw string written as-is.
    """
    def _write(name, segments):
        path = tmp_path / name
        lines = []
        for segment in segments:
            if isinstance(segment, str):
                lines.append(segment)
            else:
                chrom, start, end, *rest = segment
                lines.append('\t'.join([chrom, f"{start}-{end}"] + [str(v) for v in rest]))
        path.write_text(''.join(line + '\n' for line in lines))
        return path

    return _write


@pytest.fixture
def small_lengths():
    # 11 bins per chromosome at 40 kb precision
    return {"chr1": 400000, "chr2": 400000}
