"""
Tests for trace parsing.
"""

import bz2
import gzip

import pytest

from bpsim import TraceFormatError
from bpsim.trace import (
    BranchRecord,
    BranchTrace,
    SimpleTextFormat,
    TraceParser,
    create_sample_trace,
)


def write_trace(path, text):
    path.write_text(text)
    return path


def test_parse_plain_trace(tmp_path):
    trace = write_trace(tmp_path / "trace.txt",
                        "00a3b5fc t\n"
                        "0x00a3b604 n\n"
                        "\n"
                        "# comment\n"
                        "ffffffff T\n")

    records = list(TraceParser().parse_file(trace))

    assert records == [
        BranchRecord(pc=0x00a3b5fc, taken=True),
        BranchRecord(pc=0x00a3b604, taken=False),
        BranchRecord(pc=0xffffffff, taken=True),
    ]


def test_strict_mode_rejects_unknown_outcome(tmp_path):
    trace = write_trace(tmp_path / "trace.txt", "100 t\n104 x\n")

    with pytest.raises(TraceFormatError) as excinfo:
        list(TraceParser().parse_file(trace))

    assert excinfo.value.line_number == 2
    assert excinfo.value.path == str(trace)
    assert "invalid outcome" in str(excinfo.value)


def test_permissive_mode_treats_non_t_as_not_taken(tmp_path):
    trace = write_trace(tmp_path / "trace.txt",
                        "100 t\n104 x\n108 T\n10c taken\n110 n\n")

    records = list(TraceParser(strict=False).parse_file(trace))

    assert [r.taken for r in records] == [True, False, False, True, False]


@pytest.mark.parametrize("strict", [True, False])
def test_invalid_address_always_rejected(tmp_path, strict):
    trace = write_trace(tmp_path / "trace.txt", "zzzz t\n")
    with pytest.raises(TraceFormatError):
        list(TraceParser(strict=strict).parse_file(trace))


def test_missing_outcome_rejected():
    with pytest.raises(TraceFormatError):
        SimpleTextFormat().parse_line("400100", 1)


def test_strict_mode_rejects_extra_fields(tmp_path):
    trace = write_trace(tmp_path / "trace.txt", "4 t\n8 t garbage\n")

    with pytest.raises(TraceFormatError) as excinfo:
        list(TraceParser().parse_file(trace))

    assert excinfo.value.line_number == 2


def test_permissive_mode_ignores_extra_fields():
    record = SimpleTextFormat(strict=False).parse_line("8 t garbage", 1)
    assert record == BranchRecord(8, True)


def test_negative_address_rejected():
    with pytest.raises(TraceFormatError):
        SimpleTextFormat().parse_line("-4 t", 1)


def test_parse_lines_in_memory():
    records = list(TraceParser().parse_lines(["4 t", "8 n"]))
    assert records == [BranchRecord(4, True), BranchRecord(8, False)]


def test_gzip_trace(tmp_path):
    path = tmp_path / "trace.txt.gz"
    with gzip.open(path, 'wt') as f:
        f.write("4 t\n8 n\n")

    records = list(TraceParser().parse_file(path))

    assert records == [BranchRecord(4, True), BranchRecord(8, False)]


def test_bz2_trace(tmp_path):
    path = tmp_path / "trace.txt.bz2"
    with bz2.open(path, 'wt') as f:
        f.write("c n\n")

    assert list(TraceParser().parse_file(path)) == [BranchRecord(0xc, False)]


def test_max_and_skip_branches(tmp_path):
    trace = write_trace(tmp_path / "trace.txt",
                        "".join(f"{4 * i:x} t\n" for i in range(10)))
    parser = TraceParser()

    records = list(parser.parse_file(trace, max_branches=3, skip_branches=2))
    assert [r.pc for r in records] == [8, 12, 16]

    assert list(parser.parse_file(trace, max_branches=0)) == []


def test_load_trace_statistics(tmp_path):
    trace = write_trace(tmp_path / "trace.txt", "4 t\n4 n\n8 t\n8 t\n")

    loaded = TraceParser().load_trace(trace)

    assert len(loaded) == 4
    stats = loaded.get_statistics()
    assert stats['taken'] == 3
    assert stats['not_taken'] == 1
    assert stats['unique_pcs'] == 2
    assert stats['taken_ratio'] == pytest.approx(0.75)


def test_empty_trace_statistics():
    assert BranchTrace().get_statistics() == {'count': 0}


def test_branch_trace_from_pairs():
    trace = BranchTrace.from_pairs([(0x4, 1), (0x8, 0)])
    assert list(trace) == [BranchRecord(4, True), BranchRecord(8, False)]


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        TraceParser(format_name='champsim')


def test_sample_trace_round_trips(tmp_path):
    path = tmp_path / "loop.txt"
    create_sample_trace(path, num_branches=50, pattern='loop', seed=1)

    records = list(TraceParser().parse_file(path))

    assert len(records) == 50
    assert [r.taken for r in records[:10]] == [True] * 9 + [False]
    assert all(r.pc % 4 == 0 for r in records)


def test_sample_trace_is_reproducible(tmp_path):
    first, second = tmp_path / "a.txt", tmp_path / "b.txt"
    create_sample_trace(first, num_branches=200, seed=42)
    create_sample_trace(second, num_branches=200, seed=42)
    assert first.read_text() == second.read_text()


def test_trace_info(tmp_path):
    trace = write_trace(tmp_path / "trace.txt", "00a3b5fc t\n" * 100)
    info = TraceParser().get_trace_info(trace)
    assert info.compression is None
    assert info.format == 'text'
    assert info.estimated_branches == 100


def test_trace_info_compressed_has_no_estimate(tmp_path):
    path = tmp_path / "trace.txt.gz"
    with gzip.open(path, 'wt') as f:
        f.write("00a3b5fc t\n" * 100)

    info = TraceParser().get_trace_info(path)

    assert info.compression == 'gz'
    assert info.estimated_branches is None
