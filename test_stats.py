import pytest

from stats import degree_counts, rank_summary, stats_block


def test_stats_block_on_degrees():
    block = stats_block([1, 2, 3, 4, 5])

    assert block["average"] == 3.0
    assert block["median"] == 3.0
    assert block["min"] == 1 and isinstance(block["min"], int)
    assert block["max"] == 5 and isinstance(block["max"], int)
    assert block["quintiles"] == pytest.approx([1.8, 2.6, 3.4, 4.2])


def test_stats_block_on_ranks_keeps_floats():
    block = stats_block([0.5, 0.25])

    assert block["min"] == 0.25
    assert isinstance(block["max"], float)


def test_stats_block_rejects_empty():
    with pytest.raises(ValueError):
        stats_block([])


def test_degree_counts():
    graph = [[1], [0, 2], [0, 3, 4], [4, 5], [2, 6], [0, 6], [3]]

    out_deg, in_deg = degree_counts(graph)

    assert out_deg == [1, 2, 3, 2, 2, 2, 1]
    assert in_deg == [3, 1, 2, 2, 2, 1, 2]


def test_degree_counts_without_edges():
    assert degree_counts([[], []]) == ([0, 0], [0, 0])


def test_rank_summary_reports_sink_mass():
    summary = rank_summary([0.075, 0.13875], [[1], []])

    assert summary["sum"] == pytest.approx(0.21375)
    assert summary["sink_mass"] == pytest.approx(0.13875)
    assert summary["sinks"] == 1


def test_rank_summary_without_sinks():
    summary = rank_summary([0.5, 0.5], [[1], [0]])

    assert summary == {"sum": 1.0, "sink_mass": 0.0, "sinks": 0}
