from bracketview.bracket.partition import (
    group_by_depth,
    partition_records,
    round_keys,
    split_sides,
)
from bracketview.core.models import Side


def test_partition_by_sign_and_depth(make_record):
    records = [
        make_record("a", 1),
        make_record("b", 1),
        make_record("c", 2),
        make_record("d", -1),
        make_record("e", -1),
        make_record("f", -2),
    ]
    partition = partition_records(records)

    assert {k: [r.id for r in v] for k, v in partition.winners.items()} == {
        1: ["a", "b"],
        2: ["c"],
    }
    assert {k: [r.id for r in v] for k, v in partition.losers.items()} == {
        1: ["d", "e"],
        2: ["f"],
    }
    assert partition.winners_count == 3
    assert partition.losers_count == 3
    assert partition.side(Side.LOSERS) is partition.losers


def test_round_zero_is_winners_side(make_record):
    winners, losers = split_sides([make_record("z", 0)])
    assert [r.id for r in winners] == ["z"]
    assert losers == []


def test_group_keys_ascending_and_order_kept(make_record):
    records = [
        make_record("late", 5),
        make_record("x", 2),
        make_record("y", 2),
    ]
    groups = group_by_depth(records)
    assert list(groups) == [2, 5]
    assert [r.id for r in groups[2]] == ["x", "y"]


def test_round_keys_keep_gaps(make_record):
    groups = group_by_depth([make_record("a", 1), make_record("b", 4)])
    assert round_keys(groups) == [1, 4]


def test_empty_input():
    partition = partition_records([])
    assert partition.winners == {}
    assert partition.losers == {}
