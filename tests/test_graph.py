import pytest

from bracketview.bracket.graph import build_graph, parse_match_index, sort_key


@pytest.mark.parametrize(
    "match_id, expected",
    [
        ("preview_7_3_2", 2),
        ("preview_gfr_6_0", 0),
        ("abc", 0),
        ("12345", 0),
        ("preview_7_3_x", 0),
        ("a_b_c_11_extra", 11),
    ],
)
def test_parse_match_index(match_id, expected):
    assert parse_match_index(match_id) == expected


def test_edges_link_parents_and_children(make_record):
    records = [
        make_record("w1", 1),
        make_record("w2", 1),
        make_record("w3", 2, sources=("w1", "w2")),
    ]
    graph = build_graph(records)

    final = graph.nodes["w3"]
    assert [p.id for p in final.parents] == ["w1", "w2"]
    assert [c.id for c in graph.nodes["w1"].children] == ["w3"]
    assert sorted(graph.edges()) == [("w1", "w3"), ("w2", "w3")]
    assert [r.id for r in graph.roots] == ["w1", "w2"]


def test_unresolved_reference_is_dropped(make_record):
    records = [
        make_record("l1", -1, sources=("w1", None)),
        make_record("l2", -2, sources=("l1", "missing")),
    ]
    graph = build_graph(records)

    assert graph.nodes["l1"].parents == []
    assert [p.id for p in graph.nodes["l2"].parents] == ["l1"]
    assert graph.edges() == [("l1", "l2")]
    assert [r.id for r in graph.roots] == ["l1"]


def test_roots_follow_round_then_index(make_record):
    records = [
        make_record("preview_1_2_0", 2),
        make_record("preview_1_1_1", 1),
        make_record("preview_1_1_0", 1),
    ]
    graph = build_graph(records)
    assert [r.id for r in graph.roots] == [
        "preview_1_1_0",
        "preview_1_1_1",
        "preview_1_2_0",
    ]
    assert sort_key(records[0]) == (2, 0)


def test_empty_graph():
    graph = build_graph([])
    assert graph.nodes == {}
    assert graph.roots == []
    assert graph.edges() == []
