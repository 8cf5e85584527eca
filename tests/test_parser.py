import logging

from bracketview.core.models import SourceKind
from bracketview.core.parser import (
    parse_phase_document,
    parse_set_detail,
    parse_set_node,
    parse_stream_queue,
    parse_tournament_info,
)


def test_phase_document_flattens_groups(phase_document):
    records = parse_phase_document(phase_document)

    assert [r.id for r in records] == ["1", "2", "3", "4", "5", "6", "7"]
    assert {r.pool_id for r in records} == {"A1"}
    assert {r.phase_group_id for r in records} == {"200"}

    first = records[0]
    assert first.round == 1
    assert first.round_label == "Winners Semi-Final"
    assert first.entrant_names == ("Alpha", "Bravo")
    assert first.entrant_sources[0].kind is SourceKind.TERMINAL

    final = records[2]
    assert final.entrant_names == ("", "")
    assert [s.match_id for s in final.entrant_sources] == ["1", "2"]


def test_set_node_defaults():
    record = parse_set_node({"id": 99})
    assert record.round == 1
    assert record.round_label == "Round 1"
    assert len(record.slots) == 2
    assert record.winner_id is None
    assert record.display_score is None


def test_set_node_without_id_is_skipped():
    assert parse_set_node({"round": 2}) is None


def test_losers_round_label_uses_depth():
    assert parse_set_node({"id": 1, "round": -3}).round_label == "Round 3"


def test_graphql_errors_are_logged(caplog):
    caplog.set_level(logging.WARNING, logger="bracketview.core.parser")
    records = parse_phase_document({"errors": [{"message": "bad phase"}], "data": None})
    assert records == []
    assert any("bad phase" in m for m in caplog.messages)


def test_malformed_documents_yield_nothing():
    assert parse_phase_document(None) == []
    assert parse_phase_document({"data": {"phase": {"phaseGroups": "oops"}}}) == []
    assert parse_stream_queue({"data": {"tournament": None}}) == []
    assert parse_set_detail({"data": {"set": None}}) is None
    assert parse_tournament_info({}) is None


def test_stream_queue():
    document = {
        "data": {
            "tournament": {
                "streamQueue": [
                    {
                        "stream": {"streamSource": "TWITCH", "streamName": "MainStage"},
                        "sets": [{"id": 11}, {"id": 12}],
                    },
                    {"stream": {"streamName": "Side"}, "sets": []},
                ]
            }
        }
    }
    entries = parse_stream_queue(document)
    assert entries[0].name == "MainStage"
    assert entries[0].set_ids == ("11", "12")
    assert entries[1].source == ""
    assert entries[1].set_ids == ()


def test_set_detail_defaults():
    document = {
        "data": {
            "set": {
                "id": 5,
                "round": -2,
                "startAt": 1700000000,
                "phaseGroup": {"displayIdentifier": "B3", "phase": {"name": "Pools"}},
                "slots": [
                    {
                        "entrant": {"id": 1, "name": "Alpha"},
                        "standing": {"stats": {"score": {"value": 2}}},
                    },
                    {"entrant": None},
                ],
            }
        }
    }
    detail = parse_set_detail(document)
    assert detail.id == "5"
    assert detail.entrant_names == ("Alpha", "TBD")
    assert detail.scores == (2, 0)
    assert detail.round_label is None
    assert detail.phase_name == "Pools"
    assert detail.pool_id == "B3"
    assert detail.start_at == 1700000000
    assert not detail.is_completed


def test_set_detail_accepts_bare_set():
    detail = parse_set_detail({"id": "s1", "completedAt": 10})
    assert detail.id == "s1"
    assert detail.entrant_names == ("TBD", "TBD")
    assert detail.is_completed


def test_tournament_info():
    info = parse_tournament_info(
        {"data": {"tournament": {"id": 3, "name": "Weekly", "startAt": "1700"}}}
    )
    assert info == {"id": "3", "name": "Weekly", "start_at": 1700}


def test_wrongly_typed_fields_fall_back_to_defaults():
    document = {
        "data": {
            "phase": {
                "phaseGroups": {
                    "nodes": [
                        {
                            "displayIdentifier": "A1",
                            "sets": {"nodes": [{"id": 1, "round": 1, "slots": 3}]},
                        }
                    ]
                }
            }
        }
    }
    (record,) = parse_phase_document(document)
    assert record.entrant_names == ("", "")
    assert all(not s.is_match_reference for s in record.entrant_sources)

    detail = parse_set_detail({"data": {"set": {"id": 5, "slots": 7}}})
    assert detail.entrant_names == ("TBD", "TBD")

    queue = {
        "data": {
            "tournament": {
                "streamQueue": [
                    {"stream": "jsonv", "sets": [{"id": 4}]},
                    {"stream": {"streamName": "Main"}, "sets": 12},
                ]
            }
        }
    }
    entries = parse_stream_queue(queue)
    assert [(e.name, e.set_ids) for e in entries] == [("", ("4",)), ("Main", ())]
