import json

import pytest

from gantt_player.errors import InvalidTimeline
from gantt_player.timeline import Segment, Timeline, parse_timeline


def test_parse_valid_payload():
    timeline = parse_timeline(
        [
            {"pid": "P1", "start": 0, "end": 2},
            {"pid": "P2", "start": 2, "end": 4},
            {"pid": "P1", "start": 4, "end": 7},
        ]
    )
    assert len(timeline) == 3
    assert timeline[0] == Segment("P1", 0, 2)
    assert timeline.global_start == 0
    assert timeline.global_end == 7
    assert timeline.span == 7


def test_every_segment_lies_within_global_bounds():
    timeline = parse_timeline(
        [
            {"pid": "A", "start": 3, "end": 4.5},
            {"pid": "B", "start": 4.5, "end": 9},
            {"pid": "A", "start": 9, "end": 12},
        ]
    )
    for seg in timeline:
        assert timeline.global_start <= seg.start
        assert seg.end <= timeline.global_end


def test_span_never_below_one():
    timeline = parse_timeline([{"pid": "P1", "start": 2, "end": 2.5}])
    assert timeline.span == 1


def test_unordered_payload_is_sorted_by_start():
    timeline = parse_timeline(
        [
            {"pid": "P2", "start": 5, "end": 8},
            {"pid": "P1", "start": 0, "end": 5},
        ]
    )
    assert [s.pid for s in timeline] == ["P1", "P2"]


def test_empty_list_gives_empty_timeline():
    timeline = parse_timeline([])
    assert not timeline
    assert len(timeline) == 0
    assert timeline.span == 1


def test_zero_length_segment_rejected():
    with pytest.raises(InvalidTimeline):
        parse_timeline([{"pid": "P1", "start": 3, "end": 3}])


def test_reversed_segment_rejected():
    with pytest.raises(InvalidTimeline):
        parse_timeline([{"pid": "P1", "start": 4, "end": 3}])


@pytest.mark.parametrize("payload", [None, "P1 0 5", {"pid": "P1"}, 42])
def test_absent_or_non_sequence_rejected(payload):
    with pytest.raises(InvalidTimeline):
        parse_timeline(payload)


@pytest.mark.parametrize(
    "segment",
    [
        {"start": 0, "end": 1},
        {"pid": "", "start": 0, "end": 1},
        {"pid": "P1", "start": "0", "end": 1},
        {"pid": "P1", "start": 0},
        {"pid": "P1", "start": -1, "end": 1},
        {"pid": "P1", "start": True, "end": 2},
        {"pid": "P1", "start": float("nan"), "end": 2},
        {"pid": "P1", "start": 0, "end": float("nan")},
        {"pid": "P1", "start": 0, "end": float("inf")},
        {"pid": "P1", "start": float("inf"), "end": 2},
        {"pid": "P1", "start": float("-inf"), "end": 2},
        {"pid": "P1", "start": 0, "end": float("-inf")},
        ["P1", 0, 1],
    ],
)
def test_malformed_segment_rejected(segment):
    with pytest.raises(InvalidTimeline):
        parse_timeline([segment])


def test_overlapping_slices_of_one_process_rejected():
    with pytest.raises(InvalidTimeline):
        parse_timeline(
            [
                {"pid": "P1", "start": 0, "end": 4},
                {"pid": "P1", "start": 3, "end": 6},
            ]
        )


def test_different_processes_may_interleave():
    timeline = parse_timeline(
        [
            {"pid": "P1", "start": 0, "end": 4},
            {"pid": "P2", "start": 3, "end": 6},
        ]
    )
    assert len(timeline) == 2


def test_timeline_is_immutable():
    timeline = Timeline([Segment("P1", 0, 1)])
    with pytest.raises(AttributeError):
        timeline.segments.append(Segment("P2", 1, 2))
    with pytest.raises(AttributeError):
        timeline[0].pid = "P9"


def test_segment_label():
    assert Segment("P3", 2, 7).label == "P3 (2-7)"


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_json_times_rejected(token):
    # json.loads (and requests' Response.json) accept these tokens.
    for body in (
        f'[{{"pid": "P1", "start": 0, "end": {token}}}]',
        f'[{{"pid": "P1", "start": {token}, "end": 2}}]',
    ):
        with pytest.raises(InvalidTimeline):
            parse_timeline(json.loads(body))
