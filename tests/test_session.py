from unittest import mock

import pytest

from gantt_player.backend import parse_response
from gantt_player.errors import BackendError, InvalidTimeline, NoTimeline
from gantt_player.gantt import GanttRenderer
from gantt_player.playback import Phase
from gantt_player.rows import DONE, RUNNING, ProcessTable
from gantt_player.session import Session

from .test_backend import GOOD_BODY


@pytest.fixture
def parts(scheduler, canvas):
    table = ProcessTable()
    table.add_row("P1", 0, 5)
    table.add_row("P2", 1, 3)
    client = mock.Mock()
    statuses = []
    session = Session(client, table, GanttRenderer(canvas), scheduler, on_status=statuses.append)
    return session, client, table, canvas, statuses


def test_run_installs_timeline_and_metrics(parts):
    session, client, table, canvas, statuses = parts
    client.simulate.return_value = parse_response(GOOD_BODY)

    session.run(2)

    client.simulate.assert_called_once_with(table.to_processes(), 2)
    assert len(session.timeline) == 3
    assert len(canvas.of_kind("rectangle")) == 3
    assert table.rows_for("P1")[0].turnaround_time == 8
    assert statuses[-1] == "Status: ready - use Play to animate"


def test_run_with_empty_table_rejected(scheduler, canvas):
    session = Session(mock.Mock(), ProcessTable(), GanttRenderer(canvas), scheduler)
    with pytest.raises(ValueError):
        session.run(1)


def test_backend_failure_keeps_previous_timeline(parts):
    session, client, _table, canvas, statuses = parts
    client.simulate.return_value = parse_response(GOOD_BODY)
    session.run(2)
    drawn = list(canvas.items)
    previous = session.timeline

    client.simulate.side_effect = BackendError("HTTP 500", status=500)
    with pytest.raises(BackendError):
        session.run(2)

    assert session.timeline is previous
    assert canvas.items == drawn
    assert statuses[-1] == "Status: Error - HTTP 500"


def test_invalid_timeline_clears_chart_and_stays_idle(parts):
    session, client, table, canvas, statuses = parts
    client.simulate.return_value = parse_response(GOOD_BODY)
    session.run(2)
    assert table.rows_for("P1")[0].waiting_time == 3

    client.simulate.side_effect = InvalidTimeline("Segment 0 ends at 3, not after its start 3.")
    with pytest.raises(InvalidTimeline):
        session.run(2)

    assert canvas.items == []
    assert session.controller.phase is Phase.IDLE
    assert not session.timeline
    assert statuses[-1].startswith("Status: Error - invalid timeline")
    assert all(row.waiting_time is None and row.turnaround_time is None for row in table)
    assert session.result is None
    with pytest.raises(NoTimeline):
        session.play()


def test_playback_drives_table_highlights(parts, scheduler):
    session, client, table, _canvas, statuses = parts
    client.simulate.return_value = parse_response(GOOD_BODY)
    session.run(2)

    session.play()
    assert table.rows_for("P1")[0].state == RUNNING
    assert statuses[-1] == "Status: playing"

    scheduler.run_all()
    assert table.rows_for("P1")[0].state == DONE
    assert table.rows_for("P2")[0].state == DONE
    assert statuses[-1] == "Status: finished"

    session.reset()
    assert {row.state for row in table} == {None}
    assert statuses[-1] == "Status: reset"


def test_clear_drops_everything(parts):
    session, client, table, canvas, statuses = parts
    client.simulate.return_value = parse_response(GOOD_BODY)
    session.run(2)

    session.clear()
    assert len(table) == 0
    assert canvas.items == []
    assert not session.timeline
    assert session.result is None
    assert statuses[-1] == "Status: cleared"


def test_speed_change_reaches_controller(parts):
    session = parts[0]
    session.set_speed(4)
    assert session.controller.speed_multiplier == 4.0
