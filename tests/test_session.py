"""Tests for the PlaybackSession facade."""

import pytest

from algorithms.prim import prim
from engine import PlaybackSession, RunPhase
from graph import Edge


def test_empty_graph_is_a_no_op(session):
    assert not session.begin_run([], [])
    assert session.phase is RunPhase.IDLE
    assert session.log_length == 0
    assert session.current_state() is None


def test_second_run_refused_while_active(session, triangle):
    assert session.begin_run(*triangle)
    assert not session.begin_run(*triangle)
    session.pause()
    assert not session.begin_run(*triangle)
    assert session.log_length == 1


def test_malformed_edge_raises_before_anything_changes(session, triangle):
    nodes, _ = triangle
    with pytest.raises(ValueError):
        session.begin_run(nodes, [Edge(0, 42, 1)])
    assert session.phase is RunPhase.IDLE
    assert session.log_length == 0


def test_current_state_follows_the_live_tail(session, clock, triangle):
    session.begin_run(*triangle)
    assert session.current_index == 0
    clock.advance(1.0)
    session.tick()
    assert session.current_index == 1
    assert session.current_state() is session.log[1]


def test_navigation_is_disabled_while_running(session, clock, triangle):
    session.begin_run(*triangle)
    clock.advance(2.0)
    session.tick()
    assert not session.step_backward()
    assert not session.seek(0)
    assert not session.hold_backward()
    assert session.current_index == 2


def test_scrub_while_paused_then_resume_jumps_back_to_tail(session, clock, triangle):
    session.begin_run(*triangle)
    clock.advance(3.0)
    session.tick()
    session.pause()
    assert session.step_backward()
    assert session.step_backward()
    assert session.current_index == 1
    assert session.log_length == 4

    session.resume()
    clock.advance(1.0)
    session.tick()
    assert session.current_index == 4
    assert session.log_length == 5


def test_completion_publishes_the_summary(session, triangle):
    session.begin_run(*triangle)
    session.finish()
    assert session.phase is RunPhase.COMPLETED
    assert session.log_length == len(list(prim(*triangle)))
    final = session.current_state()
    assert final.is_final
    assert final.label == "Algorithm complete! MST has 2 edges with total weight: 8"


def test_rewind_idempotence(session, square_graph):
    session.begin_run(*square_graph.snapshot())
    session.finish()
    for i in range(1, session.log_length - 1):
        session.seek(i)
        before = session.current_state()
        assert session.step_forward()
        assert session.step_backward()
        assert session.current_state() == before


def test_determinism_across_runs(session, square_graph):
    nodes, edges = square_graph.snapshot()
    session.begin_run(nodes, edges)
    session.finish()
    first = list(session.log)
    session.begin_run(nodes, edges)
    session.finish()
    assert list(session.log) == first


def test_cancel_keeps_log_and_allows_navigation(session, clock, triangle):
    session.begin_run(*triangle)
    clock.advance(2.0)
    session.tick()
    assert session.cancel()
    assert session.phase is RunPhase.IDLE
    assert session.log_length == 3
    assert session.step_backward()
    assert session.current_index == 1
    assert not session.cancel()


def test_reset_discards_everything(session, triangle):
    views = []
    session.subscribe(views.append)
    session.begin_run(*triangle)
    session.finish()
    session.reset()
    assert session.phase is RunPhase.IDLE
    assert session.log_length == 0
    assert session.current_state() is None
    assert views[-1]["phase"] == "idle"
    assert views[-1]["mst_edges"] == []
    assert views[-1]["current_index"] == -1


def test_listeners_see_every_change(session, clock, triangle):
    views = []
    unsubscribe = session.subscribe(views.append)
    session.begin_run(*triangle)
    session.pause()
    session.step_backward()           # at index 0 already: nothing published
    session.resume()
    clock.advance(1.0)
    session.tick()
    assert [(v["phase"], v["current_index"]) for v in views] == [
        ("running", 0), ("paused", 0), ("running", 0), ("running", 1),
    ]
    view = views[-1]
    for key in ("visited", "mst_edges", "current_edge", "distance_table",
                "changed_nodes", "label", "current_index", "log_length", "phase"):
        assert key in view

    unsubscribe()
    clock.advance(1.0)
    session.tick()
    assert len(views) == 4


def test_hold_through_the_session(session, clock, triangle):
    session.begin_run(*triangle)
    session.finish()
    session.seek(0)
    assert session.hold_forward()
    clock.advance(0.5)
    session.tick()
    assert session.current_index == 2
    assert session.view()["holding"] == "forward"
    assert session.release_hold()
    assert session.view()["holding"] is None


def test_resume_releases_a_hold(session, clock, triangle):
    session.begin_run(*triangle)
    clock.advance(3.0)
    session.tick()
    session.pause()
    session.hold_backward()
    assert session.transport.hold.active
    session.resume()
    assert not session.transport.hold.active


def test_finish_releases_a_hold_and_stays_on_the_summary(session, clock, square_graph):
    session.begin_run(*square_graph.snapshot())
    clock.advance(4.0)
    session.tick()
    session.pause()
    assert session.hold_backward()
    session.finish()
    last = session.log_length - 1
    assert session.current_index == last
    assert not session.transport.hold.active
    clock.advance(5.0)
    session.tick()
    assert session.current_index == last
    assert session.current_state().is_final


def test_speed_controls(session, clock, triangle):
    assert session.set_speed_multiplier(8)
    assert not session.set_speed_multiplier(0)
    assert not session.speed_up()             # nothing running yet
    session.begin_run(*triangle)
    assert session.speed_up()
    assert session.view()["speeding_up"]
    clock.advance(1.0)
    session.tick()
    clock.advance(1.0 / 8)
    assert session.tick() == 1
    session.release_speed_up()
    assert not session.view()["speeding_up"]


def test_seconds_until_next_event(session, clock, triangle):
    assert session.seconds_until_next_event() is None
    session.begin_run(*triangle)
    assert session.seconds_until_next_event() == 1.0
    session.pause()
    assert session.seconds_until_next_event() is None


def test_metrics_for_partial_run(session, split_graph):
    session.begin_run(*split_graph)
    session.finish()
    m = session.metrics()
    assert m.completed
    assert not m.spanning
    assert (m.nodes_visited, m.mst_edges, m.total_weight) == (2, 1, 2)


def test_unknown_algorithm_rejected():
    with pytest.raises(ValueError):
        PlaybackSession(algorithm="kruskal")
