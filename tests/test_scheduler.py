"""Tests for the paced Scheduler."""

from algorithms.prim import prim
from engine import RunLog, RunPhase, Scheduler


def make_scheduler(config, clock):
    log = RunLog()
    return Scheduler(log, config, clock), log


def test_first_state_is_emitted_on_start(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    assert sched.start(prim(*triangle))
    assert sched.phase is RunPhase.RUNNING
    assert len(log) == 1
    assert log[0].label == "Starting Prim's Algorithm..."


def test_states_are_paced_by_base_interval(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    assert sched.tick(0.5) == 0
    assert sched.tick(1.0) == 1
    assert sched.tick(1.5) == 0
    assert sched.tick(2.0) == 1
    assert len(log) == 3


def test_overdue_ticks_catch_up_in_order(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    sched.tick(100.0)
    assert sched.phase is RunPhase.COMPLETED
    assert [s.label for s in log] == [s.label for s in prim(*triangle)]
    assert log.frozen
    assert sched.tick(200.0) == 0


def test_pause_freezes_the_log(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    assert sched.pause()
    assert sched.tick(10.0) == 0
    assert len(log) == 1
    assert not sched.pause()

    # the elapsed deadline fires once on resume, not as a burst
    assert sched.resume(now=10.0)
    assert sched.tick(10.0) == 1
    assert sched.tick(10.5) == 0
    assert sched.tick(11.0) == 1


def test_speed_up_only_changes_future_waits(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))            # next state due at 1.0
    assert sched.speed_up()
    assert sched.tick(0.5) == 0             # the pending 1 s wait is kept
    assert sched.tick(1.0) == 1             # now waits 1.0 / 4
    assert sched.tick(1.25) == 1
    sched.release_speed_up()
    assert sched.tick(1.5) == 1             # scheduled while still fast
    assert sched.tick(2.0) == 0
    assert sched.tick(2.5) == 1


def test_speed_multiplier_validation(config, clock):
    sched, _ = make_scheduler(config, clock)
    for bad in (0, -3, 2.5, True, "7"):
        assert not sched.set_speed_multiplier(bad)
    assert sched.speed_multiplier == 4
    assert sched.set_speed_multiplier(20)
    assert sched.speed_multiplier == 20


def test_speed_up_requires_running(config, clock, triangle):
    sched, _ = make_scheduler(config, clock)
    assert not sched.speed_up()
    sched.start(prim(*triangle))
    sched.pause()
    assert not sched.speed_up()


def test_no_skips_or_duplicates_under_mixed_control(config, clock, square_graph):
    nodes, edges = square_graph.snapshot()
    sched, log = make_scheduler(config, clock)
    sched.start(prim(nodes, edges))
    t = 0.0
    for i in range(60):
        t += 0.3
        if i % 7 == 3:
            sched.pause()
        elif i % 7 == 5:
            sched.resume(now=t)
        if i % 5 == 0:
            sched.speed_up()
        elif i % 5 == 2:
            sched.release_speed_up()
        sched.tick(t)
    sched.resume(now=t)
    sched.tick(t + 100)
    assert [s.step_number for s in log] == list(range(len(log)))
    assert list(log) == list(prim(nodes, edges))


def test_cancel_keeps_what_was_recorded(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    sched.tick(1.0)
    assert sched.cancel()
    assert sched.phase is RunPhase.IDLE
    assert len(log) == 2
    assert log.frozen
    assert sched.tick(50.0) == 0
    assert not sched.cancel()


def test_start_refused_while_active(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    assert sched.start(prim(*triangle))
    assert not sched.start(prim(*triangle))
    sched.pause()
    assert not sched.start(prim(*triangle))
    assert len(log) == 1


def test_restart_after_completion_starts_a_fresh_log(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    sched.run_to_completion()
    assert sched.start(prim(*triangle))
    assert len(log) == 1


def test_reset_clears_the_log(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    sched.tick(3.0)
    sched.reset()
    assert sched.phase is RunPhase.IDLE
    assert len(log) == 0
    assert not log.frozen


def test_run_to_completion_from_pause(config, clock, triangle):
    sched, log = make_scheduler(config, clock)
    sched.start(prim(*triangle))
    sched.pause()
    assert sched.run_to_completion() == 6
    assert sched.is_completed
    assert log.last.is_final


def test_seconds_until_due(config, clock, triangle):
    sched, _ = make_scheduler(config, clock)
    assert sched.seconds_until_due(0.0) is None
    sched.start(prim(*triangle))
    assert sched.seconds_until_due(0.25) == 0.75
    sched.pause()
    assert sched.seconds_until_due(0.25) is None


def test_on_state_sees_completed_phase_for_final_state(config, clock, triangle):
    seen = []
    log = RunLog()
    sched = Scheduler(log, config, clock, on_state=lambda i, s: seen.append((i, sched.phase)))
    sched.start(prim(*triangle))
    sched.run_to_completion()
    assert seen[0] == (0, RunPhase.RUNNING)
    assert seen[-1] == (6, RunPhase.COMPLETED)
