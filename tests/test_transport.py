"""Tests for the Transport controller and the HoldRepeater."""

import pytest

from algorithms.prim import prim
from engine import HoldPhase, HoldRepeater, RunLog, Transport


@pytest.fixture
def log(triangle):
    log = RunLog()
    for state in prim(*triangle):
        log.append(state)
    log.freeze()
    return log


@pytest.fixture
def transport(log, config, clock):
    moves = []
    t = Transport(log, config, clock, on_move=lambda i, s: moves.append(i))
    t.moves = moves
    t.seek(0)
    return t


def test_step_and_bounds(transport, log):
    assert not transport.step_backward()
    assert transport.step_forward()
    assert transport.index == 1
    assert transport.seek(len(log) - 1)
    assert not transport.step_forward()
    assert transport.current is log[len(log) - 1]


def test_seek_out_of_range_is_ignored(transport):
    transport.seek(3)
    assert not transport.seek(-1)
    assert not transport.seek(7)
    assert transport.index == 3


def test_every_move_publishes_the_full_state(transport, log):
    transport.step_forward()
    transport.step_forward()
    transport.step_backward()
    assert transport.moves == [0, 1, 2, 1]
    assert transport.current == log[1]


def test_forward_then_back_restores_the_same_state(transport, log):
    for i in range(1, len(log) - 1):
        transport.seek(i)
        before = transport.current
        transport.step_forward()
        transport.step_backward()
        assert transport.current == before


def test_stepping_never_touches_the_log(transport, log):
    snapshot = list(log)
    transport.seek(5)
    transport.step_backward()
    transport.hold_backward(now=0.0)
    transport.tick(10.0)
    assert list(log) == snapshot


def test_hold_steps_once_then_repeats_after_debounce(transport, clock):
    assert transport.hold_forward(now=0.0)
    assert transport.index == 1
    assert transport.hold.phase is HoldPhase.DEBOUNCING

    assert transport.tick(0.2) == 0
    assert transport.tick(0.25) == 0             # debounce over, first repeat at 0.5
    assert transport.hold.phase is HoldPhase.REPEATING
    assert transport.tick(0.5) == 1
    assert transport.index == 2
    assert transport.tick(1.0) == 2              # 0.75 and 1.0
    assert transport.index == 4


def test_release_stops_repeating_and_is_idempotent(transport):
    transport.hold_forward(now=0.0)
    assert transport.release_hold()
    assert not transport.release_hold()
    assert transport.tick(5.0) == 0
    assert transport.index == 1


def test_release_during_debounce_cancels_auto_repeat(transport):
    transport.hold_forward(now=0.0)
    transport.tick(0.1)
    transport.release_hold()
    assert transport.tick(1.0) == 0
    assert transport.index == 1


def test_hold_stops_at_the_end(transport, log):
    transport.seek(4)
    transport.hold_forward(now=0.0)
    assert transport.index == 5
    assert transport.tick(0.5) == 1
    assert transport.index == len(log) - 1
    assert not transport.hold.active
    assert transport.tick(5.0) == 0


def test_hold_stops_at_the_start(transport):
    transport.seek(3)
    transport.hold_backward(now=0.0)
    transport.tick(10.0)
    assert transport.index == 0
    assert not transport.hold.active


def test_hold_at_a_bound_does_nothing(transport, log):
    assert not transport.hold_backward(now=0.0)
    assert not transport.hold.active
    transport.seek(len(log) - 1)
    assert not transport.hold_forward(now=0.0)
    assert not transport.hold.active


def test_a_new_press_replaces_the_old_hold(transport):
    transport.seek(3)
    transport.hold_forward(now=0.0)
    transport.hold_backward(now=0.1)
    assert transport.hold.direction == -1
    assert transport.index == 3


def test_hold_repeater_on_its_own():
    steps = []
    rep = HoldRepeater(debounce=0.25)
    rep.press(1, now=0.0, interval=0.5)
    assert rep.seconds_until_due(0.0) == 0.25
    rep.tick(0.25, lambda d: steps.append(d) or True)
    assert rep.seconds_until_due(0.25) == 0.5
    rep.tick(1.25, lambda d: steps.append(d) or True)
    assert steps == [1, 1]
    rep.tick(1.75, lambda d: False)
    assert rep.phase is HoldPhase.IDLE
    assert rep.seconds_until_due(2.0) is None
