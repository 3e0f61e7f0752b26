import pytest
from roots_engine.core.clock import Clock

def test_tick_returns_seconds():
    clock = Clock(target_fps=60)
    clock._clock.tick.return_value = 16

    assert clock.tick() == pytest.approx(0.016)
    clock._clock.tick.assert_called_with(60)

def test_tick_never_negative_and_clamped():
    clock = Clock(max_delta=0.25)

    clock._clock.tick.return_value = -5
    assert clock.tick() == 0.0

    clock._clock.tick.return_value = 2000
    assert clock.tick() == 0.25

def test_elapsed_accumulates():
    clock = Clock()
    clock._clock.tick.return_value = 100
    clock.tick()
    clock.tick()
    assert clock.elapsed == pytest.approx(0.2)
