import pytest

from niri.animation import (
    Animation,
    animation_slowdown,
    ease_out_cubic,
    monotonic_time_ns,
    set_animation_slowdown,
)


@pytest.fixture(autouse=True)
def restore_slowdown():
    saved = animation_slowdown()
    try:
        yield
    finally:
        set_animation_slowdown(saved)


def test_ease_out_cubic_endpoints():
    assert ease_out_cubic(0.0) == pytest.approx(0.0)
    assert ease_out_cubic(1.0) == pytest.approx(1.0)


def test_ease_out_cubic_midpoint():
    assert ease_out_cubic(0.5) == pytest.approx(0.875)


def test_ease_out_cubic_is_increasing():
    samples = [ease_out_cubic(i / 20) for i in range(21)]
    assert all(a < b for a, b in zip(samples, samples[1:]))


def test_monotonic_time_does_not_go_backwards():
    first = monotonic_time_ns()
    second = monotonic_time_ns()
    assert second >= first


def test_value_at_start_and_end():
    anim = Animation(3.0, 7.0, 1000, now_ns=500)
    assert anim.value() == pytest.approx(3.0)
    assert not anim.is_done()
    anim.set_current_time(1500)
    assert anim.is_done()
    assert anim.value() == pytest.approx(7.0)


def test_value_clamped_past_end():
    anim = Animation(0.0, 10.0, 1000, now_ns=0)
    anim.set_current_time(50_000)
    assert anim.value() == pytest.approx(10.0)


def test_value_between_bounds_midway():
    anim = Animation(1.0, 0.0, 1000, now_ns=0)
    anim.set_current_time(300)
    assert 0.0 < anim.value() < 1.0
    assert anim.to_value == 0.0
    assert anim.from_value == 1.0


def test_slowdown_stretches_duration():
    factor = 2.0
    duration = 100
    set_animation_slowdown(factor)
    assert animation_slowdown() == factor
    anim = Animation(0.0, 1.0, duration, now_ns=0)
    anim.set_current_time(duration)
    assert not anim.is_done()
    anim.set_current_time(int(duration * factor))
    assert anim.is_done()


def test_zero_duration_is_done_immediately():
    anim = Animation(2.0, 5.0, 0, now_ns=10)
    assert anim.is_done()
    assert anim.value() == pytest.approx(5.0)


def test_default_start_time_uses_clock():
    before = monotonic_time_ns()
    anim = Animation(0.0, 1.0, 1000)
    after = monotonic_time_ns()
    assert before <= anim.start_time_ns <= after