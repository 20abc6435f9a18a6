import pytest
from PySide6.QtTest import QTest

from shockglobe.config import DEFAULT_CONFIG
from shockglobe.controller.animation import AnimationClock, AnimationDriver
from shockglobe.controller.interaction import InteractionController


@pytest.fixture()
def driver(qapp, fake_scheduler):
    renders = []
    interaction = InteractionController(scheduler=fake_scheduler)
    drv = AnimationDriver(interaction, lambda: renders.append(1))
    drv.renders = renders
    yield drv
    drv.stop()


def test_clock_advances_by_fixed_step():
    clock = AnimationClock(step=0.016)
    for _ in range(10):
        clock.advance()
    assert clock.value == pytest.approx(0.16)


def test_ticks_advance_clock_and_yaw(driver):
    n = 25
    for _ in range(n):
        driver.tick()

    assert driver.clock.value == pytest.approx(n * DEFAULT_CONFIG.clock_step)
    assert driver.interaction.rotation.yaw == pytest.approx(
        DEFAULT_CONFIG.initial_yaw + n * DEFAULT_CONFIG.auto_rotate_step
    )
    assert driver.frame_count == n
    assert len(driver.renders) == n


def test_no_auto_rotate_while_dragging(driver):
    driver.interaction.pointer_down(0.0, 0.0)
    yaw = driver.interaction.rotation.yaw
    for _ in range(10):
        driver.tick()

    assert driver.interaction.rotation.yaw == yaw
    # the clock keeps running
    assert driver.clock.value == pytest.approx(10 * DEFAULT_CONFIG.clock_step)


def test_frame_signal_carries_clock(driver):
    seen = []
    driver.frame.connect(seen.append)
    driver.tick()
    driver.tick()
    assert seen == pytest.approx([0.016, 0.032])


def test_timer_drives_frames_until_stopped(driver):
    driver.start()
    assert driver.is_running
    QTest.qWait(200)
    assert driver.frame_count > 0

    driver.stop()
    assert not driver.is_running
    frames = driver.frame_count
    QTest.qWait(150)
    assert driver.frame_count == frames


def test_stop_is_idempotent(driver):
    driver.stop()
    driver.start()
    driver.stop()
    driver.stop()
    assert not driver.is_running
