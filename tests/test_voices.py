import threading
import time

import pytest

from brain_music.core.data_types import NoteEvent, VoiceState, Waveform
from brain_music.music.patterns import generate
from brain_music.music.voices import AudioSink, ManualClock, RealtimeClock, VoiceManager


def note(duration: float = 1.0, offset: float = 0.0, frequency: float = 440.0) -> NoteEvent:
    return NoteEvent(frequency=frequency, waveform=Waveform.SINE, gain=0.1, duration=duration, offset=offset)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def manager(clock, sink) -> VoiceManager:
    return VoiceManager(clock, sink)


def test_manual_clock_fires_in_time_order(clock) -> None:
    fired = []
    clock.call_at(0.3, lambda: fired.append("c"))
    clock.call_at(0.1, lambda: fired.append("a"))
    token = clock.call_at(0.2, lambda: fired.append("b"))
    clock.cancel(token)
    clock.advance(0.5)
    assert fired == ["a", "c"]
    assert clock.now() == pytest.approx(0.5)
    assert clock.pending_count() == 0


def test_second_cycle_replaces_first(manager, sink) -> None:
    manager.start_cycle(generate("meditative", 1.0))
    assert manager.active_count() == 4
    handles = manager.start_cycle(generate("drowsy", 1.0))
    assert manager.active_count() == 1
    assert len(handles) == 1
    assert len(sink.stopped) == 4


def test_voices_expire_naturally(manager, clock, sink) -> None:
    (handle,) = manager.start_cycle(generate("drowsy", 1.0))
    assert manager.get(handle).state is VoiceState.PLAYING
    clock.advance(0.4)
    assert manager.active_count() == 1
    clock.advance(0.2)
    assert manager.active_count() == 0
    assert manager.get(handle) is None
    assert sink.stopped == [handle]
    assert clock.pending_count() == 0


def test_staggered_voices_start_on_schedule(manager, clock, sink) -> None:
    handles = manager.start_cycle(generate("relaxed", 1.0))
    states = [manager.get(h).state for h in handles]
    assert states == [VoiceState.PLAYING] + [VoiceState.CREATED] * 3
    assert sink.started == handles[:1]

    clock.advance(0.1)
    assert sink.started == handles[:2]
    clock.advance(0.25)
    assert sink.started == handles
    assert all(manager.get(h).state is VoiceState.PLAYING for h in handles)


def test_forced_stop_is_idempotent(manager, sink) -> None:
    (handle,) = manager.start_cycle([note()])
    assert manager.stop(handle) is True
    assert manager.stop(handle) is False
    assert sink.stopped == [handle]
    assert manager.active_count() == 0


def test_stop_after_natural_expiry_is_a_no_op(manager, clock, sink) -> None:
    (handle,) = manager.start_cycle([note(duration=0.2)])
    clock.advance(1.0)
    assert manager.stop(handle) is False
    assert sink.stopped == [handle]


def test_stale_handle_does_not_reach_reused_slot(manager) -> None:
    (old,) = manager.start_cycle([note()])
    (new,) = manager.start_cycle([note(frequency=220.0)])
    assert new.slot == old.slot
    assert new.cycle == old.cycle + 1
    assert manager.get(old) is None
    assert manager.stop(old) is False
    assert manager.get(new).frequency == 220.0


def test_unstarted_voice_is_released_without_sink_stop(manager, clock, sink) -> None:
    manager.start_cycle([note(offset=0.5)])
    assert manager.clear() == 1
    assert sink.started == []
    assert sink.stopped == []
    assert clock.pending_count() == 0


def test_callbacks_from_cleared_cycle_are_ignored(manager, clock, sink) -> None:
    manager.start_cycle([note(duration=0.3)])
    (current,) = manager.start_cycle([note(duration=1.0)])
    clock.advance(0.5)
    assert manager.active_count() == 1
    assert manager.get(current).state is VoiceState.PLAYING


def test_shutdown_releases_everything(manager, sink) -> None:
    manager.start_cycle(generate("meditative", 1.0))
    manager.shutdown()
    assert manager.active_count() == 0
    assert manager.is_closed
    assert manager.start_cycle([note()]) == []
    assert manager.released_count == 4


def test_sink_failure_still_releases_voice(clock) -> None:
    class BrokenSink(AudioSink):
        def stop_voice(self, voice) -> None:
            raise RuntimeError("device gone")

    manager = VoiceManager(clock, BrokenSink())
    manager.start_cycle([note(duration=0.1)])
    clock.advance(0.2)
    assert manager.active_count() == 0


def test_many_cycles_do_not_accumulate(manager, clock) -> None:
    for i in range(100):
        manager.start_cycle(generate("relaxed" if i % 2 else "meditative", 1.0))
        clock.advance(0.05)
        assert manager.active_count() == 4
    assert len(manager._slots) == 4


def test_realtime_clock_expires_voices(sink) -> None:
    manager = VoiceManager(RealtimeClock(), sink)
    manager.start_cycle([note(duration=0.05), note(duration=0.05, offset=0.02)])
    deadline = time.monotonic() + 3.0
    while manager.active_count() and time.monotonic() < deadline:
        time.sleep(0.01)
    assert manager.active_count() == 0
    assert len(sink.started) == 2
    assert len(sink.stopped) == 2


def test_concurrent_cycles_and_expiry_stay_bounded(sink) -> None:
    manager = VoiceManager(RealtimeClock(), sink)
    errors = []

    def driver():
        try:
            for _ in range(50):
                manager.start_cycle([note(duration=0.005), note(duration=0.005, offset=0.002)])
                assert manager.active_count() <= 2
                time.sleep(0.002)
        except AssertionError as e:
            errors.append(e)

    thread = threading.Thread(target=driver)
    thread.start()
    thread.join(timeout=10)
    manager.shutdown()
    assert errors == []
    assert manager.active_count() == 0
