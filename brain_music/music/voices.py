"""
Voice lifecycle management

This module owns every transient voice between the moment a generation cycle
creates it and the moment it stops. Voices live in a slot table; each new cycle
force-stops the previous cycle's voices before creating its own, so the active
set never grows beyond one cycle. Start and expiry are driven by callbacks from
an audio clock, and those callbacks take the same lock as the cycle itself.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, Iterable, List, Optional

from ..core.data_types import NoteEvent, Voice, VoiceHandle, VoiceState


class AudioSink:
    """
    Renders voices; the default implementation renders nothing

    Subclasses override start_voice/stop_voice to drive a real synthesizer.
    """

    def start_voice(self, voice: Voice) -> None:
        pass

    def stop_voice(self, voice: Voice) -> None:
        pass

    def close(self) -> None:
        pass


class ManualClock:
    """
    Deterministic audio clock

    Time only moves when advance() is called; due callbacks run in time order,
    outside the clock's own lock.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue = []
        self._cancelled = set()
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def now(self) -> float:
        """Current simulated time (s)"""
        return self._now

    def call_at(self, when: float, callback: Callable[[], None]) -> int:
        """Schedule callback at simulated time when; returns a cancel token"""
        with self._lock:
            token = next(self._counter)
            heapq.heappush(self._queue, (when, token, callback))
            return token

    def cancel(self, token: int) -> None:
        """Drop a pending callback; unknown or fired tokens are ignored"""
        with self._lock:
            if any(entry[1] == token for entry in self._queue):
                self._cancelled.add(token)

    def pending_count(self) -> int:
        """Number of callbacks still waiting to fire"""
        with self._lock:
            return len(self._queue) - len(self._cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback that falls due"""
        target = self._now + seconds
        while True:
            with self._lock:
                if not self._queue or self._queue[0][0] > target:
                    break
                when, token, callback = heapq.heappop(self._queue)
                if token in self._cancelled:
                    self._cancelled.discard(token)
                    continue
                self._now = max(self._now, when)
            callback()
        self._now = target


class RealtimeClock:
    """Wall-clock audio clock backed by threading.Timer"""

    def now(self) -> float:
        """Monotonic wall-clock time (s)"""
        return time.monotonic()

    def call_at(self, when: float, callback: Callable[[], None]) -> threading.Timer:
        """Run callback on a daemon timer thread at monotonic time when"""
        timer = threading.Timer(max(0.0, when - self.now()), callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, token: threading.Timer) -> None:
        """Cancel a timer that has not fired yet"""
        token.cancel()


class VoiceManager:
    """
    Track active voices and enforce clear-before-create replacement

    Voices sit in a slot table indexed by slot number. A handle carries the
    slot and the generation cycle that created it; once the voice is released
    the handle no longer resolves, even if the slot has been reused.
    """

    def __init__(self, clock=None, sink: Optional[AudioSink] = None):
        self.clock = clock if clock is not None else RealtimeClock()
        self.sink = sink if sink is not None else AudioSink()
        self.cycle = 0
        self.is_closed = False
        self.released_count = 0
        self._slots: List[Optional[Voice]] = []
        self._free: List[int] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start_cycle(self, events: Iterable[NoteEvent]) -> List[VoiceHandle]:
        """
        Replace the active voice set with voices for the given events

        Args:
            events: Note events of the new generation cycle

        Returns:
            List[VoiceHandle]: Handles of the new voices
        """
        events = list(events)
        with self._lock:
            if self.is_closed:
                logging.warning("Voice manager is shut down, ignoring generation cycle")
                return []

            cleared = self._clear_locked()
            self.cycle += 1
            now = self.clock.now()

            handles = []
            for event in events:
                voice = self._create_locked(event, now)
                handles.append(voice.handle)

            logging.debug(f"Cycle {self.cycle}: cleared {cleared}, created {len(handles)} voices")
            return handles

    def stop(self, handle: VoiceHandle) -> bool:
        """
        Force-stop a single voice

        Returns:
            bool: True if a live voice was stopped, False for stale handles
        """
        with self._lock:
            voice = self._resolve(handle)
            if voice is None:
                return False
            self._release_locked(voice)
            return True

    def clear(self) -> int:
        """Force-stop every active voice; returns how many were released"""
        with self._lock:
            return self._clear_locked()

    def shutdown(self):
        """Release every voice and refuse further cycles"""
        with self._lock:
            released = self._clear_locked()
            self.is_closed = True
        logging.info(f"Voice manager shut down ({released} voices released)")

    def get(self, handle: VoiceHandle) -> Optional[Voice]:
        with self._lock:
            return self._resolve(handle)

    def active_voices(self) -> List[Voice]:
        with self._lock:
            return [voice for voice in self._slots if voice is not None]

    def active_count(self) -> int:
        with self._lock:
            return sum(1 for voice in self._slots if voice is not None)

    # ------------------------------------------------------------------
    # Clock callbacks
    # ------------------------------------------------------------------

    def _on_voice_start(self, handle: VoiceHandle):
        with self._lock:
            voice = self._resolve(handle)
            if voice is not None and voice.state is VoiceState.CREATED:
                self._play_locked(voice)

    def _on_voice_expired(self, handle: VoiceHandle):
        with self._lock:
            voice = self._resolve(handle)
            if voice is not None:
                self._release_locked(voice)

    # ------------------------------------------------------------------
    # Internals, caller holds self._lock
    # ------------------------------------------------------------------

    def _resolve(self, handle: VoiceHandle) -> Optional[Voice]:
        if not 0 <= handle.slot < len(self._slots):
            return None
        voice = self._slots[handle.slot]
        if voice is None or voice.handle != handle:
            return None
        return voice

    def _create_locked(self, event: NoteEvent, now: float) -> Voice:
        if self._free:
            slot = self._free.pop()
        else:
            slot = len(self._slots)
            self._slots.append(None)

        start_time = now + max(0.0, event.offset)
        voice = Voice(
            handle=VoiceHandle(slot=slot, cycle=self.cycle),
            frequency=event.frequency,
            waveform=event.waveform,
            gain=event.gain,
            start_time=start_time,
            stop_time=start_time + event.duration,
        )
        self._slots[slot] = voice

        handle = voice.handle
        if start_time <= now:
            self._play_locked(voice)
        else:
            voice.timers.append(self.clock.call_at(start_time, lambda: self._on_voice_start(handle)))
        voice.timers.append(self.clock.call_at(voice.stop_time, lambda: self._on_voice_expired(handle)))
        return voice

    def _play_locked(self, voice: Voice):
        voice.state = VoiceState.PLAYING
        try:
            self.sink.start_voice(voice)
        except Exception as e:
            logging.error(f"Audio sink failed to start voice {voice.handle}: {e}")

    def _release_locked(self, voice: Voice):
        was_playing = voice.state is VoiceState.PLAYING
        for token in voice.timers:
            self.clock.cancel(token)
        voice.timers.clear()
        voice.state = VoiceState.STOPPED
        self._slots[voice.handle.slot] = None
        self._free.append(voice.handle.slot)
        self.released_count += 1

        if was_playing:
            try:
                self.sink.stop_voice(voice)
            except Exception as e:
                logging.error(f"Audio sink failed to stop voice {voice.handle}: {e}")

    def _clear_locked(self) -> int:
        live = [voice for voice in self._slots if voice is not None]
        for voice in live:
            self._release_locked(voice)
        return len(live)
