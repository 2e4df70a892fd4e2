"""
Main CLI entry point for Brain Music

This module provides the command-line interface and the periodic driver loop
that feeds sample windows through the pipeline.
"""

import argparse
import logging
import signal
import sys
import time
from threading import Event

import numpy as np

from ..core.config import (
    SAMPLING_RATE_HZ, WINDOW_SIZE, TICK_INTERVAL_MS, INTENSITY_SCALE, SMOOTHING_HALF_WIDTH,
    MASTER_GAIN, UDP_HOST, UDP_PORT, STATUS_INTERVAL_SEC, N_CHANNELS,
)
from ..core.data_types import MentalState
from ..core.errors import BrainMusicError
from ..acquisition.sources import SyntheticEEGSource, ReplaySource
from ..communication.note_sender import NoteEventSender
from ..music.voices import AudioSink, ManualClock, RealtimeClock
from ..pipeline import BrainMusicPipeline, TickResult

STATE_LABELS = {
    MentalState.FOCUSED: "Focused -> Techno Beat",
    MentalState.RELAXED: "Relaxed -> Ambient Waves",
    MentalState.DROWSY: "Drowsy -> Deep Bass Drone",
    MentalState.MEDITATIVE: "Meditative -> Ethereal Sounds",
    MentalState.EXCITED: "Hyper-focused -> Experimental",
}


def format_status(result: TickResult, active_voices: int) -> str:
    """One status line for a tick"""
    c = result.classification
    if c is None:
        return f"State: {'-':>10} | Voices: {active_voices}"
    flag = " (held)" if result.degenerate else ""
    return (f"State: {c.state.value:>10} | Emotion: {c.emotion.value:>9} | "
            f"Conf: {c.confidence:5.1f} | Voices: {active_voices} | {STATE_LABELS[c.state]}{flag}")


def run_realtime_processing(pipeline: BrainMusicPipeline, source, window_size: int,
                            interval_ms: float) -> None:
    """
    Main real-time processing loop

    Pulls one window per tick, runs it through the pipeline and keeps a fixed
    cadence until interrupted or the source runs dry.
    """
    logging.info("Starting real-time processing...")

    last_status_time = 0.0
    interval = interval_ms / 1000.0

    # Graceful shutdown handler
    shutdown_event = Event()
    def signal_handler(signum, frame):
        logging.info("Shutdown signal received")
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        logging.info("Real-time processing started. Press Ctrl+C to stop.")

        while not shutdown_event.is_set():
            tick_start = time.time()

            raw_data = source.get_data(window_size)
            if raw_data is None:
                logging.info("Signal source exhausted")
                break

            result = pipeline.process(raw_data, tick_start)

            if tick_start - last_status_time > STATUS_INTERVAL_SEC:
                print(format_status(result, pipeline.voice_manager.active_count()))
                last_status_time = tick_start

            # Keep a fixed cadence
            shutdown_event.wait(max(0.0, interval - (time.time() - tick_start)))

    except BrainMusicError as e:
        logging.error(f"Processing error: {e}")
    finally:
        pipeline.shutdown()
        logging.info("Real-time processing stopped")


def run_demo(pipeline: BrainMusicPipeline, source, window_size: int, ticks: int,
             interval_ms: float) -> None:
    """Run a fixed number of ticks on a manual clock and print every tick"""
    clock = pipeline.voice_manager.clock
    interval = interval_ms / 1000.0
    try:
        for i in range(ticks):
            raw_data = source.get_data(window_size)
            if raw_data is None:
                break
            result = pipeline.process(raw_data, clock.now())
            print(f"[{i:4d}] {format_status(result, pipeline.voice_manager.active_count())}")
            clock.advance(interval)
    finally:
        pipeline.shutdown()


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="Brain Music - Real-time EEG to music mapping",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Stream synthetic EEG to a synthesizer listening on UDP
  python -m brain_music --run

  # Replay a recording saved with numpy.save (channels x samples)
  python -m brain_music --run --replay session.npy --fs 256

  # Print 50 ticks without sending anything
  python -m brain_music --demo-ticks 50 --no-sink --seed 1
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument("--run", action="store_true",
                           help="Run real-time processing")
    mode_group.add_argument("--demo-ticks", type=int, metavar="N",
                           help="Run N ticks on a simulated clock and exit")

    # Data source options
    parser.add_argument("--replay", metavar="FILE",
                       help="Replay a .npy recording instead of synthetic data")
    parser.add_argument("--no-loop", action="store_true",
                       help="Stop when the replayed recording ends")
    parser.add_argument("--channels", type=int, default=N_CHANNELS,
                       help=f"Synthetic channel count (default: {N_CHANNELS})")
    parser.add_argument("--seed", type=int,
                       help="Seed for synthetic data and note selection")

    # Processing parameters
    parser.add_argument("--fs", type=float, default=SAMPLING_RATE_HZ,
                       help=f"Sampling frequency (default: {SAMPLING_RATE_HZ})")
    parser.add_argument("--window-size", type=int, default=WINDOW_SIZE,
                       help=f"Samples per window, power of two (default: {WINDOW_SIZE})")
    parser.add_argument("--interval-ms", type=float, default=TICK_INTERVAL_MS,
                       help=f"Tick cadence in ms (default: {TICK_INTERVAL_MS})")
    parser.add_argument("--smooth", type=int, default=SMOOTHING_HALF_WIDTH,
                       help=f"Moving-average half width, 0 disables (default: {SMOOTHING_HALF_WIDTH})")
    parser.add_argument("--intensity-scale", type=float, default=INTENSITY_SCALE,
                       help=f"Intensity multiplier (default: {INTENSITY_SCALE})")

    # Communication options
    parser.add_argument("--udp-host", default=UDP_HOST,
                       help=f"Synthesizer UDP host (default: {UDP_HOST})")
    parser.add_argument("--udp-port", type=int, default=UDP_PORT,
                       help=f"Synthesizer UDP port (default: {UDP_PORT})")
    parser.add_argument("--master-gain", type=float, default=MASTER_GAIN,
                       help=f"Master gain applied to sent voices (default: {MASTER_GAIN})")
    parser.add_argument("--no-sink", action="store_true",
                       help="Do not send voices anywhere")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Enable verbose logging")

    return parser


def main(argv=None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    print("="*60)
    print("Brain Music - Real-time EEG to Music")
    print("="*60)

    rng = np.random.default_rng(args.seed)

    try:
        if args.replay:
            source = ReplaySource.from_file(args.replay, fs=args.fs, loop=not args.no_loop)
        else:
            logging.info("Using synthetic EEG data")
            source = SyntheticEEGSource(args.fs, args.channels, rng=rng,
                                        hop_sec=args.interval_ms / 1000.0)

        sink = AudioSink() if args.no_sink else NoteEventSender(args.udp_host, args.udp_port, args.master_gain)
        clock = ManualClock() if args.demo_ticks is not None else RealtimeClock()

        try:
            pipeline = BrainMusicPipeline.build(
                fs=args.fs,
                window_size=args.window_size,
                clock=clock,
                sink=sink,
                rng=rng,
                smoothing_half_width=args.smooth,
                intensity_scale=args.intensity_scale,
            )
        except BrainMusicError:
            sink.close()
            raise

        if args.demo_ticks is not None:
            run_demo(pipeline, source, args.window_size, args.demo_ticks, args.interval_ms)
        else:
            run_realtime_processing(pipeline, source, args.window_size, args.interval_ms)
        return 0

    except BrainMusicError as e:
        logging.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    except (OSError, ValueError) as e:
        logging.error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
