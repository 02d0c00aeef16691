"""
Connect to the streaming backend and report metrics until interrupted.

Decoded frames are not rendered here, the display sink just keeps count of
what arrives per stream and logs it once per second.

CTRL-C disconnects from the server and exits cleanly.
"""
import argparse
from collections import Counter
import logging
import signal
import threading
import types
from typing import Optional

from svs_client import Settings
from svs_control import Session, State
from svs_metrics import PsutilSampler


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Adaptive multi-stream video client.")
    parser.add_argument("--config", default="settings.toml",
                        help="Path to the TOML config file (default: settings.toml)")
    parser.add_argument("--url", default=None,
                        help="Backend URL, overrides the config file")
    parser.add_argument("--log", default=None,
                        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). (default: ERROR)")

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    settings = Settings(args.config)

    level_name = (args.log or settings.get("log")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {level_name}")

    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s: %(message)s"
    )

    resources = settings.get("resources")
    metrics = settings.get("metrics")

    frames: Counter[int] = Counter()
    frames_lock = threading.Lock()

    def display(stream: int, frame: bytes) -> None:
        with frames_lock:
            frames[stream] += 1

    session = Session(
        args.url or settings.get("backend_url"),
        settings.stream_settings(),
        settings.slos(),
        PsutilSampler(resources["max_cpu_usage"], resources["max_memory_usage"]),
        display_sink=display,
        batch_size=metrics["batch_size"],
        metrics_window=metrics["window"],
        disconnect_timeout=settings.get("session")["disconnect_timeout"],
    )

    done = threading.Event()
    for state in (State.DISCONNECTED, State.CONNECTION_FAILED):
        session.on(state, done.set)

    session.on(State.CONNECTED, lambda: logging.info("Connected"))
    session.on(State.CONNECTION_FAILED, lambda: logging.error("Connection failed"))

    def signal_handler(sig: int, frame: Optional[types.FrameType]) -> None:
        logging.info("Shutting down...")
        if session.state == State.CONNECTED:
            session.disconnect()
        else:
            done.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    session.start()
    session.connect()

    while not done.wait(1):
        with frames_lock:
            counts = dict(frames)
            frames.clear()

        if counts:
            logging.info(f"Frames per stream: {dict(sorted(counts.items()))}")

    session.stop()


if __name__ == "__main__":
    main()
