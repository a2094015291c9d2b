"""
Hand Pose Pipeline

Runs one tracker frame through the full processing chain:

    decode -> skeleton update -> scale normalization -> pose classification
    -> render snapshot

Usage:
    python -m handpose.pipeline --config configs/default.yaml --input frames.jsonl
"""

import argparse
import queue
import threading
from pathlib import Path
from typing import Any, Iterable, Optional
from dataclasses import dataclass

from .exceptions import FrameDecodeError
from .hand.frame_decoder import LandmarkFrameDecoder, Payload
from .hand.normalizer import ScaleNormalizer
from .hand.skeleton import SkeletonStore
from .pose.classifier import PoseClassifier
from .render.publisher import RenderPublisher, RenderSnapshot
from .utils.config import load_config, Config
from .utils.logging_utils import setup_logging, get_logger, ProgressLogger

logger = get_logger(__name__)


@dataclass
class PipelineStats:
    """Frame counters for one session."""
    frames_received: int = 0
    frames_processed: int = 0
    frames_dropped: int = 0  # malformed payloads
    frames_overflowed: int = 0  # discarded by a full worker queue


class FramePipeline:
    """
    End-to-end processing of tracker frames into classified hands.

    Stages:
    1. Frame Decoding - Validate payload shape, extract joints and handedness
    2. Skeleton Update - Overwrite delivered joints, set chirality
    3. Scale Normalization - Recompute per-hand normalization factor
    4. Pose Classification - Re-run rules for both hands
    5. Publishing - Map to world space and notify render subscribers

    The five stages run under one lock, so frames never interleave.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        store: Optional[SkeletonStore] = None,
        publisher: Optional[RenderPublisher] = None
    ):
        """
        Args:
            config: Configuration object (defaults when omitted)
            store: Skeleton store to write into (created when omitted)
            publisher: Render publisher (created when omitted)
        """
        self.config = config or Config()
        hand_cfg = self.config.hand

        self.decoder = LandmarkFrameDecoder(
            mirror=hand_cfg.mirror_handedness,
            max_hands=hand_cfg.max_hands,
            num_joints=hand_cfg.num_landmarks
        )
        self.store = store or SkeletonStore(
            close_threshold=hand_cfg.close_threshold,
            apart_threshold=hand_cfg.apart_threshold
        )
        self.normalizer = ScaleNormalizer(extent_ratio=hand_cfg.extent_ratio)
        self.classifier = PoseClassifier()
        self.publisher = publisher or RenderPublisher()

        self.stats = PipelineStats()
        self._frame_idx = 0
        self._lock = threading.Lock()

        logger.info("Pipeline initialized")

    def process(self, payload: Payload) -> Optional[RenderSnapshot]:
        """
        Process one frame payload.

        Malformed payloads are dropped and leave the store unchanged.

        Args:
            payload: Raw frame (JSON bytes/str or parsed object)

        Returns:
            Published RenderSnapshot, or None if the frame was dropped
        """
        with self._lock:
            self.stats.frames_received += 1

            try:
                frame = self.decoder.decode(payload)
            except FrameDecodeError as exc:
                self.stats.frames_dropped += 1
                logger.warning(f"Dropping frame: {exc}")
                return None

            self.store.apply_frame(frame)

            for slot, hand in self.store.items():
                self.normalizer.update(hand)
                self.classifier.update(hand)

            frame_idx = self._frame_idx
            self._frame_idx += 1
            self.stats.frames_processed += 1

            self._log_poses(frame_idx)

            return self.publisher.publish(self.store, frame_idx)

    def process_many(self, payloads: Iterable[Payload]) -> int:
        """Process payloads in order and return how many were accepted."""
        accepted = 0
        for payload in payloads:
            if self.process(payload) is not None:
                accepted += 1
        return accepted

    def reset(self):
        """Reset the skeleton store to placeholder hands."""
        with self._lock:
            self.store.reset()
            self._frame_idx = 0

    def _log_poses(self, frame_idx: int):
        """Emit the per-frame pose and chirality of both hands."""
        parts = [
            f"{slot.value}={hand.pose.value} ({hand.chirality})"
            for slot, hand in self.store.items()
        ]
        message = f"Frame {frame_idx}: " + ", ".join(parts)
        if self.config.pipeline.log_poses:
            logger.info(message)
        else:
            logger.debug(message)


class FrameWorker:
    """
    Single-consumer frame queue.

    The transport side calls submit(); one background thread drains the
    queue and runs each payload through the pipeline to completion before
    taking the next. With a bounded queue the oldest pending frame is
    discarded when a new one arrives.
    """

    def __init__(
        self,
        pipeline: FramePipeline,
        max_queue_size: Optional[int] = None,
        poll_interval: float = 0.1
    ):
        """
        Args:
            pipeline: Pipeline that processes each frame
            max_queue_size: Queue bound (0 = unbounded); defaults to config
            poll_interval: Seconds between stop checks while idle
        """
        if max_queue_size is None:
            max_queue_size = pipeline.config.pipeline.max_queue_size

        self.pipeline = pipeline
        self.poll_interval = poll_interval
        self._queue: 'queue.Queue[Any]' = queue.Queue(maxsize=max_queue_size)
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def start(self):
        """Start the draining thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Frame worker is already running")

        self._running.set()
        self._thread = threading.Thread(
            target=self._run,
            name='handpose-frame-worker',
            daemon=True
        )
        self._thread.start()
        logger.debug("Frame worker started")

    def submit(self, payload: Payload):
        """
        Enqueue one raw payload.

        Raises:
            RuntimeError: If the worker is not running
        """
        if not self._running.is_set():
            raise RuntimeError("Frame worker is not running")

        try:
            self._queue.put_nowait(payload)
            return
        except queue.Full:
            pass

        try:
            self._queue.get_nowait()
            self._queue.task_done()
            self.pipeline.stats.frames_overflowed += 1
            logger.debug("Frame queue full, discarded oldest frame")
        except queue.Empty:
            pass

        try:
            self._queue.put_nowait(payload)
        except queue.Full:
            self.pipeline.stats.frames_overflowed += 1
            logger.debug("Frame queue full, discarded newest frame")

    def join(self):
        """Block until every submitted frame has been processed."""
        self._queue.join()

    def stop(self, timeout: Optional[float] = None) -> int:
        """
        Stop draining and discard pending frames.

        Args:
            timeout: Seconds to wait for the thread to exit

        Returns:
            Number of pending frames discarded
        """
        self._running.clear()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

        discarded = 0
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
            self._queue.task_done()
            discarded += 1

        if discarded:
            logger.info(f"Frame worker stopped, discarded {discarded} pending frame(s)")
        return discarded

    def __enter__(self) -> 'FrameWorker':
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()

    def _run(self):
        while self._running.is_set():
            try:
                payload = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

            try:
                self.pipeline.process(payload)
            except Exception:
                logger.exception("Unexpected error while processing frame")
            finally:
                self._queue.task_done()


def read_frames(path: str) -> list:
    """Read one raw payload per non-empty line of a JSON-lines file."""
    with open(path, 'r') as f:
        return [line for line in (raw.strip() for raw in f) if line]


def main():
    """Replay a recorded JSON-lines frame file through the pipeline."""
    parser = argparse.ArgumentParser(
        description="Hand Pose Pipeline"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/default.yaml",
        help="Configuration file"
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="JSON-lines file with one frame payload per line"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    config = load_config(args.config) if Path(args.config).exists() else Config()
    level = "DEBUG" if args.verbose else config.logging.level
    setup_logging(level=level, log_file=config.logging.log_file)

    logger.info("Hand Pose Pipeline")
    logger.info(f"Config: {args.config}")

    frames = read_frames(args.input)
    pipeline = FramePipeline(config)

    progress = ProgressLogger(__name__, total=len(frames))
    progress.start()
    for payload in frames:
        snapshot = pipeline.process(payload)
        progress.update(dropped=int(snapshot is None))
    progress.finish()

    stats = pipeline.stats
    logger.info(
        f"Processed {stats.frames_processed} frames, "
        f"dropped {stats.frames_dropped} malformed"
    )


if __name__ == "__main__":
    main()
