"""Concurrent frame production with strictly ordered reassembly.

Every frame of an animation is an independent render. ``FramePipeline`` hands
one ``FrameJob`` per frame to a fixed pool of worker threads through a bounded
job queue and reads the ``FrameResult`` messages they send back on a second
queue. A single collector owns the result slots and places each raster by its
frame index, so the finished ``AnimationSequence`` is ordered no matter which
worker finishes first.

The TensorFlow kernels release the GIL while they run, so threads give real
parallelism for the renders used in :mod:`ifs.engine`.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Callable, Iterator, Optional, Sequence

import numpy as np

from .errors import InvalidFrameCount, InvalidWorkerCount, RenderCancelled, RenderPanic, RenderTimeout
from .paths import ParameterPath, get_path

logger = logging.getLogger(__name__)

# Display time of each animation frame, in hundredths of a second.
FRAME_DELAY = 8

ON_ERROR_CHOICES = ("raise", "blank")

RenderFunction = Callable[[complex], np.ndarray]
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class FrameJob:
    """The parameter ``c`` to render as frame ``index``."""

    index: int
    parameter: complex


@dataclass(frozen=True)
class FrameResult:
    """Outcome of one ``FrameJob``: a raster, or the error that prevented it."""

    index: int
    raster: Optional[np.ndarray] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class AnimationSequence:
    """Rasters in frame order, ready for the image encoder."""

    frames: tuple[np.ndarray, ...]
    parameters: tuple[complex, ...]
    delay: int = FRAME_DELAY
    blanked: tuple[int, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.frames)

    def __getitem__(self, index: int) -> np.ndarray:
        return self.frames[index]


def check_count(value: object, error: type[ValueError], label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise error(f"{label} must be a positive integer, got {value!r}")
    return int(value)


def build_jobs(n_frames: int, path: ParameterPath) -> list[FrameJob]:
    """One job per frame index, with the parameter ``path`` assigns to it."""

    n_frames = check_count(n_frames, InvalidFrameCount, "n_frames")
    return [FrameJob(index, complex(path(index, n_frames))) for index in range(n_frames)]


def _blank_like(raster: np.ndarray) -> np.ndarray:
    blank = np.zeros_like(raster)
    if blank.ndim == 3 and blank.shape[-1] == 4:
        blank[..., 3] = np.iinfo(blank.dtype).max if np.issubdtype(blank.dtype, np.integer) else 1.0
    blank.setflags(write=False)
    return blank


class FramePipeline:
    """Render ``FrameJob``s on ``n_workers`` threads and reassemble them in index order.

    ``on_error`` selects what a failed frame does to the whole render: ``"raise"``
    aborts with ``RenderPanic`` naming the frame, ``"blank"`` substitutes an opaque
    black raster and only raises when every frame failed. ``cancel`` stops
    dispatching new jobs once set, and ``timeout`` bounds the whole collection in
    seconds.
    """

    def __init__(
        self,
        render: RenderFunction,
        n_workers: int,
        *,
        on_error: str = "raise",
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        progress: Optional[ProgressCallback] = None,
        delay: int = FRAME_DELAY,
    ) -> None:
        if on_error not in ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be one of {', '.join(ON_ERROR_CHOICES)}, got {on_error!r}")
        self.render = render
        self.n_workers = check_count(n_workers, InvalidWorkerCount, "n_workers")
        self.on_error = on_error
        self.timeout = timeout
        self.cancel = cancel if cancel is not None else threading.Event()
        self.progress = progress
        self.delay = delay

    def run(self, jobs: Sequence[FrameJob]) -> AnimationSequence:
        n_frames = check_count(len(jobs), InvalidFrameCount, "number of jobs")
        indices = sorted(job.index for job in jobs)
        if indices != list(range(n_frames)):
            raise InvalidFrameCount("jobs must cover every index in [0, n_frames) exactly once")

        job_q: Queue[Optional[FrameJob]] = Queue(maxsize=n_frames + self.n_workers)
        result_q: Queue[FrameResult] = Queue(maxsize=n_frames)

        for job in jobs:
            job_q.put(job)
        # The queue is closed only after every job is in it: one sentinel per worker.
        for _ in range(self.n_workers):
            job_q.put(None)

        # Scoped to this run; the caller's cancel event is only ever read.
        stop = threading.Event()
        workers = [
            threading.Thread(
                target=self._work,
                args=(job_q, result_q, stop),
                name=f"ifs-frame-worker-{k}",
                daemon=True,
            )
            for k in range(self.n_workers)
        ]
        for worker in workers:
            worker.start()

        try:
            slots, blanked = self._collect(result_q, n_frames)
        finally:
            stop.set()
            for worker in workers:
                worker.join()

        parameters = [0j] * n_frames
        for job in jobs:
            parameters[job.index] = job.parameter
        return AnimationSequence(
            frames=tuple(slots),
            parameters=tuple(parameters),
            delay=self.delay,
            blanked=tuple(blanked),
        )

    def _work(self, job_q: Queue, result_q: Queue, stop: threading.Event) -> None:
        for job in iter(job_q.get, None):
            if stop.is_set() or self.cancel.is_set():
                result_q.put(FrameResult(job.index, error=RenderCancelled(f"frame {job.index} was not started")))
                continue
            try:
                raster = self.render(job.parameter)
            except Exception as exc:
                logger.exception("[worker] frame=%d parameter=%s error=%s", job.index, job.parameter, exc)
                result_q.put(FrameResult(job.index, error=exc))
            else:
                logger.debug("Finished frame number %d", job.index)
                result_q.put(FrameResult(job.index, raster=raster))

    def _next_result(self, result_q: Queue, deadline: Optional[float]) -> FrameResult:
        if deadline is None:
            return result_q.get()
        remaining = deadline - time.monotonic()
        try:
            return result_q.get(timeout=max(remaining, 0.0))
        except Empty:
            raise RenderTimeout(f"render did not finish within {self.timeout} seconds") from None

    def _collect(self, result_q: Queue, n_frames: int) -> tuple[list[np.ndarray], list[int]]:
        slots: list[Optional[np.ndarray]] = [None] * n_frames
        seen = [False] * n_frames
        failures: dict[int, BaseException] = {}
        deadline = None if self.timeout is None else time.monotonic() + self.timeout

        for done in range(1, n_frames + 1):
            result = self._next_result(result_q, deadline)
            if seen[result.index]:
                raise RenderPanic(result.index, f"frame {result.index} was delivered twice")
            seen[result.index] = True

            if result.failed:
                if isinstance(result.error, RenderCancelled):
                    raise RenderCancelled("render cancelled before every frame was produced") from result.error
                if self.on_error == "raise":
                    raise RenderPanic(result.index) from result.error
                failures[result.index] = result.error
            else:
                slots[result.index] = result.raster

            if self.progress is not None:
                self.progress(done, n_frames)

        if failures:
            if len(failures) == n_frames:
                raise RenderPanic(None, "every frame failed to render") from failures[0]
            blank = _blank_like(next(raster for raster in slots if raster is not None))
            for index in failures:
                logger.warning("frame %d failed and was replaced with a blank frame", index)
                slots[index] = blank

        return slots, sorted(failures)


def render_animation(
    n_frames: int,
    n_workers: int,
    path_name: str,
    render: RenderFunction,
    **options,
) -> AnimationSequence:
    """Render ``n_frames`` frames along the named parameter path on ``n_workers`` threads.

    Arguments are validated before any work is dispatched; ``options`` are passed
    to :class:`FramePipeline`.
    """

    n_frames = check_count(n_frames, InvalidFrameCount, "n_frames")
    n_workers = check_count(n_workers, InvalidWorkerCount, "n_workers")
    path = get_path(path_name)

    pipeline = FramePipeline(render, n_workers, **options)
    jobs = build_jobs(n_frames, path)

    logger.info("Starting job with n_frames = %d n_workers = %d path = %s", n_frames, n_workers, path_name)
    start = time.perf_counter()
    sequence = pipeline.run(jobs)
    logger.info("Took %.3fs", time.perf_counter() - start)
    return sequence
