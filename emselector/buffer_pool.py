# MIT License
# Copyright (c) 2020-2024 Pau Freixes

import logging
import threading
from collections import deque
from copy import copy
from dataclasses import dataclass

from .default_values import DEFAULT_BUFFER_SIZE, DEFAULT_MAX_BUFFER_SIZE, DEFAULT_MAX_BUFFERS

logger = logging.getLogger(__name__)


@dataclass
class BufferPoolMetrics:
    """Provides basic metrics for understanding how the buffer pool has
    behaved historically and currently.
    """

    # buffers that are currently idle within the pool.
    cur_buffers: int

    # historical values until now for how many buffers have been
    # created, handed out, given back, dropped instead of being kept
    # and grown for fitting a key bigger than the buffer.
    buffers_created: int
    buffers_acquired: int
    buffers_released: int
    buffers_discarded: int
    buffers_grown: int


class BufferPool:
    """Keeps a list of reusable byte buffers, used for building the
    bytes of a key without allocating a new buffer per selection.

    Buffers are checked out by one caller at a time, acquire and
    release can be called concurrently from different threads.
    """

    _buffer_size: int
    _max_buffers: int
    _max_buffer_size: int
    _unused_buffers: deque
    _lock: threading.Lock
    _metrics: BufferPoolMetrics

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        max_buffers: int = DEFAULT_MAX_BUFFERS,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
    ) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be higher than 0")
        if max_buffers < 1:
            raise ValueError("max_buffers must be higher than 0")
        if max_buffer_size < buffer_size:
            raise ValueError("max_buffer_size must be higher or equal than buffer_size")

        self._buffer_size = buffer_size
        self._max_buffers = max_buffers
        self._max_buffer_size = max_buffer_size
        self._unused_buffers = deque()
        self._lock = threading.Lock()
        self._metrics = BufferPoolMetrics(
            cur_buffers=0,
            buffers_created=0,
            buffers_acquired=0,
            buffers_released=0,
            buffers_discarded=0,
            buffers_grown=0,
        )
        logger.debug(f"{self} new buffer pool created")

    def __str__(self) -> str:
        return (
            f"<BufferPool buffer_size={self._buffer_size} max_buffers={self._max_buffers} "
            + f"max_buffer_size={self._max_buffer_size}>"
        )

    def __repr__(self) -> str:
        return str(self)

    def acquire(self) -> bytearray:
        """Returns a buffer that belongs only to the caller until
        it is given back with `release`."""
        with self._lock:
            self._metrics.buffers_acquired += 1
            if self._unused_buffers:
                return self._unused_buffers.pop()

            self._metrics.buffers_created += 1

        return bytearray(self._buffer_size)

    def release(self, buffer: bytearray) -> None:
        """Returns back to the pool a buffer.

        Buffers grown over `max_buffer_size` or exceeding the number of
        buffers that can be kept are dropped.
        """
        with self._lock:
            self._metrics.buffers_released += 1
            if len(buffer) > self._max_buffer_size or len(self._unused_buffers) >= self._max_buffers:
                self._metrics.buffers_discarded += 1
                return

            self._unused_buffers.append(buffer)

    def buffer(self) -> "BufferContext":
        """Returns a context that acquires a buffer when entered and
        releases it when left, even if an exception was raised."""
        return BufferContext(self)

    def copy_into(self, buffer: bytearray, data: bytes) -> int:
        """Writes `data` at the beginning of the buffer, making it grow if
        the data does not fit, and returns the number of bytes written.

        Only the first bytes written must be read back, anything after
        them belongs to a previous use of the buffer.
        """
        with memoryview(data) as view, view.cast("B") as raw:
            length = raw.nbytes
            if length > len(buffer):
                buffer.extend(bytes(length - len(buffer)))
                with self._lock:
                    self._metrics.buffers_grown += 1

            buffer[:length] = raw

        return length

    def metrics(self) -> BufferPoolMetrics:
        with self._lock:
            metrics = copy(self._metrics)
            # current values are updated at read time
            metrics.cur_buffers = len(self._unused_buffers)

        return metrics

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @property
    def max_buffers(self) -> int:
        return self._max_buffers

    @property
    def max_buffer_size(self) -> int:
        return self._max_buffer_size


class BufferContext:
    """Context for using a buffer of the pool, the buffer is given
    back to the pool when the context is left."""

    _buffer_pool: BufferPool
    _buffer: bytearray

    __slots__ = ("_buffer_pool", "_buffer")

    def __init__(self, buffer_pool: BufferPool) -> None:
        self._buffer_pool = buffer_pool
        self._buffer = None

    def __enter__(self) -> bytearray:
        self._buffer = self._buffer_pool.acquire()
        return self._buffer

    def __exit__(self, exc_type, exc, tb) -> None:
        buffer, self._buffer = self._buffer, None
        self._buffer_pool.release(buffer)
