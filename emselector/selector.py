# MIT License
# Copyright (c) 2020-2024 Pau Freixes

import logging
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from ._address import Address, ServerPool, resolve_addresses
from .base import Key, SelectionStrategy, ServerSelector
from .buffer_pool import BufferPool, BufferPoolMetrics
from .client_errors import KeyTooLongError, NoServersError
from .default_values import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_MAX_BUFFER_SIZE,
    DEFAULT_MAX_BUFFERS,
    DEFAULT_MAX_KEY_LENGTH,
)
from .strategy import ModuloSelectionStrategy

logger = logging.getLogger(__name__)


def _key_bytes(key: Key) -> bytes:
    if isinstance(key, str):
        # lone surrogates are valid in str keys
        return key.encode("utf-8", "surrogatepass")
    if isinstance(key, memoryview):
        # len() of a view counts items, not bytes
        return key.cast("B") if key.c_contiguous else key.tobytes()
    if isinstance(key, (bytes, bytearray)):
        return key
    raise TypeError(f"key must be str or bytes, got {type(key).__name__}")


class ServerList(ServerSelector):
    """ServerList keeps the addresses of all of the servers together
    and picks the one that owns a key.

    The list of addresses is never modified, a different list of
    servers needs a new `ServerList`. Selection does not change any
    state shared between calls, so it can be used concurrently from
    many threads.
    """

    _addresses: ServerPool
    _strategy: SelectionStrategy
    _buffer_pool: BufferPool
    _max_key_length: Optional[int]

    def __init__(
        self,
        addresses: ServerPool,
        strategy: SelectionStrategy,
        buffer_pool: BufferPool,
        max_key_length: Optional[int],
    ) -> None:
        if max_key_length is not None and max_key_length < 1:
            raise ValueError("max_key_length must be higher than 0")

        self._addresses = addresses
        self._strategy = strategy
        self._buffer_pool = buffer_pool
        self._max_key_length = max_key_length

        logger.debug(f"Server list configured with {len(self._addresses)} servers")
        logger.info(f"Servers used for sending traffic: {[str(address) for address in self._addresses]}")

    def __str__(self) -> str:
        return f"<ServerList servers={len(self._addresses)} strategy={self._strategy!r}>"

    def __repr__(self) -> str:
        return str(self)

    def __len__(self) -> int:
        return len(self._addresses)

    def __iter__(self) -> Iterator[Address]:
        return iter(self._addresses)

    def each(self, visit: Callable[[Address], None]) -> None:
        for address in self._addresses:
            visit(address)

    def _select(self, key: Key) -> Address:
        addresses = self._addresses
        if len(addresses) == 1:
            return addresses[0]

        data = _key_bytes(key)
        if self._max_key_length is not None and len(data) > self._max_key_length:
            raise KeyTooLongError(len(data), self._max_key_length)

        buffer_pool = self._buffer_pool
        with buffer_pool.buffer() as buffer:
            length = buffer_pool.copy_into(buffer, data)
            # the view must be released before the buffer goes back
            # to the pool, otherwise the buffer could not grow later.
            with memoryview(buffer)[:length] as view:
                index = self._strategy.select_index(view, len(addresses))

        return addresses[index]

    def pick_server(self, key: Key) -> Address:
        """Return the address of the server that owns the key.

        A list with only one server returns always that server, whatever
        the key is. Otherwise the server is chosen by the selection
        strategy using the whole key, long keys are never truncated.
        """
        if len(self._addresses) == 0:
            raise NoServersError()

        return self._select(key)

    def pick_servers(self, keys: Sequence[Key]) -> Dict[Address, List[Key]]:
        if len(self._addresses) == 0:
            raise NoServersError()

        keys_per_address: Dict[Address, List[Key]] = {}
        for key in keys:
            keys_per_address.setdefault(self._select(key), []).append(key)

        return keys_per_address

    def buffer_pool_metrics(self) -> BufferPoolMetrics:
        return self._buffer_pool.metrics()

    @property
    def addresses(self) -> ServerPool:
        return self._addresses

    @property
    def strategy(self) -> SelectionStrategy:
        return self._strategy

    @property
    def max_key_length(self) -> Optional[int]:
        return self._max_key_length


def create_selector(
    endpoints: Sequence[str],
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    max_buffers: int = DEFAULT_MAX_BUFFERS,
    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
    max_key_length: Optional[int] = DEFAULT_MAX_KEY_LENGTH,
    strategy: Optional[SelectionStrategy] = None,
    buffer_pool: Optional[BufferPool] = None,
) -> ServerList:
    """Factory for creating a new `emselector.ServerList` instance.

    Endpoints are resolved once, here. An endpoint with a `/` is taken as a
    Unix socket path, any other one has to be a `host:port` pair. If any of
    them can not be parsed a `ConstructionError` is raised and no server list
    is returned. Host names are kept as they were configured, they are never
    resolved to an IP, neither now nor later.

    An empty list of endpoints is accepted, `pick_server` will raise a
    `NoServersError` for any key.

    By default the server list will be created with the following values.

    Keys are copied into buffers of `DEFAULT_BUFFER_SIZE` bytes, a key that
    does not fit makes the buffer grow so the whole key is always hashed.

    A maximum of `DEFAULT_MAX_BUFFERS` idle buffers are kept for being reused,
    and buffers that grew over `DEFAULT_MAX_BUFFER_SIZE` bytes are dropped
    once used.

    `max_key_length` disabled by default. If provided, keys longer than that
    number of bytes are rejected with a `KeyTooLongError`. A list with only
    one server does not check it, any key goes to that server.

    `strategy` by default a `ModuloSelectionStrategy`, which picks the server
    at `crc32(key) % number of servers`. Changing the number of servers or
    their order moves most of the keys to a different server.

    `buffer_pool` by default a new `BufferPool` owned by the server list,
    built with the buffer options above. When provided the buffer options
    are ignored.
    """
    addresses = resolve_addresses(endpoints)

    if strategy is None:
        strategy = ModuloSelectionStrategy()

    if buffer_pool is None:
        buffer_pool = BufferPool(buffer_size, max_buffers, max_buffer_size)

    return ServerList(addresses, strategy, buffer_pool, max_key_length)
