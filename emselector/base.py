# MIT License
# Copyright (c) 2020-2024 Pau Freixes

from abc import ABCMeta, abstractmethod
from typing import Callable, Dict, List, Sequence, Union

from ._address import Address, ServerPool

Key = Union[str, bytes]


class SelectionStrategy(metaclass=ABCMeta):
    @abstractmethod
    def select_index(self, key: memoryview, pool_size: int) -> int:
        """Return the position within the pool of the server that owns
        the key.

        `key` are the raw bytes of the key, the view is only valid during
        the call. `pool_size` is always higher than 1, empty and single
        server pools are handled by the server list.

        Same key and same `pool_size` must always return the same position.
        """


class ServerSelector(metaclass=ABCMeta):
    @property
    @abstractmethod
    def addresses(self) -> ServerPool:
        """Returns the ordered list of addresses the selector picks from."""

    @abstractmethod
    def each(self, visit: Callable[[Address], None]) -> None:
        """Calls `visit` with every address, following the order of the
        server pool.

        An exception raised by `visit` stops the iteration and is raised
        back to the caller, remaining addresses are not visited.
        """

    @abstractmethod
    def pick_server(self, key: Key) -> Address:
        """Return the address of the server that owns the key.

        Raises a `NoServersError` if there are no servers.
        """

    @abstractmethod
    def pick_servers(self, keys: Sequence[Key]) -> Dict[Address, List[Key]]:
        """Return the addresses that own the given keys.

        Return value is a dictionary where addresses stand for keys and
        values are the list of keys that would need to be sent to that
        server.

        Raises a `NoServersError` if there are no servers.
        """
